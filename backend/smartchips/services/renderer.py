"""
Card renderers: one pure function per GitHub resource kind.

Each returns an immutable Card; nothing here touches the network, the
property store or the host. `now` is injectable so relative dates are
deterministic under test.
"""

from datetime import datetime, timezone
from typing import List, Optional, Union
from urllib.parse import urlsplit

from ..cards import (
    GITHUB_LOGO,
    ActionButton,
    Card,
    CardHeader,
    KeyValue,
    LinkButton,
    Paragraph,
    Section,
    section,
)
from ..schemas import (
    IssueRecord,
    Label,
    ProjectRecord,
    PullRequestRecord,
    RepositoryRecord,
    UserRecord,
)
from .text import relative_time, trim_string

APP_TITLE = "GitHub Smart Chips"
BODY_SNIPPET_LENGTH = 50

LOGOUT_ACTION = "handleLogout"
RESET_AUTH_ACTION = "resetAuth"


def _now(now: Optional[datetime]) -> datetime:
    return now or datetime.now(timezone.utc)


def _format_date(value: Optional[datetime]) -> str:
    if value is None:
        return "unknown date"
    return f"{value.month}/{value.day}/{value.year}"


def _labels_section(labels: List[Label]) -> Optional[Section]:
    if not labels:
        return None
    return section(KeyValue(top_label="Labels", content=", ".join(label.name for label in labels)))


def _body_section(body: Optional[str]) -> Optional[Section]:
    snippet = trim_string(body or "", BODY_SNIPPET_LENGTH)
    if not snippet:
        return None
    return section(Paragraph(text=snippet))


def _authorize_button(authorization_url: str) -> LinkButton:
    return LinkButton(
        text="Authorize GitHub Access",
        url=authorization_url,
        open_as_overlay=True,
        reload_on_close=True,
    )


def render_repository(data: RepositoryRecord, now: Optional[datetime] = None) -> Card:
    sections = [
        section(
            KeyValue(
                top_label="Visibility",
                content="🔒 Private" if data.private else "🌐 Public",
            )
        )
    ]
    if data.language:
        sections.append(section(KeyValue(top_label="Language", content=data.language)))

    stats = [
        KeyValue(
            top_label="Stats",
            content=f"⭐ {data.stargazers_count} • 🍴 {data.forks_count}",
        )
    ]
    if data.updated_at:
        stats.append(
            KeyValue(
                top_label="Last Updated",
                content=f"updated {relative_time(_now(now), data.updated_at)}",
            )
        )
    sections.append(section(*stats))

    url = data.html_url or f"https://github.com/{data.full_name}"
    sections.append(section(LinkButton(text="View Repository on GitHub", url=url)))

    return Card(
        header=CardHeader(
            title=data.full_name,
            subtitle=data.description or "GitHub Repository",
        ),
        sections=tuple(sections),
    )


def _item_card(
    kind_label: str,
    path: str,
    full_name: str,
    data: Union[IssueRecord, PullRequestRecord],
    state_icon: str,
    extra: Optional[Section] = None,
) -> Card:
    repo_url = f"https://github.com/{full_name}"
    item_url = data.html_url
    if not item_url:
        item_url = f"{repo_url}/{path}/{data.number}" if full_name else "https://github.com"
    title = f"#{data.number}: {data.title}"
    if full_name:
        title = full_name + title

    overview = []
    if full_name:
        overview.append(KeyValue(top_label="Repository", content=full_name, open_link_url=repo_url))
    overview.append(
        KeyValue(
            top_label="Created",
            content=f"{_format_date(data.created_at)} by {data.user.login}",
        )
    )
    sections = [section(*overview)]
    for optional in (_body_section(data.body), _labels_section(data.labels), extra):
        if optional is not None:
            sections.append(optional)
    sections.append(section(LinkButton(text=f"View {kind_label} on GitHub", url=item_url)))

    return Card(
        header=CardHeader(
            title=title,
            subtitle=f"{state_icon} {kind_label} #{data.number} • {data.state}",
        ),
        sections=tuple(sections),
    )


def render_issue(data: IssueRecord) -> Card:
    state_icon = "🔴" if data.state == "closed" else "🟢"
    return _item_card("Issue", "issues", data.repository.full_name, data, state_icon)


def _full_name_from_url(html_url: str) -> str:
    # base.repo is null when the base repository was deleted
    segments = [s for s in urlsplit(html_url or "").path.split("/") if s]
    return "/".join(segments[:2]) if len(segments) >= 2 else ""


def render_pull_request(data: PullRequestRecord) -> Card:
    state_icon = "🟢"
    if data.state == "closed":
        state_icon = "🟣" if data.merged else "🔴"

    full_name = data.base.repo.full_name if data.base.repo else _full_name_from_url(data.html_url)
    branches = None
    if data.base.ref and data.head.ref:
        branches = section(
            KeyValue(top_label="Branches", content=f"{data.base.ref} ← {data.head.ref}")
        )
    return _item_card("Pull Request", "pull", full_name, data, state_icon, extra=branches)


def render_user(data: UserRecord, now: Optional[datetime] = None) -> Card:
    title = f"{data.login} ({data.name})" if data.name else data.login

    info = [KeyValue(top_label="Username", content=f"@{data.login}")]
    if data.location:
        info.append(KeyValue(top_label="Location", content=data.location))
    if data.company:
        info.append(KeyValue(top_label="Company", content=data.company))
    sections = [section(*info)]

    stats = []
    if data.public_repos is not None:
        stats.append(KeyValue(top_label="Public Repositories", content=str(data.public_repos)))
    if data.followers is not None and data.following is not None:
        stats.append(
            KeyValue(
                top_label="Followers / Following",
                content=f"{data.followers} / {data.following}",
            )
        )
    if stats:
        sections.append(section(*stats))

    if data.blog:
        blog_url = data.blog if "://" in data.blog else f"https://{data.blog}"
        sections.append(
            section(KeyValue(top_label="Website", content=data.blog, open_link_url=blog_url))
        )

    if data.created_at:
        sections.append(
            section(
                KeyValue(
                    top_label="Member Since",
                    content=f"Joined {relative_time(_now(now), data.created_at)}",
                )
            )
        )

    profile_url = data.html_url or f"https://github.com/{data.login}"
    sections.append(section(LinkButton(text="View Profile on GitHub", url=profile_url)))

    return Card(
        header=CardHeader(
            title=title,
            subtitle=data.bio or "GitHub User",
            image_url=data.avatar_url or GITHUB_LOGO,
        ),
        sections=tuple(sections),
    )


def render_project(data: ProjectRecord, now: Optional[datetime] = None) -> Card:
    details = [
        KeyValue(top_label="Status", content="Closed" if data.closed else "Open"),
        KeyValue(top_label="Visibility", content="🌐 Public" if data.public else "🔒 Private"),
    ]
    if data.updated_at:
        details.append(
            KeyValue(
                top_label="Last Updated",
                content=f"updated {relative_time(_now(now), data.updated_at)}",
            )
        )
    sections = [section(*details)]
    if data.url:
        sections.append(section(LinkButton(text="View Project on GitHub", url=data.url)))

    return Card(
        header=CardHeader(
            title=data.title,
            subtitle=data.short_description or "GitHub Project",
        ),
        sections=tuple(sections),
    )


def render_error(title: str, message: str) -> Card:
    return Card(
        header=CardHeader(title=title, subtitle="Error"),
        sections=(
            section(
                Paragraph(text=message),
                ActionButton(text="Try Again", function_name=RESET_AUTH_ACTION),
            ),
        ),
    )


def render_authorization(authorization_url: str) -> Card:
    return Card(
        header=CardHeader(title=APP_TITLE, subtitle="Authorization Required"),
        sections=(
            section(
                Paragraph(
                    text=(
                        "To view private GitHub repositories and get detailed information, "
                        "please authorize this add-on to access your GitHub account."
                    )
                ),
                _authorize_button(authorization_url),
            ),
            section(
                Paragraph(
                    text="Note: Public repositories may still be accessible without authorization."
                )
            ),
        ),
    )


def render_settings_sidebar(user: Optional[UserRecord], authorization_url: str = "") -> Card:
    header = CardHeader(title=APP_TITLE, subtitle="Settings")
    if user is None:
        return Card(
            header=header,
            sections=(
                section(
                    Paragraph(
                        text=(
                            "You are not currently logged in. To access private "
                            "repositories, please authorize this add-on."
                        )
                    ),
                    _authorize_button(authorization_url),
                ),
            ),
        )

    who = [KeyValue(top_label="Logged in as", content=f"@{user.login}")]
    if user.name:
        who.append(KeyValue(top_label="Name", content=user.name))
    return Card(
        header=header,
        sections=(
            section(*who),
            section(ActionButton(text="Logout", function_name=LOGOUT_ACTION)),
        ),
    )
