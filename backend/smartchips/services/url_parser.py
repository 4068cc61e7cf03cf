from typing import List, Optional
from urllib.parse import urlsplit

from ..schemas import (
    IssueRef,
    ProjectRef,
    PullRequestRef,
    RepositoryRef,
    ResourceReference,
    UserRef,
)

GITHUB_HOSTS = {"github.com", "www.github.com"}

# Top-level paths owned by github.com itself; never an owner or a login.
RESERVED_NAMES = {
    "about",
    "account",
    "apps",
    "codespaces",
    "collections",
    "contact",
    "customer-stories",
    "dashboard",
    "enterprise",
    "events",
    "explore",
    "features",
    "gist",
    "issues",
    "join",
    "login",
    "logout",
    "marketplace",
    "new",
    "notifications",
    "organizations",
    "orgs",
    "pricing",
    "pulls",
    "readme",
    "search",
    "security",
    "sessions",
    "settings",
    "signup",
    "site",
    "sponsors",
    "stars",
    "team",
    "topics",
    "trending",
    "users",
}

PROJECT_SCOPES = {"orgs", "users"}


def _segments(url: str) -> Optional[List[str]]:
    try:
        parts = urlsplit(url.strip())
    except ValueError:
        return None
    if parts.scheme not in ("http", "https"):
        return None
    if (parts.hostname or "").lower() not in GITHUB_HOSTS:
        return None
    return [s for s in parts.path.split("/") if s]


def _number(segment: str) -> Optional[int]:
    if not segment.isdigit():
        return None
    value = int(segment)
    return value if value > 0 else None


def _repo_name(segment: str) -> str:
    return segment[:-4] if segment.endswith(".git") and len(segment) > 4 else segment


def classify(url: str) -> Optional[ResourceReference]:
    """Turn a github.com URL into a typed reference, or None when it is not previewable."""
    segments = _segments(url)
    if not segments:
        return None

    head = segments[0]

    if len(segments) >= 4 and head not in RESERVED_NAMES:
        number = _number(segments[3])
        if number is not None and segments[2] == "pull":
            return PullRequestRef(owner=head, repo=segments[1], number=number)
        if number is not None and segments[2] == "issues":
            return IssueRef(owner=head, repo=segments[1], number=number)

    if len(segments) >= 4 and head in PROJECT_SCOPES and segments[2] == "projects":
        number = _number(segments[3])
        if number is not None:
            login = segments[1]
            return ProjectRef(owner=login, number=number, org=login if head == "orgs" else None)

    if head in RESERVED_NAMES:
        return None

    if len(segments) == 2 or (len(segments) >= 4 and segments[2] in ("tree", "blob")):
        return RepositoryRef(owner=head, repo=_repo_name(segments[1]))

    if len(segments) == 1:
        return UserRef(owner=head)

    return None
