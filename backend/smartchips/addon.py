"""
Add-on triggers: link preview, settings sidebar, logout, reset.

The OAuth side is injected as a TokenProvider and GitHub access goes through
`client_factory(token)`, so every trigger can run without globals.
"""

from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

from loguru import logger

from .cards import Card
from .datasources.base import TokenProvider
from .datasources.github_adapter import GitHubClient
from .schemas import (
    IssueRecord,
    ProjectRecord,
    PullRequestRecord,
    RepositoryRecord,
    ResourceRecord,
    UserRecord,
)
from .services import renderer
from .services.url_parser import classify

ClientFactory = Callable[[Optional[str]], GitHubClient]

HOST_CONTEXTS = ("docs", "sheets", "slides")

NOT_FOUND_MESSAGE = (
    "Unable to fetch GitHub data. The resource may not exist or you may not have access to it."
)


def matched_url(event: Dict[str, Any]) -> Optional[str]:
    """First matched URL from the Docs, Sheets or Slides context, in that order."""
    for context in HOST_CONTEXTS:
        url = ((event.get(context) or {}).get("matchedUrl") or {}).get("url")
        if url:
            return url
    return None


def render_record(record: ResourceRecord, now: Optional[datetime] = None) -> Card:
    if isinstance(record, RepositoryRecord):
        return renderer.render_repository(record, now=now)
    if isinstance(record, IssueRecord):
        return renderer.render_issue(record)
    if isinstance(record, PullRequestRecord):
        return renderer.render_pull_request(record)
    if isinstance(record, UserRecord):
        return renderer.render_user(record, now=now)
    if isinstance(record, ProjectRecord):
        return renderer.render_project(record, now=now)
    raise TypeError(f"no card for {type(record).__name__}")


def on_link_preview(
    event: Dict[str, Any],
    oauth: TokenProvider,
    client_factory: ClientFactory = GitHubClient,
    now: Optional[datetime] = None,
) -> List[Card]:
    url = matched_url(event or {})
    if not url:
        return []

    ref = classify(url)
    if ref is None:
        logger.debug(f"[link-preview] not a previewable GitHub URL: {url}")
        return []

    access_token = oauth.get_access_token()
    logger.info(
        f"[link-preview] {ref.kind.value} {url} ({'authenticated' if access_token else 'anonymous'})"
    )

    # public resources work without a token, so always try first
    with client_factory(access_token) as client:
        record = client.fetch(ref)

    if record is None and not access_token:
        return [renderer.render_authorization(oauth.get_authorization_url())]

    if record is None:
        logger.warning(f"[link-preview] no data for {url} despite a token")
        return [renderer.render_error(url, NOT_FOUND_MESSAGE)]

    return [render_record(record, now=now)]


def show_sidebar(oauth: TokenProvider, client_factory: ClientFactory = GitHubClient) -> Card:
    user = None
    access_token = oauth.get_access_token()
    if access_token:
        with client_factory(access_token) as client:
            user = client.fetch_authenticated_user()
        if user is not None:
            return renderer.render_settings_sidebar(user)
        logger.warning("[sidebar] token present but /user could not be loaded")
    return renderer.render_settings_sidebar(None, oauth.get_authorization_url())


def handle_logout(oauth: TokenProvider) -> Tuple[Card, str]:
    oauth.reset()
    logger.info("[sidebar] logged out")
    return renderer.render_settings_sidebar(None, oauth.get_authorization_url()), "Logged out"


def reset_auth(oauth: TokenProvider) -> str:
    oauth.reset()
    return "Authorization reset. Open the link again to re-authorize."
