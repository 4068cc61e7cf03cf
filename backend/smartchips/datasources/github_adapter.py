from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx
from loguru import logger
from pydantic import ValidationError

from ..config import Settings, get_settings
from ..schemas import (
    BranchRef,
    GitHubAccount,
    IssueRecord,
    IssueRef,
    Label,
    ProjectRecord,
    ProjectRef,
    PullRequestRecord,
    PullRequestRef,
    RepositoryRecord,
    RepositoryRef,
    ResourceRecord,
    ResourceReference,
    UserRecord,
    UserRef,
)

PROJECT_FIELDS = """
      number
      title
      shortDescription
      closed
      public
      createdAt
      updatedAt
      url
"""

ORG_PROJECT_QUERY = (
    "query($login: String!, $number: Int!) {\n"
    "  organization(login: $login) {\n"
    "    projectV2(number: $number) {" + PROJECT_FIELDS + "    }\n"
    "  }\n"
    "}\n"
)

USER_PROJECT_QUERY = (
    "query($login: String!, $number: Int!) {\n"
    "  user(login: $login) {\n"
    "    projectV2(number: $number) {" + PROJECT_FIELDS + "    }\n"
    "  }\n"
    "}\n"
)


def api_path(*segments: Any) -> str:
    return "".join("/" + quote(str(segment), safe="") for segment in segments)


def _account(item: Optional[Dict[str, Any]]) -> GitHubAccount:
    item = item or {}
    return GitHubAccount(
        login=item.get("login") or "",
        avatar_url=item.get("avatar_url") or "",
        html_url=item.get("html_url") or "",
    )


def _labels(items: Optional[list]) -> list:
    labels = []
    for item in items or []:
        if isinstance(item, str):
            labels.append(Label(name=item))
        elif item.get("name"):
            labels.append(
                Label(
                    name=item["name"],
                    color=item.get("color") or "",
                    description=item.get("description"),
                )
            )
    return labels


def map_repository(item: Dict[str, Any]) -> RepositoryRecord:
    full_name = item.get("full_name") or ""
    return RepositoryRecord(
        owner=_account(item.get("owner")),
        name=item.get("name") or full_name.split("/")[-1],
        full_name=full_name,
        description=item.get("description"),
        private=bool(item.get("private")),
        language=item.get("language"),
        stargazers_count=item.get("stargazers_count") or 0,
        forks_count=item.get("forks_count") or 0,
        updated_at=item.get("updated_at"),
        html_url=item.get("html_url") or "",
    )


def map_issue(item: Dict[str, Any], repository: RepositoryRecord) -> IssueRecord:
    return IssueRecord(
        number=item.get("number") or 0,
        title=item.get("title") or "",
        state=item.get("state") or "unknown",
        body=item.get("body"),
        created_at=item.get("created_at"),
        user=_account(item.get("user")),
        labels=_labels(item.get("labels")),
        html_url=item.get("html_url") or "",
        repository=repository,
    )


def _branch(item: Optional[Dict[str, Any]]) -> BranchRef:
    item = item or {}
    repo = item.get("repo")
    return BranchRef(
        ref=item.get("ref") or "",
        repo=map_repository(repo) if repo else None,
    )


def map_pull_request(item: Dict[str, Any]) -> PullRequestRecord:
    return PullRequestRecord(
        number=item.get("number") or 0,
        title=item.get("title") or "",
        state=item.get("state") or "unknown",
        body=item.get("body"),
        created_at=item.get("created_at"),
        user=_account(item.get("user")),
        labels=_labels(item.get("labels")),
        html_url=item.get("html_url") or "",
        merged=bool(item.get("merged")),
        base=_branch(item.get("base")),
        head=_branch(item.get("head")),
    )


def map_user(item: Dict[str, Any]) -> UserRecord:
    return UserRecord(
        login=item.get("login") or "",
        avatar_url=item.get("avatar_url") or "",
        html_url=item.get("html_url") or "",
        name=item.get("name"),
        bio=item.get("bio"),
        company=item.get("company"),
        location=item.get("location"),
        blog=item.get("blog"),
        public_repos=item.get("public_repos"),
        followers=item.get("followers"),
        following=item.get("following"),
        created_at=item.get("created_at"),
    )


def map_project(item: Dict[str, Any]) -> ProjectRecord:
    return ProjectRecord(
        number=item.get("number") or 0,
        title=item.get("title") or "",
        short_description=item.get("shortDescription"),
        closed=bool(item.get("closed")),
        public=bool(item.get("public")),
        created_at=item.get("createdAt"),
        updated_at=item.get("updatedAt"),
        url=item.get("url") or "",
    )


class GitHubClient:
    """Read-only GitHub REST/GraphQL client. Every fetch returns a record or None."""

    def __init__(
        self,
        access_token: Optional[str] = None,
        settings: Optional[Settings] = None,
        http_client: Optional[httpx.Client] = None,
    ):
        self.settings = settings or get_settings()
        self.access_token = access_token or None
        headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": "GitHub-Smart-Chips",
        }
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        self.headers = headers
        if http_client is None:
            client_kwargs: Dict[str, Any] = {"timeout": self.settings.http_timeout_seconds}
            if self.settings.github_proxy:
                client_kwargs["proxy"] = self.settings.github_proxy
            http_client = httpx.Client(**client_kwargs)
            self._owns_client = True
        else:
            self._owns_client = False
        self.client = http_client

    def __enter__(self) -> "GitHubClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def _get(self, path: str) -> Optional[Dict[str, Any]]:
        url = f"{self.settings.api_base}{path}"
        try:
            resp = self.client.get(url, headers=self.headers)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.error(f"[github] request error for {path}: {type(exc).__name__} {exc!r}")
            return None
        if resp.status_code != 200:
            logger.warning(f"[github] GitHub API error: {resp.status_code} - {resp.text}")
            return None
        try:
            return resp.json()
        except ValueError as exc:
            logger.error(f"[github] invalid JSON from {path}: {exc}")
            return None

    def _graphql(self, query: str, variables: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        headers = {**self.headers, "Content-Type": "application/json"}
        try:
            resp = self.client.post(
                str(self.settings.github_graphql_url),
                json={"query": query, "variables": variables},
                headers=headers,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.error(f"[github] GraphQL request error: {type(exc).__name__} {exc!r}")
            return None
        if resp.status_code != 200:
            logger.warning(f"[github] GraphQL error: {resp.status_code} - {resp.text}")
            return None
        try:
            payload = resp.json()
        except ValueError as exc:
            logger.error(f"[github] invalid GraphQL JSON: {exc}")
            return None
        if not isinstance(payload, dict):
            logger.error(f"[github] unexpected GraphQL payload: {type(payload).__name__}")
            return None
        if payload.get("errors"):
            errors = payload["errors"] if isinstance(payload["errors"], list) else [payload["errors"]]
            messages = [err.get("message", "") if isinstance(err, dict) else str(err) for err in errors]
            logger.warning(f"[github] GraphQL errors: {messages}")
            return None
        data = payload.get("data")
        return data if isinstance(data, dict) and data else None

    @staticmethod
    def _map(mapper, *args):
        try:
            return mapper(*args)
        except (ValidationError, AttributeError, TypeError) as exc:
            logger.error(f"[github] unexpected payload for {mapper.__name__}: {exc}")
            return None

    def fetch_repository(self, owner: str, repo: str) -> Optional[RepositoryRecord]:
        item = self._get(api_path("repos", owner, repo))
        if item is None:
            return None
        return self._map(map_repository, item)

    def fetch_issue(self, owner: str, repo: str, number: int) -> Optional[IssueRecord]:
        item = self._get(api_path("repos", owner, repo, "issues", number))
        if item is None:
            return None
        repository = self.fetch_repository(owner, repo)
        if repository is None:
            logger.warning(f"[github] repository {owner}/{repo} unavailable for issue #{number}")
            return None
        return self._map(map_issue, item, repository)

    def fetch_pull_request(self, owner: str, repo: str, number: int) -> Optional[PullRequestRecord]:
        item = self._get(api_path("repos", owner, repo, "pulls", number))
        if item is None:
            return None
        return self._map(map_pull_request, item)

    def fetch_user(self, login: str) -> Optional[UserRecord]:
        item = self._get(api_path("users", login))
        if item is None:
            return None
        return self._map(map_user, item)

    def fetch_authenticated_user(self) -> Optional[UserRecord]:
        if not self.access_token:
            return None
        item = self._get("/user")
        if item is None:
            return None
        return self._map(map_user, item)

    def fetch_project(self, owner_login: str, number: int, is_org: bool) -> Optional[ProjectRecord]:
        query = ORG_PROJECT_QUERY if is_org else USER_PROJECT_QUERY
        data = self._graphql(query, {"login": owner_login, "number": number})
        if data is None:
            return None
        owner_node = data.get("organization" if is_org else "user")
        project = owner_node.get("projectV2") if isinstance(owner_node, dict) else None
        if not project:
            logger.warning(f"[github] project {owner_login}#{number} not found")
            return None
        return self._map(map_project, project)

    def fetch(self, ref: ResourceReference) -> Optional[ResourceRecord]:
        """Fetch whatever record the reference points at."""
        if isinstance(ref, RepositoryRef):
            return self.fetch_repository(ref.owner, ref.repo)
        if isinstance(ref, IssueRef):
            return self.fetch_issue(ref.owner, ref.repo, ref.number)
        if isinstance(ref, PullRequestRef):
            return self.fetch_pull_request(ref.owner, ref.repo, ref.number)
        if isinstance(ref, UserRef):
            return self.fetch_user(ref.owner)
        if isinstance(ref, ProjectRef):
            return self.fetch_project(ref.owner, ref.number, ref.is_org)
        return None
