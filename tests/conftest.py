"""
Shared fixtures.

- settings: Settings built from explicit values (no .env lookup)
- fake_github: in-memory GitHub API behind httpx.MockTransport
- client_factory: GitHubClient factory wired to fake_github
- FakeOAuth: TokenProvider stand-in with a fixed token
- *_payload: trimmed GitHub API responses
"""

from typing import Any, Dict, List, Optional, Tuple

import httpx
import pytest

from smartchips.config import Settings
from smartchips.datasources.github_adapter import GitHubClient


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        GITHUB_CLIENT_ID="client-id",
        GITHUB_CLIENT_SECRET="client-secret",
        PUBLIC_BASE_URL="https://chips.example.com",
    )


# ---------------------------------------------------------------------------
# FAKE GITHUB
# ---------------------------------------------------------------------------

class FakeGitHub:
    """Routes (method, path) to canned responses and records every request."""

    def __init__(self):
        self.routes: Dict[Tuple[str, str], Tuple[int, Any, Optional[Exception]]] = {}
        self.requests: List[httpx.Request] = []

    def add(self, method: str, path: str, status: int = 200, json: Any = None, exc: Exception = None):
        self.routes[(method, path)] = (status, json, exc)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"message": "Not Found"})
        status, body, exc = route
        if exc is not None:
            raise exc
        return httpx.Response(status, json=body)

    def http_client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self.handler))

    @property
    def paths(self) -> List[str]:
        return [request.url.path for request in self.requests]


@pytest.fixture
def fake_github() -> FakeGitHub:
    return FakeGitHub()


@pytest.fixture
def client_factory(fake_github: FakeGitHub, settings: Settings):
    def factory(access_token=None):
        return GitHubClient(access_token, settings=settings, http_client=fake_github.http_client())

    return factory


class FakeOAuth:
    AUTH_URL = "https://github.com/login/oauth/authorize?client_id=client-id&state=test"

    def __init__(self, token: Optional[str] = None):
        self.token = token
        self.reset_calls = 0
        self.authorization_url_calls = 0

    def get_access_token(self) -> Optional[str]:
        return self.token

    def get_authorization_url(self) -> str:
        self.authorization_url_calls += 1
        return self.AUTH_URL

    def reset(self) -> None:
        self.reset_calls += 1
        self.token = None


# ---------------------------------------------------------------------------
# PAYLOADS
# ---------------------------------------------------------------------------

@pytest.fixture
def owner_payload() -> Dict[str, Any]:
    return {
        "login": "octocat",
        "avatar_url": "https://avatars.githubusercontent.com/u/583231",
        "html_url": "https://github.com/octocat",
    }


@pytest.fixture
def repo_payload(owner_payload) -> Dict[str, Any]:
    return {
        "owner": owner_payload,
        "name": "hello-world",
        "full_name": "octocat/hello-world",
        "description": "My first repository",
        "private": False,
        "language": "Python",
        "stargazers_count": 42,
        "forks_count": 7,
        "updated_at": "2025-01-27T11:00:00Z",
        "html_url": "https://github.com/octocat/hello-world",
    }


@pytest.fixture
def issue_payload(owner_payload) -> Dict[str, Any]:
    return {
        "number": 789,
        "title": "Found a bug",
        "state": "open",
        "body": "Steps to reproduce: open the app, click the button, watch it crash.",
        "created_at": "2025-01-15T09:30:00Z",
        "user": owner_payload,
        "labels": [
            {"name": "bug", "color": "d73a4a", "description": "Something isn't working"},
            {"name": "help wanted", "color": "008672"},
        ],
        "html_url": "https://github.com/octocat/hello-world/issues/789",
    }


@pytest.fixture
def pull_payload(owner_payload, repo_payload) -> Dict[str, Any]:
    return {
        "number": 123,
        "title": "Add feature",
        "state": "closed",
        "merged": True,
        "body": "",
        "created_at": "2025-01-20T10:00:00Z",
        "user": owner_payload,
        "labels": [],
        "html_url": "https://github.com/octocat/hello-world/pull/123",
        "base": {"ref": "main", "repo": repo_payload},
        "head": {"ref": "feature-x", "repo": repo_payload},
    }


@pytest.fixture
def user_payload(owner_payload) -> Dict[str, Any]:
    return {
        **owner_payload,
        "name": "The Octocat",
        "bio": "GitHub mascot",
        "company": "@github",
        "location": "San Francisco",
        "blog": "github.blog",
        "public_repos": 8,
        "followers": 1000,
        "following": 9,
        "created_at": "2011-01-25T18:44:36Z",
    }


@pytest.fixture
def project_payload() -> Dict[str, Any]:
    return {
        "data": {
            "organization": {
                "projectV2": {
                    "number": 1,
                    "title": "Roadmap",
                    "shortDescription": "What we are building",
                    "closed": False,
                    "public": True,
                    "createdAt": "2024-06-01T00:00:00Z",
                    "updatedAt": "2025-01-29T00:00:00Z",
                    "url": "https://github.com/orgs/myorg/projects/1",
                }
            }
        }
    }
