from datetime import datetime
from enum import Enum
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict


class ResourceKind(str, Enum):
    REPOSITORY = "repository"
    ISSUE = "issue"
    PULL_REQUEST = "pull_request"
    USER = "user"
    PROJECT = "project"


class _Ref(BaseModel):
    model_config = ConfigDict(frozen=True)

    owner: str


class RepositoryRef(_Ref):
    kind: Literal[ResourceKind.REPOSITORY] = ResourceKind.REPOSITORY
    repo: str


class IssueRef(_Ref):
    kind: Literal[ResourceKind.ISSUE] = ResourceKind.ISSUE
    repo: str
    number: int


class PullRequestRef(_Ref):
    kind: Literal[ResourceKind.PULL_REQUEST] = ResourceKind.PULL_REQUEST
    repo: str
    number: int


class UserRef(_Ref):
    kind: Literal[ResourceKind.USER] = ResourceKind.USER


class ProjectRef(_Ref):
    kind: Literal[ResourceKind.PROJECT] = ResourceKind.PROJECT
    number: int
    # set to the owner for organization projects, None for user projects
    org: Optional[str] = None

    @property
    def is_org(self) -> bool:
        return self.org is not None


ResourceReference = Union[RepositoryRef, IssueRef, PullRequestRef, UserRef, ProjectRef]


class GitHubAccount(BaseModel):
    login: str = ""
    avatar_url: str = ""
    html_url: str = ""


class Label(BaseModel):
    name: str
    color: str = ""
    description: Optional[str] = None


class RepositoryRecord(BaseModel):
    owner: GitHubAccount
    name: str
    full_name: str
    description: Optional[str] = None
    private: bool = False
    language: Optional[str] = None
    stargazers_count: int = 0
    forks_count: int = 0
    updated_at: Optional[datetime] = None
    html_url: str = ""


class IssueRecord(BaseModel):
    number: int
    title: str
    state: str
    body: Optional[str] = None
    created_at: Optional[datetime] = None
    user: GitHubAccount
    labels: List[Label] = []
    html_url: str = ""
    repository: RepositoryRecord


class BranchRef(BaseModel):
    ref: str
    repo: Optional[RepositoryRecord] = None


class PullRequestRecord(BaseModel):
    number: int
    title: str
    state: str
    body: Optional[str] = None
    created_at: Optional[datetime] = None
    user: GitHubAccount
    labels: List[Label] = []
    html_url: str = ""
    merged: bool = False
    base: BranchRef
    head: BranchRef


class UserRecord(GitHubAccount):
    name: Optional[str] = None
    bio: Optional[str] = None
    company: Optional[str] = None
    location: Optional[str] = None
    blog: Optional[str] = None
    public_repos: Optional[int] = None
    followers: Optional[int] = None
    following: Optional[int] = None
    created_at: Optional[datetime] = None


class ProjectRecord(BaseModel):
    number: int
    title: str
    short_description: Optional[str] = None
    closed: bool = False
    public: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    url: str = ""


ResourceRecord = Union[
    RepositoryRecord, IssueRecord, PullRequestRecord, UserRecord, ProjectRecord
]
