from functools import lru_cache
from typing import Optional

from pydantic import Field, HttpUrl
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    github_client_id: str = Field(default="", alias="GITHUB_CLIENT_ID")
    github_client_secret: str = Field(default="", alias="GITHUB_CLIENT_SECRET")
    github_api_base_url: HttpUrl = Field(
        default="https://api.github.com", alias="GITHUB_API_BASE_URL"
    )
    github_graphql_url: HttpUrl = Field(
        default="https://api.github.com/graphql", alias="GITHUB_GRAPHQL_URL"
    )
    github_oauth_scope: str = Field(default="repo read:project", alias="GITHUB_OAUTH_SCOPE")
    github_proxy: Optional[str] = Field(default=None, alias="GITHUB_PROXY")
    # where Google reaches this service; used for action URLs and the OAuth redirect
    public_base_url: str = Field(default="http://localhost:8020", alias="PUBLIC_BASE_URL")
    http_timeout_seconds: float = Field(default=20, alias="HTTP_TIMEOUT_SECONDS")
    # expected `aud` of the add-on userIdToken; empty skips the audience check
    google_id_token_audience: str = Field(default="", alias="GOOGLE_ID_TOKEN_AUDIENCE")
    google_certs_url: HttpUrl = Field(
        default="https://www.googleapis.com/oauth2/v3/certs", alias="GOOGLE_CERTS_URL"
    )
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        populate_by_name = True
        extra = "ignore"  # ignore unrelated env vars to avoid validation errors

    @property
    def api_base(self) -> str:
        return str(self.github_api_base_url).rstrip("/")

    @property
    def oauth_redirect_url(self) -> str:
        return f"{self.public_base_url.rstrip('/')}/oauth/callback"


@lru_cache
def get_settings() -> Settings:
    return Settings()
