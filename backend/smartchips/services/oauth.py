"""
GitHub OAuth for the add-on.

Flow:
1. get_authorization_url() -> user opens it in an overlay, GitHub asks for consent
2. GitHub redirects to /oauth/callback with ?code=...&state=...
3. handle_callback() exchanges the code and stores the token for the user
   the state was issued to
4. get_access_token() reads it back on later requests; reset() drops it

Reference: https://docs.github.com/en/apps/oauth-apps/building-oauth-apps/authorizing-oauth-apps
"""

import secrets
from typing import Optional
from urllib.parse import urlencode

import httpx
from loguru import logger

from ..config import Settings, get_settings
from .property_store import PropertyStore

AUTHORIZATION_URL = "https://github.com/login/oauth/authorize"
TOKEN_URL = "https://github.com/login/oauth/access_token"

STATE_TTL_SECONDS = 600


def token_key(user_key: str) -> str:
    return f"github_token:{user_key}"


def state_key(state: str) -> str:
    return f"oauth_state:{state}"


class GitHubOAuthService:
    """Per-user view over the OAuth token stored in a PropertyStore."""

    def __init__(
        self,
        store: PropertyStore,
        user_key: Optional[str],
        settings: Optional[Settings] = None,
    ):
        self.store = store
        self.user_key = user_key
        self.settings = settings or get_settings()
        if not self.settings.github_client_id or not self.settings.github_client_secret:
            logger.warning(
                "[oauth] GitHub OAuth not configured. Set GITHUB_CLIENT_ID and GITHUB_CLIENT_SECRET."
            )

    def get_access_token(self) -> Optional[str]:
        if not self.user_key:
            return None
        return self.store.get(token_key(self.user_key))

    def get_authorization_url(self) -> str:
        state = secrets.token_urlsafe(24)
        if self.user_key:
            self.store.set(state_key(state), self.user_key, ttl_seconds=STATE_TTL_SECONDS)
        else:
            # nobody to file the token under, so the callback for this state is denied
            logger.warning("[oauth] authorization URL for an unidentified user")
        params = {
            "client_id": self.settings.github_client_id,
            "redirect_uri": self.settings.oauth_redirect_url,
            "scope": self.settings.github_oauth_scope,
            "state": state,
        }
        return f"{AUTHORIZATION_URL}?{urlencode(params)}"

    def reset(self) -> None:
        if not self.user_key:
            return
        logger.info(f"[oauth] resetting authorization for {self.user_key}")
        self.store.delete(token_key(self.user_key))

    @classmethod
    def handle_callback(
        cls,
        store: PropertyStore,
        code: str,
        state: str,
        settings: Optional[Settings] = None,
        http_client: Optional[httpx.Client] = None,
    ) -> bool:
        """Exchange the authorization code; True when a token was stored."""
        settings = settings or get_settings()
        user_key = store.get(state_key(state)) if state else None
        if not user_key:
            logger.warning("[oauth] callback with unknown or expired state")
            return False
        store.delete(state_key(state))
        if not code:
            logger.warning(f"[oauth] callback for {user_key} without a code")
            return False

        token_data = {
            "client_id": settings.github_client_id,
            "client_secret": settings.github_client_secret,
            "code": code,
            "redirect_uri": settings.oauth_redirect_url,
        }
        client = http_client or httpx.Client(timeout=settings.http_timeout_seconds)
        try:
            resp = client.post(TOKEN_URL, data=token_data, headers={"Accept": "application/json"})
            if resp.status_code != 200:
                logger.error(f"[oauth] token exchange failed: {resp.status_code} - {resp.text}")
                return False
            payload = resp.json()
        except httpx.HTTPError as exc:
            logger.error(f"[oauth] network error during token exchange: {exc!r}")
            return False
        except ValueError as exc:
            logger.error(f"[oauth] invalid token response: {exc}")
            return False
        finally:
            if http_client is None:
                client.close()

        access_token = payload.get("access_token")
        if not access_token:
            # GitHub reports denied/expired codes with a 200 and an error field
            logger.warning(
                f"[oauth] token exchange denied: {payload.get('error')} {payload.get('error_description', '')}"
            )
            return False

        store.set(token_key(user_key), access_token, ttl_seconds=payload.get("expires_in"))
        logger.info(f"[oauth] stored GitHub token for {user_key} (scope={payload.get('scope', '')})")
        return True
