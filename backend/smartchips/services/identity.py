"""
Who is asking: the Google user behind an add-on request.

HTTP add-on events carry `authorizationEventObject.userIdToken`, an ID token
signed by Google. Its `sub` claim is the stable user id the OAuth token is
filed under. Anything that does not verify yields None, never a shared key.
"""

from typing import Any, Dict, Optional

import httpx
from jose import JWTError, jwt
from loguru import logger

from ..config import Settings, get_settings
from .property_store import PropertyStore

GOOGLE_ISSUERS = ("https://accounts.google.com", "accounts.google.com")
SIGNING_KEYS_KEY = "google_signing_keys"
SIGNING_KEYS_TTL_SECONDS = 3600


def user_id_token(event: Dict[str, Any]) -> Optional[str]:
    auth = event.get("authorizationEventObject") or {}
    if not isinstance(auth, dict):
        return None
    token = auth.get("userIdToken")
    return token if isinstance(token, str) and token else None


class GoogleIdentityVerifier:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        http_client: Optional[httpx.Client] = None,
    ):
        self.settings = settings or get_settings()
        self.http_client = http_client
        self.cache = PropertyStore()
        if not self.settings.google_id_token_audience:
            logger.warning(
                "[identity] GOOGLE_ID_TOKEN_AUDIENCE not set; ID token audience is not checked"
            )

    def _signing_keys(self) -> Optional[Dict[str, Any]]:
        keys = self.cache.get(SIGNING_KEYS_KEY)
        if keys is not None:
            return keys
        client = self.http_client or httpx.Client(timeout=self.settings.http_timeout_seconds)
        try:
            resp = client.get(str(self.settings.google_certs_url))
            if resp.status_code != 200:
                logger.error(f"[identity] signing keys unavailable: {resp.status_code}")
                return None
            keys = resp.json()
        except httpx.HTTPError as exc:
            logger.error(f"[identity] could not fetch signing keys: {exc!r}")
            return None
        except ValueError as exc:
            logger.error(f"[identity] invalid signing keys response: {exc}")
            return None
        finally:
            if self.http_client is None:
                client.close()
        if not isinstance(keys, dict) or not keys.get("keys"):
            logger.error("[identity] signing keys response has no keys")
            return None
        self.cache.set(SIGNING_KEYS_KEY, keys, ttl_seconds=SIGNING_KEYS_TTL_SECONDS)
        return keys

    def user_id(self, id_token: Optional[str]) -> Optional[str]:
        """The verified `sub` of the token, or None."""
        if not id_token:
            return None
        keys = self._signing_keys()
        if keys is None:
            return None
        audience = self.settings.google_id_token_audience or None
        try:
            claims = jwt.decode(
                id_token,
                keys,
                algorithms=["RS256"],
                audience=audience,
                issuer=GOOGLE_ISSUERS,
                options={"verify_aud": audience is not None},
            )
        except JWTError as exc:
            logger.warning(f"[identity] rejected user ID token: {exc}")
            return None
        subject = claims.get("sub")
        return subject if isinstance(subject, str) and subject else None
