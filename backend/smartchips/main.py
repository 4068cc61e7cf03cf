import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.responses import HTMLResponse
from loguru import logger

from . import addon, host
from .config import Settings, get_settings
from .datasources.github_adapter import GitHubClient
from .services.identity import GoogleIdentityVerifier, user_id_token
from .services.oauth import GitHubOAuthService
from .services.property_store import PropertyStore

settings = get_settings()
logger.remove()
logger.add(sys.stderr, level=settings.log_level.upper())

app = FastAPI(title="GitHub Smart Chips", version="0.1.0")

property_store = PropertyStore()
identity_verifier = GoogleIdentityVerifier(settings)


def get_property_store() -> PropertyStore:
    return property_store


def get_identity_verifier() -> GoogleIdentityVerifier:
    return identity_verifier


async def get_event(request: Request) -> Dict[str, Any]:
    try:
        event = await request.json()
    except ValueError:
        return {}
    return event if isinstance(event, dict) else {}


def get_user_key(
    event: Dict[str, Any] = Depends(get_event),
    verifier: GoogleIdentityVerifier = Depends(get_identity_verifier),
) -> Optional[str]:
    return verifier.user_id(user_id_token(event))


def get_oauth(
    user_key: Optional[str] = Depends(get_user_key),
    store: PropertyStore = Depends(get_property_store),
    settings: Settings = Depends(get_settings),
) -> GitHubOAuthService:
    return GitHubOAuthService(store, user_key, settings=settings)


def get_client_factory(settings: Settings = Depends(get_settings)) -> addon.ClientFactory:
    def factory(access_token):
        return GitHubClient(access_token, settings=settings)

    return factory


@app.get("/health")
def health():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


@app.post("/link-preview")
def link_preview(
    event: Dict[str, Any] = Depends(get_event),
    oauth: GitHubOAuthService = Depends(get_oauth),
    client_factory: addon.ClientFactory = Depends(get_client_factory),
    settings: Settings = Depends(get_settings),
):
    cards = addon.on_link_preview(event, oauth, client_factory)
    return host.link_preview_response(cards, settings.public_base_url)


@app.post("/homepage")
def homepage(
    oauth: GitHubOAuthService = Depends(get_oauth),
    client_factory: addon.ClientFactory = Depends(get_client_factory),
    settings: Settings = Depends(get_settings),
):
    card = addon.show_sidebar(oauth, client_factory)
    return host.push_card_response(card, settings.public_base_url)


@app.post("/actions/handleLogout")
def handle_logout(
    oauth: GitHubOAuthService = Depends(get_oauth),
    settings: Settings = Depends(get_settings),
):
    card, notification = addon.handle_logout(oauth)
    return host.update_card_response(card, notification, settings.public_base_url)


@app.post("/actions/resetAuth")
def reset_auth(oauth: GitHubOAuthService = Depends(get_oauth)):
    return host.notification_response(addon.reset_auth(oauth))


@app.get("/oauth/callback", response_class=HTMLResponse)
def oauth_callback(
    code: str = Query(default=""),
    state: str = Query(default=""),
    store: PropertyStore = Depends(get_property_store),
    settings: Settings = Depends(get_settings),
):
    if GitHubOAuthService.handle_callback(store, code, state, settings=settings):
        return HTMLResponse("Success! You can close this tab.")
    return HTMLResponse("Denied. You can close this tab and try again.")


def main():
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8020)


if __name__ == "__main__":
    main()
