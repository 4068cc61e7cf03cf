from typing import Optional, Protocol


class TokenProvider(Protocol):
    """What the add-on needs from the OAuth side: a token, a way to get one, a way to drop it."""

    def get_access_token(self) -> Optional[str]:
        ...

    def get_authorization_url(self) -> str:
        ...

    def reset(self) -> None:
        ...
