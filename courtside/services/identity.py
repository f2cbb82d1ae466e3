"""Identity providers: where the current user id comes from."""

from typing import Mapping, Optional, Protocol


class IdentityProvider(Protocol):
    """Supplies a stable user identifier; authentication happens elsewhere."""

    def current_user_id(self, headers: Optional[Mapping[str, str]] = None) -> Optional[str]:
        ...


class StaticIdentityProvider:
    """Always returns the same user, for single-user installs and tests."""

    def __init__(self, user_id: str):
        self.user_id = user_id

    def current_user_id(self, headers: Optional[Mapping[str, str]] = None) -> Optional[str]:
        return self.user_id


class HeaderIdentityProvider:
    """Reads the user id set by an authenticating proxy in front of the app."""

    def __init__(self, header_name: str = "X-User-Id", default_user_id: Optional[str] = None):
        self.header_name = header_name
        self.default_user_id = default_user_id

    def current_user_id(self, headers: Optional[Mapping[str, str]] = None) -> Optional[str]:
        value = (headers or {}).get(self.header_name)
        if value and value.strip():
            return value.strip()
        return self.default_user_id
