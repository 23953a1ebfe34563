"""Authentication handlers for fetching schemas from live endpoints.

Provides pluggable authentication via the Auth protocol.
Users can implement custom auth or use built-in handlers.
"""

from typing import Dict, Iterable, Protocol, runtime_checkable


@runtime_checkable
class Auth(Protocol):
    """Protocol for authentication handlers.

    Example:
        class OrgAuth:
            def __init__(self, token: str, org_id: str):
                self.token = token
                self.org_id = org_id

            def get_headers(self) -> dict[str, str]:
                return {
                    "Authorization": f"Bearer {self.token}",
                    "X-Org-ID": self.org_id,
                }
    """

    def get_headers(self) -> Dict[str, str]:
        """Return headers to include in requests."""
        ...


class BearerAuth:
    """Bearer token authentication.

    Example:
        auth = BearerAuth("eyJhbGciOiJIUzI1NiIs...")
    """

    def __init__(self, token: str):
        self.token = token

    def get_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


class HeaderAuth:
    """Arbitrary request headers, e.g. API keys or tenant IDs.

    Example:
        auth = HeaderAuth({"X-API-Key": "key123"})
    """

    def __init__(self, headers: Dict[str, str]):
        self._headers = dict(headers)

    def get_headers(self) -> Dict[str, str]:
        return self._headers.copy()


class NoAuth:
    """No authentication (for public APIs or testing)."""

    def get_headers(self) -> Dict[str, str]:
        return {}


def parse_header_option(option: str) -> tuple[str, str]:
    """Split a ``Name: value`` command-line header into its name and value.

    Raises:
        ValueError: if there is no colon or the name is empty
    """
    name, separator, value = option.partition(":")
    name = name.strip()
    if not separator or not name:
        raise ValueError(f"Invalid header {option!r}, expected 'Name: value'")
    return name, value.strip()


def build_auth(token: str | None = None, headers: Iterable[str] = ()) -> Auth:
    """Combine a bearer token and ``Name: value`` headers into one handler."""
    combined: Dict[str, str] = {}
    if token:
        combined.update(BearerAuth(token).get_headers())
    for option in headers:
        name, value = parse_header_option(option)
        combined[name] = value
    if not combined:
        return NoAuth()
    return HeaderAuth(combined)
