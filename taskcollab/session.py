"""Acting-user context passed explicitly to every client.

The store identifies the caller by a ``User-Id`` header.  Authentication is
owned elsewhere; this module only carries the identifier and forwards it
verbatim.  Nothing here reads global state — whoever builds a client hands
it a ``UserSession``.
"""

from __future__ import annotations

from attrs import frozen


@frozen
class UserSession:
    """The user on whose behalf requests are made."""

    user_id: int | str
    username: str | None = None

    def headers(self) -> dict[str, str]:
        """Return the identity headers attached to every request."""
        return {"User-Id": str(self.user_id)}
