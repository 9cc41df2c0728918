# application/services/authoriser.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from application.ports.token_verifier import TokenVerifierPort


@dataclass(frozen=True)
class AuthState:
    is_authorised: bool = False
    is_admin: bool = False
    auth_name: Optional[str] = None

    def to_context(self) -> Dict[str, Any]:
        return {
            "isAuthorised": self.is_authorised,
            "isAdmin": self.is_admin,
            "authName": self.auth_name,
        }


class Authoriser:
    """
    Map a signed staff token to the landing page's auth flags.

    A missing token is not an error: authorise() returns None and the page
    renders unauthenticated. An invalid token raises AuthorisationError
    from the verifier.
    """

    def __init__(self, verifier: TokenVerifierPort, user_group: str, admin_group: str):
        self._verifier = verifier
        self._user_group = user_group
        self._admin_group = admin_group

    def authorise(self, token: Optional[str]) -> Optional[AuthState]:
        if not token:
            return None

        claims = self._verifier.verify(token)
        groups = claims.get("groups") or []
        if isinstance(groups, str):
            groups = [groups]

        is_admin = bool(self._admin_group) and self._admin_group in groups
        is_user = bool(self._user_group) and self._user_group in groups
        return AuthState(
            is_authorised=is_user or is_admin,
            is_admin=is_admin,
            auth_name=claims.get("name"),
        )
