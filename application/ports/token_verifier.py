# application/ports/token_verifier.py
from __future__ import annotations

from typing import Any, Dict, Protocol


class TokenVerifierPort(Protocol):
    def verify(self, token: str) -> Dict[str, Any]:
        """
        Return the verified claims. Raises AuthorisationError when the token
        is not valid.
        """
        ...
