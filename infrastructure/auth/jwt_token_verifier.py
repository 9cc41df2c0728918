# infrastructure/auth/jwt_token_verifier.py
from __future__ import annotations

from typing import Any, Dict

import jwt

from application.exceptions import AuthorisationError


class JwtTokenVerifier:
    def __init__(self, secret: str, algorithms: tuple = ("HS256",)):
        self._secret = secret
        self._algorithms = list(algorithms)

    def verify(self, token: str) -> Dict[str, Any]:
        if not self._secret:
            raise AuthorisationError("JWT secret is not configured")
        try:
            return jwt.decode(token, self._secret, algorithms=self._algorithms)
        except jwt.PyJWTError as e:
            raise AuthorisationError(f"Invalid token: {e}") from e
