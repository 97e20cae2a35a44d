"""
JWT Token Issuer

Signs session tokens with HS256 and generates opaque refresh tokens.
"""

import base64
import logging
import secrets
from datetime import UTC, datetime, timedelta
from typing import List, Optional

from jose import JWTError, jwt

from libs.result import Error, Result, Return
from src.app.services.token_issuer import (
    REFRESH_TOKEN_BYTES,
    SESSION_TOKEN_LIFETIME_MINUTES,
    ITokenIssuer,
)
from src.domain.entities import User

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


class JwtTokenIssuer(ITokenIssuer):
    """
    python-jose token issuer.

    Claims:
    - name, email: the user's email
    - role: first role of the supplied list
    - full_name: the user's display name
    - iss, aud: from configuration
    - iat, exp: issuance time and issuance + 30 minutes
    """

    def __init__(self, secret: str, issuer: str, audience: str):
        self.secret = secret
        self.issuer = issuer
        self.audience = audience

    def generate_token(self, user: User, roles: List[str]) -> Result[str]:
        if not user.email or not user.name:
            return Return.err(Error("INVALID_USER", "User email and name are required"))
        if not roles:
            return Return.err(
                Error("NO_ROLE_ASSIGNED", "User has no role to embed in the token")
            )

        try:
            now = datetime.now(UTC)
            payload = {
                "name": user.email,
                "email": user.email,
                "role": roles[0],
                "full_name": user.name,
                "iss": self.issuer,
                "aud": self.audience,
                "iat": now,
                "exp": now + timedelta(minutes=SESSION_TOKEN_LIFETIME_MINUTES),
            }
            token = jwt.encode(payload, self.secret, algorithm=ALGORITHM)
        except Exception as exc:
            logger.error(f"Token signing failed for user {user.id}: {exc}")
            return Return.err(Error("TOKEN_GENERATION_FAILED", "Could not sign token"))

        return Return.ok(token)

    def generate_refresh_token(self) -> str:
        return base64.b64encode(secrets.token_bytes(REFRESH_TOKEN_BYTES)).decode("ascii")

    def verify_token(self, token: str) -> Optional[dict]:
        """
        Verify and decode a session token

        Args:
            token: JWT token string

        Returns:
            Decoded claims dict or None if signature, issuer, audience or
            expiry do not check out
        """
        try:
            return jwt.decode(
                token,
                self.secret,
                algorithms=[ALGORITHM],
                audience=self.audience,
                issuer=self.issuer,
            )
        except JWTError:
            return None
