from typing import Optional

from config import ApplicationConfig
from src.adapter.services.jwt_token_issuer import JwtTokenIssuer


def get_token_issuer() -> JwtTokenIssuer:
    """Token issuer configured from ApplicationConfig"""
    return JwtTokenIssuer(
        secret=ApplicationConfig.JWT_SECRET,
        issuer=ApplicationConfig.JWT_ISSUER,
        audience=ApplicationConfig.JWT_AUDIENCE,
    )


def verify_jwt(token: str) -> Optional[dict]:
    """
    Verify and decode JWT token

    Args:
        token: JWT token string

    Returns:
        Decoded payload dict or None if invalid
    """
    return get_token_issuer().verify_token(token)
