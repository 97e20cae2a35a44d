"""
Bcrypt Credential Verifier

Hashes passwords on account creation and checks them on login.
"""

import logging

import bcrypt

from src.app.services.credential_verifier import ICredentialVerifier
from src.domain.entities import User
from src.domain.results import SignInResult

logger = logging.getLogger(__name__)


class BcryptCredentialVerifier(ICredentialVerifier):
    """
    bcrypt-backed credential verifier.

    Passwords are truncated to 72 bytes (bcrypt's limit) on both hash and
    check so long passwords stay verifiable.
    """

    def __init__(self, rounds: int = 12):
        self.rounds = rounds

    def hash_password(self, password: str) -> str:
        pw_bytes = password.encode("utf-8")[:72]
        return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(self.rounds)).decode("utf-8")

    async def check_password(self, user: User, password: str) -> SignInResult:
        if not user.password_hash:
            logger.warning(f"User {user.id} has no password hash")
            return SignInResult.failed()

        password_valid = bcrypt.checkpw(
            password.encode("utf-8")[:72], user.password_hash.encode("utf-8")
        )
        return SignInResult.success() if password_valid else SignInResult.failed()
