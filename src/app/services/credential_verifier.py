from abc import ABC, abstractmethod

from src.domain.entities import User
from src.domain.results import SignInResult


class ICredentialVerifier(ABC):
    """Hashes passwords and checks them against stored credential material"""

    @abstractmethod
    def hash_password(self, password: str) -> str:
        pass

    @abstractmethod
    async def check_password(self, user: User, password: str) -> SignInResult:
        """
        Check a presented password for the user.

        Implementations may add lock-out or two-factor rules and report them
        through the SignInResult flags.
        """
        pass
