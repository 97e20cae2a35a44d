from abc import ABC, abstractmethod
from typing import List

from libs.result import Result
from src.domain.entities import User

SESSION_TOKEN_LIFETIME_MINUTES = 30
REFRESH_TOKEN_BYTES = 64


class ITokenIssuer(ABC):
    """Issues signed session tokens and opaque refresh tokens"""

    @abstractmethod
    def generate_token(self, user: User, roles: List[str]) -> Result[str]:
        """
        Build and sign a session token for the user.

        The first entry of roles becomes the role claim. Never raises:
        failures come back as Result errors.
        """
        pass

    @abstractmethod
    def generate_refresh_token(self) -> str:
        pass
