from abc import ABC, abstractmethod
from typing import List, Optional
from src.domain.entities import User
from src.domain.results import IdentityResult


class IUserRepository(ABC):
    """User store interface - application layer"""

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email address (case-insensitive)"""
        pass

    @abstractmethod
    async def create(self, user: User, password: str) -> IdentityResult:
        """Validate, hash the raw password and create the user"""
        pass

    @abstractmethod
    async def add_to_roles(self, user: User, role_names: List[str]) -> IdentityResult:
        """Link the user to existing roles"""
        pass

    @abstractmethod
    async def remove_from_roles(
        self, user: User, role_names: List[str]
    ) -> IdentityResult:
        """Unlink the user from roles it holds"""
        pass

    @abstractmethod
    async def get_roles(self, user: User) -> List[str]:
        """Role names held by the user, earliest assignment first"""
        pass

    @abstractmethod
    async def list_all(self) -> List[User]:
        """All users, oldest first"""
        pass
