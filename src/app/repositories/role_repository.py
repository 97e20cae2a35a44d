from abc import ABC, abstractmethod
from typing import List, Optional

from src.domain.entities import Role
from src.domain.results import IdentityResult


class IRoleRepository(ABC):
    """Role store interface - application layer"""

    @abstractmethod
    async def get_by_name(self, name: str) -> Optional[Role]:
        """Get role by name (case-insensitive)"""
        pass

    @abstractmethod
    async def create(self, role: Role) -> IdentityResult:
        """
        Create a new role.

        Returns a failed result with code DuplicateRoleName when the name is
        taken, including when a concurrent create won the race.
        """
        pass

    @abstractmethod
    async def list_all(self) -> List[Role]:
        """All roles ordered by name"""
        pass
