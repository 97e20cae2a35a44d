from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.role_repository import IRoleRepository
from src.domain.entities import Role, normalize_role_name
from src.domain.results import IdentityError, IdentityResult


def _duplicate_role(name: str) -> IdentityError:
    return IdentityError(
        code="DuplicateRoleName", description=f"Role name '{name}' is already taken."
    )


class RoleRepository(IRoleRepository):
    """Role repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_name(self, name: str) -> Optional[Role]:
        """Get role by name"""
        stmt = select(Role).where(Role.normalized_name == normalize_role_name(name))
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def create(self, role: Role) -> IdentityResult:
        """Create a new role"""
        name = (role.name or "").strip()
        if not name:
            return IdentityResult.failed(
                IdentityError(code="InvalidRoleName", description=f"Role name '{name}' is invalid.")
            )
        if await self.get_by_name(name) is not None:
            return IdentityResult.failed(_duplicate_role(name))

        role.name = name
        role.normalized_name = normalize_role_name(name)
        try:
            # SAVEPOINT: losing a concurrent create only undoes this insert
            async with self.session.begin_nested():
                self.session.add(role)
                await self.session.flush()
        except IntegrityError:
            return IdentityResult.failed(_duplicate_role(name))
        await self.session.refresh(role)
        return IdentityResult.success()

    async def list_all(self) -> List[Role]:
        """All roles ordered by name"""
        stmt = select(Role).order_by(Role.normalized_name)
        result = await self.session.exec(stmt)
        return list(result.all())
