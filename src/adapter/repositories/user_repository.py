from typing import List, Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.user_repository import IUserRepository
from src.app.services.credential_verifier import ICredentialVerifier
from src.app.services.password_policy import PasswordPolicy
from src.domain.entities import Role, User, UserRole, normalize_email, normalize_role_name
from src.domain.results import IdentityError, IdentityResult


def _duplicate_email(email: str) -> IdentityError:
    return IdentityError(
        code="DuplicateEmail", description=f"Email '{email}' is already taken."
    )


class UserRepository(IUserRepository):
    """User repository implementation using SQLModel"""

    def __init__(
        self,
        session: AsyncSession,
        credential_verifier: ICredentialVerifier,
        password_policy: Optional[PasswordPolicy] = None,
    ):
        self.session = session
        self.credential_verifier = credential_verifier
        self.password_policy = password_policy or PasswordPolicy()

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email address"""
        stmt = select(User).where(User.normalized_email == normalize_email(email))
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def create(self, user: User, password: str) -> IdentityResult:
        """Validate, hash the password and insert the user"""
        errors = []
        email = (user.email or "").strip()
        if not email or "@" not in email:
            errors.append(
                IdentityError(code="InvalidEmail", description=f"Email '{email}' is invalid.")
            )
        elif await self.get_by_email(email) is not None:
            errors.append(_duplicate_email(email))
        errors.extend(self.password_policy.validate(password))
        if errors:
            return IdentityResult.failed(*errors)

        user.normalized_email = normalize_email(email)
        user.password_hash = self.credential_verifier.hash_password(password)
        try:
            async with self.session.begin_nested():
                self.session.add(user)
                await self.session.flush()
        except IntegrityError:
            return IdentityResult.failed(_duplicate_email(email))
        await self.session.refresh(user)
        return IdentityResult.success()

    async def add_to_roles(self, user: User, role_names: List[str]) -> IdentityResult:
        """Link user to each named role"""
        errors = []
        links = []
        for name in role_names:
            role = await self._get_role(name)
            if role is None:
                errors.append(
                    IdentityError(code="RoleNotFound", description=f"Role {name} does not exist.")
                )
                continue
            if await self._get_link(user.id, role.id) is not None:
                errors.append(
                    IdentityError(
                        code="UserAlreadyInRole",
                        description=f"User already in role '{name}'.",
                    )
                )
                continue
            links.append(UserRole(user_id=user.id, role_id=role.id))
        if errors:
            return IdentityResult.failed(*errors)

        for link in links:
            self.session.add(link)
        await self.session.flush()
        return IdentityResult.success()

    async def remove_from_roles(
        self, user: User, role_names: List[str]
    ) -> IdentityResult:
        """Unlink user from each named role"""
        errors = []
        links = []
        for name in role_names:
            role = await self._get_role(name)
            link = await self._get_link(user.id, role.id) if role is not None else None
            if link is None:
                errors.append(
                    IdentityError(
                        code="UserNotInRole", description=f"User is not in role '{name}'."
                    )
                )
                continue
            links.append(link)
        if errors:
            return IdentityResult.failed(*errors)

        for link in links:
            await self.session.delete(link)
        await self.session.flush()
        return IdentityResult.success()

    async def get_roles(self, user: User) -> List[str]:
        """Role names of user, earliest assignment first"""
        stmt = (
            select(Role.name)
            .join(UserRole, UserRole.role_id == Role.id)
            .where(UserRole.user_id == user.id)
            .order_by(UserRole.created_at, Role.name)
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def list_all(self) -> List[User]:
        """All users, oldest first"""
        stmt = select(User).order_by(User.created_at, User.normalized_email)
        result = await self.session.exec(stmt)
        return list(result.all())

    async def _get_role(self, name: str) -> Optional[Role]:
        stmt = select(Role).where(Role.normalized_name == normalize_role_name(name))
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def _get_link(self, user_id: UUID, role_id: UUID) -> Optional[UserRole]:
        stmt = select(UserRole).where(
            UserRole.user_id == user_id, UserRole.role_id == role_id
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()
