from typing import Dict, List, Optional
from uuid import UUID

import pytest
from unittest.mock import AsyncMock, MagicMock

from src.app.repositories.role_repository import IRoleRepository
from src.app.repositories.user_repository import IUserRepository
from src.app.services.credential_verifier import ICredentialVerifier
from src.app.services.password_policy import PasswordPolicy
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import Role, User, normalize_email, normalize_role_name
from src.domain.results import IdentityError, IdentityResult, SignInResult


class PlainCredentialVerifier(ICredentialVerifier):
    """Reversible "hash" so tests can run without bcrypt cost"""

    def hash_password(self, password: str) -> str:
        return f"plain${password}"

    async def check_password(self, user: User, password: str) -> SignInResult:
        if user.password_hash == self.hash_password(password):
            return SignInResult.success()
        return SignInResult.failed()


class InMemoryUserRepository(IUserRepository):
    def __init__(self, store: "InMemoryStore"):
        self.store = store

    async def get_by_email(self, email: str) -> Optional[User]:
        return self.store.users.get(normalize_email(email))

    async def create(self, user: User, password: str) -> IdentityResult:
        errors = self.store.password_policy.validate(password)
        if normalize_email(user.email) in self.store.users:
            errors.append(
                IdentityError(
                    code="DuplicateEmail",
                    description=f"Email '{user.email}' is already taken.",
                )
            )
        if errors:
            return IdentityResult.failed(*errors)
        user.normalized_email = normalize_email(user.email)
        user.password_hash = self.store.credential_verifier.hash_password(password)
        self.store.users[user.normalized_email] = user
        self.store.links[user.id] = []
        return IdentityResult.success()

    async def add_to_roles(self, user: User, role_names: List[str]) -> IdentityResult:
        held = self.store.links.setdefault(user.id, [])
        for name in role_names:
            if normalize_role_name(name) not in self.store.roles:
                return IdentityResult.failed(
                    IdentityError(code="RoleNotFound", description=f"Role {name} does not exist.")
                )
            if normalize_role_name(name) in held:
                return IdentityResult.failed(
                    IdentityError(
                        code="UserAlreadyInRole",
                        description=f"User already in role '{name}'.",
                    )
                )
        held.extend(normalize_role_name(name) for name in role_names)
        return IdentityResult.success()

    async def remove_from_roles(self, user: User, role_names: List[str]) -> IdentityResult:
        held = self.store.links.setdefault(user.id, [])
        for name in role_names:
            held.remove(normalize_role_name(name))
        return IdentityResult.success()

    async def get_roles(self, user: User) -> List[str]:
        return [self.store.roles[key].name for key in self.store.links.get(user.id, [])]

    async def list_all(self) -> List[User]:
        return list(self.store.users.values())


class InMemoryRoleRepository(IRoleRepository):
    def __init__(self, store: "InMemoryStore"):
        self.store = store

    async def get_by_name(self, name: str) -> Optional[Role]:
        return self.store.roles.get(normalize_role_name(name))

    async def create(self, role: Role) -> IdentityResult:
        key = normalize_role_name(role.name)
        if key in self.store.roles:
            return IdentityResult.failed(
                IdentityError(
                    code="DuplicateRoleName",
                    description=f"Role name '{role.name}' is already taken.",
                )
            )
        role.normalized_name = key
        self.store.roles[key] = role
        return IdentityResult.success()

    async def list_all(self) -> List[Role]:
        return sorted(self.store.roles.values(), key=lambda r: r.normalized_name)


class InMemoryStore:
    def __init__(self):
        self.users: Dict[str, User] = {}
        self.roles: Dict[str, Role] = {}
        self.links: Dict[UUID, List[str]] = {}
        self.credential_verifier = PlainCredentialVerifier()
        self.password_policy = PasswordPolicy()


class InMemoryUnitOfWork(UnitOfWork):
    """Unit of work over dicts; commits are counted, rollback is a no-op"""

    def __init__(self, store: InMemoryStore):
        self.store = store
        self.users = InMemoryUserRepository(store)
        self.roles = InMemoryRoleRepository(store)
        self.commits = 0

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        return False

    async def commit(self):
        self.commits += 1

    async def rollback(self):
        pass


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def uow(store):
    return InMemoryUnitOfWork(store)


@pytest.fixture
def credential_verifier(store):
    return store.credential_verifier


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.users = MagicMock()
    uow.users.get_by_email = AsyncMock()
    uow.users.create = AsyncMock()
    uow.users.add_to_roles = AsyncMock()
    uow.users.get_roles = AsyncMock()

    uow.roles = MagicMock()
    uow.roles.get_by_name = AsyncMock()
    uow.roles.create = AsyncMock()

    return uow
