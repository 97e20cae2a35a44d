from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.services.bcrypt_credential_verifier import BcryptCredentialVerifier
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork, enable_sqlite_savepoints
from src.api.error import ClientError
from src.api.utils.jwt import get_token_issuer, verify_jwt
from src.app.services.password_policy import PasswordPolicy
from src.app.use_cases.account import AccountService
from src.domain.entities import RoleName

engine = enable_sqlite_savepoints(
    create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)
)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

# auto_error=False so a missing header gets the same 401 body as a bad token
security = HTTPBearer(auto_error=False)


def get_credential_verifier() -> BcryptCredentialVerifier:
    return BcryptCredentialVerifier(rounds=ApplicationConfig.BCRYPT_ROUNDS)


def get_password_policy() -> PasswordPolicy:
    return PasswordPolicy(required_length=ApplicationConfig.PASSWORD_REQUIRED_LENGTH)


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(
            session, get_credential_verifier(), get_password_policy()
        )


def get_account_service(uow=Depends(get_unit_of_work)) -> AccountService:
    return AccountService(uow, uow.credential_verifier, get_token_issuer())


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> dict:
    """
    Dependency to extract and verify JWT token from Authorization header.

    Args:
        credentials: Bearer token from Authorization header

    Returns:
        Decoded JWT payload containing name, email, role, full_name

    Raises:
        ClientError: 401 if token is missing, invalid or expired
    """
    if credentials is None:
        raise ClientError.unauthorized("Bearer token required")

    payload = verify_jwt(credentials.credentials)
    if payload is None:
        raise ClientError.unauthorized()

    return payload


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[dict]:
    """Payload of a valid bearer token, None when the header is absent"""
    if credentials is None:
        return None

    payload = verify_jwt(credentials.credentials)
    if payload is None:
        raise ClientError.unauthorized()

    return payload


def is_admin(payload: Optional[dict]) -> bool:
    return payload is not None and payload.get("role") == RoleName.admin.value


async def require_admin(current_user: dict = Depends(get_current_user)) -> dict:
    """Reject tokens whose role claim is not Admin (403)"""
    if not is_admin(current_user):
        raise ClientError.forbidden("Admin role required")
    return current_user
