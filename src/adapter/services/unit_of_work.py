from typing import Optional

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.role_repository import RoleRepository
from src.adapter.repositories.user_repository import UserRepository
from src.app.services.credential_verifier import ICredentialVerifier
from src.app.services.password_policy import PasswordPolicy
from src.app.services.unit_of_work import UnitOfWork


def enable_sqlite_savepoints(engine: AsyncEngine) -> AsyncEngine:
    """
    Let SQLAlchemy emit BEGIN itself on SQLite so SAVEPOINTs nest correctly.

    The sqlite3 driver otherwise defers BEGIN until the first DML statement.
    No-op for other databases.
    """
    if engine.dialect.name != "sqlite":
        return engine

    @event.listens_for(engine.sync_engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN")

    return engine


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(
        self,
        session: AsyncSession,
        credential_verifier: ICredentialVerifier,
        password_policy: Optional[PasswordPolicy] = None,
    ):
        self.session = session
        self.credential_verifier = credential_verifier
        self.password_policy = password_policy

    async def __aenter__(self):
        # Initialize all repositories with the session
        self.users = UserRepository(
            self.session, self.credential_verifier, self.password_policy
        )
        self.roles = RoleRepository(self.session)
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()
