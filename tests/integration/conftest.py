import pytest
import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from src.adapter.services.bcrypt_credential_verifier import BcryptCredentialVerifier
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork, enable_sqlite_savepoints
from src.api.utils.jwt import get_token_issuer
from src.app.use_cases.account import AccountService
from src.depends import get_unit_of_work


@pytest_asyncio.fixture
async def engine():
    engine = enable_sqlite_savepoints(create_async_engine("sqlite+aiosqlite:///./test.db"))
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        yield session


@pytest.fixture
def credential_verifier():
    # Minimum bcrypt cost keeps the suite fast
    return BcryptCredentialVerifier(rounds=4)


@pytest.fixture
def account_service(db_session, credential_verifier):
    uow = SqlAlchemyUnitOfWork(db_session, credential_verifier)
    return AccountService(uow, credential_verifier, get_token_issuer())


@pytest.fixture
def app(db_session, credential_verifier):
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session, credential_verifier)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    return app


@pytest_asyncio.fixture
async def client(app):
    from httpx import ASGITransport

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def admin_token(client, account_service):
    await account_service.create_admin()
    response = await client.post(
        "/account/identity/login",
        json={"email_address": "admin@admin.com", "password": "Admin@123"},
    )
    return response.json()["token"]
