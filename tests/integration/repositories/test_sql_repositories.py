import pytest

from src.adapter.repositories.role_repository import RoleRepository
from src.adapter.repositories.user_repository import UserRepository
from src.app.use_cases.account import CreateAccountCommand
from src.domain.entities import Role, User


@pytest.fixture
def users(db_session, credential_verifier):
    return UserRepository(db_session, credential_verifier)


@pytest.fixture
def roles(db_session):
    return RoleRepository(db_session)


def make_user(email="Jane@Acme.com"):
    return User(name="Jane", user_name=email, email=email)


@pytest.mark.asyncio
async def test_create_user_hashes_password_and_normalizes_email(users, db_session):
    user = make_user()

    result = await users.create(user, "SecurePass123!")
    await db_session.commit()

    assert result.succeeded
    assert user.normalized_email == "jane@acme.com"
    assert user.password_hash.startswith("$2b$")
    assert (await users.get_by_email("JANE@ACME.COM")).id == user.id


@pytest.mark.asyncio
async def test_create_user_duplicate_email(users, db_session):
    await users.create(make_user(), "SecurePass123!")
    await db_session.commit()

    result = await users.create(make_user("jane@acme.com"), "SecurePass123!")

    assert not result.succeeded
    assert result.errors[0].code == "DuplicateEmail"


@pytest.mark.asyncio
async def test_create_user_invalid_email(users):
    result = await users.create(make_user("not-an-email"), "SecurePass123!")

    assert not result.succeeded
    assert result.describe() == "Email 'not-an-email' is invalid."


@pytest.mark.asyncio
async def test_role_create_and_duplicate(roles, db_session):
    first = await roles.create(Role(name="Editor"))
    await db_session.commit()
    second = await roles.create(Role(name="EDITOR"))

    assert first.succeeded
    assert second.has_error("DuplicateRoleName")
    assert [role.name for role in await roles.list_all()] == ["Editor"]


@pytest.mark.asyncio
async def test_role_create_rejects_blank_name(roles):
    result = await roles.create(Role(name="  "))

    assert result.has_error("InvalidRoleName")


@pytest.mark.asyncio
async def test_roles_listed_in_assignment_order(users, roles, db_session):
    user = make_user()
    await users.create(user, "SecurePass123!")
    for name in ("Viewer", "Editor"):
        await roles.create(Role(name=name))
    await users.add_to_roles(user, ["Viewer"])
    await users.add_to_roles(user, ["Editor"])
    await db_session.commit()

    assert await users.get_roles(user) == ["Viewer", "Editor"]


@pytest.mark.asyncio
async def test_add_to_roles_errors(users, roles, db_session):
    user = make_user()
    await users.create(user, "SecurePass123!")
    await roles.create(Role(name="Editor"))
    await users.add_to_roles(user, ["Editor"])
    await db_session.commit()

    result = await users.add_to_roles(user, ["Editor", "Missing"])

    assert result.describe() == "User already in role 'Editor'.\nRole Missing does not exist."


@pytest.mark.asyncio
async def test_remove_from_roles(users, roles, db_session):
    user = make_user()
    await users.create(user, "SecurePass123!")
    await roles.create(Role(name="Editor"))
    await users.add_to_roles(user, ["Editor"])
    await db_session.commit()

    removed = await users.remove_from_roles(user, ["Editor"])
    missing = await users.remove_from_roles(user, ["Editor"])

    assert removed.succeeded
    assert missing.has_error("UserNotInRole")
    assert await users.get_roles(user) == []


@pytest.mark.asyncio
async def test_create_admin_against_database(account_service, users, roles):
    await account_service.create_admin()
    await account_service.create_admin()

    assert [role.name for role in await roles.list_all()] == ["Admin"]
    all_users = await users.list_all()
    assert [user.email for user in all_users] == ["admin@admin.com"]
    assert await users.get_roles(all_users[0]) == ["Admin"]


async def lookup_miss(self, key):
    return None


@pytest.mark.asyncio
async def test_role_insert_conflict_keeps_session_usable(users, roles, db_session, monkeypatch):
    """A concurrent writer created the role between lookup and insert"""
    user = make_user()
    await users.create(user, "SecurePass123!")
    await roles.create(Role(name="Editor"))
    await db_session.commit()
    monkeypatch.setattr(RoleRepository, "get_by_name", lookup_miss)

    result = await roles.create(Role(name="editor"))

    assert result.has_error("DuplicateRoleName")
    # Rows loaded before the conflict are still readable without a reload
    assert user.name == "Jane"
    assert (await users.add_to_roles(user, ["Editor"])).succeeded
    assert await users.get_roles(user) == ["Editor"]


@pytest.mark.asyncio
async def test_user_insert_conflict_reports_duplicate_email(users, db_session, monkeypatch):
    first = make_user()
    await users.create(first, "SecurePass123!")
    await db_session.commit()
    monkeypatch.setattr(UserRepository, "get_by_email", lookup_miss)

    result = await users.create(make_user("jane@acme.com"), "SecurePass123!")

    assert result.describe() == "Email 'jane@acme.com' is already taken."
    assert first.email == "Jane@Acme.com"


@pytest.mark.asyncio
async def test_create_account_tolerates_role_created_concurrently(
    account_service, roles, users, db_session, monkeypatch
):
    await roles.create(Role(name="Editor"))
    await db_session.commit()
    monkeypatch.setattr(RoleRepository, "get_by_name", lookup_miss)

    response = await account_service.create_account(
        CreateAccountCommand(
            name="Ann", email_address="ann@acme.com", password="SecurePass123!", role="Editor"
        )
    )
    monkeypatch.undo()

    assert response.success is True
    assert response.message == "Ann assigned to Editor role."
    assert [role.name for role in await roles.list_all()] == ["Editor"]
    assert await users.get_roles(await users.get_by_email("ann@acme.com")) == ["Editor"]
