"""
Account Service

Creates accounts, assigns roles, seeds the admin account and logs users in.
Every public operation answers with a response envelope (listings with a
Result); nothing raises past this class.
"""

import logging
from typing import List, Optional

from libs.result import Error, Result, Return
from src.app.services.credential_verifier import ICredentialVerifier
from src.app.services.token_issuer import ITokenIssuer
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import Role, RoleName, User
from .dtos import (
    ChangeRoleCommand,
    CreateAccountCommand,
    CreateRoleCommand,
    GeneralResponse,
    LoginCommand,
    LoginResponse,
    RoleInfo,
    UserWithRolesInfo,
)

logger = logging.getLogger(__name__)

ACCOUNT_EXISTS_MESSAGE = "Sorry, user already exists"
EMPTY_MODEL_MESSAGE = "Model State cannot be empty"
USER_NOT_FOUND_MESSAGE = "User Not Found"
INVALID_CREDENTIAL_MESSAGE = "Invalid Credential"
LOGIN_FAILED_MESSAGE = (
    "Error occured while logging in account, please contact administration"
)

ADMIN_NAME = "Admin"
ADMIN_EMAIL = "admin@admin.com"
ADMIN_PASSWORD = "Admin@123"


class AccountService:
    """
    Account orchestration over the user/role stores.

    Business Rules:
    - Email is unique; duplicates are rejected before touching the store
    - Role assignment creates missing roles on the fly
    - Store validation errors are newline-joined into the message
    - Login collapses every verifier failure into "Invalid Credential"
    - Unexpected exceptions become success=False with the exception text
    """

    def __init__(
        self,
        uow: UnitOfWork,
        credential_verifier: ICredentialVerifier,
        token_issuer: ITokenIssuer,
    ):
        self.uow = uow
        self.credential_verifier = credential_verifier
        self.token_issuer = token_issuer

    async def create_account(self, command: CreateAccountCommand) -> GeneralResponse:
        """
        Create a user and assign the requested role.

        Args:
            command: name, email_address, password and role name

        Returns:
            GeneralResponse of the role assignment, or the failure that
            stopped account creation
        """
        try:
            async with self.uow:
                existing_user = await self.uow.users.get_by_email(command.email_address)
                if existing_user is not None:
                    logger.warning("Account creation rejected: email already registered")
                    return GeneralResponse(success=False, message=ACCOUNT_EXISTS_MESSAGE)

                user = User(
                    name=command.name,
                    user_name=command.email_address,
                    email=command.email_address,
                )
                result = await self.uow.users.create(user, command.password)
                if not result.succeeded:
                    return GeneralResponse(success=False, message=result.describe())

                # The account stays even if the role assignment below fails
                await self.uow.commit()

                return await self._assign_user_to_role(user, Role(name=command.role))
        except Exception as exc:
            logger.exception("Account creation failed")
            return GeneralResponse(success=False, message=str(exc))

    async def assign_user_to_role(
        self, user: Optional[User], role: Optional[Role]
    ) -> GeneralResponse:
        """
        Give user the named role, creating the role if it does not exist.

        Returns:
            GeneralResponse with "{name} assigned to {role} role." on success
        """
        try:
            async with self.uow:
                return await self._assign_user_to_role(user, role)
        except Exception as exc:
            logger.exception("Role assignment failed")
            return GeneralResponse(success=False, message=str(exc))

    async def create_admin(self) -> None:
        """
        Seed the admin account once.

        No-op when the admin role already exists. Failures are logged and
        swallowed so startup always proceeds.
        """
        try:
            async with self.uow:
                admin_role = await self.uow.roles.get_by_name(RoleName.admin.value)
            if admin_role is not None:
                logger.info("Admin role present, skipping admin bootstrap")
                return

            response = await self.create_account(
                CreateAccountCommand(
                    name=ADMIN_NAME,
                    email_address=ADMIN_EMAIL,
                    password=ADMIN_PASSWORD,
                    role=RoleName.admin.value,
                )
            )
            if response.success:
                logger.info("Admin account created")
            else:
                logger.warning(f"Admin bootstrap did not complete: {response.message}")
        except Exception:
            logger.exception("Admin bootstrap failed")

    async def login_account(self, command: LoginCommand) -> LoginResponse:
        """
        Authenticate and issue a session token plus refresh token.

        Args:
            command: email_address and raw password

        Returns:
            LoginResponse with both tokens on success, no tokens otherwise
        """
        try:
            async with self.uow:
                user = await self.uow.users.get_by_email(command.email_address)
                if user is None:
                    return LoginResponse(success=False, message=USER_NOT_FOUND_MESSAGE)

                try:
                    sign_in = await self.credential_verifier.check_password(
                        user, command.password
                    )
                except Exception:
                    logger.warning(f"Credential check raised for user {user.id}")
                    return LoginResponse(success=False, message=INVALID_CREDENTIAL_MESSAGE)

                if not sign_in.succeeded:
                    logger.warning(f"Invalid credential for user {user.id}")
                    return LoginResponse(success=False, message=INVALID_CREDENTIAL_MESSAGE)

                roles = await self.uow.users.get_roles(user)
                token_result = self.token_issuer.generate_token(user, roles)
                refresh_token = self.token_issuer.generate_refresh_token()

                if token_result.is_err() or not token_result.value or not refresh_token:
                    if token_result.is_err():
                        logger.error(
                            f"Token not issued for user {user.id}: {token_result.error.code}"
                        )
                    return LoginResponse(success=False, message=LOGIN_FAILED_MESSAGE)

                return LoginResponse(
                    success=True,
                    message=f"{user.name} successfully logged in",
                    token=token_result.value,
                    refresh_token=refresh_token,
                )
        except Exception as exc:
            logger.exception("Login failed")
            return LoginResponse(success=False, message=str(exc))

    async def create_role(self, command: CreateRoleCommand) -> GeneralResponse:
        """Create a standalone role"""
        if not command.name or not command.name.strip():
            return GeneralResponse(success=False, message=EMPTY_MODEL_MESSAGE)

        name = command.name.strip()
        try:
            async with self.uow:
                if await self.uow.roles.get_by_name(name) is not None:
                    return GeneralResponse(
                        success=False, message=f"{name} role already exists"
                    )

                result = await self.uow.roles.create(Role(name=name))
                if not result.succeeded:
                    return GeneralResponse(success=False, message=result.describe())

                await self.uow.commit()
                return GeneralResponse(success=True, message=f"{name} role created.")
        except Exception as exc:
            logger.exception("Role creation failed")
            return GeneralResponse(success=False, message=str(exc))

    async def get_roles(self) -> Result[List[RoleInfo]]:
        """All roles ordered by name, or ROLE_LISTING_FAILED"""
        try:
            async with self.uow:
                roles = await self.uow.roles.list_all()
                return Return.ok(
                    [RoleInfo(id=str(role.id), name=role.name) for role in roles]
                )
        except Exception as exc:
            logger.exception("Role listing failed")
            return Return.err(Error("ROLE_LISTING_FAILED", str(exc)))

    async def get_users_with_roles(self) -> Result[List[UserWithRolesInfo]]:
        """Every user with role names in assignment order, or USER_LISTING_FAILED"""
        try:
            async with self.uow:
                users = await self.uow.users.list_all()
                result = []
                for user in users:
                    roles = await self.uow.users.get_roles(user)
                    result.append(
                        UserWithRolesInfo(
                            id=str(user.id), name=user.name, email=user.email, roles=roles
                        )
                    )
                return Return.ok(result)
        except Exception as exc:
            logger.exception("User listing failed")
            return Return.err(Error("USER_LISTING_FAILED", str(exc)))

    async def change_role(self, command: ChangeRoleCommand) -> GeneralResponse:
        """
        Replace all roles of a user with a single role.

        The target role is created if missing; removal and assignment are
        committed together.
        """
        if not command.user_email.strip() or not command.role_name.strip():
            return GeneralResponse(success=False, message=EMPTY_MODEL_MESSAGE)

        role_name = command.role_name.strip()
        try:
            async with self.uow:
                user = await self.uow.users.get_by_email(command.user_email)
                if user is None:
                    return GeneralResponse(success=False, message=USER_NOT_FOUND_MESSAGE)

                error = await self._ensure_role(role_name)
                if error:
                    return GeneralResponse(success=False, message=error)

                current_roles = await self.uow.users.get_roles(user)
                if current_roles:
                    removed = await self.uow.users.remove_from_roles(user, current_roles)
                    if not removed.succeeded:
                        return GeneralResponse(success=False, message=removed.describe())

                added = await self.uow.users.add_to_roles(user, [role_name])
                if not added.succeeded:
                    return GeneralResponse(success=False, message=added.describe())

                await self.uow.commit()
                return GeneralResponse(
                    success=True, message=f"{user.name} role changed to {role_name}."
                )
        except Exception as exc:
            logger.exception("Role change failed")
            return GeneralResponse(success=False, message=str(exc))

    async def _assign_user_to_role(
        self, user: Optional[User], role: Optional[Role]
    ) -> GeneralResponse:
        # Expects self.uow to be entered
        if user is None or role is None or not role.name:
            return GeneralResponse(success=False, message=EMPTY_MODEL_MESSAGE)

        error = await self._ensure_role(role.name)
        if error:
            return GeneralResponse(success=False, message=error)

        result = await self.uow.users.add_to_roles(user, [role.name])
        if not result.succeeded:
            return GeneralResponse(success=False, message=result.describe())

        await self.uow.commit()
        return GeneralResponse(
            success=True, message=f"{user.name} assigned to {role.name} role."
        )

    async def _ensure_role(self, name: str) -> Optional[str]:
        """Create the role when missing; returns joined errors on failure"""
        if await self.uow.roles.get_by_name(name) is not None:
            return None

        result = await self.uow.roles.create(Role(name=name))
        # A concurrent assignment may have created it first
        if result.succeeded or result.has_error("DuplicateRoleName"):
            return None
        return result.describe()
