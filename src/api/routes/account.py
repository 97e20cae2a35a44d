from typing import List, Optional

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, EmailStr, Field

from src.app.use_cases.account import (
    AccountService,
    ChangeRoleCommand,
    CreateAccountCommand,
    CreateRoleCommand,
    GeneralResponse,
    LoginCommand,
    LoginResponse,
    RoleInfo,
    UserWithRolesInfo,
)
from src.api.error import ClientError, ServerError
from src.depends import get_account_service, get_optional_user, is_admin, require_admin
from src.domain.entities import RoleName, normalize_role_name

router = APIRouter(prefix="/account/identity", tags=["Account"])


def envelope(response, failure_status: int = status.HTTP_400_BAD_REQUEST):
    """Serialize a response envelope; failures get failure_status"""
    if response.success:
        return response
    return JSONResponse(
        status_code=failure_status,
        content=response.model_dump(by_alias=True, exclude_none=True),
    )


class CreateAccountRequest(BaseModel):
    """
    Create account HTTP request payload

    Validates incoming HTTP request before converting to CreateAccountCommand.
    """

    name: str = Field(..., min_length=1, max_length=255, description="Display name")
    email_address: EmailStr = Field(..., description="Email, also the login name")
    password: str = Field(..., description="Raw password, checked by the password policy")
    role: str = Field(..., min_length=1, max_length=256, description="Role to assign")


@router.post(
    "/create",
    status_code=status.HTTP_200_OK,
    response_model=GeneralResponse,
    responses={400: {"model": GeneralResponse}},
)
async def create_account(
    request: CreateAccountRequest,
    caller: Optional[dict] = Depends(get_optional_user),
    service: AccountService = Depends(get_account_service),
):
    """
    Create Account

    Creates the user, then assigns the requested role (created if missing).
    Open to anonymous callers except for the Admin role.

    Raises:
        - 400 Bad Request: duplicate email, password policy, store errors
        - 401 Unauthorized: bearer token present but invalid or expired
        - 403 Forbidden: Admin role requested without an Admin token
        - 422 Unprocessable Entity: Invalid input (handled by FastAPI)
    """
    if normalize_role_name(request.role) == normalize_role_name(
        RoleName.admin.value
    ) and not is_admin(caller):
        raise ClientError.forbidden("Admin role required to create Admin accounts")

    command = CreateAccountCommand(
        name=request.name,
        email_address=request.email_address,
        password=request.password,
        role=request.role,
    )
    return envelope(await service.create_account(command))


class LoginRequest(BaseModel):
    """Login HTTP request payload"""

    email_address: EmailStr = Field(..., description="User email address")
    password: str = Field(..., description="User password")


@router.post(
    "/login",
    status_code=status.HTTP_200_OK,
    response_model=LoginResponse,
    response_model_exclude_none=True,
    responses={401: {"model": LoginResponse}},
)
async def login(
    request: LoginRequest, service: AccountService = Depends(get_account_service)
):
    """
    Login

    Returns a 30-minute session token and a refresh token.

    Raises:
        - 401 Unauthorized: unknown user, invalid credential, token issue failure
    """
    command = LoginCommand(email_address=request.email_address, password=request.password)
    return envelope(
        await service.login_account(command), failure_status=status.HTTP_401_UNAUTHORIZED
    )


class CreateRoleRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=256, description="Role name")


@router.post(
    "/role/create",
    status_code=status.HTTP_200_OK,
    response_model=GeneralResponse,
    responses={400: {"model": GeneralResponse}},
)
async def create_role(
    request: CreateRoleRequest,
    _admin: dict = Depends(require_admin),
    service: AccountService = Depends(get_account_service),
):
    """Create Role (Admin only)"""
    return envelope(await service.create_role(CreateRoleCommand(name=request.name)))


@router.get(
    "/role/list", status_code=status.HTTP_200_OK, response_model=List[RoleInfo]
)
async def list_roles(
    _admin: dict = Depends(require_admin),
    service: AccountService = Depends(get_account_service),
):
    """List Roles (Admin only)"""
    result = await service.get_roles()
    if result.is_err():
        raise ServerError(result.error)
    return result.value


@router.get(
    "/users-with-roles",
    status_code=status.HTTP_200_OK,
    response_model=List[UserWithRolesInfo],
)
async def list_users_with_roles(
    _admin: dict = Depends(require_admin),
    service: AccountService = Depends(get_account_service),
):
    """List Users With Their Roles (Admin only)"""
    result = await service.get_users_with_roles()
    if result.is_err():
        raise ServerError(result.error)
    return result.value


class ChangeRoleRequest(BaseModel):
    user_email: EmailStr = Field(..., description="Email of the user to update")
    role_name: str = Field(..., min_length=1, max_length=256, description="New role")


@router.post(
    "/change-role",
    status_code=status.HTTP_200_OK,
    response_model=GeneralResponse,
    responses={400: {"model": GeneralResponse}},
)
async def change_role(
    request: ChangeRoleRequest,
    _admin: dict = Depends(require_admin),
    service: AccountService = Depends(get_account_service),
):
    """
    Change Role (Admin only)

    Replaces every role of the user with role_name. Tokens already issued
    keep their role claim until they expire.
    """
    command = ChangeRoleCommand(user_email=request.user_email, role_name=request.role_name)
    return envelope(await service.change_role(command))
