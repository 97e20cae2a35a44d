"""
Account Use Case DTOs (Data Transfer Objects)

Commands going into AccountService and the response envelopes coming out.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


# ============================================================================
# Commands
# ============================================================================


class CreateAccountCommand(BaseModel):
    """Create account intent - role is assigned right after the user is stored"""

    name: str
    email_address: str
    password: str
    role: str


class LoginCommand(BaseModel):
    email_address: str
    password: str


class CreateRoleCommand(BaseModel):
    name: str


class ChangeRoleCommand(BaseModel):
    """Replace every role of the user with role_name"""

    user_email: str
    role_name: str


# ============================================================================
# Response DTOs
# ============================================================================


class GeneralResponse(BaseModel):
    """Success flag plus a human-readable message"""

    model_config = ConfigDict(frozen=True)

    success: bool
    message: str


class LoginResponse(BaseModel):
    """
    Login outcome.

    token and refresh_token (serialized as refreshToken) are set only on
    success, and both are required then.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    success: bool
    message: str
    token: Optional[str] = None
    refresh_token: Optional[str] = Field(default=None, alias="refreshToken")

    @model_validator(mode="after")
    def check_tokens(self) -> "LoginResponse":
        has_tokens = bool(self.token) and bool(self.refresh_token)
        if self.success and not has_tokens:
            raise ValueError("successful login requires token and refresh token")
        if not self.success and (self.token or self.refresh_token):
            raise ValueError("failed login must not carry tokens")
        return self


class RoleInfo(BaseModel):
    id: str
    name: str


class UserWithRolesInfo(BaseModel):
    id: str
    name: str
    email: str
    roles: List[str]
