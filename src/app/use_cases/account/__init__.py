"""
Account Use Cases

Account creation, role management, admin bootstrap and login.
"""

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
from .account_service import AccountService

__all__ = [
    # Service
    "AccountService",
    # Commands
    "CreateAccountCommand",
    "LoginCommand",
    "CreateRoleCommand",
    "ChangeRoleCommand",
    # Responses
    "GeneralResponse",
    "LoginResponse",
    "RoleInfo",
    "UserWithRolesInfo",
]
