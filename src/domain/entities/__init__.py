"""
Account Service Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

from .enums import RoleName

from .user import User, normalize_email
from .role import Role, normalize_role_name
from .user_role import UserRole

__all__ = [
    # Enums
    "RoleName",
    # Entities
    "User",
    "Role",
    "UserRole",
    # Helpers
    "normalize_email",
    "normalize_role_name",
]
