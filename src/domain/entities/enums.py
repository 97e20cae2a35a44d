"""
Account Service Domain Enums

Enumeration types used across domain entities.
"""

from enum import Enum


class RoleName(str, Enum):
    """Well-known role names"""

    admin = "Admin"
    user = "User"
