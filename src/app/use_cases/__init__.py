"""
Use Cases

Organized into domain folders:
- account/: Accounts, roles and login
"""

from .account import AccountService

__all__ = [
    "AccountService",
]
