"""
Password Policy

Strength rules applied by the user store before hashing.
"""

from typing import List

from src.domain.results import IdentityError


class PasswordPolicy:
    """
    Password strength rules.

    Each violated rule yields its own IdentityError so callers can show
    every problem at once.
    """

    def __init__(
        self,
        required_length: int = 6,
        require_digit: bool = True,
        require_lowercase: bool = True,
        require_uppercase: bool = True,
        require_non_alphanumeric: bool = True,
    ):
        self.required_length = required_length
        self.require_digit = require_digit
        self.require_lowercase = require_lowercase
        self.require_uppercase = require_uppercase
        self.require_non_alphanumeric = require_non_alphanumeric

    def validate(self, password: str) -> List[IdentityError]:
        password = password or ""
        errors = []

        if len(password) < self.required_length:
            errors.append(
                IdentityError(
                    code="PasswordTooShort",
                    description=f"Passwords must be at least {self.required_length} characters.",
                )
            )
        if self.require_non_alphanumeric and all(c.isalnum() for c in password):
            errors.append(
                IdentityError(
                    code="PasswordRequiresNonAlphanumeric",
                    description="Passwords must have at least one non alphanumeric character.",
                )
            )
        if self.require_digit and not any("0" <= c <= "9" for c in password):
            errors.append(
                IdentityError(
                    code="PasswordRequiresDigit",
                    description="Passwords must have at least one digit ('0'-'9').",
                )
            )
        if self.require_lowercase and not any("a" <= c <= "z" for c in password):
            errors.append(
                IdentityError(
                    code="PasswordRequiresLower",
                    description="Passwords must have at least one lowercase ('a'-'z').",
                )
            )
        if self.require_uppercase and not any("A" <= c <= "Z" for c in password):
            errors.append(
                IdentityError(
                    code="PasswordRequiresUpper",
                    description="Passwords must have at least one uppercase ('A'-'Z').",
                )
            )

        return errors
