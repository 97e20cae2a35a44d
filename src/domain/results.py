"""
Store and credential outcomes

Values returned by the user/role stores and the credential verifier
instead of raising for expected failures.
"""

from typing import List

from pydantic import BaseModel, ConfigDict


class IdentityError(BaseModel):
    """One store validation failure"""

    model_config = ConfigDict(frozen=True)

    code: str
    description: str


class IdentityResult(BaseModel):
    """Outcome of a user/role store mutation"""

    model_config = ConfigDict(frozen=True)

    succeeded: bool
    errors: List[IdentityError] = []

    @classmethod
    def success(cls) -> "IdentityResult":
        return cls(succeeded=True)

    @classmethod
    def failed(cls, *errors: IdentityError) -> "IdentityResult":
        return cls(succeeded=False, errors=list(errors))

    def has_error(self, code: str) -> bool:
        return any(error.code == code for error in self.errors)

    def describe(self) -> str:
        """Newline-joined error descriptions, empty when succeeded"""
        return "\n".join(error.description for error in self.errors)


class SignInResult(BaseModel):
    """
    Outcome of a credential check.

    Only succeeded=True allows a login. The other flags leave room for
    lock-out and two-factor checks in the verifier.
    """

    model_config = ConfigDict(frozen=True)

    succeeded: bool
    is_locked_out: bool = False
    is_not_allowed: bool = False
    requires_two_factor: bool = False

    @classmethod
    def success(cls) -> "SignInResult":
        return cls(succeeded=True)

    @classmethod
    def failed(cls) -> "SignInResult":
        return cls(succeeded=False)
