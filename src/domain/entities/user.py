"""
User Entity

Represents an account that can log in and hold roles.
"""

from datetime import UTC, datetime
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel


def normalize_email(email: str) -> str:
    return email.strip().lower()


class User(SQLModel, table=True):
    """
    User entity - an account identified by its email address.

    Business Rules:
    - Email is the login name (user_name == email)
    - normalized_email must be unique across all users
    - Password stored as bcrypt hash, set by the user store on create
    - Roles are linked through UserRole
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=255)
    user_name: str = Field(max_length=255)
    email: str = Field(max_length=255)
    normalized_email: str = Field(default="", unique=True, index=True, max_length=255)
    password_hash: str = Field(default="", max_length=60)  # Bcrypt output is 60 chars

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC), sa_column=Column(DateTime)
    )
