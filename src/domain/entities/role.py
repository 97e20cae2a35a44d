"""
Role Entity

Named permission group a user can hold.
"""

from datetime import UTC, datetime
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel


def normalize_role_name(name: str) -> str:
    return name.strip().lower()


class Role(SQLModel, table=True):
    """
    Role entity.

    Business Rules:
    - normalized_name must be unique
    - Roles referenced during assignment are created on demand
    """

    __tablename__ = "roles"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=256)
    normalized_name: str = Field(default="", unique=True, index=True, max_length=256)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC), sa_column=Column(DateTime)
    )
