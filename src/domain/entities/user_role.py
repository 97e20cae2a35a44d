"""
UserRole Entity

Links User to Role (many-to-many).
"""

from datetime import UTC, datetime
from uuid import UUID

from sqlmodel import Column, DateTime, Field, Index, SQLModel


class UserRole(SQLModel, table=True):
    """
    UserRole entity - one role held by one user.

    Business Rules:
    - (user_id, role_id) is unique
    - created_at orders a user's roles; the earliest is the token role claim
    """

    __tablename__ = "user_roles"

    user_id: UUID = Field(foreign_key="users.id", primary_key=True)
    role_id: UUID = Field(foreign_key="roles.id", primary_key=True)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC), sa_column=Column(DateTime)
    )

    __table_args__ = (Index("idx_user_role_role_id", "role_id"),)
