"""
Account Entity

Identity record for pet owners, veterinarians and administrators.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint
from sqlmodel import Column, DateTime, Field, Index, SQLModel

from .enums import AdminTier, Role


def normalize_email(email: str) -> str:
    return email.strip().lower()


class Account(SQLModel, table=True):
    """
    Account entity - identity record shared by permission checks and recovery.

    Business Rules:
    - Email is unique and stored lowercase
    - admin_tier is set if and only if role is administrator (CHECK constraint)
    - Password stored as bcrypt hash (cost factor 12)
    - Never hard-deleted here; deleted_at marks a removed account
    """

    __tablename__ = "accounts"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    password_hash: str = Field(max_length=60)  # Bcrypt output is 60 chars

    role: Role
    admin_tier: Optional[AdminTier] = Field(default=None)

    # Timestamps
    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )
    updated_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    deleted_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    __table_args__ = (
        CheckConstraint(
            "(role = 'administrator') = (admin_tier IS NOT NULL)",
            name="ck_account_admin_tier_matches_role",
        ),
        Index("idx_account_role", "role"),
    )

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None
