"""
PasswordResetToken Entity

Single-use, time-limited credential recovery tokens.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel


class PasswordResetToken(SQLModel, table=True):
    """
    PasswordResetToken entity - credential recovery tokens.

    Business Rules:
    - Expires one hour after issue (configurable)
    - Only the SHA-256 hash of the secret is stored
    - One row per account: issuing replaces the previous token
    - used goes False -> True exactly once (compare-and-set in the repository)
    """

    __tablename__ = "password_reset_tokens"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    account_id: UUID = Field(foreign_key="accounts.id", unique=True)
    account_email: str = Field(max_length=255)  # lowercase snapshot at issue time
    token_hash: str = Field(max_length=64, unique=True)  # SHA-256 output

    used: bool = Field(default=False)
    used_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    # Timestamps
    issued_at: datetime = Field(
        default_factory=datetime.utcnow, sa_column=Column(DateTime)
    )
    expires_at: datetime = Field(sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_password_reset_expires_at", "expires_at"),
        Index("idx_password_reset_used", "used"),
    )

    def is_active(self, now: datetime) -> bool:
        return not self.used and now < self.expires_at
