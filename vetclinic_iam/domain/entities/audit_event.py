"""
AuditEvent Entity

Immutable log of identity and access-control events.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, JSON, SQLModel


class AuditEvent(SQLModel, table=True):
    """
    AuditEvent entity - immutable log of recovery and account-management events.

    Business Rules:
    - Immutable (never updated or deleted)
    - actor_id is None when the event was not initiated by a signed-in account
    - Metadata never contains reset secrets or password material
    """

    __tablename__ = "audit_events"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    account_id: Optional[UUID] = Field(default=None, index=True)
    actor_id: Optional[UUID] = Field(default=None, index=True)

    action: str = Field(max_length=100)  # e.g., "password_reset_requested"
    event_metadata: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    # Timestamps
    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )

    __table_args__ = (
        Index("idx_audit_created_at", "created_at"),
        Index("idx_audit_account_action", "account_id", "action"),
    )
