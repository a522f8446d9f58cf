"""
Account Management DTOs (Data Transfer Objects)

Commands and responses for the gated account-management use cases.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from vetclinic_iam.domain.entities import Account


class CreateAccountCommand(BaseModel):
    """
    Create account command - represents validated provisioning intent

    role and admin_tier are kept as raw strings; unknown values are
    denied by the permission gate rather than rejected as malformed.
    """

    email: str
    password: str
    role: str
    admin_tier: Optional[str] = None


class AccountResponse(BaseModel):
    """Account details in responses"""

    id: str
    email: str
    role: str
    admin_tier: Optional[str]
    created_at: datetime

    @classmethod
    def from_account(cls, account: Account) -> "AccountResponse":
        return cls(
            id=str(account.id),
            email=account.email,
            role=account.role.value,
            admin_tier=account.admin_tier.value if account.admin_tier else None,
            created_at=account.created_at,
        )


class DeleteAccountResponse(BaseModel):
    """Response for account deletion"""

    status: str
    account_id: str
    reset_tokens_revoked: int


class PermissionsResponse(BaseModel):
    """Effective permissions of the signed-in account"""

    role: str
    role_display_name: str
    admin_tier: Optional[str]
    admin_tier_display_name: Optional[str]
    capabilities: List[str]
    summary: List[str]
    creatable_roles: List[str]
    assignable_tiers: List[str]
    can_access_admin_dashboard: bool
