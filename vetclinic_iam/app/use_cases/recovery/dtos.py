"""
Credential Recovery DTOs

Response classes for the recovery use cases.
"""

from datetime import datetime

from pydantic import BaseModel


class RequestPasswordResetResponse(BaseModel):
    """Response for request password reset use case, identical for every email"""

    status: str
    message: str


class ValidateResetTokenResponse(BaseModel):
    """Response for validate reset token use case"""

    status: str
    email: str
    expires_at: datetime


class CompletePasswordResetResponse(BaseModel):
    """Response for complete password reset use case"""

    status: str
    message: str


class SweepExpiredTokensResponse(BaseModel):
    """Response for expired token sweep"""

    removed: int


class ResetTokenStatsResponse(BaseModel):
    """Reset token counts for operators"""

    total: int
    active: int
    expired: int
    used: int
