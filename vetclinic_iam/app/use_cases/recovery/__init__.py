"""
Credential Recovery Use Cases

Password reset token issuance, validation, consumption and housekeeping.
"""

from .request_password_reset_use_case import (
    RequestPasswordResetUseCase,
    build_recovery_link,
)
from .validate_reset_token_use_case import ValidateResetTokenUseCase
from .complete_password_reset_use_case import CompletePasswordResetUseCase
from .sweep_expired_tokens_use_case import SweepExpiredTokensUseCase
from .get_reset_token_stats_use_case import GetResetTokenStatsUseCase
from .dtos import (
    RequestPasswordResetResponse,
    ValidateResetTokenResponse,
    CompletePasswordResetResponse,
    SweepExpiredTokensResponse,
    ResetTokenStatsResponse,
)

__all__ = [
    # Use Cases
    "RequestPasswordResetUseCase",
    "ValidateResetTokenUseCase",
    "CompletePasswordResetUseCase",
    "SweepExpiredTokensUseCase",
    "GetResetTokenStatsUseCase",
    # DTOs - Responses
    "RequestPasswordResetResponse",
    "ValidateResetTokenResponse",
    "CompletePasswordResetResponse",
    "SweepExpiredTokensResponse",
    "ResetTokenStatsResponse",
    # Helpers
    "build_recovery_link",
]
