"""
Use Cases

Organized into domain folders:
- recovery/: Credential recovery (password reset tokens)
- accounts/: Account management gated by the permission evaluator
"""

from .recovery import (
    RequestPasswordResetUseCase,
    ValidateResetTokenUseCase,
    CompletePasswordResetUseCase,
    SweepExpiredTokensUseCase,
    GetResetTokenStatsUseCase,
)
from .accounts import (
    CreateAccountUseCase,
    ChangeAccountRoleUseCase,
    ChangeAccountEmailUseCase,
    DeleteAccountUseCase,
    GetMyPermissionsUseCase,
)

__all__ = [
    # Recovery
    "RequestPasswordResetUseCase",
    "ValidateResetTokenUseCase",
    "CompletePasswordResetUseCase",
    "SweepExpiredTokensUseCase",
    "GetResetTokenStatsUseCase",
    # Accounts
    "CreateAccountUseCase",
    "ChangeAccountRoleUseCase",
    "ChangeAccountEmailUseCase",
    "DeleteAccountUseCase",
    "GetMyPermissionsUseCase",
]
