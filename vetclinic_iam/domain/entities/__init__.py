"""
Clinic IAM Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import AdminTier, Capability, Role

# Export all entities
from .account import Account, normalize_email
from .password_reset_token import PasswordResetToken
from .audit_event import AuditEvent

__all__ = [
    # Enums
    "Role",
    "AdminTier",
    "Capability",
    # Entities
    "Account",
    "PasswordResetToken",
    "AuditEvent",
    # Helpers
    "normalize_email",
]
