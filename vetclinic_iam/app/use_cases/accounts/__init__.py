"""
Account Management Use Cases

Account mutations gated by the permission evaluator.
"""

from .create_account_use_case import CreateAccountUseCase
from .change_account_role_use_case import ChangeAccountRoleUseCase
from .change_account_email_use_case import ChangeAccountEmailUseCase
from .delete_account_use_case import DeleteAccountUseCase
from .get_my_permissions_use_case import GetMyPermissionsUseCase
from .dtos import (
    AccountResponse,
    CreateAccountCommand,
    DeleteAccountResponse,
    PermissionsResponse,
)

__all__ = [
    # Use Cases
    "CreateAccountUseCase",
    "ChangeAccountRoleUseCase",
    "ChangeAccountEmailUseCase",
    "DeleteAccountUseCase",
    "GetMyPermissionsUseCase",
    # DTOs - Commands
    "CreateAccountCommand",
    # DTOs - Responses
    "AccountResponse",
    "DeleteAccountResponse",
    "PermissionsResponse",
]
