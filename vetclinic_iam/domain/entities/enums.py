"""
Clinic IAM Domain Enums

All enumeration types used across domain entities and the permission evaluator.
"""

from enum import Enum


class Role(str, Enum):
    """Top-level account kind"""

    pet_owner = "pet_owner"
    veterinarian = "veterinarian"
    administrator = "administrator"


class AdminTier(str, Enum):
    """Sub-level of an administrator account, controls escalation limits"""

    standard = "standard"
    elevated = "elevated"
    super_admin = "super_admin"


class Capability(str, Enum):
    """A single named permission"""

    create_accounts = "create_accounts"
    edit_accounts = "edit_accounts"
    delete_accounts = "delete_accounts"
    view_all_accounts = "view_all_accounts"
    manage_appointments = "manage_appointments"
    view_reports = "view_reports"
    access_admin_panel = "access_admin_panel"
    manage_system_settings = "manage_system_settings"
    view_clinical_records = "view_clinical_records"
    edit_clinical_records = "edit_clinical_records"
