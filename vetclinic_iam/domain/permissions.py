"""
Permission Evaluator

Pure role/tier checks used as the gate before any account-management mutation.

Business Rules:
- Capabilities are a fixed lookup keyed by (role, admin tier), recomputed per call
- Administrators start from a base set; elevated and super admins gain
  manage_system_settings and edit_clinical_records
- Super admin differs from elevated only through the hierarchy checks
  (can_manage, creatable_roles, assignable_tiers), not through capabilities
- Only a super admin may manage, create or grant tiers to administrators
- Unknown or malformed roles/tiers fail closed: empty set or False, never an exception

Every function accepts enum members or their raw string values. An actor or
target is anything exposing ``role`` and ``admin_tier`` attributes (an Account,
or a lightweight principal).
"""

from typing import Any, Dict, FrozenSet, List, Optional

from .entities.enums import AdminTier, Capability, Role

_BASE_ADMIN_CAPABILITIES: FrozenSet[Capability] = frozenset(
    {
        Capability.create_accounts,
        Capability.edit_accounts,
        Capability.delete_accounts,
        Capability.view_all_accounts,
        Capability.manage_appointments,
        Capability.view_reports,
        Capability.access_admin_panel,
        Capability.view_clinical_records,
    }
)

_WIDENED_ADMIN_CAPABILITIES: FrozenSet[Capability] = _BASE_ADMIN_CAPABILITIES | {
    Capability.manage_system_settings,
    Capability.edit_clinical_records,
}

ROLE_CAPABILITIES: Dict[Role, FrozenSet[Capability]] = {
    # Pet owners act only on their own pets and appointments, which is not a capability here
    Role.pet_owner: frozenset(),
    Role.veterinarian: frozenset(
        {
            Capability.manage_appointments,
            Capability.view_clinical_records,
            Capability.edit_clinical_records,
        }
    ),
}

ADMIN_TIER_CAPABILITIES: Dict[AdminTier, FrozenSet[Capability]] = {
    AdminTier.standard: _BASE_ADMIN_CAPABILITIES,
    AdminTier.elevated: _WIDENED_ADMIN_CAPABILITIES,
    AdminTier.super_admin: _WIDENED_ADMIN_CAPABILITIES,
}

CREATABLE_ROLES: Dict[AdminTier, FrozenSet[Role]] = {
    AdminTier.standard: frozenset({Role.pet_owner, Role.veterinarian}),
    AdminTier.elevated: frozenset({Role.pet_owner, Role.veterinarian}),
    AdminTier.super_admin: frozenset(Role),
}

ASSIGNABLE_TIERS: Dict[AdminTier, FrozenSet[AdminTier]] = {
    AdminTier.standard: frozenset(),
    AdminTier.elevated: frozenset({AdminTier.standard}),
    AdminTier.super_admin: frozenset(AdminTier),
}

ROLE_DISPLAY_NAMES: Dict[Role, str] = {
    Role.pet_owner: "Pet Owner",
    Role.veterinarian: "Veterinarian",
    Role.administrator: "Administrator",
}

TIER_DISPLAY_NAMES: Dict[AdminTier, str] = {
    AdminTier.standard: "Standard Admin",
    AdminTier.elevated: "Elevated Admin",
    AdminTier.super_admin: "Super Administrator",
}

# Order of the human-readable summary
CAPABILITY_LABELS: Dict[Capability, str] = {
    Capability.create_accounts: "Create Users",
    Capability.edit_accounts: "Edit Users",
    Capability.delete_accounts: "Delete Users",
    Capability.view_all_accounts: "View All Users",
    Capability.manage_appointments: "Manage Appointments",
    Capability.view_reports: "View Reports",
    Capability.access_admin_panel: "Admin Panel Access",
    Capability.manage_system_settings: "System Settings",
    Capability.view_clinical_records: "View Clinical Records",
    Capability.edit_clinical_records: "Edit Clinical Records",
}


def _coerce_role(value: Any) -> Optional[Role]:
    if isinstance(value, Role):
        return value
    try:
        return Role(value)
    except (ValueError, TypeError):
        return None


def _coerce_tier(value: Any) -> Optional[AdminTier]:
    if isinstance(value, AdminTier):
        return value
    try:
        return AdminTier(value)
    except (ValueError, TypeError):
        return None


def _coerce_capability(value: Any) -> Optional[Capability]:
    if isinstance(value, Capability):
        return value
    try:
        return Capability(value)
    except (ValueError, TypeError):
        return None


def _role_of(subject: Any) -> Optional[Role]:
    return _coerce_role(getattr(subject, "role", None))


def _admin_tier_of(actor: Any) -> Optional[AdminTier]:
    """Tier of an administrator actor; None for anyone else or a malformed tier."""
    if _role_of(actor) is not Role.administrator:
        return None
    return _coerce_tier(getattr(actor, "admin_tier", None))


def permissions_for(role: Any, admin_tier: Any = None) -> FrozenSet[Capability]:
    """
    Capabilities granted to a (role, tier) pair.

    Total over any input: unknown roles, and administrators without a
    recognised tier, get the empty set.
    """
    parsed_role = _coerce_role(role)
    if parsed_role is None:
        return frozenset()

    if parsed_role is Role.administrator:
        tier = _coerce_tier(admin_tier)
        if tier is None:
            return frozenset()
        return ADMIN_TIER_CAPABILITIES[tier]

    return ROLE_CAPABILITIES[parsed_role]


def has_capability(actor: Any, capability: Any) -> bool:
    parsed = _coerce_capability(capability)
    if actor is None or parsed is None:
        return False
    return parsed in permissions_for(
        getattr(actor, "role", None), getattr(actor, "admin_tier", None)
    )


def can_manage(actor: Any, target: Any) -> bool:
    """
    Hierarchy check, independent of the flat capability set.

    - Super admins manage everyone, other administrators included
    - No other administrator manages an administrator
    - Standard and elevated admins manage pet owners and veterinarians
    - Non-administrators manage nobody
    """
    if actor is None or target is None:
        return False

    tier = _admin_tier_of(actor)
    if tier is None:
        return False

    if tier is AdminTier.super_admin:
        return True

    target_role = _role_of(target)
    if target_role is Role.administrator:
        return False

    return target_role in (Role.pet_owner, Role.veterinarian)


def creatable_roles(actor: Any) -> FrozenSet[Role]:
    tier = _admin_tier_of(actor)
    if tier is None:
        return frozenset()
    return CREATABLE_ROLES[tier]


def assignable_tiers(actor: Any) -> FrozenSet[AdminTier]:
    tier = _admin_tier_of(actor)
    if tier is None:
        return frozenset()
    return ASSIGNABLE_TIERS[tier]


def can_assign_role(actor: Any, target_role: Any, target_tier: Any = None) -> bool:
    """
    Single gate before creating an account or changing its role/tier.

    The resulting account must satisfy the tier invariant, so an administrator
    role without a tier, or a tier on any other role, is denied.
    """
    role = _coerce_role(target_role)
    if role is None or role not in creatable_roles(actor):
        return False

    if role is not Role.administrator:
        return target_tier is None

    tier = _coerce_tier(target_tier)
    if tier is None:
        return False
    return tier in assignable_tiers(actor)


def can_access_admin_dashboard(actor: Any) -> bool:
    return has_capability(actor, Capability.access_admin_panel)


def permissions_summary(actor: Any) -> List[str]:
    """Human-readable capability labels, in a fixed order."""
    if actor is None:
        return []
    granted = permissions_for(
        getattr(actor, "role", None), getattr(actor, "admin_tier", None)
    )
    return [label for capability, label in CAPABILITY_LABELS.items() if capability in granted]


def role_display_name(role: Any) -> str:
    parsed = _coerce_role(role)
    if parsed is None:
        return "Unknown"
    return ROLE_DISPLAY_NAMES[parsed]


def tier_display_name(tier: Any) -> str:
    parsed = _coerce_tier(tier)
    if parsed is None:
        return TIER_DISPLAY_NAMES[AdminTier.standard]
    return TIER_DISPLAY_NAMES[parsed]
