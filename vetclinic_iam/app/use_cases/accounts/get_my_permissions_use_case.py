from uuid import UUID

from vetclinic_iam.app.services.unit_of_work import UnitOfWork
from vetclinic_iam.domain import permissions
from vetclinic_iam.domain.entities import AdminTier, Capability, Role
from vetclinic_iam.libs.result import Error, Result, Return
from .dtos import PermissionsResponse


class GetMyPermissionsUseCase:
    """Effective permissions of the signed-in account, recomputed from its stored role/tier"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, actor_id: UUID) -> Result[PermissionsResponse]:
        async with self.uow:
            actor = await self.uow.accounts.get_by_id(actor_id)
            if actor is None:
                return Return.err(Error("UNAUTHORIZED", "Account is no longer active"))

            granted = permissions.permissions_for(actor.role, actor.admin_tier)
            creatable = permissions.creatable_roles(actor)
            assignable = permissions.assignable_tiers(actor)

            return Return.ok(
                PermissionsResponse(
                    role=actor.role.value,
                    role_display_name=permissions.role_display_name(actor.role),
                    admin_tier=actor.admin_tier.value if actor.admin_tier else None,
                    admin_tier_display_name=(
                        permissions.tier_display_name(actor.admin_tier)
                        if actor.admin_tier
                        else None
                    ),
                    capabilities=[c.value for c in Capability if c in granted],
                    summary=permissions.permissions_summary(actor),
                    creatable_roles=[r.value for r in Role if r in creatable],
                    assignable_tiers=[t.value for t in AdminTier if t in assignable],
                    can_access_admin_dashboard=permissions.can_access_admin_dashboard(actor),
                )
            )
