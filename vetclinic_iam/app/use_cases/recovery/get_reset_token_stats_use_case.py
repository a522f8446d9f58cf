from datetime import datetime

from vetclinic_iam.app.services.unit_of_work import UnitOfWork
from vetclinic_iam.libs.result import Result, Return
from .dtos import ResetTokenStatsResponse


class GetResetTokenStatsUseCase:
    """Counts of reset tokens by state, for operators"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self) -> Result[ResetTokenStatsResponse]:
        async with self.uow:
            stats = await self.uow.password_reset_tokens.get_stats(datetime.utcnow())
            return Return.ok(ResetTokenStatsResponse(**stats))
