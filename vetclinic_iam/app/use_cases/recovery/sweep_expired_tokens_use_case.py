"""
Sweep Expired Tokens Use Case

Optional periodic housekeeping; expiry itself is always evaluated lazily.
"""

import logging
from datetime import datetime

from vetclinic_iam.app.services.unit_of_work import UnitOfWork
from vetclinic_iam.libs.result import Result, Return
from .dtos import SweepExpiredTokensResponse

logger = logging.getLogger(__name__)


class SweepExpiredTokensUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self) -> Result[SweepExpiredTokensResponse]:
        async with self.uow:
            removed = await self.uow.password_reset_tokens.delete_expired(datetime.utcnow())
            await self.uow.commit()

        logger.info(f"Swept {removed} expired password reset tokens")
        return Return.ok(SweepExpiredTokensResponse(removed=removed))
