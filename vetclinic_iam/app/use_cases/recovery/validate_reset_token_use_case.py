"""
Validate Reset Token Use Case

Read-only probe used to render the reset form before a new password is submitted.
"""

from datetime import datetime

from vetclinic_iam.app.services.unit_of_work import UnitOfWork
from vetclinic_iam.libs.result import Result, Return
from .dtos import ValidateResetTokenResponse
from .token_lookup import INVALID_TOKEN_ERROR, find_active_token


class ValidateResetTokenUseCase:
    """
    Use case for validating a reset token without consuming it.

    Business Rules:
    - Valid only while unused and before expires_at
    - Never mutates state, so it can be called any number of times
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, secret: str) -> Result[ValidateResetTokenResponse]:
        async with self.uow:
            token = await find_active_token(self.uow, secret, datetime.utcnow())
            if token is None:
                return Return.err(INVALID_TOKEN_ERROR)

            return Return.ok(
                ValidateResetTokenResponse(
                    status="valid",
                    email=token.account_email,
                    expires_at=token.expires_at,
                )
            )
