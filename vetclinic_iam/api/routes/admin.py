"""
Admin API Routes - Token Housekeeping Endpoints

These endpoints are for schedulers and operators.
Authentication is via Admin API Key, not account JWTs.
"""

from fastapi import APIRouter, Depends, status

from vetclinic_iam.api.error import ServerError
from vetclinic_iam.api.utils.admin_auth import verify_admin_api_key
from vetclinic_iam.app.services.unit_of_work import UnitOfWork
from vetclinic_iam.app.use_cases.recovery import (
    GetResetTokenStatsUseCase,
    ResetTokenStatsResponse,
    SweepExpiredTokensResponse,
    SweepExpiredTokensUseCase,
)
from vetclinic_iam.depends import get_unit_of_work

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.post(
    "/password-reset-tokens/sweep",
    status_code=status.HTTP_200_OK,
    response_model=SweepExpiredTokensResponse,
    dependencies=[Depends(verify_admin_api_key)],
)
async def sweep_expired_reset_tokens(uow: UnitOfWork = Depends(get_unit_of_work)):
    """
    Sweep Expired Reset Tokens

    Reclaims storage; validity never depends on this having run.

    Requires: X-Admin-API-Key header

    Raises:
        - 401 Unauthorized: Missing or invalid admin API key
    """
    result = await SweepExpiredTokensUseCase(uow).execute()

    if result.is_err():
        raise ServerError(result.error)

    return result.value


@router.get(
    "/password-reset-tokens/stats",
    status_code=status.HTTP_200_OK,
    response_model=ResetTokenStatsResponse,
    dependencies=[Depends(verify_admin_api_key)],
)
async def reset_token_stats(uow: UnitOfWork = Depends(get_unit_of_work)):
    """
    Reset Token Statistics

    Requires: X-Admin-API-Key header
    """
    result = await GetResetTokenStatsUseCase(uow).execute()

    if result.is_err():
        raise ServerError(result.error)

    return result.value
