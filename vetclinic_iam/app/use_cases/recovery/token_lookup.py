import logging
from datetime import datetime
from typing import Optional

from vetclinic_iam.app.services.passwords import hash_reset_secret
from vetclinic_iam.app.services.unit_of_work import UnitOfWork
from vetclinic_iam.domain.entities import PasswordResetToken
from vetclinic_iam.libs.result import Error

logger = logging.getLogger(__name__)

INVALID_TOKEN_ERROR = Error(
    "INVALID_OR_EXPIRED_TOKEN",
    "Invalid or expired password reset token",
)


async def find_active_token(
    uow: UnitOfWork, secret: str, now: datetime
) -> Optional[PasswordResetToken]:
    """
    Look up a reset token by its secret and return it only while it is active.

    Unknown, used and expired tokens are all reported as None; the specific
    reason only goes to the debug log.
    """
    if not secret:
        return None

    token = await uow.password_reset_tokens.get_by_token_hash(hash_reset_secret(secret))
    if token is None:
        logger.debug("Reset token rejected: not found")
        return None

    # Expiry is checked regardless of used
    if now >= token.expires_at:
        logger.debug(f"Reset token {token.id} rejected: expired")
        return None

    if token.used:
        logger.debug(f"Reset token {token.id} rejected: already used")
        return None

    return token
