from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from vetclinic_iam.adapter.services.email_sender import LoggingEmailSender
from vetclinic_iam.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from vetclinic_iam.api.utils.jwt import verify_jwt
from vetclinic_iam.app.services.email_sender import EmailSender
from vetclinic_iam.app.services.password_policy import PasswordPolicy

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

security = HTTPBearer()


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_email_sender() -> EmailSender:
    return LoggingEmailSender()


def get_password_policy() -> PasswordPolicy:
    return PasswordPolicy.from_config(ApplicationConfig)


async def get_current_account_id(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> UUID:
    """
    Dependency to extract the signed-in account from the Authorization header.

    Only the account id is taken from the token; role and tier are always
    re-read from the store by the use case.

    Raises:
        HTTPException: 401 if token is invalid, expired or has no account_id
    """
    payload = verify_jwt(credentials.credentials)

    try:
        return UUID(payload["account_id"])
    except (TypeError, KeyError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )
