from typing import List, Optional, Tuple

import bcrypt
import pytest
import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from vetclinic_iam.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from vetclinic_iam.api.utils.jwt import generate_jwt
from vetclinic_iam.app.services.email_sender import EmailSender
from vetclinic_iam.depends import get_email_sender, get_unit_of_work
from vetclinic_iam.domain.entities import Account, AdminTier, Role

DEFAULT_PASSWORD = "TestPass123!"


class RecordingEmailSender(EmailSender):
    """Captures dispatched emails instead of sending them"""

    def __init__(self):
        self.reset_emails: List[Tuple[str, str, str]] = []
        self.changed_notifications: List[str] = []

    async def send_password_reset_email(self, to_email: str, secret: str, recovery_link: str) -> None:
        self.reset_emails.append((to_email, secret, recovery_link))

    async def send_password_changed_notification(self, to_email: str) -> None:
        self.changed_notifications.append(to_email)

    def last_secret(self) -> str:
        return self.reset_emails[-1][1]


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite:///./test.db")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        yield session


@pytest.fixture
def email_outbox():
    return RecordingEmailSender()


@pytest_asyncio.fixture
async def client(engine, email_outbox):
    """
    App wired to the test database.

    Each request opens its own session, as in production, so a use case
    rolling back never expires the objects a test holds in db_session.
    """
    from httpx import ASGITransport
    from vetclinic_iam.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)

    async def override_get_unit_of_work():
        async with Session() as session:
            yield SqlAlchemyUnitOfWork(session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_email_sender] = lambda: email_outbox

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def create_account(db_session):
    """Insert an account directly, bypassing the permission gate"""

    async def _create(
        email: str,
        role: Role = Role.pet_owner,
        admin_tier: Optional[AdminTier] = None,
        password: str = DEFAULT_PASSWORD,
    ) -> Account:
        account = Account(
            email=email,
            password_hash=bcrypt.hashpw(password.encode(), bcrypt.gensalt(4)).decode(),
            role=role,
            admin_tier=admin_tier,
        )
        db_session.add(account)
        await db_session.commit()
        await db_session.refresh(account)
        return account

    return _create


def auth_headers(account: Account) -> dict:
    return {"Authorization": f"Bearer {generate_jwt(account.id)}"}


@pytest.fixture
def headers_for():
    return auth_headers
