"""
Fixtures for registrations tests.
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from regdesk.core.config import Settings
from regdesk.core.database import Base
from regdesk.modules.registrations.models import Registration, RegistrationStatus
from regdesk.modules.registrations.service import RegistrationService
from regdesk.modules.registrations.templates import EventDetails
from regdesk.modules.registrations.uploads import PaymentProofStore, PaymentProofUpload

FIXED_NOW = datetime(2026, 1, 5, 9, 30, tzinfo=UTC)


class RecordingNotifier:
    """Notifier that remembers every message instead of sending it."""

    def __init__(self, result: bool = True):
        self.result = result
        self.sent: list[tuple[str, str, str]] = []

    async def send(self, to_email: str, subject: str, body: str) -> bool:
        self.sent.append((to_email, subject, body))
        return self.result


class ExplodingNotifier:
    """Notifier whose transport raises."""

    def __init__(self):
        self.attempts = 0

    async def send(self, to_email: str, subject: str, body: str) -> bool:
        self.attempts += 1
        raise ConnectionError("mail relay unreachable")


@pytest.fixture
def mock_db():
    """Create a mock database session."""
    db = AsyncMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.refresh = AsyncMock()
    db.get = AsyncMock()
    db.execute = AsyncMock()
    db.add = MagicMock()
    return db


@pytest.fixture
def test_settings(tmp_path):
    """Settings isolated from the environment and any .env file."""
    return Settings(
        _env_file=None,
        python_env="test",
        database_url="sqlite+aiosqlite:///:memory:",
        upload_dir=tmp_path / "uploads",
        admin_username="admin",
        admin_password="s3cret",
        email_backend="log",
        owner_email="owner@example.com",
    )


@pytest.fixture
def event(test_settings):
    return EventDetails.from_settings(test_settings)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def file_store(tmp_path):
    return PaymentProofStore(tmp_path / "uploads")


@pytest.fixture
def registration_service(notifier, file_store, event):
    return RegistrationService(
        notifier=notifier,
        file_store=file_store,
        event=event,
        owner_email="owner@example.com",
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def valid_fields():
    """A complete, valid set of form fields."""
    return {
        "society_member": "Yes",
        "membership_interest": "No",
        "title": "Mr.",
        "first_name": "Ann",
        "last_name": "Lee",
        "company": "",
        "po_box": None,
        "city": "Nassau",
        "telephone": "555-0100",
        "email": "ann@example.com",
        "practice_track": "Civil",
        "payment_method": "Bank Transfer",
        "consent": "on",
    }


@pytest.fixture
def pdf_upload():
    """A 1 KB PDF payment proof."""
    return PaymentProofUpload(
        filename="receipt.PDF",
        content_type="application/pdf",
        content=b"%PDF-1.4\n" + b"0" * 1015,
    )


@pytest.fixture
def sample_registration():
    """Create a sample registration model awaiting verification."""
    registration = MagicMock(spec=Registration)
    registration.id = "6f1c2a9e-8a43-4c1e-9d55-3b2f0c7e1a10"
    registration.created_at = FIXED_NOW
    registration.status = RegistrationStatus.PENDING_VERIFICATION
    registration.society_member = "Yes"
    registration.membership_interest = "No"
    registration.title = "Mr."
    registration.first_name = "Ann"
    registration.last_name = "Lee"
    registration.company = ""
    registration.po_box = ""
    registration.city = "Nassau"
    registration.telephone = "555-0100"
    registration.email = "ann@example.com"
    registration.practice_track = "Civil"
    registration.payment_method = "Bank Transfer"
    registration.payment_file_name = "receipt.pdf"
    registration.payment_file_path = "/srv/uploads/6f1c2a9e-8a43-4c1e-9d55-3b2f0c7e1a10.pdf"
    registration.admin_notes = ""
    return registration


@pytest_asyncio.fixture
async def db_engine():
    """In-memory SQLite engine with the schema created."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine):
    """A real async session bound to the in-memory database."""
    session_maker = async_sessionmaker(db_engine, expire_on_commit=False)
    async with session_maker() as session:
        yield session


@pytest.fixture
def exploding_notifier():
    return ExplodingNotifier()


@pytest.fixture
def undelivered_notifier():
    """Notifier that reports every send as failed."""
    return RecordingNotifier(result=False)
