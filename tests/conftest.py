from __future__ import annotations

from pathlib import Path
from typing import Any, Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, text

from app.core.config import get_settings
from app.database import get_engine, get_session_maker
from app.services import notifications
from tests.fakes import RecordingEmailSender, RecordingSmsSender

NOTIFICATION_ENV = [
    "SMTP_HOST",
    "SMTP_PORT",
    "SMTP_USER",
    "SMTP_PASS",
    "FROM_EMAIL",
    "SENDGRID_API_KEY",
    "TWILIO_ACCOUNT_SID",
    "TWILIO_AUTH_TOKEN",
    "TWILIO_PHONE_NUMBER",
]


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "restaurant-test.db"


@pytest.fixture(autouse=True)
def test_settings(tmp_path: Path, db_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{db_path}")
    monkeypatch.setenv("STATIC_DIR", str(tmp_path / "public"))
    monkeypatch.setenv("INIT_DB_ON_STARTUP", "true")
    for key in NOTIFICATION_ENV:
        monkeypatch.delenv(key, raising=False)

    get_settings.cache_clear()
    get_session_maker.cache_clear()
    get_engine.cache_clear()
    notifications.reset_notification_services()
    yield
    notifications.reset_notification_services()
    get_session_maker.cache_clear()
    get_engine.cache_clear()
    get_settings.cache_clear()


@pytest.fixture
def client() -> Iterator[TestClient]:
    from app.main import create_app

    with TestClient(create_app()) as test_client:
        yield test_client


@pytest.fixture
def senders(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> tuple[RecordingSmsSender, RecordingEmailSender]:
    sms = RecordingSmsSender()
    email = RecordingEmailSender()
    monkeypatch.setattr(notifications, "_sms_sender", sms)
    monkeypatch.setattr(notifications, "_email_sender", email)
    return sms, email


@pytest.fixture
def run_sql(db_path: Path):
    """Run raw SQL against the test database outside the API."""
    engine = create_engine(f"sqlite:///{db_path}")

    def _run(statement: str, **params: Any) -> list[dict[str, Any]]:
        with engine.begin() as conn:
            result = conn.execute(text(statement), params)
            if result.returns_rows:
                return [dict(row) for row in result.mappings().all()]
            return []

    yield _run
    engine.dispose()
