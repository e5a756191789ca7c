import os
import tempfile

# must run before zee_ordering.config is imported
_TMP = tempfile.mkdtemp(prefix="zee-ordering-tests-")
os.environ["DATABASE_URL"] = "sqlite:///" + os.path.join(_TMP, "test.db")
os.environ["PUBLIC_DIR"] = os.path.join(_TMP, "public")
os.environ["ADMIN_EMAIL"] = "Admin@Example.com"
os.environ["ADMIN_PASSWORD"] = "s3cret-pass"
os.environ["OWNER_EMAIL"] = "owner@example.com"
os.environ["SMTP_HOST"] = ""
os.environ["SMTP_USER"] = ""
os.environ["SMTP_PASS"] = ""
os.environ["GOOGLE_SERVICE_ACCOUNT_JSON"] = ""
os.environ["GOOGLE_SERVICE_ACCOUNT_JSON_BASE64"] = ""
os.environ["GOOGLE_SHEETS_SPREADSHEET_ID"] = ""
os.environ["RESET_DB"] = "false"

import pytest
from fastapi.testclient import TestClient

from zee_ordering.config import get_settings, settings
from zee_ordering.db import SessionLocal, init_db
from zee_ordering.main import app


@pytest.fixture(autouse=True)
def fresh_db():
    init_db(reset=True)
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def db():
    s = SessionLocal()
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def client():
    """Anonymous client; protected paths redirect to /login."""
    return TestClient(app)


@pytest.fixture
def auth_client():
    return TestClient(app, cookies={settings.AUTH_COOKIE_NAME: "test-session"})


@pytest.fixture
def override_settings():
    """Call with keyword overrides; routes see a patched copy of the settings."""

    def _apply(**changes):
        patched = settings.model_copy(update=changes)
        app.dependency_overrides[get_settings] = lambda: patched
        return patched

    return _apply
