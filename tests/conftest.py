"""Shared test fixtures for ztauth-core."""

import os
import sqlite3
import tempfile

import pytest

from ztauth_core.config import settings
from ztauth_core.db import Core, apply_schema
from ztauth_core.exceptions import DeliveryError


@pytest.fixture(autouse=True)
def fast_bcrypt():
    """Use the minimum bcrypt work factor so tests stay fast."""
    original = settings.bcrypt_work_factor
    settings.bcrypt_work_factor = 4
    yield
    settings.bcrypt_work_factor = original


@pytest.fixture
def test_db():
    """Create in-memory test database with schema."""
    db = sqlite3.connect(":memory:")
    db.row_factory = sqlite3.Row
    db.execute("PRAGMA foreign_keys = ON")
    apply_schema(db)

    yield db

    db.close()


@pytest.fixture
def core(test_db):
    """Core wrapping the in-memory test database."""
    return Core(test_db)


@pytest.fixture
def set_options(test_db):
    """Update the global_options row.

    Usage: set_options(enable_registration=0, smtp_host="smtp.test")
    """
    def _set(**columns):
        clause = ", ".join(f"{name} = ?" for name in columns)
        test_db.execute(
            f"UPDATE global_options SET {clause} WHERE id = 1",
            list(columns.values())
        )
        test_db.commit()

    return _set


class FakeTransport:
    """Records sent messages. Addresses in fail_for raise DeliveryError."""

    def __init__(self, fail_for=()):
        self.sent = []
        self.attempted = []
        self.fail_for = set(fail_for)

    def send(self, message):
        self.attempted.append(message)
        if message.to in self.fail_for:
            raise DeliveryError(f"Mailbox unavailable: {message.to}")
        self.sent.append(message)


@pytest.fixture
def transport():
    """A recording fake transport."""
    return FakeTransport()


@pytest.fixture
def transport_factory(transport):
    """Transport factory returning the shared fake transport."""
    created_with = []

    def _factory(options):
        created_with.append(options)
        return transport

    _factory.created_with = created_with
    return _factory


@pytest.fixture
def client(monkeypatch, transport):
    """Create test client for API testing.

    Uses a temp file database so each request's fresh connection sees the
    same data. SMTP is replaced with the fake transport.
    """
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    original_db_path = settings.database_path
    settings.database_path = db_path

    try:
        from ztauth_core.db import init_db
        from ztauth_core.main import app
        from ztauth_core.mail import transport as transport_module

        init_db()
        monkeypatch.setattr(transport_module, "create_transporter", lambda options: transport)

        app.config["TESTING"] = True
        with app.test_client() as test_client:
            yield test_client

    finally:
        settings.database_path = original_db_path
        try:
            os.unlink(db_path)
        except OSError:
            pass
