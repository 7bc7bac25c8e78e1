"""First-user promotion when registrations race on separate connections."""

import threading
from contextlib import closing

import pytest

from ztauth_core.accounts import service as accounts
from ztauth_core.auth.schemas import RegisterRequest
from ztauth_core.config import settings
from ztauth_core.db import get_core, init_db
from ztauth_core.exceptions import Conflict


@pytest.fixture
def file_db(tmp_path, monkeypatch):
    """Temp-file database shared by every get_core() connection."""
    monkeypatch.setattr(settings, "database_path", str(tmp_path / "race.db"))
    init_db()
    return settings.database_path


def _register_all(emails):
    barrier = threading.Barrier(len(emails))
    results = {}
    errors = []

    def worker(email):
        request = RegisterRequest(email=email, password="Abc123", name="Racer")
        barrier.wait()
        try:
            with closing(get_core()) as core:
                results[email] = accounts.register(core, request).role
        except Exception as e:
            errors.append(e)

    threads = [threading.Thread(target=worker, args=(email,)) for email in emails]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)

    return results, errors


@pytest.mark.parametrize("count", [2, 4])
def test_exactly_one_admin(file_db, count):
    emails = [f"racer{i}@example.com" for i in range(count)]

    results, errors = _register_all(emails)

    assert errors == []
    assert sorted(results.values()) == ["ADMIN"] + ["USER"] * (count - 1)

    with closing(get_core()) as core:
        assert len(core.users.list_admins()) == 1
        assert core.users.count() == count


def test_same_email_registers_once(file_db):
    results, errors = _register_all(["dup@example.com", "DUP@example.com"])

    assert len(results) == 1
    assert len(errors) == 1
    assert isinstance(errors[0], Conflict)
    with closing(get_core()) as core:
        assert core.users.count() == 1
