"""User store operations.

IMPORT CONVENTION:
- Core accesses these through core.users property
- NO direct import needed when using Core API

Emails are stored normalized (trimmed, lower-cased) and the email column is
COLLATE NOCASE, so every lookup here is case-insensitive.
"""

import sqlite3
from typing import Any

from . import query
from ..auth.schemas import Role
from ..utils import isodatetime, uid

USER_COLUMNS = {"email", "name", "hash", "last_login"}


class UserOperations:
    """User store operations.

    Read methods return sqlite3.Row objects (or None). The credential hash
    is part of the row; callers convert to UserResponse before anything
    leaves the service layer.
    """

    def __init__(self, conn: sqlite3.Connection):
        """Initialize user operations with a database connection.

        Args:
            conn: SQLite connection with row_factory set to sqlite3.Row
        """
        self._conn = conn

    def find_by_id(self, user_id: str) -> sqlite3.Row | None:
        """Get user by ID, or None if it does not exist."""
        return self._conn.execute(
            "SELECT * FROM users WHERE id = ?",
            (user_id,)
        ).fetchone()

    def find_by_email(self, email: str) -> sqlite3.Row | None:
        """Get user by email (case-insensitive), or None if it does not exist."""
        return self._conn.execute(
            "SELECT * FROM users WHERE email = ?",
            (email.strip().lower(),)
        ).fetchone()

    def count(self) -> int:
        """Count all users."""
        row = self._conn.execute("SELECT COUNT(*) FROM users").fetchone()
        return row[0]

    def list_admins(self) -> list[sqlite3.Row]:
        """List all ADMIN users, oldest first."""
        return self._conn.execute(
            "SELECT * FROM users WHERE role = ? ORDER BY created_at",
            (Role.ADMIN.value,)
        ).fetchall()

    def create(self, email: str, name: str, password_hash: str) -> str:
        """Create a user with an auto-generated UUID.

        The role is decided inside the INSERT itself: ADMIN when the table
        is empty, USER otherwise. SQLite runs the statement under a single
        write lock, so concurrent first registrations promote at most one
        account.

        Args:
            email: Normalized email address
            name: Display name
            password_hash: bcrypt credential hash

        Returns:
            The new user ID

        Raises:
            sqlite3.IntegrityError: If the email is already registered
        """
        user_id = uid.generate_uuid()
        now = isodatetime.now()

        self._conn.execute(
            """INSERT INTO users (id, email, name, hash, role, last_login, created_at, updated_at)
               SELECT ?, ?, ?, ?,
                      CASE WHEN (SELECT COUNT(*) FROM users) = 0 THEN ? ELSE ? END,
                      ?, ?, ?""",
            (
                user_id, email, name, password_hash,
                Role.ADMIN.value, Role.USER.value,
                now, now, now,
            )
        )

        return user_id

    def update(self, user_id: str, data: dict[str, Any]) -> None:
        """Update a user with partial data.

        Args:
            user_id: The UUID of the user to update
            data: Column names mapped to new values. None values are skipped.

        Raises:
            ValueError: If data names a column that cannot be updated
            sqlite3.IntegrityError: If the new email is already registered
        """
        unknown = set(data) - USER_COLUMNS
        if unknown:
            raise ValueError(f"Cannot update user columns: {', '.join(sorted(unknown))}")

        update_clause, params = query.build_update_clause(data)
        if not update_clause:
            return

        update_clause += ", updated_at = ?"
        params.extend([isodatetime.now(), user_id])

        self._conn.execute(
            f"UPDATE users SET {update_clause} WHERE id = ?",
            params
        )

    def touch_last_login(self, user_id: str) -> None:
        """Stamp last_login with the current time."""
        self._conn.execute(
            "UPDATE users SET last_login = ? WHERE id = ?",
            (isodatetime.now(), user_id)
        )
