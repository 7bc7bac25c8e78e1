"""Global options store operations.

IMPORT CONVENTION:
- Core accesses these through core.options property
"""

import sqlite3

from ..schemas.options import GlobalOptions


class OptionsOperations:
    """Read access to the global_options singleton."""

    def __init__(self, conn: sqlite3.Connection):
        self._conn = conn

    def get(self) -> GlobalOptions:
        """Load the singleton row.

        Returns the defaults when the row is missing, which only happens on a
        database created outside init_db().
        """
        row = self._conn.execute(
            "SELECT * FROM global_options WHERE id = 1"
        ).fetchone()

        if row is None:
            return GlobalOptions()

        return GlobalOptions.from_row(row)
