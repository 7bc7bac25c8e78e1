"""Schema module for ZTAuth Core.

schema.sql is the source of truth for the data model.
"""

from pathlib import Path

SCHEMA_PATH = Path(__file__).parent / "schema.sql"

__all__ = ["SCHEMA_PATH"]
