"""SQL clause builders shared by the operations classes."""

from typing import Any


def build_update_clause(
    data: dict[str, Any],
    exclude: set[str] | None = None
) -> tuple[str, list[Any]]:
    """Build the SET clause of an UPDATE statement.

    Args:
        data: Column names mapped to new values. None values are skipped.
        exclude: Column names that must never be updated

    Returns:
        Tuple of (clause, params), e.g. ("email = ?, name = ?", ["a@x.com", "Ann"]).
        The clause is empty when there is nothing to update.
    """
    exclude = exclude or set()
    columns = [k for k, v in data.items() if v is not None and k not in exclude]
    clause = ", ".join(f"{column} = ?" for column in columns)
    return clause, [data[column] for column in columns]
