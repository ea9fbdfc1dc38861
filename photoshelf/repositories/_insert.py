"""Dialect-aware INSERT ... ON CONFLICT for rows guarded by a unique constraint."""

from typing import Optional

from sqlalchemy.dialects import postgresql, sqlite
from sqlmodel import Session

from photoshelf.errors import StorageError

_INSERT_BY_DIALECT = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


def insert_ignoring_duplicates(
    session: Session,
    table,
    rows: list[dict],
    conflict_columns: list[str],
    update_columns: Optional[list[str]] = None,
) -> None:
    """Insert rows, letting the unique constraint on ``conflict_columns`` drop repeats.

    With ``update_columns``, a repeat overwrites those columns of the stored row instead.
    """
    if not rows:
        return
    dialect = session.get_bind().dialect.name
    insert = _INSERT_BY_DIALECT.get(dialect)
    if insert is None:
        raise StorageError(f"Unsupported database dialect: {dialect}")
    stmt = insert(table).values(rows)
    if update_columns:
        stmt = stmt.on_conflict_do_update(
            index_elements=conflict_columns,
            set_={c: stmt.excluded[c] for c in update_columns},
        )
    else:
        stmt = stmt.on_conflict_do_nothing(index_elements=conflict_columns)
    session.exec(stmt)
