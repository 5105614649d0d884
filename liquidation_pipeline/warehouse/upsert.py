"""
PostgreSQL implementation of the unit store.

Implements INSERT ... ON CONFLICT DO UPDATE for idempotent, last-write-wins
upserts. Every call runs in its own transaction.
"""

from typing import Any
from uuid import UUID

from psycopg import sql

from liquidation_pipeline.core.models import FileRun
from liquidation_pipeline.observability.logger import get_logger

from .connection import DatabaseConnectionPool
from .schema_mgmt import TABLE_COLUMNS
from .store import FILE_RUNS, UnitStore

logger = get_logger(__name__)


def _columns_for(table: str, rows: list[dict[str, Any]]) -> list[str]:
    """
    Allow-listed columns present in the rows, in table order.

    Raises:
        ValueError: If the table is unknown or a row carries an unknown column
    """
    if table not in TABLE_COLUMNS:
        raise ValueError(f"Unknown table '{table}'")
    allowed = TABLE_COLUMNS[table]

    present: set[str] = set()
    for row in rows:
        present.update(row)
    unknown = present - set(allowed)
    if unknown:
        raise ValueError(f"Unknown column(s) for '{table}': {', '.join(sorted(unknown))}")
    return [name for name in allowed if name in present]


def build_upsert(table: str, key: str, columns: list[str]) -> sql.Composed:
    """
    INSERT ... ON CONFLICT (key) DO UPDATE statement replacing every
    non-key column.
    """
    updates = [
        sql.SQL("{} = EXCLUDED.{}").format(sql.Identifier(name), sql.Identifier(name))
        for name in columns
        if name != key
    ]
    updates.append(sql.SQL("written_at = NOW()"))
    return sql.SQL(
        "INSERT INTO {table} ({columns}) VALUES ({values}) "
        "ON CONFLICT ({key}) DO UPDATE SET {updates}"
    ).format(
        table=sql.Identifier(table),
        columns=sql.SQL(", ").join(map(sql.Identifier, columns)),
        values=sql.SQL(", ").join(sql.Placeholder() * len(columns)),
        key=sql.Identifier(key),
        updates=sql.SQL(", ").join(updates),
    )


def build_insert(table: str, columns: list[str]) -> sql.Composed:
    return sql.SQL("INSERT INTO {table} ({columns}) VALUES ({values})").format(
        table=sql.Identifier(table),
        columns=sql.SQL(", ").join(map(sql.Identifier, columns)),
        values=sql.SQL(", ").join(sql.Placeholder() * len(columns)),
    )


class PostgresUnitStore(UnitStore):
    """
    Unit store backed by PostgreSQL through a psycopg3 connection pool.
    """

    def __init__(self, pool: DatabaseConnectionPool):
        self.pool = pool

    def create_file_run(self, run: FileRun) -> None:
        row = run.model_dump()
        columns = _columns_for(FILE_RUNS, [row])
        self.pool.execute_command(build_insert(FILE_RUNS, columns), tuple(row[c] for c in columns))

    def mark_file_run_processed(self, run_id: UUID, row_count: int | None = None) -> None:
        if row_count is None:
            query = sql.SQL("UPDATE {} SET processed = TRUE, written_at = NOW() WHERE id = %s").format(
                sql.Identifier(FILE_RUNS)
            )
            params: tuple = (run_id,)
        else:
            query = sql.SQL(
                "UPDATE {} SET processed = TRUE, row_count = %s, written_at = NOW() WHERE id = %s"
            ).format(sql.Identifier(FILE_RUNS))
            params = (row_count, run_id)

        if self.pool.execute_command(query, params) != 1:
            raise KeyError(f"Unknown file run {run_id}")

    def upsert_by_key(self, table: str, key: str, rows: list[dict[str, Any]]) -> int:
        if not rows:
            return 0
        # Within one statement batch a key may appear only once; the
        # last occurrence wins, matching sequential upserts.
        deduped = {row[key]: row for row in rows}
        columns = _columns_for(table, list(deduped.values()))
        if key not in columns:
            raise ValueError(f"Rows for '{table}' do not carry key column '{key}'")

        params = [tuple(row.get(c) for c in columns) for row in deduped.values()]
        self.pool.execute_batch(build_upsert(table, key, columns), params)
        logger.debug(f"Upserted {len(params)} rows into {table}")
        return len(rows)

    def append_only(self, table: str, rows: list[dict[str, Any]]) -> int:
        if not rows:
            return 0
        columns = _columns_for(table, rows)
        params = [tuple(row.get(c) for c in columns) for row in rows]
        self.pool.execute_batch(build_insert(table, columns), params)
        logger.debug(f"Appended {len(params)} rows to {table}")
        return len(rows)

    def read_rows(self, table: str) -> list[dict[str, Any]]:
        if table not in TABLE_COLUMNS:
            raise ValueError(f"Unknown table '{table}'")
        return self.pool.execute_query(sql.SQL("SELECT * FROM {}").format(sql.Identifier(table)))

    def close(self) -> None:
        self.pool.close()
