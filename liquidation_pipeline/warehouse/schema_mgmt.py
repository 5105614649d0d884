"""
Schema management for the ingestion tables.

Column definitions are derived from the pydantic models so the tables and
the records written into them cannot drift apart. ensure_schema() is
idempotent: it creates missing tables and adds columns introduced since a
table was first created.
"""

import types
from datetime import date, datetime
from typing import Any, Literal, Union, get_args, get_origin
from uuid import UUID

from psycopg import sql
from pydantic import BaseModel

from liquidation_pipeline.core.models import (
    FeeMetricRecord,
    FileRun,
    LifecycleEvent,
    SalesMetricRecord,
    UnitRecord,
)
from liquidation_pipeline.observability.logger import get_logger

from .connection import DatabaseConnectionPool
from .store import (
    CHECKIN_FEE_LOOKUP,
    FEE_METRICS,
    FILE_RUNS,
    LIFECYCLE_EVENTS,
    SALES_METRICS,
    UNIT_KEY,
    UNITS_CANONICAL,
)

logger = get_logger(__name__)

_SCALAR_TYPES: dict[Any, str] = {
    str: "TEXT",
    float: "NUMERIC",
    int: "INTEGER",
    bool: "BOOLEAN",
    date: "DATE",
    datetime: "TIMESTAMPTZ",
    UUID: "UUID",
}


def sql_type(annotation: Any) -> str:
    """PostgreSQL column type for a model field annotation."""
    origin = get_origin(annotation)
    if origin is Literal:
        return "TEXT"
    if origin in (Union, types.UnionType):
        members = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(members) == 1:
            return sql_type(members[0])
    if annotation in _SCALAR_TYPES:
        return _SCALAR_TYPES[annotation]
    raise TypeError(f"No column type for annotation {annotation!r}")


def model_columns(model: type[BaseModel]) -> dict[str, str]:
    return {name: sql_type(info.annotation) for name, info in model.model_fields.items()}


# Columns written by the pipeline, per table
TABLE_COLUMNS: dict[str, dict[str, str]] = {
    UNITS_CANONICAL: {**model_columns(UnitRecord), "file_run_id": "UUID"},
    LIFECYCLE_EVENTS: model_columns(LifecycleEvent),
    SALES_METRICS: model_columns(SalesMetricRecord),
    FEE_METRICS: model_columns(FeeMetricRecord),
    FILE_RUNS: model_columns(FileRun),
    CHECKIN_FEE_LOOKUP: {
        "category": "TEXT",
        "program": "TEXT",
        "base_price_type": "TEXT",
        "key": "TEXT",
        "price": "NUMERIC",
    },
}

# Natural key per upsert table
TABLE_KEYS: dict[str, str] = {
    UNITS_CANONICAL: UNIT_KEY,
    SALES_METRICS: UNIT_KEY,
    FEE_METRICS: UNIT_KEY,
    FILE_RUNS: "id",
    CHECKIN_FEE_LOOKUP: "key",
}

# Tables without a natural key get a surrogate id
SURROGATE_KEY_TABLES = (LIFECYCLE_EVENTS,)

INDEXES: tuple[tuple[str, str, str], ...] = (
    ("idx_lifecycle_events_unit_id", LIFECYCLE_EVENTS, "unit_id"),
    ("idx_lifecycle_events_event_date", LIFECYCLE_EVENTS, "event_date"),
    ("idx_sales_metrics_order_closed_on", SALES_METRICS, "order_closed_on"),
    ("idx_units_canonical_current_stage", UNITS_CANONICAL, "current_stage"),
)


def create_table_statement(table: str) -> sql.Composed:
    columns = TABLE_COLUMNS[table]
    key = TABLE_KEYS.get(table)

    definitions = []
    if table in SURROGATE_KEY_TABLES:
        definitions.append(sql.SQL("id BIGSERIAL PRIMARY KEY"))
    for name, column_type in columns.items():
        suffix = " PRIMARY KEY" if name == key else ""
        definitions.append(sql.SQL("{} {}{}").format(
            sql.Identifier(name), sql.SQL(column_type), sql.SQL(suffix)
        ))
    definitions.append(sql.SQL("written_at TIMESTAMPTZ NOT NULL DEFAULT NOW()"))

    return sql.SQL("CREATE TABLE IF NOT EXISTS {} ({})").format(
        sql.Identifier(table), sql.SQL(", ").join(definitions)
    )


class SchemaManager:
    """
    Creates and evolves the ingestion tables.
    """

    def __init__(self, pool: DatabaseConnectionPool):
        self.pool = pool

    def ensure_schema(self) -> list[str]:
        """
        Create missing tables, columns and indexes in one transaction.

        Returns:
            Names of the managed tables
        """
        with self.pool.transaction() as cur:
            for table, columns in TABLE_COLUMNS.items():
                cur.execute(create_table_statement(table))
                for name, column_type in columns.items():
                    cur.execute(sql.SQL("ALTER TABLE {} ADD COLUMN IF NOT EXISTS {} {}").format(
                        sql.Identifier(table), sql.Identifier(name), sql.SQL(column_type)
                    ))
            for index_name, table, column in INDEXES:
                cur.execute(sql.SQL("CREATE INDEX IF NOT EXISTS {} ON {} ({})").format(
                    sql.Identifier(index_name), sql.Identifier(table), sql.Identifier(column)
                ))

        tables = list(TABLE_COLUMNS)
        logger.info(f"Schema ensured for {len(tables)} tables", extra={"tables": tables})
        return tables

    def list_tables(self) -> list[str]:
        rows = self.pool.execute_query(
            "SELECT table_name FROM information_schema.tables "
            "WHERE table_schema = current_schema() ORDER BY table_name"
        )
        return [row["table_name"] for row in rows]

    def table_columns(self, table: str) -> list[str]:
        rows = self.pool.execute_query(
            "SELECT column_name FROM information_schema.columns "
            "WHERE table_schema = current_schema() AND table_name = %s ORDER BY ordinal_position",
            (table,),
        )
        return [row["column_name"] for row in rows]
