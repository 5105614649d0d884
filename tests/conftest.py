"""
Shared fixtures for the liquidation-pipeline test suite.

Unit tests use the in-memory store; integration and e2e tests marked
`integration` get a throwaway PostgreSQL from testcontainers.
"""
import os
from collections.abc import Callable
from typing import Generator

import pytest
from psycopg import sql
from testcontainers.postgres import PostgresContainer

from liquidation_pipeline.core.settings import ENV_OVERRIDES
from liquidation_pipeline.warehouse.connection import DatabaseConnectionPool
from liquidation_pipeline.warehouse.schema_mgmt import TABLE_COLUMNS, SchemaManager
from liquidation_pipeline.warehouse.store import InMemoryUnitStore
from liquidation_pipeline.warehouse.upsert import PostgresUnitStore

POSTGRES_IMAGE = "postgres:16.2-alpine"
PG_USER = "test_ingest"
PG_PASSWORD = "test_password"
PG_DATABASE = "test_liquidation"

FIXTURES_DIR = os.path.join(os.path.dirname(__file__), "fixtures")


def pytest_configure(config):
    for marker in (
        "unit: Unit tests that don't require external services",
        "integration: Tests that start a PostgreSQL container (needs Docker)",
        "e2e: Whole extracts through the full pipeline",
        "slow: Tests that take more than 5 seconds to run",
    ):
        config.addinivalue_line("markers", marker)


# =======================
# POSTGRESQL (testcontainers)
# =======================

@pytest.fixture(scope="session")
def postgres_container() -> Generator[PostgresContainer, None, None]:
    with PostgresContainer(
        image=POSTGRES_IMAGE,
        username=PG_USER,
        password=PG_PASSWORD,
        dbname=PG_DATABASE,
    ) as postgres:
        yield postgres


@pytest.fixture(scope="session")
def db_pool(postgres_container) -> Generator[DatabaseConnectionPool, None, None]:
    """
    One open pool for the whole session, with the ingestion tables created.
    """
    pool = DatabaseConnectionPool(
        host=postgres_container.get_container_host_ip(),
        port=int(postgres_container.get_exposed_port(5432)),
        database=PG_DATABASE,
        user=PG_USER,
        password=PG_PASSWORD,
    )
    pool.open(max_retries=5)
    SchemaManager(pool).ensure_schema()
    yield pool
    pool.close()


@pytest.fixture(scope="function")
def clean_db(db_pool) -> DatabaseConnectionPool:
    """The session pool, with every ingestion table truncated first."""
    with db_pool.transaction() as cur:
        for table in TABLE_COLUMNS:
            cur.execute(sql.SQL("TRUNCATE TABLE {}").format(sql.Identifier(table)))
    return db_pool


@pytest.fixture(scope="function")
def pg_store(clean_db) -> PostgresUnitStore:
    return PostgresUnitStore(clean_db)


# =======================
# IN-MEMORY STORE
# =======================

@pytest.fixture(scope="function")
def memory_store() -> InMemoryUnitStore:
    return InMemoryUnitStore()


# =======================
# EXTRACT FILES
# =======================

@pytest.fixture(scope="session")
def test_data_dir() -> str:
    """Directory holding the sample extracts and fee sheet."""
    return FIXTURES_DIR


@pytest.fixture(scope="session")
def read_fixture(test_data_dir) -> Callable[[str], bytes]:
    """Read a fixture file as bytes, the way an upload arrives."""
    def _read(name: str) -> bytes:
        with open(os.path.join(test_data_dir, name), "rb") as f:
            return f.read()
    return _read


# =======================
# ENVIRONMENT
# =======================

@pytest.fixture(scope="function")
def clean_ingest_env(monkeypatch):
    """Remove INGEST_* variables so settings only come from the test's input."""
    monkeypatch.delenv("INGEST_CONFIG", raising=False)
    for name in ENV_OVERRIDES:
        monkeypatch.delenv(name, raising=False)
