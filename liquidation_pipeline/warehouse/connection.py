"""
Pooled PostgreSQL connections for the ingestion store (psycopg3).

Every store write borrows one connection and runs as a single
transaction: a batch either lands completely or not at all.
"""
import os
import time
from contextlib import contextmanager

from psycopg import OperationalError
from psycopg.conninfo import conninfo_to_dict, make_conninfo
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

from liquidation_pipeline.observability.logger import get_logger

logger = get_logger(__name__)


class DatabaseConnectionPool:
    """
    Owns a psycopg_pool.ConnectionPool for the warehouse database.

    Settings not passed in are read from DB_HOST, DB_PORT, DB_NAME,
    DB_USER and DB_PASSWORD. Rows come back as dicts.
    """

    def __init__(
        self,
        host: str | None = None,
        port: int | None = None,
        database: str | None = None,
        user: str | None = None,
        password: str | None = None,
        min_size: int = 1,
        max_size: int = 4,
        timeout: float = 30.0,
    ) -> None:
        """
        Args:
            host: Server host, else DB_HOST or localhost
            port: Server port, else DB_PORT or 5432
            database: Database name, else DB_NAME or "liquidation"
            user: Login role, else DB_USER or "ingest"
            password: Login password, else DB_PASSWORD
            min_size: Connections kept open
            max_size: Upper bound on open connections
            timeout: Seconds to wait for a connection

        Raises:
            ValueError: If no password is configured
        """
        self.host = host or os.getenv("DB_HOST", "localhost")
        self.port = port or int(os.getenv("DB_PORT", "5432"))
        self.database = database or os.getenv("DB_NAME", "liquidation")
        self.user = user or os.getenv("DB_USER", "ingest")
        self.password = password or os.getenv("DB_PASSWORD")

        if not self.password:
            raise ValueError(
                "No database password configured: set DB_PASSWORD "
                "or pass password= explicitly."
            )

        self.min_size = min_size
        self.max_size = max_size
        self.timeout = timeout

        self.conninfo = make_conninfo(
            host=self.host,
            port=self.port,
            dbname=self.database,
            user=self.user,
            password=self.password,
            connect_timeout=int(self.timeout),
        )

        self._pool: ConnectionPool | None = None

    @classmethod
    def from_url(cls, url: str, **kwargs) -> "DatabaseConnectionPool":
        """Build a pool from a postgresql:// URL (e.g. a test container's)."""
        params = conninfo_to_dict(url)
        return cls(
            host=params.get("host"),
            port=int(params["port"]) if params.get("port") else None,
            database=params.get("dbname"),
            user=params.get("user"),
            password=params.get("password"),
            **kwargs,
        )

    def open(self, max_retries: int = 3, retry_delay: float = 2.0) -> None:
        """
        Connect, retrying while the server is still coming up.

        Args:
            max_retries: Attempts before giving up
            retry_delay: Seconds between attempts

        Raises:
            OperationalError: If every attempt fails
        """
        if self._pool is not None:
            return

        self._pool = ConnectionPool(
            conninfo=self.conninfo,
            min_size=self.min_size,
            max_size=self.max_size,
            timeout=self.timeout,
            kwargs={"row_factory": dict_row},
            open=False,
        )

        for attempt in range(1, max_retries + 1):
            try:
                self._pool.open(wait=True, timeout=self.timeout)
                logger.info(
                    f"Connected to {self.host}:{self.port}/{self.database}",
                    extra={"attempt": attempt},
                )
                return
            except (OperationalError, TimeoutError) as e:
                if attempt < max_retries:
                    logger.warning(f"Connection attempt {attempt} of {max_retries} failed: {e}")
                    time.sleep(retry_delay)
                else:
                    self._pool.close()
                    self._pool = None
                    raise OperationalError(
                        f"Could not reach {self.host}:{self.port}/{self.database} "
                        f"after {max_retries} attempts: {e}"
                    ) from e

    def close(self) -> None:
        if self._pool is not None:
            self._pool.close()
            self._pool = None

    @contextmanager
    def get_connection(self):
        """
        Borrow a pooled connection for the duration of the block.

        Raises:
            RuntimeError: If open() has not been called
        """
        if self._pool is None:
            raise RuntimeError("Connection pool is not open; call open() first")

        with self._pool.connection() as conn:
            yield conn

    @contextmanager
    def transaction(self):
        """
        Cursor whose statements commit together when the block exits
        cleanly and roll back if it raises.
        """
        with self.get_connection() as conn:
            with conn.transaction():
                with conn.cursor() as cur:
                    yield cur

    def execute_query(self, query, params: tuple | None = None) -> list[dict]:
        """Run a SELECT and return every row as a dict."""
        with self.get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(query, params)
                return cur.fetchall()

    def execute_command(self, command, params: tuple | None = None) -> int:
        """
        Run one DML or DDL statement in its own transaction.

        Returns:
            Rows affected
        """
        with self.transaction() as cur:
            cur.execute(command, params)
            return cur.rowcount

    def execute_batch(self, command, params_list: list) -> int:
        """
        Run one statement for every parameter set, all in one transaction.

        Returns:
            Parameter sets executed
        """
        if not params_list:
            return 0
        with self.transaction() as cur:
            cur.executemany(command, params_list)
        return len(params_list)

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
