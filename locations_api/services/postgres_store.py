"""PostgreSQL implementation of the location repository (Supabase database)."""

# pylint: disable=no-member  # psycopg3 has type inference issues with pylint

import logging
import threading
from datetime import datetime
from typing import Any

import psycopg
from psycopg import sql
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

from .store import LocationFilters, LocationStore, LocationStoreError, WRITABLE_COLUMNS

logger = logging.getLogger(__name__)


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so the term matches literally."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def build_where(filters: LocationFilters) -> tuple[sql.Composable, list[Any]]:
    """Translate filters into a WHERE clause and its parameters."""
    clauses: list[sql.Composable] = []
    params: list[Any] = []

    if filters.search:
        pattern = f"%{escape_like(filters.search)}%"
        clauses.append(
            sql.SQL("(title ILIKE %s OR description ILIKE %s OR address ILIKE %s)")
        )
        params.extend([pattern, pattern, pattern])

    if filters.hardware:
        clauses.append(sql.SQL("%s = ANY(deployable_hardware)"))
        params.append(filters.hardware)

    if filters.min_price is not None:
        clauses.append(sql.SQL("price >= %s"))
        params.append(filters.min_price)

    if filters.max_price is not None:
        clauses.append(sql.SQL("price <= %s"))
        params.append(filters.max_price)

    if filters.negotiable is not None:
        clauses.append(sql.SQL("is_negotiable = %s"))
        params.append(filters.negotiable)

    if filters.bbox is not None:
        clauses.append(sql.SQL("latitude BETWEEN %s AND %s AND longitude BETWEEN %s AND %s"))
        params.extend([filters.bbox.south, filters.bbox.north, filters.bbox.west, filters.bbox.east])

    if not clauses:
        return sql.SQL(""), params
    return sql.SQL(" WHERE ") + sql.SQL(" AND ").join(clauses), params


class PostgresLocationStore(LocationStore):
    """psycopg 3 implementation of LocationStore.

    Each call borrows its own connection from a pool, so concurrent request
    threads never share a transaction. The pool is opened on first use.
    """

    def __init__(
        self,
        dsn: str | None,
        table: str = "locations",
        min_size: int = 1,
        max_size: int = 10,
        timeout: float = 10.0,
    ):
        self.dsn = dsn
        self.table = sql.Identifier(table)
        self.min_size = min_size
        self.max_size = max_size
        self.timeout = timeout
        self._pool: ConnectionPool | None = None
        self._lock = threading.Lock()

    @property
    def pool(self) -> ConnectionPool:
        with self._lock:
            if self._pool is None:
                if not self.dsn:
                    raise LocationStoreError("DATABASE_URL is not configured")
                pool = ConnectionPool(
                    self.dsn,
                    min_size=self.min_size,
                    max_size=self.max_size,
                    timeout=self.timeout,
                    kwargs={"row_factory": dict_row},
                    open=False,
                )
                try:
                    pool.open()
                except psycopg.Error as e:
                    logger.error("Could not open connection pool: %s", e)
                    raise LocationStoreError("Could not connect to database") from e
                self._pool = pool
            return self._pool

    def _run(self, query: sql.Composable, params: list[Any], fetch: str) -> Any:
        # the pool commits on a clean exit, rolls back on error and discards broken connections
        try:
            with self.pool.connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(query, params)
                    if fetch == "all":
                        return cur.fetchall()
                    if fetch == "one":
                        return cur.fetchone()
                    return cur.rowcount
        except psycopg.Error as e:
            logger.error("Database error: %s", e)
            raise LocationStoreError(str(e)) from e

    def find_locations(self, filters: LocationFilters) -> list[dict[str, Any]]:
        where, params = build_where(filters)
        query = (
            sql.SQL("SELECT * FROM {}").format(self.table)
            + where
            + sql.SQL(" ORDER BY created_at DESC LIMIT %s OFFSET %s")
        )
        rows = self._run(query, params + [filters.limit, filters.offset], fetch="all")
        logger.debug("find_locations returned %d rows", len(rows))
        return rows

    def count_locations(self, filters: LocationFilters) -> int:
        where, params = build_where(filters)
        query = sql.SQL("SELECT COUNT(*) AS total FROM {}").format(self.table) + where
        row = self._run(query, params, fetch="one")
        return int(row["total"]) if row else 0

    def get_location(self, location_id: str) -> dict[str, Any] | None:
        query = sql.SQL("SELECT * FROM {} WHERE id = %s").format(self.table)
        return self._run(query, [location_id], fetch="one")

    def create_location(self, values: dict[str, Any]) -> dict[str, Any]:
        columns = [c for c in WRITABLE_COLUMNS if c in values]
        query = sql.SQL("INSERT INTO {} ({}) VALUES ({}) RETURNING *").format(
            self.table,
            sql.SQL(", ").join(sql.Identifier(c) for c in columns),
            sql.SQL(", ").join(sql.Placeholder() for _ in columns),
        )
        row = self._run(query, [values[c] for c in columns], fetch="one")
        logger.info("Created location %s", row["id"])
        return row

    def update_location(
        self,
        location_id: str,
        values: dict[str, Any],
        expected_updated_at: datetime | None = None,
    ) -> dict[str, Any] | None:
        columns = [c for c in WRITABLE_COLUMNS if c in values]
        assignments = [
            sql.SQL("{} = %s").format(sql.Identifier(c)) for c in columns
        ] + [sql.SQL("updated_at = NOW()")]
        params: list[Any] = [values[c] for c in columns] + [location_id]

        query = sql.SQL("UPDATE {} SET {} WHERE id = %s").format(
            self.table, sql.SQL(", ").join(assignments)
        )
        if expected_updated_at is not None:
            query += sql.SQL(" AND updated_at = %s")
            params.append(expected_updated_at)
        query += sql.SQL(" RETURNING *")

        row = self._run(query, params, fetch="one")
        if row is None:
            logger.info("Update of location %s matched no row", location_id)
        return row

    def delete_location(self, location_id: str) -> bool:
        query = sql.SQL("DELETE FROM {} WHERE id = %s").format(self.table)
        deleted = self._run(query, [location_id], fetch="rowcount")
        return deleted > 0

    def close(self) -> None:
        with self._lock:
            if self._pool is not None:
                self._pool.close()
            self._pool = None
