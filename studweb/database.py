"""Connection settings and a thin query layer over a DB-API connection."""

from __future__ import annotations

import re
import threading
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import parse_qsl, unquote, urlsplit

from .errors import NotFoundError, PostgresError, wrap_postgres_error

MAX_CONNECTIONS = 10
ACQUIRE_TIMEOUT = 1.0
DEFAULT_PORT = 5432

_PLACEHOLDER = re.compile(r"\$(\d+)")


@dataclass(frozen=True)
class ConnectionConfig:
    """Settings parsed from a database URL."""

    host: str = ""
    port: int = DEFAULT_PORT
    user: str = ""
    password: str = ""
    database: str = ""
    ssl_mode: str | None = None
    params: dict[str, str] = field(default_factory=dict)
    max_connections: int = MAX_CONNECTIONS
    acquire_timeout: float = ACQUIRE_TIMEOUT


def parse_database_url(url: str) -> ConnectionConfig:
    """Parse a postgres:// URL into a ConnectionConfig."""
    parts = urlsplit(url)
    if parts.scheme not in ("postgres", "postgresql"):
        raise ValueError(f"unsupported database URL scheme: {parts.scheme!r}")
    port = parts.port
    query = dict(parse_qsl(parts.query, keep_blank_values=True))
    ssl_mode = query.pop("sslmode", None)
    return ConnectionConfig(
        host=parts.hostname or "",
        port=DEFAULT_PORT if port is None else port,
        user=unquote(parts.username or ""),
        password=unquote(parts.password or ""),
        database=parts.path.lstrip("/"),
        ssl_mode=ssl_mode,
        params=query,
    )


def _bind(query: str, args: Sequence[Any], paramstyle: str) -> tuple[str, tuple[Any, ...]]:
    """Rewrite $n placeholders for the driver's parameter style."""
    if paramstyle in ("dollar", "native"):
        return query, tuple(args)
    if paramstyle == "numeric":
        return _PLACEHOLDER.sub(r":\1", query), tuple(args)
    if paramstyle in ("format", "pyformat"):
        marker = "%s"
        query = query.replace("%", "%%")
    elif paramstyle == "qmark":
        marker = "?"
    else:
        raise ValueError(f"unsupported parameter style: {paramstyle!r}")

    ordered: list[Any] = []

    def substitute(match: re.Match[str]) -> str:
        index = int(match.group(1))
        if not 1 <= index <= len(args):
            raise ValueError(f"no argument for placeholder ${index}")
        ordered.append(args[index - 1])
        return marker

    return _PLACEHOLDER.sub(substitute, query), tuple(ordered)


@contextmanager
def _translated() -> Iterator[None]:
    try:
        yield
    except PostgresError:
        raise
    except Exception as exc:
        wrapped = wrap_postgres_error(exc)
        if wrapped is exc:
            raise
        raise wrapped from exc


class Transaction:
    """Statements run on one cursor inside an open transaction."""

    def __init__(self, cursor: Any, paramstyle: str) -> None:
        self._cursor = cursor
        self._paramstyle = paramstyle

    def _run(self, query: str, args: Sequence[Any]) -> None:
        sql, params = _bind(query, args, self._paramstyle)
        self._cursor.execute(sql, params)

    def execute(self, query: str, *args: Any) -> int:
        """Run a statement and return the number of affected rows."""
        with _translated():
            self._run(query, args)
            return self._cursor.rowcount

    def fetch_all(self, query: str, *args: Any) -> list[tuple[Any, ...]]:
        """Run a query and return every row."""
        with _translated():
            self._run(query, args)
            return [tuple(row) for row in self._cursor.fetchall()]

    def fetch_one(self, query: str, *args: Any) -> tuple[Any, ...]:
        """Run a query and return its first row; raise NotFoundError if none."""
        with _translated():
            self._run(query, args)
            row = self._cursor.fetchone()
        if row is None:
            raise NotFoundError("no rows in result set")
        return tuple(row)


class Database:
    """Query access to a DB-API connection, one transaction at a time."""

    def __init__(self, connection: Any) -> None:
        self._connection = connection
        self._paramstyle = getattr(connection, "paramstyle", "format")
        self._lock = threading.RLock()
        self._active: Transaction | None = None

    @contextmanager
    def transaction(self) -> Iterator[Transaction]:
        """Open a transaction, committed on success and rolled back on error.

        A transaction opened while another is active joins the outer one.
        """
        with self._lock:
            if self._active is not None:
                yield self._active
                return
            cursor = self._connection.cursor()
            tx = Transaction(cursor, self._paramstyle)
            self._active = tx
            try:
                yield tx
            except BaseException:
                self._connection.rollback()
                raise
            else:
                with _translated():
                    self._connection.commit()
            finally:
                self._active = None
                close = getattr(cursor, "close", None)
                if close is not None:
                    close()

    def fetch_all(self, query: str, *args: Any) -> list[tuple[Any, ...]]:
        """Run a query and return every row."""
        with self.transaction() as tx:
            return tx.fetch_all(query, *args)

    def fetch_one(self, query: str, *args: Any) -> tuple[Any, ...]:
        """Run a query and return its first row; raise NotFoundError if none."""
        with self.transaction() as tx:
            return tx.fetch_one(query, *args)

    def execute(self, query: str, *args: Any) -> int:
        """Run a statement and return the number of affected rows."""
        with self.transaction() as tx:
            return tx.execute(query, *args)