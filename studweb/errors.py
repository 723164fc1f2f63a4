"""Database error types and translation of driver errors into them."""

from __future__ import annotations

UNIQUE_CONSTRAINT_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"
NOT_FOUND = "20000"


class PostgresError(Exception):
    """Base class for errors reported by the storage layer."""

    text = "postgres error"

    def __init__(self, detail: str | None = None, *, code: str | None = None) -> None:
        self.detail = detail
        self.code = code
        message = self.text if code is None else f"{code} {self.text}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class UniqueConstraintViolation(PostgresError):
    """A row with the same unique value already exists."""

    text = "postgres unique constraint violation"


class ForeignKeyViolation(PostgresError):
    """A referenced row does not exist or is still referenced."""

    text = "postgres foreign key violation"


class NotFoundError(PostgresError, LookupError):
    """The requested row does not exist."""

    text = "postgres not found error"


class UnknownError(PostgresError):
    """The database reported an error with an unrecognised code."""

    text = "postgres unknown error"


_BY_CODE: dict[str, type[PostgresError]] = {
    UNIQUE_CONSTRAINT_VIOLATION: UniqueConstraintViolation,
    FOREIGN_KEY_VIOLATION: ForeignKeyViolation,
    NOT_FOUND: NotFoundError,
}


def map_pg_error(code: str) -> type[PostgresError]:
    """Return the error class for a PostgreSQL SQLSTATE code."""
    return _BY_CODE.get(code, UnknownError)


def _sqlstate(error: BaseException) -> str | None:
    for attribute in ("sqlstate", "pgcode"):
        code = getattr(error, attribute, None)
        if isinstance(code, str) and code:
            return code
    return None


def wrap_postgres_error(error: BaseException | None) -> BaseException | None:
    """Translate a driver error into a PostgresError where it carries a SQLSTATE.

    Errors without a SQLSTATE, and errors that are already PostgresError,
    are returned unchanged.
    """
    if error is None:
        return None
    if isinstance(error, PostgresError):
        return error
    code = _sqlstate(error)
    if code is None:
        return error
    wrapped = map_pg_error(code)(str(error), code=code)
    wrapped.__cause__ = error
    return wrapped