# jobtracking/common/context.py
"""The database connection tracking callbacks are running on."""
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

from sqlalchemy import Connection

_ACTIVE_CONNECTION: ContextVar[Optional[Connection]] = ContextVar(
    "jobtracking_active_connection", default=None
)


@contextmanager
def using_connection(connection: Connection) -> Iterator[Connection]:
    """
    Make ``connection`` visible to registries while the block runs.

    A registry stored in the same database writes through this connection, so
    its jobs commit or roll back together with the owner's trackings.
    """
    token = _ACTIVE_CONNECTION.set(connection)
    try:
        yield connection
    finally:
        _ACTIVE_CONNECTION.reset(token)


def active_connection() -> Optional[Connection]:
    return _ACTIVE_CONNECTION.get()
