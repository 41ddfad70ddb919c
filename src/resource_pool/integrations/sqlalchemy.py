"""
SQLAlchemy integration for resource-pool.

Pools SQLAlchemy ``Connection`` objects checked out from an ``Engine``.
Pair the engine with ``NullPool`` so this pool is the only one keeping
connections open.
"""
from __future__ import annotations

import logging

from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from ..errors import ResourceCreationError

logger = logging.getLogger(__name__)

# Log prefix for tracing
LOG_PREFIX = "[RESOURCE_POOL:sqlalchemy]"


class PooledConnection:
    """
    Resource wrapper around a SQLAlchemy Connection.

    Example:
        with pool.lease() as pooled:
            pooled.connection.execute(text("SELECT 1"))
    """

    def __init__(self, connection: Connection) -> None:
        self._connection = connection

    @property
    def connection(self) -> Connection:
        """Get the wrapped SQLAlchemy connection."""
        return self._connection

    def is_closed(self) -> bool:
        """A closed or invalidated connection cannot be reused."""
        return self._connection.closed or self._connection.invalidated

    def close(self) -> None:
        self._connection.close()

    def __repr__(self) -> str:
        return f"<PooledConnection closed={self._connection.closed}>"


class EngineConnectionFactory:
    """Resource factory that opens connections on a SQLAlchemy engine."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @property
    def engine(self) -> Engine:
        """Get the engine connections are opened on."""
        return self._engine

    def create_connection(self) -> PooledConnection:
        """
        Open a new connection.

        Raises:
            ResourceCreationError: The engine could not connect.
        """
        try:
            connection = self._engine.connect()
        except SQLAlchemyError as e:
            logger.warning(
                f"{LOG_PREFIX} create_connection: Connect failed for "
                f"{self._engine.url.render_as_string(hide_password=True)}: {e}"
            )
            raise ResourceCreationError(f"Could not connect: {e}") from e
        return PooledConnection(connection)
