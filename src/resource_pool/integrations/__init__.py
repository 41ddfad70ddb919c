"""SQLAlchemy integration module."""
from .sqlalchemy import EngineConnectionFactory, PooledConnection

__all__ = [
    "EngineConnectionFactory",
    "PooledConnection",
]
