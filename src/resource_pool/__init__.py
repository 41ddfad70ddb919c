"""
resource_pool - Bounded pool of reusable, factory-created connection resources
"""

from .types import (
    Resource,
    ResourceFactory,
    ResourceState,
    ResourcePoolStats,
    ResourcePoolEventType,
    ResourcePoolEvent,
    ResourcePoolEventListener,
)
from .errors import (
    ResourcePoolError,
    InvalidConfiguration,
    ResourceCreationError,
    PoolExhausted,
)
from .config import (
    DEFAULT_RESOURCE_POOL_CONFIG,
    ResourcePoolConfig,
    ResourcePoolSettings,
    get_settings,
    validate_config,
)
from .pool import ResourcePool

__all__ = [
    # Types
    "Resource",
    "ResourceFactory",
    "ResourceState",
    "ResourcePoolStats",
    "ResourcePoolEventType",
    "ResourcePoolEvent",
    "ResourcePoolEventListener",
    # Errors
    "ResourcePoolError",
    "InvalidConfiguration",
    "ResourceCreationError",
    "PoolExhausted",
    # Config
    "DEFAULT_RESOURCE_POOL_CONFIG",
    "ResourcePoolConfig",
    "ResourcePoolSettings",
    "get_settings",
    "validate_config",
    # Pool
    "ResourcePool",
]
