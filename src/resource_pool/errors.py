"""
Error types for resource-pool
"""

from typing import List, Optional


class ResourcePoolError(Exception):
    """Base class for all pool errors"""


class InvalidConfiguration(ResourcePoolError, ValueError):
    """Raised when a pool is constructed with invalid parameters"""

    def __init__(self, errors: List[str]) -> None:
        self.errors = list(errors)
        super().__init__("Invalid pool configuration: " + "; ".join(self.errors))


class ResourceCreationError(ResourcePoolError):
    """Raised when the factory fails to create a resource"""


class PoolExhausted(ResourcePoolError):
    """Raised by acquire when no free resource exists and capacity is saturated"""

    def __init__(self, max_size: int, pool_name: Optional[str] = None) -> None:
        self.max_size = max_size
        self.pool_name = pool_name
        super().__init__(f"The maximum pool size ({max_size}) has been reached.")
