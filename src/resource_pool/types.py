"""
Type definitions for resource-pool
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional, Protocol, runtime_checkable


@runtime_checkable
class Resource(Protocol):
    """A poolable handle to an external connection"""

    def is_closed(self) -> bool:
        """Whether the underlying connection is gone (may raise)"""
        ...

    def close(self) -> None:
        """Dispose of the underlying connection (may raise)"""
        ...


@runtime_checkable
class ResourceFactory(Protocol):
    """Creates new resources on demand"""

    def create_connection(self) -> Resource:
        """Create a resource, raising ResourceCreationError on failure"""
        ...


class ResourceState(str, Enum):
    """Where a tracked resource currently lives"""

    FREE = "free"
    BUSY = "busy"


@dataclass
class ResourcePoolStats:
    """Resource pool statistics"""

    name: str
    max_size: int
    free_count: int
    busy_count: int
    total_created: int
    total_discarded: int
    total_closed: int
    total_acquisitions: int
    total_reused: int
    total_releases: int
    exhausted_count: int

    @property
    def size(self) -> int:
        return self.free_count + self.busy_count

    @property
    def hit_ratio(self) -> float:
        """Share of acquisitions served from the free set"""
        if self.total_acquisitions == 0:
            return 0.0
        return self.total_reused / self.total_acquisitions


class ResourcePoolEventType(str, Enum):
    """Pool event types"""

    RESOURCE_CREATED = "resource:created"
    RESOURCE_ACQUIRED = "resource:acquired"
    RESOURCE_RELEASED = "resource:released"
    RESOURCE_DISCARDED = "resource:discarded"
    RESOURCE_CLOSED = "resource:closed"
    POOL_EXHAUSTED = "pool:exhausted"
    POOL_CLEARED = "pool:cleared"


@dataclass
class ResourcePoolEvent:
    """Pool event"""

    type: ResourcePoolEventType
    timestamp: float
    pool_name: str
    resource: Optional[Any] = None
    data: Optional[Dict[str, Any]] = None


# Type alias for event listeners
ResourcePoolEventListener = Callable[[ResourcePoolEvent], None]
