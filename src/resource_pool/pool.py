"""
Resource pool implementation
"""

import logging
import threading
import time
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Set

from .config import ResourcePoolConfig, ResourcePoolSettings, get_settings, validate_config
from .errors import InvalidConfiguration, PoolExhausted, ResourceCreationError
from .types import (
    Resource,
    ResourceFactory,
    ResourcePoolEvent,
    ResourcePoolEventListener,
    ResourcePoolEventType,
    ResourcePoolStats,
    ResourceState,
)

logger = logging.getLogger(__name__)

# Log prefix for tracing
LOG_PREFIX = "[RESOURCE_POOL]"


class ResourcePool:
    """
    Bounded pool of reusable resources created by an injected factory.

    Idle resources are kept on a free stack and reused most-recently-released
    first; checked-out resources are tracked by identity in the busy set. The
    pool never holds more than ``max_size`` resources and never waits for
    capacity: ``acquire`` either returns immediately or raises PoolExhausted.

    Every public operation runs under a single per-pool lock. Event listeners
    are called after the lock has been released.
    """

    def __init__(
        self,
        factory: ResourceFactory,
        initial_size: int = 0,
        max_size: int = 10,
        *,
        name: str = "default-pool",
    ) -> None:
        errors = []
        if factory is None:
            errors.append("factory is required")
        elif not callable(getattr(factory, "create_connection", None)):
            errors.append("factory must provide a create_connection() method")
        errors.extend(
            validate_config(
                ResourcePoolConfig(name=name, initial_size=initial_size, max_size=max_size)
            )
        )
        if errors:
            logger.error(f"{LOG_PREFIX} __init__: Rejected configuration for '{name}': {errors}")
            raise InvalidConfiguration(errors)

        self._factory = factory
        self._max_size = max_size
        self._name = name
        self._lock = threading.Lock()
        self._free: List[Resource] = []
        self._busy: Dict[int, Resource] = {}
        self._listeners: Dict[ResourcePoolEventType, Set[ResourcePoolEventListener]] = {}

        # Statistics
        self._stats = {
            "total_created": 0,
            "total_discarded": 0,
            "total_closed": 0,
            "total_acquisitions": 0,
            "total_reused": 0,
            "total_releases": 0,
            "exhausted_count": 0,
        }

        self._seed(initial_size)
        logger.info(
            f"{LOG_PREFIX} __init__: Created pool '{name}' "
            f"(initial_size={initial_size}, max_size={max_size})"
        )

    @classmethod
    def from_config(
        cls, factory: ResourceFactory, config: ResourcePoolConfig
    ) -> "ResourcePool":
        """Create a pool from a ResourcePoolConfig"""
        return cls(
            factory,
            config.initial_size,
            config.max_size,
            name=config.name,
        )

    @classmethod
    def from_settings(
        cls,
        factory: ResourceFactory,
        settings: Optional[ResourcePoolSettings] = None,
    ) -> "ResourcePool":
        """Create a pool sized from RESOURCE_POOL_* environment settings"""
        settings = settings or get_settings()
        return cls.from_config(factory, settings.to_config())

    @property
    def name(self) -> str:
        """Get the pool name"""
        return self._name

    @property
    def max_size(self) -> int:
        """Get the pool capacity"""
        return self._max_size

    def acquire(self) -> Resource:
        """
        Check out a resource, preferring the most recently released one.

        Raises:
            PoolExhausted: No free resource is alive and capacity is saturated.
            ResourceCreationError: The factory failed to create a new resource.
        """
        events: List[ResourcePoolEvent] = []
        try:
            with self._lock:
                return self._acquire_locked(events)
        finally:
            self._dispatch(events)

    def release(self, resource: Resource) -> None:
        """
        Return a checked-out resource to the pool.

        Live resources go back on the free stack; closed resources, or ones
        whose liveness check fails, are dropped. Releasing a resource the pool
        is not tracking as busy is ignored.
        """
        events: List[ResourcePoolEvent] = []
        with self._lock:
            tracked = self._busy.pop(id(resource), None)
            if tracked is None:
                logger.warning(
                    f"{LOG_PREFIX} release: Resource {resource!r} is not checked out "
                    f"from pool '{self._name}', ignoring"
                )
            elif self._is_alive(resource):
                self._free.append(resource)
                self._stats["total_releases"] += 1
                events.append(self._event(ResourcePoolEventType.RESOURCE_RELEASED, resource))
            else:
                logger.debug(f"{LOG_PREFIX} release: Dropping closed resource {resource!r}")
                self._dispose(resource)
                self._stats["total_releases"] += 1
                self._stats["total_discarded"] += 1
                events.append(self._event(ResourcePoolEventType.RESOURCE_DISCARDED, resource))
        self._dispatch(events)

    def discard(self, resource: Resource) -> None:
        """Drop a checked-out resource the caller found broken, closing it"""
        events: List[ResourcePoolEvent] = []
        with self._lock:
            tracked = self._busy.pop(id(resource), None)
            if tracked is None:
                logger.warning(
                    f"{LOG_PREFIX} discard: Resource {resource!r} is not checked out "
                    f"from pool '{self._name}', ignoring"
                )
            else:
                self._dispose(resource)
                self._stats["total_discarded"] += 1
                events.append(self._event(ResourcePoolEventType.RESOURCE_DISCARDED, resource))
        self._dispatch(events)

    def size(self) -> int:
        """Get the total (free and busy) number of resources"""
        with self._lock:
            return self._size_locked()

    def close_all(self) -> None:
        """
        Close every resource, free ones first, then empty the pool.

        Checked-out resources are closed as well. Close failures are logged and
        do not stop the sweep. The pool stays usable and will create fresh
        resources on later acquire calls.
        """
        events: List[ResourcePoolEvent] = []
        with self._lock:
            free = self._free
            busy = list(self._busy.values())
            for resource in free + busy:
                was_alive = self._is_alive(resource)
                self._dispose(resource)
                if was_alive:
                    self._stats["total_closed"] += 1
                    events.append(self._event(ResourcePoolEventType.RESOURCE_CLOSED, resource))
            self._free = []
            self._busy = {}
            events.append(
                self._event(
                    ResourcePoolEventType.POOL_CLEARED,
                    data={"free": len(free), "busy": len(busy)},
                )
            )
        logger.info(
            f"{LOG_PREFIX} close_all: Cleared pool '{self._name}' "
            f"({len(free)} free, {len(busy)} busy)"
        )
        self._dispatch(events)

    @contextmanager
    def lease(self) -> Iterator[Resource]:
        """Acquire a resource for the duration of a with-block"""
        resource = self.acquire()
        try:
            yield resource
        finally:
            self.release(resource)

    def state_of(self, resource: Resource) -> Optional[ResourceState]:
        """Get whether a resource is free or busy, or None if untracked"""
        with self._lock:
            if self._busy.get(id(resource)) is resource:
                return ResourceState.BUSY
            if any(free is resource for free in self._free):
                return ResourceState.FREE
            return None

    def get_stats(self) -> ResourcePoolStats:
        """Get pool statistics"""
        with self._lock:
            return ResourcePoolStats(
                name=self._name,
                max_size=self._max_size,
                free_count=len(self._free),
                busy_count=len(self._busy),
                **self._stats,
            )

    def on(
        self, event_type: ResourcePoolEventType, listener: ResourcePoolEventListener
    ) -> None:
        """Add an event listener"""
        with self._lock:
            self._listeners.setdefault(event_type, set()).add(listener)

    def off(
        self, event_type: ResourcePoolEventType, listener: ResourcePoolEventListener
    ) -> None:
        """Remove an event listener"""
        with self._lock:
            if event_type in self._listeners:
                self._listeners[event_type].discard(listener)

    def __len__(self) -> int:
        return self.size()

    def __enter__(self) -> "ResourcePool":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close_all()

    def __repr__(self) -> str:
        return f"<ResourcePool name={self._name!r} size={self.size()} max_size={self._max_size}>"

    def _seed(self, initial_size: int) -> None:
        """Create the initial free resources, all or nothing"""
        created: List[Resource] = []
        try:
            for _ in range(initial_size):
                created.append(self._create())
        except ResourceCreationError:
            logger.error(
                f"{LOG_PREFIX} _seed: Failed after {len(created)} of {initial_size} "
                f"resources, closing them"
            )
            for resource in created:
                self._dispose(resource)
            raise
        self._free.extend(created)
        self._stats["total_created"] += len(created)

    def _acquire_locked(self, events: List[ResourcePoolEvent]) -> Resource:
        # Each pass that does not return pops one entry off the free stack.
        while self._free:
            resource = self._free.pop()
            if self._is_alive(resource):
                self._busy[id(resource)] = resource
                self._stats["total_acquisitions"] += 1
                self._stats["total_reused"] += 1
                events.append(self._event(ResourcePoolEventType.RESOURCE_ACQUIRED, resource))
                logger.debug(f"{LOG_PREFIX} acquire: Reusing free resource {resource!r}")
                return resource

            logger.debug(f"{LOG_PREFIX} acquire: Discarding closed free resource {resource!r}")
            self._dispose(resource)
            self._stats["total_discarded"] += 1
            events.append(self._event(ResourcePoolEventType.RESOURCE_DISCARDED, resource))

        if self._size_locked() < self._max_size:
            resource = self._create()
            self._stats["total_created"] += 1
            events.append(self._event(ResourcePoolEventType.RESOURCE_CREATED, resource))
            if not self._is_alive(resource):
                self._dispose(resource)
                self._stats["total_discarded"] += 1
                events.append(self._event(ResourcePoolEventType.RESOURCE_DISCARDED, resource))
                raise ResourceCreationError("Factory returned a closed resource")

            self._busy[id(resource)] = resource
            self._stats["total_acquisitions"] += 1
            events.append(self._event(ResourcePoolEventType.RESOURCE_ACQUIRED, resource))
            logger.debug(f"{LOG_PREFIX} acquire: Created new resource {resource!r}")
            return resource

        self._stats["exhausted_count"] += 1
        events.append(
            self._event(ResourcePoolEventType.POOL_EXHAUSTED, data={"max_size": self._max_size})
        )
        logger.debug(f"{LOG_PREFIX} acquire: Pool '{self._name}' exhausted")
        raise PoolExhausted(self._max_size, self._name)

    def _create(self) -> Resource:
        """Ask the factory for a new resource"""
        try:
            resource = self._factory.create_connection()
        except ResourceCreationError:
            raise
        except Exception as e:
            raise ResourceCreationError(f"Failed to create resource: {e}") from e
        return resource

    def _size_locked(self) -> int:
        return len(self._free) + len(self._busy)

    def _is_alive(self, resource: Resource) -> bool:
        """Liveness check; a failing check counts as closed"""
        try:
            return not resource.is_closed()
        except Exception as e:
            logger.warning(f"{LOG_PREFIX} _is_alive: Liveness check failed for {resource!r}: {e}")
            return False

    def _dispose(self, resource: Resource) -> None:
        """Close a resource, absorbing errors"""
        try:
            resource.close()
        except Exception as e:
            logger.warning(f"{LOG_PREFIX} _dispose: Failed to close {resource!r}: {e}")

    def _event(
        self,
        event_type: ResourcePoolEventType,
        resource: Optional[Resource] = None,
        data: Optional[Dict[str, Any]] = None,
    ) -> ResourcePoolEvent:
        return ResourcePoolEvent(
            type=event_type,
            timestamp=time.time(),
            pool_name=self._name,
            resource=resource,
            data=data,
        )

    def _dispatch(self, events: List[ResourcePoolEvent]) -> None:
        """Deliver events to listeners; must not be called with the lock held"""
        if not events:
            return
        with self._lock:
            snapshot = {
                event_type: list(listeners)
                for event_type, listeners in self._listeners.items()
            }
        for event in events:
            for listener in snapshot.get(event.type, ()):
                try:
                    listener(event)
                except Exception as e:
                    logger.warning(
                        f"{LOG_PREFIX} _dispatch: Listener for {event.type.value} failed: {e}"
                    )
