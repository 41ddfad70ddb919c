"""
Configuration utilities for resource-pool
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


@dataclass(frozen=True)
class ResourcePoolConfig:
    """Resource pool configuration"""

    name: str = "default-pool"
    initial_size: int = 0
    max_size: int = 10


# Default resource pool configuration
DEFAULT_RESOURCE_POOL_CONFIG = ResourcePoolConfig(
    name="default-pool",
    initial_size=0,
    max_size=10,
)


def validate_config(config: ResourcePoolConfig) -> List[str]:
    """Validate configuration values"""
    errors = []

    if config.max_size < 1:
        errors.append("max_size must be at least 1")

    if config.initial_size < 0:
        errors.append("initial_size must be non-negative")

    # Cross-field validations
    if config.initial_size > config.max_size:
        errors.append("initial_size cannot exceed max_size")

    return errors


class ResourcePoolSettings(BaseSettings):
    """Pool sizing loaded from RESOURCE_POOL_* environment variables."""

    name: str = Field(default="default-pool", description="Pool name used in logs and events")
    initial_size: int = Field(default=0, description="Resources created when the pool is built")
    max_size: int = Field(default=10, description="Hard ceiling on free plus busy resources")

    model_config = SettingsConfigDict(env_prefix="RESOURCE_POOL_", env_file=None)

    def to_config(self) -> ResourcePoolConfig:
        """Convert to the plain config dataclass used by the pool."""
        return ResourcePoolConfig(
            name=self.name,
            initial_size=self.initial_size,
            max_size=self.max_size,
        )


@lru_cache()
def get_settings() -> ResourcePoolSettings:
    """Get cached settings instance."""
    return ResourcePoolSettings()
