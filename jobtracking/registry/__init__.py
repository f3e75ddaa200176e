from .base import JobRegistry
from .memory_registry import MemoryJobRegistry
from .redis_registry import RedisJobRegistry
from .sql_registry import SqlJobRegistry

__all__ = ["JobRegistry", "MemoryJobRegistry", "RedisJobRegistry", "SqlJobRegistry"]
