from .client import JobClient
from .common.exceptions import (
    ConfigurationError,
    JobTrackingException,
    SchedulerError,
    ValidationError,
)
from .common.job import Job
from .common.states import LifecycleEvent, TrackingState
from .common.tracking import SchedulingRule, TrackingConfig, TrackingRecord
from .config import configure, get_job_registry
from .registry import JobRegistry, MemoryJobRegistry, RedisJobRegistry, SqlJobRegistry
from .storage import TrackingRepository, create_tracking_tables
from .trackable import Trackable

__all__ = [
    "ConfigurationError",
    "Job",
    "JobClient",
    "JobRegistry",
    "JobTrackingException",
    "LifecycleEvent",
    "MemoryJobRegistry",
    "RedisJobRegistry",
    "SchedulerError",
    "SchedulingRule",
    "SqlJobRegistry",
    "Trackable",
    "TrackingConfig",
    "TrackingRecord",
    "TrackingRepository",
    "TrackingState",
    "ValidationError",
    "configure",
    "create_tracking_tables",
    "get_job_registry",
]
