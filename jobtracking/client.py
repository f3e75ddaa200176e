# jobtracking/client.py
from typing import Callable, Any, Optional
from datetime import datetime

from .common.job import Job
from .registry.base import JobRegistry
from .serialization.base import BaseSerializer
from .serialization.json_serializer import JsonSerializer


class JobClient:
    """
    Builds jobs for scheduling methods and stores them in a registry.

    The returned ``Job`` is the reference a scheduling method hands back so
    its owner can track it.
    """
    def __init__(
        self, registry: Optional[JobRegistry] = None, serializer: Optional[BaseSerializer] = None
    ):
        if registry is None:
            from .config import get_job_registry

            registry = get_job_registry()
        self.registry = registry
        self.serializer = serializer or JsonSerializer()

    def _build_job(
        self, target_func: Callable, args: tuple, kwargs: dict, run_at: Optional[datetime] = None
    ) -> Job:
        serialized_args = self.serializer.serialize_args(target_func, *args, **kwargs)
        return Job(
            target_module=target_func.__module__,
            target_function=target_func.__name__,
            args=serialized_args[0],
            kwargs=serialized_args[1],
            run_at=run_at,
        )

    def enqueue(self, target_func: Callable, *args: Any, **kwargs: Any) -> Job:
        """Creates a fire-and-forget job."""
        job = self._build_job(target_func, args, kwargs)
        self.registry.enqueue(job)
        return job

    def schedule(
        self, target_func: Callable, run_at: datetime, *args: Any, **kwargs: Any
    ) -> Job:
        """Creates a job that should not run before ``run_at``."""
        job = self._build_job(target_func, args, kwargs, run_at=run_at)
        self.registry.enqueue(job)
        return job

    def delete(self, job_id: str) -> bool:
        return self.registry.destroy_jobs([job_id]) == 1

    def get_job(self, job_id: str) -> Optional[Job]:
        return self.registry.get_job(job_id)
