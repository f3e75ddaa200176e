# jobtracking/registry/memory_registry.py
import logging
from threading import RLock
from typing import Optional, List, Dict, Sequence

from jobtracking.registry.base import JobRegistry
from jobtracking.common.job import Job

logger = logging.getLogger(__name__)


class MemoryJobRegistry(JobRegistry):
    def __init__(self):
        self._jobs: Dict[str, Job] = {}
        self._lock = RLock()

    def enqueue(self, job: Job) -> str:
        with self._lock:
            self._jobs[job.id] = job
        return job.id

    def get_job(self, job_id: str) -> Optional[Job]:
        with self._lock:
            return self._jobs.get(job_id)

    def destroy_jobs(self, ids: Sequence[str]) -> int:
        if not ids:
            return 0
        destroyed = 0
        with self._lock:
            for job_id in ids:
                if self._jobs.pop(job_id, None) is not None:
                    destroyed += 1
        logger.debug(f"Destroyed {destroyed} of {len(ids)} requested jobs")
        return destroyed

    def job_ids(self) -> List[str]:
        with self._lock:
            return list(self._jobs)

    def __contains__(self, job_id: str) -> bool:
        with self._lock:
            return job_id in self._jobs

    def __len__(self) -> int:
        with self._lock:
            return len(self._jobs)
