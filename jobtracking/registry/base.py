# jobtracking/registry/base.py
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Set

from jobtracking.common.job import Job


class JobRegistry(ABC):
    """
    Boundary to the system that holds and runs background jobs.

    Tracking only ever asks a registry to look jobs up or destroy them by id.
    ``enqueue`` is there for scheduling methods (see ``JobClient``).
    """

    @abstractmethod
    def enqueue(self, job: Job) -> str: ...

    @abstractmethod
    def get_job(self, job_id: str) -> Optional[Job]: ...

    @abstractmethod
    def destroy_jobs(self, ids: Sequence[str]) -> int: ...

    def get_jobs(self, job_ids: Sequence[str]) -> List[Job]:
        jobs = [self.get_job(job_id) for job_id in job_ids]
        return [job for job in jobs if job is not None]

    def existing_job_ids(self, job_ids: Sequence[str]) -> Set[str]:
        return {job.id for job in self.get_jobs(job_ids)}
