# jobtracking/registry/redis_registry.py
import redis
import logging
from typing import Optional, Sequence

from .base import JobRegistry
from ..common.job import Job
from ..serialization.base import BaseSerializer
from ..serialization.json_serializer import JsonSerializer

logger = logging.getLogger(__name__)


class RedisJobRegistry(JobRegistry):
    def __init__(
        self,
        connection_pool=None,
        redis_client=None,
        serializer: Optional[BaseSerializer] = None,
        key_prefix: str = "jobtracking",
    ):
        if redis_client:
            self.redis_client = redis_client
            if not getattr(self.redis_client, "decode_responses", False):
                self.redis_client = redis.Redis(
                    connection_pool=self.redis_client.connection_pool,
                    decode_responses=True,
                )
        elif connection_pool:
            self.redis_client = redis.Redis(
                connection_pool=connection_pool, decode_responses=True
            )
        else:
            self.redis_client = redis.Redis(
                host="localhost", port=6379, db=0, decode_responses=True
            )
        self.serializer = serializer or JsonSerializer()
        self.key_prefix = key_prefix

    def _job_key(self, job_id: str) -> str:
        return f"{self.key_prefix}:job:{job_id}"

    def _queue_key(self, queue: str) -> str:
        return f"{self.key_prefix}:queue:{queue}"

    def enqueue(self, job: Job) -> str:
        with self.redis_client.pipeline() as pipe:
            pipe.hset(self._job_key(job.id), mapping=self.serializer.serialize_job(job))
            pipe.lpush(self._queue_key(job.queue), job.id)
            pipe.execute()
        return job.id

    def get_job(self, job_id: str) -> Optional[Job]:
        job_data = self.redis_client.hgetall(self._job_key(job_id))
        if not job_data:
            return None
        return self.serializer.deserialize_job(job_data)

    def destroy_jobs(self, ids: Sequence[str]) -> int:
        if not ids:
            return 0
        # Queue names are needed to pull the ids out of their lists.
        with self.redis_client.pipeline() as pipe:
            for job_id in ids:
                pipe.hget(self._job_key(job_id), "queue")
            queues = pipe.execute()

        destroyed = 0
        with self.redis_client.pipeline() as pipe:
            for job_id, queue in zip(ids, queues):
                if queue is None:
                    continue
                pipe.lrem(self._queue_key(queue), 0, job_id)
                pipe.delete(self._job_key(job_id))
                destroyed += 1
            pipe.execute()
        logger.debug(f"Destroyed {destroyed} of {len(ids)} requested jobs")
        return destroyed
