import pytest
import json

redis = pytest.importorskip("redis")

from jobtracking.common.job import Job
from jobtracking.registry.redis_registry import RedisJobRegistry


# --- Fixtures ---
@pytest.fixture
def redis_client():
    r = redis.Redis(host='localhost', port=6379, db=0)
    try:
        r.ping()
    except redis.exceptions.ConnectionError:
        pytest.skip("Redis server not running on localhost:6379")
    r.flushdb() # Clear database before each test
    return r

@pytest.fixture
def redis_registry(redis_client):
    return RedisJobRegistry(connection_pool=redis_client.connection_pool)

def _make_job(queue="default"):
    return Job(
        target_module="tests.test_tasks",
        target_function="export_widget",
        args=json.dumps([1]),
        kwargs=json.dumps({}),
        queue=queue,
    )


def test_redis_registry_enqueue_and_get(redis_registry, redis_client):
    job = _make_job(queue="exports")
    assert redis_registry.enqueue(job) == job.id

    stored_job_data = redis_client.hgetall(f"jobtracking:job:{job.id}")
    assert stored_job_data[b'target_function'].decode() == "export_widget"
    assert redis_client.lrange("jobtracking:queue:exports", 0, -1) == [job.id.encode()]

    stored = redis_registry.get_job(job.id)
    assert stored == job
    assert redis_registry.get_job("missing") is None


def test_redis_registry_destroy_jobs(redis_registry, redis_client):
    kept, doomed = _make_job(), _make_job()
    redis_registry.enqueue(kept)
    redis_registry.enqueue(doomed)

    assert redis_registry.destroy_jobs([doomed.id, "unknown-id"]) == 1
    assert redis_registry.get_job(doomed.id) is None
    assert redis_registry.get_job(kept.id) is not None
    assert redis_client.lrange("jobtracking:queue:default", 0, -1) == [kept.id.encode()]


def test_redis_registry_destroy_nothing(redis_registry):
    redis_registry.enqueue(_make_job())
    assert redis_registry.destroy_jobs([]) == 0
