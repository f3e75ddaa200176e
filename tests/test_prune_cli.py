import json

from sqlalchemy import create_engine

from jobtracking.common.job import Job
from jobtracking.registry.sql_registry import SqlJobRegistry
from jobtracking.storage.models import create_tracking_tables
from jobtracking.storage.repository import TrackingRepository
from run_prune_orphaned_trackings import main


class Invoice:
    def __init__(self, id):
        self.id = id


def _make_job() -> Job:
    return Job(
        target_module="tests.test_tasks",
        target_function="export_widget",
        args=json.dumps([1]),
        kwargs=json.dumps({}),
    )


def _seed(tmp_path):
    connection_url = f"sqlite:///{tmp_path / 'jobtracking.db'}"
    engine = create_engine(connection_url)
    registry = SqlJobRegistry(engine=engine)
    create_tracking_tables(engine)

    live_job = _make_job()
    registry.enqueue(live_job)
    with engine.begin() as connection:
        repository = TrackingRepository(connection)
        repository.create_tracking(Invoice(1), "schedule_reminder", live_job)
        repository.create_tracking(Invoice(1), "schedule_archive", _make_job())
    return connection_url, engine


def _remaining_methods(engine):
    with engine.connect() as connection:
        trackings = TrackingRepository(connection).find_trackings_for_owner(Invoice(1))
    return [t.created_by_method_name for t in trackings]


def test_prune_removes_trackings_of_missing_jobs(tmp_path, capsys):
    connection_url, engine = _seed(tmp_path)

    main(["--connection-url", connection_url])

    output = capsys.readouterr().out
    assert "Pruned 1 orphaned trackings:" in output
    assert "Invoice 1 schedule_archive" in output
    assert _remaining_methods(engine) == ["schedule_reminder"]


def test_prune_dry_run_keeps_trackings(tmp_path, capsys):
    connection_url, engine = _seed(tmp_path)

    main(["--connection-url", connection_url, "--dry-run"])

    assert "Found 1 orphaned trackings:" in capsys.readouterr().out
    assert _remaining_methods(engine) == ["schedule_reminder", "schedule_archive"]


def test_prune_with_nothing_to_do(tmp_path, capsys):
    connection_url, engine = _seed(tmp_path)
    main(["--connection-url", connection_url])
    capsys.readouterr()

    main(["--connection-url", connection_url, "--jobs-connection-url", connection_url])

    assert capsys.readouterr().out.strip() == "No orphaned trackings found."
