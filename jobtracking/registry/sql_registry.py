# jobtracking/registry/sql_registry.py
from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional, Sequence, Set

from sqlalchemy import (
    Connection,
    DateTime,
    Engine,
    String,
    Text,
    create_engine,
    delete,
    insert,
    select,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, sessionmaker

from jobtracking.common.context import active_connection
from jobtracking.common.job import Job
from jobtracking.registry.base import JobRegistry

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


class JobModel(Base):
    __tablename__ = "jobtracking_jobs"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    target_module: Mapped[str] = mapped_column(String(255))
    target_function: Mapped[str] = mapped_column(String(255))
    args: Mapped[str] = mapped_column(Text)
    kwargs: Mapped[str] = mapped_column(Text)
    queue: Mapped[str] = mapped_column(String(100), index=True, default="default")
    run_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)


_jobs = JobModel.__table__


class SqlJobRegistry(JobRegistry):
    """
    Job registry backed by a SQL table.

    While tracking callbacks run on a connection from the same engine, reads
    and writes go through that connection instead of a session of their own.
    Jobs then share the owner's transaction, and a rolled-back flush takes its
    enqueued and destroyed jobs back with it.
    """

    def __init__(
        self,
        connection_url: Optional[str] = None,
        engine: Optional[Engine] = None,
        create_tables: bool = True,
    ) -> None:
        if engine is None and connection_url is None:
            raise ValueError("connection_url or engine is required")
        self.engine = engine or create_engine(connection_url)
        self._session_factory = sessionmaker(bind=self.engine, expire_on_commit=False)
        if create_tables:
            Base.metadata.create_all(self.engine)

    def _shared_connection(self) -> Optional[Connection]:
        connection = active_connection()
        if connection is not None and connection.engine is self.engine:
            return connection
        return None

    def _job_from_model(self, model) -> Job:
        return Job(
            id=model.id,
            target_module=model.target_module,
            target_function=model.target_function,
            args=model.args,
            kwargs=model.kwargs,
            created_at=model.created_at,
            queue=model.queue,
            run_at=model.run_at,
        )

    def enqueue(self, job: Job) -> str:
        values = dict(
            id=job.id,
            target_module=job.target_module,
            target_function=job.target_function,
            args=job.args,
            kwargs=job.kwargs,
            queue=job.queue,
            run_at=job.run_at,
            created_at=job.created_at,
        )
        connection = self._shared_connection()
        if connection is not None:
            connection.execute(insert(_jobs).values(**values))
        else:
            with self._session_factory.begin() as session:
                session.add(JobModel(**values))
        return job.id

    def get_job(self, job_id: str) -> Optional[Job]:
        jobs = self.get_jobs([job_id])
        return jobs[0] if jobs else None

    def get_jobs(self, job_ids: Sequence[str]) -> List[Job]:
        if not job_ids:
            return []
        query = select(_jobs).where(_jobs.c.id.in_(list(job_ids)))
        connection = self._shared_connection()
        if connection is not None:
            return [self._job_from_model(row) for row in connection.execute(query)]
        with self._session_factory() as session:
            return [self._job_from_model(row) for row in session.execute(query)]

    def existing_job_ids(self, job_ids: Sequence[str]) -> Set[str]:
        if not job_ids:
            return set()
        query = select(_jobs.c.id).where(_jobs.c.id.in_(list(job_ids)))
        connection = self._shared_connection()
        if connection is not None:
            return set(connection.execute(query).scalars())
        with self._session_factory() as session:
            return set(session.execute(query).scalars())

    def destroy_jobs(self, ids: Sequence[str]) -> int:
        if not ids:
            return 0
        statement = delete(_jobs).where(_jobs.c.id.in_(list(ids)))
        connection = self._shared_connection()
        if connection is not None:
            destroyed = connection.execute(statement).rowcount or 0
        else:
            with self._session_factory.begin() as session:
                destroyed = session.execute(statement).rowcount or 0
        logger.debug(f"Destroyed {destroyed} of {len(ids)} requested jobs")
        return destroyed
