# jobtracking/storage/repository.py
from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any, Iterable, List, Sequence

from sqlalchemy import Connection, Select, delete, insert, select

from jobtracking.common.context import using_connection
from jobtracking.common.exceptions import ValidationError
from jobtracking.common.tracking import TrackingRecord
from jobtracking.registry.base import JobRegistry
from jobtracking.storage.models import JobTrackingModel

logger = logging.getLogger(__name__)

_table = JobTrackingModel.__table__


def owner_kind_name(owner: Any) -> str:
    config = getattr(type(owner), "__tracking__", None)
    if config is not None:
        return config.kind_name
    return type(owner).__name__


class TrackingRepository:
    """
    Queries and writes tracking records on a SQLAlchemy ``Connection``.

    Working on a bare connection lets the lifecycle listeners use the
    connection of the flush that triggered them, so trackings commit or roll
    back together with the owner.
    """

    def __init__(self, connection: Connection) -> None:
        self.connection = connection

    def _tracking_from_row(self, row) -> TrackingRecord:
        mapping = row._mapping
        return TrackingRecord(
            id=mapping["id"],
            job_owner_id=mapping["job_owner_id"],
            job_owner_type=mapping["job_owner_type"],
            created_by_method_name=mapping["created_by_method_name"],
            job_id=mapping["job_id"],
            created_at=mapping["created_at"],
        )

    def _fetch(self, query: Select) -> List[TrackingRecord]:
        rows = self.connection.execute(query).all()
        return [self._tracking_from_row(row) for row in rows]

    def _owner_query(self, owner: Any) -> Select:
        return select(_table).where(
            _table.c.job_owner_id == owner.id,
            _table.c.job_owner_type == owner_kind_name(owner),
        )

    def build_tracking_query(self, owner: Any, method_name: str) -> Select:
        return self._owner_query(owner).where(
            _table.c.created_by_method_name == method_name
        )

    def create_tracking(self, owner: Any, method_name: str, job: Any) -> TrackingRecord:
        tracking = TrackingRecord(
            job_owner_id=getattr(owner, "id", None),
            job_owner_type=owner_kind_name(owner),
            created_by_method_name=method_name,
            job_id=getattr(job, "id", None),
            created_at=datetime.now(UTC),
        )
        missing = [
            name
            for name in ("job_owner_id", "job_owner_type", "created_by_method_name", "job_id")
            if getattr(tracking, name) in (None, "")
        ]
        if missing:
            raise ValidationError(
                f"Cannot track job for {tracking.job_owner_type}: missing {', '.join(missing)}"
            )

        result = self.connection.execute(
            insert(_table).values(
                job_owner_id=tracking.job_owner_id,
                job_owner_type=tracking.job_owner_type,
                created_by_method_name=tracking.created_by_method_name,
                job_id=tracking.job_id,
                created_at=tracking.created_at,
            )
        )
        tracking.id = result.inserted_primary_key[0]
        logger.debug(
            f"Tracking {tracking.id}: {tracking.job_owner_type} {tracking.job_owner_id} "
            f"created job {tracking.job_id} via {method_name}"
        )
        return tracking

    def find_trackings_for(self, owner: Any, method_name: str) -> List[TrackingRecord]:
        return self._fetch(self.build_tracking_query(owner, method_name))

    def find_trackings_for_owner(self, owner: Any) -> List[TrackingRecord]:
        return self._fetch(self._owner_query(owner).order_by(_table.c.id))

    def destroy_trackings(self, trackings: Iterable[TrackingRecord]) -> int:
        ids = [tracking.id for tracking in trackings]
        if not ids:
            return 0
        result = self.connection.execute(delete(_table).where(_table.c.id.in_(ids)))
        logger.debug(f"Destroyed trackings {ids}")
        return result.rowcount or 0

    def destroy_trackings_for_owner(self, owner: Any) -> int:
        return self.destroy_trackings(self.find_trackings_for_owner(owner))

    def destroy_trackings_for_jobs(self, job_ids: Sequence[str]) -> int:
        if not job_ids:
            return 0
        result = self.connection.execute(
            delete(_table).where(_table.c.job_id.in_(list(job_ids)))
        )
        return result.rowcount or 0

    def find_orphaned_trackings(self, registry: JobRegistry) -> List[TrackingRecord]:
        """Trackings whose job is no longer held by ``registry``."""
        trackings = self._fetch(select(_table).order_by(_table.c.id))
        if not trackings:
            return []
        with using_connection(self.connection):
            existing = registry.existing_job_ids([t.job_id for t in trackings])
        return [t for t in trackings if t.job_id not in existing]

    def prune_orphaned_trackings(self, registry: JobRegistry) -> List[TrackingRecord]:
        orphans = self.find_orphaned_trackings(registry)
        self.destroy_trackings(orphans)
        if orphans:
            logger.info(f"Pruned {len(orphans)} trackings for jobs that no longer exist")
        return orphans
