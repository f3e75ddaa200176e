# jobtracking/reconciler.py
"""
Callbacks that keep an owner's tracked jobs in step with the owner.

For each scheduling rule two callbacks are built:

* the creation-tracking callback runs the owner's scheduling method and
  records a tracking when it returns a job;
* the reschedule callback, run after updates, destroys the jobs and trackings
  left by earlier runs of that method and runs the creation callback again.

Both take the owner and an optional ``Connection``. Lifecycle listeners pass
the connection of the flush in progress; manual calls fall back to the
connection of the owner's session. Scheduling methods and job destruction run
with that connection active, so a SQL registry on the same engine joins the
owner's transaction.
"""
import logging
from typing import Any, Callable, Optional

from sqlalchemy import Connection
from sqlalchemy.orm import object_session

from jobtracking.common.context import using_connection
from jobtracking.common.exceptions import ValidationError
from jobtracking.common.states import TrackingState
from jobtracking.common.tracking import SchedulingRule, TrackingConfig, TrackingRecord
from jobtracking.storage.repository import TrackingRepository

logger = logging.getLogger(__name__)


def creation_callback_name(method_name: str) -> str:
    return f"creation_tracking_callback_for_{method_name}"


def reschedule_callback_name(method_name: str) -> str:
    return f"reschedule_for_{method_name}"


def owner_connection(owner: Any) -> Connection:
    session = object_session(owner)
    if session is None:
        raise ValidationError(
            f"{type(owner).__name__} must be attached to a session to track jobs"
        )
    return session.connection()


def build_creation_callback(
    config: TrackingConfig, rule: SchedulingRule
) -> Callable[..., Optional[TrackingRecord]]:
    method_name = rule.method_name

    def creation_tracking_callback(
        owner: Any, connection: Optional[Connection] = None
    ) -> Optional[TrackingRecord]:
        if connection is None:
            connection = owner_connection(owner)
        with using_connection(connection):
            job = getattr(owner, method_name)()
        if not config.is_job(job):
            logger.debug(
                f"{config.kind_name}.{method_name} returned {type(job).__name__}; nothing to track"
            )
            return None
        return TrackingRepository(connection).create_tracking(owner, method_name, job)

    creation_tracking_callback.__name__ = creation_callback_name(method_name)
    return creation_tracking_callback


def build_reschedule_callback(
    config: TrackingConfig, rule: SchedulingRule, creation_callback: Callable
) -> Callable[..., Optional[TrackingRecord]]:
    method_name = rule.method_name

    def reschedule_callback(
        owner: Any, connection: Optional[Connection] = None
    ) -> Optional[TrackingRecord]:
        if not rule.should_update(owner):
            return None
        if connection is None:
            connection = owner_connection(owner)

        repository = TrackingRepository(connection)
        trackings = repository.find_trackings_for(owner, method_name)
        if trackings:
            logger.debug(
                f"{config.kind_name} {owner.id}: {TrackingState.RECONCILING.value} "
                f"{len(trackings)} jobs from {method_name}"
            )
            with using_connection(connection):
                config.resolve_registry().destroy_jobs([t.job_id for t in trackings])
            repository.destroy_trackings(trackings)

        return creation_callback(owner, connection)

    reschedule_callback.__name__ = reschedule_callback_name(method_name)
    return reschedule_callback


def destroy_owner_trackings(
    config: TrackingConfig, owner: Any, connection: Connection
) -> int:
    """Remove every tracking of a destroyed owner, and its jobs if configured."""
    repository = TrackingRepository(connection)
    trackings = repository.find_trackings_for_owner(owner)
    if trackings and config.destroy_jobs_on_owner_destroy:
        with using_connection(connection):
            config.resolve_registry().destroy_jobs([t.job_id for t in trackings])
    return repository.destroy_trackings(trackings)


def current_tracking_state(owner: Any, method_name: str, connection: Connection) -> TrackingState:
    if TrackingRepository(connection).find_trackings_for(owner, method_name):
        return TrackingState.TRACKED
    return TrackingState.UNTRACKED
