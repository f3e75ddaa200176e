# jobtracking/trackable.py
import logging
from dataclasses import replace
from typing import Any, Callable, List, Optional, Type

from sqlalchemy import Connection, and_, event
from sqlalchemy.orm import foreign, relationship, remote

from jobtracking.common.context import using_connection
from jobtracking.common.exceptions import ConfigurationError
from jobtracking.common.job import Job
from jobtracking.common.states import ALL_EVENTS, LifecycleEvent, TrackingState
from jobtracking.common.tracking import (
    SchedulingRule,
    TrackingConfig,
    TrackingRecord,
    TrackingRelations,
    always,
)
from jobtracking.reconciler import (
    build_creation_callback,
    build_reschedule_callback,
    creation_callback_name,
    current_tracking_state,
    destroy_owner_trackings,
    owner_connection,
    reschedule_callback_name,
)
from jobtracking.registry.base import JobRegistry
from jobtracking.storage.models import JobTrackingModel
from jobtracking.storage.repository import TrackingRepository

logger = logging.getLogger(__name__)


def _after_insert(mapper, connection, target) -> None:
    config = type(target).__tracking__
    for rule in config.rules_for(LifecycleEvent.AFTER_CREATE):
        config.creation_callbacks[rule.method_name](target, connection)


def _after_update(mapper, connection, target) -> None:
    config = type(target).__tracking__
    for callback in list(config.reschedule_callbacks.values()):
        callback(target, connection)


def _before_delete(mapper, connection, target) -> None:
    destroy_owner_trackings(type(target).__tracking__, target, connection)


class Trackable:
    """
    Mixin for declarative models whose rows schedule background jobs.

    Enable it on the mapped class, then declare one rule per scheduling
    method::

        class Widget(Trackable, Base):
            ...
            def schedule_export(self):
                return JobClient().enqueue(export_widget, self.id)

        Widget.enable_tracking()
        Widget.declare_scheduling(
            on=LifecycleEvent.AFTER_CREATE,
            method_name="schedule_export",
            update_if=lambda widget: widget.export_stale,
        )

    The scheduling method runs after the row is inserted (or updated, for
    ``AFTER_UPDATE`` rules). When it returns a job, a tracking row links the
    owner, the method name and the job id. After every update whose
    ``update_if`` holds, the jobs tracked for that method are destroyed and the
    method runs again.
    """

    __tracking__ = None

    @classmethod
    def enable_tracking(
        cls,
        job_class: Type = Job,
        registry: Optional[JobRegistry] = None,
        destroy_jobs_on_owner_destroy: bool = False,
        kind_name: Optional[str] = None,
    ) -> TrackingConfig:
        if getattr(cls, "__tracking__", None) is not None:
            raise ConfigurationError(
                f"Tracking is already enabled for {cls.__name__} or one of its bases"
            )
        if getattr(cls, "id", None) is None:
            raise ConfigurationError(f"{cls.__name__} needs an 'id' primary key to own jobs")

        relations = TrackingRelations(job_class=job_class)
        config = TrackingConfig(
            kind_name=kind_name or cls.__name__,
            job_class=job_class,
            registry=registry,
            destroy_jobs_on_owner_destroy=destroy_jobs_on_owner_destroy,
            relations=relations,
        )
        cls.__tracking__ = config

        setattr(
            cls,
            relations.trackings,
            relationship(
                JobTrackingModel,
                primaryjoin=and_(
                    cls.id == foreign(remote(JobTrackingModel.job_owner_id)),
                    JobTrackingModel.job_owner_type == config.kind_name,
                ),
                order_by=JobTrackingModel.id,
                viewonly=True,
            ),
        )

        event.listen(cls, "after_insert", _after_insert, propagate=True)
        event.listen(cls, "after_update", _after_update, propagate=True)
        event.listen(cls, "before_delete", _before_delete, propagate=True)
        logger.debug(f"Job tracking enabled for {config.kind_name}")
        return config

    @classmethod
    def declare_scheduling(
        cls,
        rule: Optional[SchedulingRule] = None,
        *,
        on: LifecycleEvent = LifecycleEvent.AFTER_CREATE,
        method_name: Optional[str] = None,
        update_if: Optional[Callable[[Any], bool]] = None,
    ) -> SchedulingRule:
        config = cls._tracking_config()
        if rule is None:
            rule = SchedulingRule(
                lifecycle_event=on,
                method_name=method_name,
                update_condition=update_if or always,
            )
        try:
            lifecycle_event = LifecycleEvent(rule.lifecycle_event)
        except ValueError:
            raise ConfigurationError(
                f"Unknown lifecycle event {rule.lifecycle_event!r}; expected one of {ALL_EVENTS}"
            ) from None
        if rule.lifecycle_event is not lifecycle_event:
            rule = replace(rule, lifecycle_event=lifecycle_event)

        if not rule.method_name:
            raise ConfigurationError(f"{cls.__name__}: a scheduling rule needs a method_name")
        if not callable(getattr(cls, rule.method_name, None)):
            raise ConfigurationError(
                f"{cls.__name__} has no scheduling method '{rule.method_name}'"
            )
        config.add_rule(rule)

        creation_callback = build_creation_callback(config, rule)
        reschedule_callback = build_reschedule_callback(config, rule, creation_callback)
        config.creation_callbacks[rule.method_name] = creation_callback
        config.reschedule_callbacks[rule.method_name] = reschedule_callback
        setattr(cls, creation_callback_name(rule.method_name), creation_callback)
        setattr(cls, reschedule_callback_name(rule.method_name), reschedule_callback)
        return rule

    @classmethod
    def _tracking_config(cls) -> TrackingConfig:
        config = getattr(cls, "__tracking__", None)
        if config is None:
            raise ConfigurationError(
                f"Call {cls.__name__}.enable_tracking() before declaring scheduling rules"
            )
        return config

    def run_and_track(
        self, method_name: str, connection: Optional[Connection] = None
    ) -> Optional[TrackingRecord]:
        """Run a scheduling method now and track the job it returns."""
        config = self._tracking_config()
        config.get_rule(method_name)
        return config.creation_callbacks[method_name](self, connection)

    def run_and_reschedule(
        self, method_name: str, connection: Optional[Connection] = None
    ) -> Optional[TrackingRecord]:
        """Replace the jobs of a scheduling method as an update would."""
        config = self._tracking_config()
        config.get_rule(method_name)
        return config.reschedule_callbacks[method_name](self, connection)

    def tracking_state(self, method_name: str) -> TrackingState:
        self._tracking_config().get_rule(method_name)
        return current_tracking_state(self, method_name, owner_connection(self))

    @property
    def tracked_jobs(self) -> List[Job]:
        """Jobs created by this owner that the registry still holds."""
        config = self._tracking_config()
        connection = owner_connection(self)
        trackings = TrackingRepository(connection).find_trackings_for_owner(self)
        with using_connection(connection):
            return config.resolve_registry().get_jobs([t.job_id for t in trackings])
