# jobtracking/common/tracking.py
from dataclasses import dataclass, field
from datetime import datetime, UTC
from typing import Any, Callable, Dict, Optional, Type, TYPE_CHECKING

from jobtracking.common.exceptions import ConfigurationError
from jobtracking.common.job import Job
from jobtracking.common.states import LifecycleEvent

if TYPE_CHECKING:
    from jobtracking.registry.base import JobRegistry


def always(owner: Any) -> bool:
    return True


@dataclass
class TrackingRecord:
    """
    Persisted link between an owner, the scheduling method it ran and the job
    that method returned.
    """

    job_owner_id: int
    job_owner_type: str
    created_by_method_name: str
    job_id: str

    id: Optional[int] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))


@dataclass(frozen=True)
class SchedulingRule:
    lifecycle_event: LifecycleEvent
    method_name: str
    update_condition: Callable[[Any], bool] = always

    def should_update(self, owner: Any) -> bool:
        return bool(self.update_condition(owner))


@dataclass(frozen=True)
class TrackingRelations:
    """The relations ``enable_tracking`` declares on an owner kind."""

    trackings: str = "job_trackings"
    jobs: str = "tracked_jobs"
    through: str = "job_trackings"
    job_class: Type = Job


@dataclass
class TrackingConfig:
    """
    Per-kind tracking configuration.

    Holds the declared rules and the callbacks generated for them, keyed by
    scheduling method name. Lifecycle listeners iterate these mappings.
    """

    kind_name: str
    job_class: Type = Job
    registry: Optional["JobRegistry"] = None
    destroy_jobs_on_owner_destroy: bool = False
    relations: TrackingRelations = field(default_factory=TrackingRelations)

    rules: Dict[str, SchedulingRule] = field(default_factory=dict)
    creation_callbacks: Dict[str, Callable] = field(default_factory=dict)
    reschedule_callbacks: Dict[str, Callable] = field(default_factory=dict)

    def add_rule(self, rule: SchedulingRule) -> None:
        if rule.method_name in self.rules:
            raise ConfigurationError(
                f"{self.kind_name} already tracks jobs created by '{rule.method_name}'"
            )
        self.rules[rule.method_name] = rule

    def get_rule(self, method_name: str) -> SchedulingRule:
        try:
            return self.rules[method_name]
        except KeyError:
            raise ConfigurationError(
                f"{self.kind_name} has no scheduling rule for '{method_name}'"
            ) from None

    def rules_for(self, event: LifecycleEvent):
        return [rule for rule in self.rules.values() if rule.lifecycle_event == event]

    def is_job(self, value: Any) -> bool:
        return isinstance(value, self.job_class)

    def resolve_registry(self) -> "JobRegistry":
        if self.registry is not None:
            return self.registry
        from jobtracking.config import get_job_registry

        return get_job_registry()
