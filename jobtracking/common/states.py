# jobtracking/common/states.py
from enum import Enum


class LifecycleEvent(str, Enum):
    """Owner lifecycle events a scheduling rule can hook into."""

    AFTER_CREATE = "after_create"
    AFTER_UPDATE = "after_update"


class TrackingState(str, Enum):
    """
    State of one (owner, scheduling method) pair.

    ``RECONCILING`` only lasts while a reschedule callback destroys and
    recreates jobs inside a flush. It is reported in debug logs;
    ``Trackable.tracking_state()`` reads the stored trackings and returns
    ``UNTRACKED`` or ``TRACKED``.
    """

    UNTRACKED = "untracked"
    TRACKED = "tracked"
    RECONCILING = "reconciling"


ALL_EVENTS = [event.value for event in LifecycleEvent]
