from .models import JobTrackingModel, TrackingBase, create_tracking_tables
from .repository import TrackingRepository

__all__ = [
    "JobTrackingModel",
    "TrackingBase",
    "TrackingRepository",
    "create_tracking_tables",
]
