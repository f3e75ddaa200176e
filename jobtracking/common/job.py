# jobtracking/common/job.py
import uuid
from dataclasses import dataclass, field
from datetime import datetime, UTC
from typing import Optional


@dataclass
class Job:
    """
    Reference to a unit of background work held by a job registry.

    Owners never look inside a job beyond its ``id``; the remaining fields
    exist so registries can store and hand the job to a worker.
    """

    # Target function information
    target_module: str
    target_function: str

    # Serialized arguments
    args: str  # JSON-serialized tuple
    kwargs: str  # JSON-serialized dict

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    queue: str = "default"
    run_at: Optional[datetime] = None
