# jobtracking/serialization/json_serializer.py
import json
from datetime import datetime
from typing import Callable, Tuple, Dict, Any

from jobtracking.serialization.base import BaseSerializer
from jobtracking.common.job import Job

_DATETIME_FIELDS = ("created_at", "run_at")


class JsonSerializer(BaseSerializer):
    def serialize_job(self, job: Job) -> Dict[str, str]:
        # Flat string mapping so it can be stored as a Redis hash.
        job_dict = {}
        for key, value in job.__dict__.items():
            if value is None:
                job_dict[key] = ""
            elif isinstance(value, datetime):
                job_dict[key] = value.isoformat()
            else:
                job_dict[key] = str(value)
        return job_dict

    def deserialize_job(self, data: Dict[str, str]) -> Job:
        job_dict: Dict[str, Any] = {}
        for key, value in data.items():
            if isinstance(key, bytes): key = key.decode("utf-8")
            if isinstance(value, bytes): value = value.decode("utf-8")
            if key in _DATETIME_FIELDS:
                job_dict[key] = datetime.fromisoformat(value) if value else None
            else:
                job_dict[key] = value
        return Job(**job_dict)

    def serialize_args(
        self, target_func: Callable, *args: Any, **kwargs: Any
    ) -> Tuple[str, str]:
        return json.dumps(args, default=str), json.dumps(kwargs, default=str)

    def deserialize_args(self, args_str: str, kwargs_str: str) -> Tuple[Tuple, Dict]:
        return tuple(json.loads(args_str)), json.loads(kwargs_str)
