# jobtracking/serialization/base.py
from abc import ABC, abstractmethod
from typing import Callable, Tuple, Dict, Any

from jobtracking.common.job import Job


class BaseSerializer(ABC):
    @abstractmethod
    def serialize_job(self, job: Job) -> Dict[str, str]: ...

    @abstractmethod
    def deserialize_job(self, data: Dict[str, str]) -> Job: ...

    @abstractmethod
    def serialize_args(
        self, target_func: Callable, *args: Any, **kwargs: Any
    ) -> Tuple[str, str]: ...

    @abstractmethod
    def deserialize_args(
        self, args_str: str, kwargs_str: str
    ) -> Tuple[Tuple, Dict]: ...
