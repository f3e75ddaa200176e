# jobtracking/config.py
from typing import Optional

from jobtracking.common.exceptions import ConfigurationError
from jobtracking.registry.base import JobRegistry

class _GlobalConfig:
    def __init__(self):
        self.registry: Optional[JobRegistry] = None

_GLOBAL_CONFIG = _GlobalConfig()

def configure(registry: Optional[JobRegistry]) -> None:
    _GLOBAL_CONFIG.registry = registry

def get_job_registry() -> JobRegistry:
    if _GLOBAL_CONFIG.registry is None:
        raise ConfigurationError(
            "jobtracking has not been configured. Call jobtracking.configure() first."
        )
    return _GLOBAL_CONFIG.registry
