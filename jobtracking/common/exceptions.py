# jobtracking/common/exceptions.py


class JobTrackingException(Exception):
    """Base exception for the jobtracking library."""

    pass


class ConfigurationError(JobTrackingException):
    """Raised when an owner kind's tracking setup is invalid."""

    pass


class ValidationError(JobTrackingException):
    """Raised when a tracking record cannot be built from its owner and job."""

    pass


class SchedulerError(JobTrackingException):
    """
    Error type for scheduling methods to raise when they cannot create a job.

    The tracking callbacks never catch or wrap it; it reaches whoever flushed
    the owner.
    """

    pass
