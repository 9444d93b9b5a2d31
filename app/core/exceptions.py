# app/core/exceptions.py
"""
Error taxonomy for the scheduling engine.
Raised in the services layer and translated to HTTP responses in app/main.py.
"""


class SchedulingError(Exception):
    """Base exception for all scheduling errors."""
    status_code = 500
    error_code = "scheduling_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInput(SchedulingError):
    """Malformed date, non-positive duration, bad timezone. Never retried."""
    status_code = 400
    error_code = "invalid_input"


class InvalidTimezone(InvalidInput):
    """The identifier is not a recognized IANA zone."""
    error_code = "invalid_timezone"

    def __init__(self, timezone_name: str):
        super().__init__(f"Unknown timezone: {timezone_name!r}")
        self.timezone_name = timezone_name


class NotFound(SchedulingError):
    """Unknown professional, service, template or appointment for this owner."""
    status_code = 404
    error_code = "not_found"


class ScheduleConflict(SchedulingError):
    """Capacity exceeded at booking time. Caller should re-query slots."""
    status_code = 409
    error_code = "schedule_conflict"


class StoreUnavailable(SchedulingError):
    """Underlying persistence failure. Only the read path may retry blindly."""
    status_code = 503
    error_code = "store_unavailable"
