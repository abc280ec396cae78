"""Domain errors raised by services and rendered by the API layer."""

from typing import Any, Dict, Optional

from fastapi import status


class AcademyError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Request could not be processed"

    def __init__(self, message: Optional[str] = None, **detail: Any):
        self.message = message or self.message
        self.detail: Dict[str, Any] = detail
        super().__init__(self.message)

    def to_payload(self) -> Dict[str, Any]:
        return {"detail": self.message, **self.detail}


class ValidationFailed(AcademyError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid request"


class InvalidCoordinates(ValidationFailed):
    message = "Invalid coordinates"


class Forbidden(AcademyError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Forbidden"


class NotAssigned(Forbidden):
    message = "You are not assigned to this session"


class TooFar(Forbidden):
    message = "You are too far from the academy"

    def __init__(self, distance: float, max_distance: float):
        super().__init__(distance=distance, max_distance=max_distance)
        self.distance = distance
        self.max_distance = max_distance


class NotFound(AcademyError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"


class DuplicateForToday(AcademyError):
    status_code = status.HTTP_409_CONFLICT
    message = "You have already marked attendance for this session today"


class RateNotFoundError(AcademyError):
    """No hourly rate applies; the session write must be rejected. Not retryable."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "No hourly rate configured for this course and coach"


class EmailDeliveryError(AcademyError):
    status_code = status.HTTP_502_BAD_GATEWAY
    message = "Email delivery failed"
