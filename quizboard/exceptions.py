from typing import Any, Dict, List, Optional

from fastapi import status


class QuizError(Exception):
    """Base class for expected, caller-recoverable failures of the quiz core."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    kind: str = "error"
    default_detail: str = "Request could not be processed"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)

    def to_dict(self) -> Dict[str, Any]:
        return {"detail": self.detail, "error": self.kind}


class NotFoundError(QuizError):
    status_code = status.HTTP_404_NOT_FOUND
    kind = "not_found"
    default_detail = "Not found"


class QuizNotStartedError(QuizError):
    kind = "not_started"
    default_detail = "Quiz has not started yet"


class QuizExpiredError(QuizError):
    kind = "expired"
    default_detail = "Quiz has expired"


class AlreadyCompletedError(QuizError):
    status_code = status.HTTP_409_CONFLICT
    kind = "already_completed"
    default_detail = "You have already completed this quiz"


class ForbiddenError(QuizError):
    status_code = status.HTTP_403_FORBIDDEN
    kind = "forbidden"
    default_detail = "Admin access required"


class AttemptConflictError(QuizError):
    """A concurrent submission completed the attempt first."""

    status_code = status.HTTP_409_CONFLICT
    kind = "conflict"
    default_detail = "Attempt was already recorded by another request"


class QuizValidationError(QuizError):
    kind = "validation_error"
    default_detail = "Invalid quiz"

    def __init__(self, errors: List[Dict[str, str]], detail: Optional[str] = None):
        self.errors = errors
        super().__init__(detail)

    def to_dict(self) -> Dict[str, Any]:
        body = super().to_dict()
        body["errors"] = self.errors
        return body
