"""
Error taxonomy of the page services.

Validation errors carry the name of the failing field so the API layer
can build a user-facing message. ``InternalError`` is kept distinct so
callers can tell "your input was invalid" from "the system failed".
"""
from typing import Any, Dict, Optional


class LandingHubError(Exception):
    status_code = 400

    def __init__(self, message: str, *, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "error": type(self).__name__,
            "message": self.message,
        }
        if self.field:
            data["field"] = self.field
        return data


class PageValidationError(LandingHubError):
    """Base class for generation input errors."""


class UnknownTemplateError(PageValidationError):
    status_code = 404


class OwnerNotFoundError(PageValidationError):
    pass


class MissingPartnerError(PageValidationError):
    pass


class MissingPropertyDataError(PageValidationError):
    pass


class DuplicatePageError(PageValidationError):
    status_code = 409


class NotFoundError(LandingHubError):
    status_code = 404


class ForbiddenError(LandingHubError):
    status_code = 403


class IllegalTransitionError(LandingHubError):
    status_code = 409


class InvariantViolation(LandingHubError):
    pass


class InternalError(LandingHubError):
    status_code = 500
