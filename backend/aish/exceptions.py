from typing import Any, Optional


class AppError(Exception):
    """Base for errors that map onto an HTTP status and an `{error, details?}` body."""

    status_code = 500

    def __init__(self, message: str, details: Optional[Any] = None):
        self.message = message
        self.details = details
        super().__init__(message)

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(AppError):
    status_code = 400


class UnauthorizedError(AppError):
    status_code = 401


class NotFoundError(AppError):
    status_code = 404


class ConflictError(AppError):
    status_code = 409


class InternalError(AppError):
    status_code = 500


class DoctorNotFoundError(NotFoundError):
    """Unknown doctor at login; answered as a credential failure."""

    status_code = 401


def format_validation_errors(errors) -> str:
    """Flatten pydantic error dicts into `field: message; field: message`."""
    parts = []
    for err in errors:
        loc = [str(p) for p in err.get("loc", ()) if p != "body"]
        field = ".".join(loc)
        parts.append(f"{field}: {err.get('msg')}" if field else str(err.get("msg")))
    return "; ".join(parts)
