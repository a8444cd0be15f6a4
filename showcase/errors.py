"""Error taxonomy shared by services and routers.

Services raise these; ``showcase.main`` maps each one to a JSON response.
No handler exposes tracebacks or internal identifiers.
"""
from contextlib import contextmanager
from typing import List, Optional


class ShowcaseError(Exception):
    """Base class for every error the API reports to clients."""

    status_code = 500

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class ValidationError(ShowcaseError):
    """Bad input. Carries either field-level errors or a single message."""

    status_code = 400

    def __init__(self, message: str = "", errors: Optional[List] = None):
        super().__init__(message or "Validation failed")
        self.errors = list(errors or [])

    def to_body(self) -> dict:
        if self.errors:
            return {"errors": [e.model_dump() for e in self.errors]}
        return {"error": self.message}


class NotFoundError(ShowcaseError):
    status_code = 404

    def __init__(self, message: str = "Work not found"):
        super().__init__(message)


class MalformedIdentifierError(ShowcaseError):
    status_code = 400

    def __init__(self, message: str = "Invalid work ID"):
        super().__init__(message)


class PermissionDeniedError(ShowcaseError):
    status_code = 403

    def __init__(self, message: str = "Not allowed"):
        super().__init__(message)


class UpstreamError(ShowcaseError):
    """Storage provider or database failure. The message is passed through."""

    status_code = 500

    def __init__(self, message: str, error: str = "Upstream failure"):
        super().__init__(message)
        self.error = error


@contextmanager
def upstream_label(error: str):
    """Relabel upstream failures raised inside the block for the response."""
    try:
        yield
    except UpstreamError as exc:
        raise UpstreamError(exc.message, error=error) from exc
