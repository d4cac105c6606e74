"""Failure taxonomy shared by all services.

Services raise these; the app turns them into ``{"success": false, "error": ...}``
responses with the matching HTTP status.
"""


class ServiceError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnauthorizedError(ServiceError):
    """No identity, or no local user record for it."""
    status_code = 401


class ForbiddenError(ServiceError):
    """Authenticated but lacking the ADMIN role."""
    status_code = 403


class NotFoundError(ServiceError):
    status_code = 404


class ValidationError(ServiceError):
    status_code = 422


class RateLimitError(ServiceError):
    status_code = 429


class UpstreamError(ServiceError):
    """External API or store failure."""
    status_code = 502
