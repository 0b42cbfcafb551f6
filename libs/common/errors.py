"""Domain exceptions raised by service modules.

Routers usually raise ``HTTPException`` directly; code below the router
layer raises these instead so it stays usable outside a request. The
handlers in ``libs.common.error_handler`` render them as
``{"detail": ..., "code": ...}``.
"""

from fastapi import status


class AppError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationFailed(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "VALIDATION_FAILED"


class NotAuthenticated(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "NOT_AUTHENTICATED"


class EntryLimitReached(AppError):
    status_code = status.HTTP_402_PAYMENT_REQUIRED
    code = "ENTRY_LIMIT_REACHED"


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "FORBIDDEN"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"


class PersistenceError(AppError):
    code = "PERSISTENCE_ERROR"


class ExternalServiceError(AppError):
    status_code = status.HTTP_502_BAD_GATEWAY
    code = "EXTERNAL_SERVICE_ERROR"
