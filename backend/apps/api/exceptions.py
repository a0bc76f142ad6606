from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import status
from rest_framework.exceptions import (
    AuthenticationFailed,
    MethodNotAllowed,
    NotAuthenticated,
    NotFound,
    ParseError,
    PermissionDenied,
    UnsupportedMediaType,
    ValidationError,
)
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from apps.api.utils import error_response
from apps.common import get_logger

logger = get_logger(__name__).bind(component="api", layer="exception")

STATUS_CODE_DEFAULTS: Dict[int, Tuple[str, str]] = {
    status.HTTP_400_BAD_REQUEST: ("BAD_REQUEST", "Malformed request"),
    status.HTTP_401_UNAUTHORIZED: ("UNAUTHORIZED", "Authentication required"),
    status.HTTP_403_FORBIDDEN: ("FORBIDDEN", "Access denied"),
    status.HTTP_404_NOT_FOUND: ("NOT_FOUND", "Resource not found"),
    status.HTTP_405_METHOD_NOT_ALLOWED: ("METHOD_NOT_ALLOWED", "Method not allowed"),
    status.HTTP_415_UNSUPPORTED_MEDIA_TYPE: (
        "UNSUPPORTED_MEDIA_TYPE",
        "Unsupported media type",
    ),
    status.HTTP_422_UNPROCESSABLE_ENTITY: ("VALIDATION_ERROR", "Invalid data"),
    status.HTTP_500_INTERNAL_SERVER_ERROR: ("SERVER_ERROR", "Something went wrong"),
}

BEARER_CHALLENGE = {"WWW-Authenticate": 'Bearer realm="api"'}


class ApplicationError(Exception):
    """
    Domain-level error raised from services, the authorization gate or views.

    Args:
        code: Machine readable error code; selects the HTTP status.
        message: Human readable summary rendered as ``error``.
        status_code: Optional explicit HTTP status overriding the code mapping.
        details: Optional structured context kept for logging.
        headers: Optional response headers.
    """

    default_code = "SERVER_ERROR"
    default_message = "Something went wrong"
    default_status: Optional[int] = None

    def __init__(
        self,
        code: Optional[str] = None,
        message: Optional[str] = None,
        *,
        status_code: Optional[int] = None,
        details: Optional[Any] = None,
        headers: Optional[Mapping[str, Any]] = None,
    ):
        self.code = code or self.default_code
        self.message = message or self.default_message
        super().__init__(self.message)
        self.status_code = status_code or self.default_status
        self.details = details
        self.headers = headers

    def field_errors(self) -> Optional[Any]:
        return None

    def to_response(self, path: Optional[str] = None) -> Response:
        return error_response(
            self.code,
            self.message,
            self.status_code,
            path=path,
            errors=self.field_errors(),
            headers=self.headers,
        )


class Unauthenticated(ApplicationError):
    default_code = "UNAUTHORIZED"
    default_message = "Authentication required"
    default_status = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: Optional[str] = None, **kwargs: Any):
        kwargs.setdefault("headers", BEARER_CHALLENGE)
        super().__init__(None, message, **kwargs)


class AuthorizationDenied(ApplicationError):
    default_code = "FORBIDDEN"
    default_message = "Access denied"
    default_status = status.HTTP_403_FORBIDDEN

    def __init__(self, message: Optional[str] = None, **kwargs: Any):
        super().__init__(None, message, **kwargs)


class ResourceNotFound(ApplicationError):
    default_code = "NOT_FOUND"
    default_message = "Resource not found"
    default_status = status.HTTP_404_NOT_FOUND

    def __init__(self, message: Optional[str] = None, **kwargs: Any):
        super().__init__(None, message, **kwargs)


class ValidationFailure(ApplicationError):
    """Carries ``(field, message)`` pairs rendered as the ``errors`` list."""

    default_code = "VALIDATION_ERROR"
    default_message = "Invalid data"
    default_status = status.HTTP_422_UNPROCESSABLE_ENTITY

    def __init__(
        self,
        fields: Iterable[Tuple[str, str]],
        message: Optional[str] = None,
        **kwargs: Any,
    ):
        super().__init__(None, message, **kwargs)
        self.fields: List[Tuple[str, str]] = list(fields)

    def field_errors(self) -> List[Tuple[str, str]]:
        return self.fields


class DatabaseError(ApplicationError):
    default_code = "DATABASE_ERROR"
    default_message = "Referential integrity violation"
    default_status = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: Optional[str] = None, **kwargs: Any):
        super().__init__(None, message, **kwargs)


class InternalFault(ApplicationError):
    default_code = "SERVER_ERROR"
    default_message = "Something went wrong"
    default_status = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: Optional[str] = None, **kwargs: Any):
        super().__init__(None, message, **kwargs)


def global_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    """
    Central exception handler for DRF views returning the shared error schema.
    """

    bound_logger = _bind_logger(context)
    path = _request_path(context)

    if isinstance(exc, InternalFault):
        bound_logger.exception("Internal fault raised by application code")
        return exc.to_response(path)

    if isinstance(exc, ApplicationError):
        bound_logger.info(
            "Handled application error",
            code=exc.code,
            status=exc.status_code,
            details=exc.details,
        )
        return exc.to_response(path)

    if isinstance(exc, DjangoValidationError):
        exc = ValidationError(_normalize_django_validation_error(exc))

    response = drf_exception_handler(exc, context)
    if response is not None:
        return _from_drf_exception(exc, response, bound_logger, path)

    bound_logger.exception("Unhandled exception bubbled to global handler")
    return InternalFault().to_response(path)


def _bind_logger(context: Dict[str, Any]):
    log = logger
    view = context.get("view")
    request = context.get("request")
    if view is not None:
        log = log.bind(view=type(view).__name__)
    if request is not None:
        log = log.bind(
            method=getattr(request, "method", None),
            path=getattr(request, "path", None),
        )
    return log


def _request_path(context: Dict[str, Any]) -> Optional[str]:
    request = context.get("request")
    return getattr(request, "path", None) if request is not None else None


def _from_drf_exception(
    exc: Exception, response: Response, bound_logger, path: Optional[str]
) -> Response:
    status_code = response.status_code
    code, message, errors, status_code = _normalize_payload(
        exc, response.data, status_code
    )
    headers = {
        key: value
        for key, value in (response.headers.items() if response.headers else ())
        if key.lower() in ("www-authenticate", "allow", "retry-after")
    }

    if status_code >= 500:
        bound_logger.error("Converted server error", code=code, status=status_code)
    else:
        bound_logger.info("Converted API exception", code=code, status=status_code)

    return error_response(
        code,
        message,
        status_code,
        path=path,
        errors=errors,
        headers=headers or None,
    )


def _normalize_django_validation_error(
    exc: DjangoValidationError,
) -> Union[Dict[str, Any], List[str]]:
    if hasattr(exc, "message_dict"):
        return exc.message_dict
    return list(exc.messages)


def _normalize_payload(
    exc: Exception,
    payload: Any,
    status_code: int,
) -> Tuple[str, str, Optional[Any], int]:
    if isinstance(exc, ValidationError):
        # Field validation failures are reported as 422 Unprocessable Entity
        return (
            "VALIDATION_ERROR",
            "Invalid data",
            payload,
            status.HTTP_422_UNPROCESSABLE_ENTITY,
        )
    if isinstance(exc, ParseError):
        return ("BAD_REQUEST", "Malformed request", None, status_code)
    if isinstance(exc, (NotAuthenticated, AuthenticationFailed)):
        message = (
            "Authentication failed"
            if isinstance(exc, AuthenticationFailed)
            else "Authentication required"
        )
        return ("UNAUTHORIZED", message, None, status_code)
    if isinstance(exc, PermissionDenied):
        return ("FORBIDDEN", "Access denied", None, status_code)
    if isinstance(exc, NotFound):
        return ("NOT_FOUND", "Resource not found", None, status_code)
    if isinstance(exc, MethodNotAllowed):
        return ("METHOD_NOT_ALLOWED", "Method not allowed", None, status_code)
    if isinstance(exc, UnsupportedMediaType):
        return ("UNSUPPORTED_MEDIA_TYPE", "Unsupported media type", None, status_code)

    code, message = STATUS_CODE_DEFAULTS.get(
        status_code,
        (
            "SERVER_ERROR" if status_code >= 500 else "BAD_REQUEST",
            "Something went wrong" if status_code >= 500 else "Request failed",
        ),
    )
    return code, message, None, status_code


__all__ = [
    "ApplicationError",
    "AuthorizationDenied",
    "DatabaseError",
    "InternalFault",
    "ResourceNotFound",
    "Unauthenticated",
    "ValidationFailure",
    "global_exception_handler",
]
