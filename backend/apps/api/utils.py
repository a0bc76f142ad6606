from collections.abc import Mapping
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

from django.utils import timezone
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.serializers import as_serializer_error

DEFAULT_ERROR_STATUS = status.HTTP_400_BAD_REQUEST

ERROR_STATUS_MAP = {
    "BAD_REQUEST": status.HTTP_400_BAD_REQUEST,
    "DATABASE_ERROR": status.HTTP_400_BAD_REQUEST,
    "UNAUTHORIZED": status.HTTP_401_UNAUTHORIZED,
    "FORBIDDEN": status.HTTP_403_FORBIDDEN,
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "METHOD_NOT_ALLOWED": status.HTTP_405_METHOD_NOT_ALLOWED,
    "UNSUPPORTED_MEDIA_TYPE": status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
    "VALIDATION_ERROR": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "SERVER_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
}

FieldMessage = Tuple[str, str]


def _walk_errors(prefix: str, value: Any) -> Iterator[FieldMessage]:
    if isinstance(value, Mapping):
        for key, nested in value.items():
            name = f"{prefix}.{key}" if prefix else str(key)
            yield from _walk_errors(name, nested)
    elif isinstance(value, (list, tuple)):
        for index, nested in enumerate(value):
            if isinstance(nested, (Mapping, list, tuple)):
                # empty dicts mark valid siblings in a many=True payload
                yield from _walk_errors(f"{prefix}[{index}]", nested)
            else:
                yield prefix or "detail", str(nested)
    elif value is not None:
        yield prefix or "detail", str(value)


def normalize_field_errors(details: Any) -> List[Dict[str, str]]:
    """Flatten validation details into ``[{"field", "message"}]``.

    Accepts a DRF ``ValidationError``, its ``detail`` payload or an iterable of
    ``(field, message)`` pairs. Only the first message of each field is kept.
    """

    if isinstance(details, ValidationError):
        details = as_serializer_error(details)
    if isinstance(details, Mapping):
        pairs: Iterable[FieldMessage] = _walk_errors("", details)
    elif isinstance(details, (list, tuple)) and all(
        isinstance(item, tuple) and len(item) == 2 for item in details
    ):
        pairs = ((str(field), str(message)) for field, message in details)
    else:
        pairs = _walk_errors("", details)

    seen = set()
    errors: List[Dict[str, str]] = []
    for field, message in pairs:
        if field in seen:
            continue
        seen.add(field)
        errors.append({"field": field, "message": message})
    return errors


def error_response(
    code: str,
    message: str,
    http_status: Optional[int] = None,
    *,
    path: Optional[str] = None,
    errors: Optional[Any] = None,
    headers: Optional[Mapping[str, str]] = None,
) -> Response:
    """
    Build the error body shared by every endpoint.

    The payload is ``{timestamp, status, error, path}`` plus ``errors`` when
    field level validation messages are supplied.

    Args:
        code: Machine-readable error identifier; selects the default status.
        message: Human-readable summary rendered as ``error``.
        http_status: Explicit HTTP status overriding the code mapping.
        path: Request path the error relates to.
        errors: Field errors in any shape ``normalize_field_errors`` accepts.
        headers: Extra response headers, e.g. ``WWW-Authenticate``.
    """

    if not isinstance(code, str) or not code.strip():
        raise ValueError("error_response requires a non-empty string code")
    if not isinstance(message, str) or not message.strip():
        raise ValueError("error_response requires a non-empty string message")
    if headers is not None and not isinstance(headers, Mapping):
        raise TypeError("error_response headers must be a mapping if provided")

    status_code = (
        int(http_status)
        if http_status is not None
        else ERROR_STATUS_MAP.get(code.strip().upper(), DEFAULT_ERROR_STATUS)
    )
    if not 400 <= status_code <= 599:
        raise ValueError("error_response status must be a 4xx or 5xx code")

    payload: Dict[str, Any] = {
        "timestamp": timezone.now().isoformat(),
        "status": status_code,
        "error": message.strip(),
        "path": path,
    }
    if errors is not None:
        payload["errors"] = normalize_field_errors(errors)

    headers_dict = (
        {str(key): str(value) for key, value in headers.items()} if headers else None
    )
    return Response(payload, status=status_code, headers=headers_dict)
