from typing import Any, Optional

from django.http import HttpRequest
from rest_framework.response import Response

from apps.api.exceptions import AuthorizationDenied, Unauthenticated
from apps.auth.gate import (
    Decision,
    Invalid,
    authorize,
    required_roles_for,
    resolve_identity,
)
from apps.common import get_logger

logger = get_logger(__name__).bind(component="api", layer="validation")


def validate_request_context(
    request: HttpRequest, view_class, view_kwargs
) -> Optional[Response]:
    """
    Runs the authorization gate for a routed API view before it dispatches.

    Returns an error Response when the caller may not proceed; otherwise None.
    Authorization is decided before the view looks anything up, so a missing
    resource behind a forbidden route still answers 403.
    """
    view_name = getattr(view_class, "__name__", "")
    method = getattr(request, "method", "") or ""
    required = required_roles_for(view_class, method)
    identity = resolve_identity(request.META.get("HTTP_AUTHORIZATION"))

    logger.debug(
        "Running request context validation",
        view=view_name,
        method=method,
        identity=type(identity).__name__,
    )

    decision = authorize(identity, required)
    if decision is Decision.ALLOW:
        return None

    if decision is Decision.UNAUTHENTICATED:
        reason = identity.reason if isinstance(identity, Invalid) else "missing token"
        logger.warning(
            "Request rejected: unauthenticated", view=view_name, method=method, reason=reason
        )
        message = (
            "Invalid or expired token" if isinstance(identity, Invalid) else None
        )
        return Unauthenticated(message).to_response(request.path)

    logger.warning(
        "Request rejected: insufficient role",
        view=view_name,
        method=method,
        username=identity.principal.username,
        role=identity.principal.role.value,
        kwargs=dict(view_kwargs or {}),
    )
    return AuthorizationDenied().to_response(request.path)


def view_class_of(view_func) -> Any:
    return getattr(view_func, "view_class", None) or getattr(view_func, "cls", None)
