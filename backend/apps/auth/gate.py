"""Bearer token authorization gate.

Both entry points are pure: ``resolve_identity`` depends only on the header,
the token backend holding the signing secret and an optional clock, and
``authorize`` only on the resolved identity and the route policy. Neither
touches the database, so they are safe to call from any request thread.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import FrozenSet, Mapping, Optional, Union

from rest_framework_simplejwt.exceptions import TokenBackendError

from apps.common import get_logger

from .dtos import Principal, Role

logger = get_logger(__name__).bind(component="auth", layer="gate")

AUTH_SCHEME = "bearer"
ACCESS_TOKEN_TYPE = "access"

RequiredRoles = Optional[FrozenSet[Role]]

# Route policies: PUBLIC allows everyone, otherwise the caller's role must be listed
PUBLIC: RequiredRoles = None
AUTHENTICATED: RequiredRoles = frozenset({Role.CLIENT, Role.ADMIN})
ADMIN_ONLY: RequiredRoles = frozenset({Role.ADMIN})


@dataclass(frozen=True)
class Anonymous:
    pass


@dataclass(frozen=True)
class Authenticated:
    principal: Principal
    raw_token: str


@dataclass(frozen=True)
class Invalid:
    reason: str


Identity = Union[Anonymous, Authenticated, Invalid]


class Decision(str, Enum):
    ALLOW = "ALLOW"
    UNAUTHENTICATED = "UNAUTHENTICATED"
    FORBIDDEN = "FORBIDDEN"


def _default_backend():
    from rest_framework_simplejwt.state import token_backend

    return token_backend


def resolve_identity(
    header: Union[str, bytes, None],
    *,
    backend=None,
    now: Optional[datetime] = None,
) -> Identity:
    """Turn an ``Authorization`` header value into an identity.

    ``backend`` is a simplejwt ``TokenBackend``; the configured one is used when
    omitted. ``now`` adds an expiry check against an explicit clock on top of
    the backend's own validation.
    """

    if isinstance(header, bytes):
        # HTTP header bytes are ISO-8859-1
        header = header.decode("latin-1")
    if not header or not header.strip():
        return Anonymous()

    parts = header.split()
    if len(parts) != 2 or parts[0].lower() != AUTH_SCHEME:
        return Invalid("authorization header is not a bearer token")
    raw_token = parts[1]

    try:
        payload = (backend or _default_backend()).decode(raw_token, verify=True)
    except TokenBackendError as exc:
        return Invalid(str(exc))

    if payload.get("token_type") != ACCESS_TOKEN_TYPE:
        return Invalid("token is not an access token")
    username = payload.get("username")
    if not username:
        return Invalid("token carries no username claim")
    if now is not None:
        exp = payload.get("exp")
        if exp is None or exp <= now.timestamp():
            return Invalid("token is expired")

    authorities = tuple(payload.get("authorities") or ())
    principal = Principal(
        username=username,
        role=Role.from_authorities(authorities),
        authorities=authorities,
    )
    return Authenticated(principal=principal, raw_token=raw_token)


def authorize(identity: Identity, required: RequiredRoles) -> Decision:
    if isinstance(identity, Invalid):
        return Decision.UNAUTHENTICATED
    if required is PUBLIC:
        return Decision.ALLOW
    if isinstance(identity, Anonymous):
        return Decision.UNAUTHENTICATED
    if identity.principal.role in required:
        return Decision.ALLOW
    return Decision.FORBIDDEN


def required_roles_for(view_class, method: str) -> RequiredRoles:
    """Look up the static ``access_policy`` a view declares for ``method``.

    HEAD follows GET. Methods the view does not list are left PUBLIC so the
    router can answer 405 for them.
    """

    policy: Mapping[str, RequiredRoles] = getattr(view_class, "access_policy", None) or {}
    method = (method or "").upper()
    if method == "HEAD":
        method = "GET"
    return policy.get(method, PUBLIC)
