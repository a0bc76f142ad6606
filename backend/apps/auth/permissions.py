from rest_framework.permissions import BasePermission

from .gate import Anonymous, Authenticated, Decision, authorize, required_roles_for


class AccessPolicyPermission(BasePermission):
    """Enforces a view's ``access_policy`` for the current HTTP method."""

    def has_permission(self, request, view):
        user = getattr(request, "user", None)
        if getattr(user, "is_authenticated", False) and hasattr(user, "role"):
            identity = Authenticated(principal=user, raw_token=str(request.auth or ""))
        else:
            identity = Anonymous()
        # DRF answers 401 when no authenticator succeeded and 403 otherwise
        return authorize(identity, required_roles_for(type(view), request.method)) is Decision.ALLOW
