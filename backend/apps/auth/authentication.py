from rest_framework.authentication import BaseAuthentication, get_authorization_header
from rest_framework.exceptions import AuthenticationFailed

from apps.common import get_logger

from .gate import Anonymous, Invalid, resolve_identity

logger = get_logger(__name__).bind(component="auth", layer="authentication")


class BearerPrincipalAuthentication(BaseAuthentication):
    """Exposes the gate's principal as ``request.user`` without a DB lookup."""

    www_authenticate_realm = "api"

    def authenticate(self, request):
        identity = resolve_identity(get_authorization_header(request))
        if isinstance(identity, Anonymous):
            return None
        if isinstance(identity, Invalid):
            logger.info("Rejected bearer token", reason=identity.reason)
            raise AuthenticationFailed("Invalid or expired token")
        return identity.principal, identity.raw_token

    def authenticate_header(self, request):
        return f'Bearer realm="{self.www_authenticate_realm}"'
