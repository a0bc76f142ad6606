from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.schemas import ErrorResponseSerializer
from apps.auth.gate import AUTHENTICATED
from apps.common import get_logger

from .container import build_user_service
from .serializers import UserSerializer

logger = get_logger(__name__).bind(component="users", layer="view")


@extend_schema(tags=["Users"])
class MeView(APIView):
    access_policy = {"GET": AUTHENTICATED}
    service = build_user_service()
    log = logger.bind(view="MeView")

    @extend_schema(
        summary="Current user profile",
        responses={
            200: UserSerializer,
            401: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def get(self, request):
        username = request.user.username
        self.log.debug("Serving current user", username=username)
        dto = self.service.get_me(username)
        return Response(UserSerializer(dto).data)
