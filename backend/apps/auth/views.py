from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework.permissions import AllowAny
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from apps.api.schemas import ErrorResponseSerializer, ValidationErrorResponseSerializer

from .gate import PUBLIC
from .serializers import (
    PrincipalTokenObtainPairSerializer,
    TokenAccessResponseSerializer,
    TokenPairResponseSerializer,
)


@extend_schema(
    tags=["Auth"],
    summary="Login (JWT obtain pair)",
    responses={
        200: TokenPairResponseSerializer,
        401: OpenApiResponse(response=ErrorResponseSerializer),
        422: OpenApiResponse(response=ValidationErrorResponseSerializer),
    },
)
class LoginView(TokenObtainPairView):
    access_policy = {"POST": PUBLIC}
    permission_classes = [AllowAny]
    serializer_class = PrincipalTokenObtainPairSerializer


@extend_schema(
    tags=["Auth"],
    summary="Refresh JWT",
    responses={
        200: TokenAccessResponseSerializer,
        401: OpenApiResponse(response=ErrorResponseSerializer),
    },
)
class RefreshView(TokenRefreshView):
    access_policy = {"POST": PUBLIC}
    permission_classes = [AllowAny]
