from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from apps.users.container import build_user_service


class PrincipalTokenObtainPairSerializer(TokenObtainPairSerializer):
    """Issues tokens carrying the ``username`` and ``authorities`` claims read by the gate."""

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        principal = build_user_service().load_principal(user.get_username())
        token["username"] = principal.username
        token["authorities"] = list(principal.authorities)
        return token


class TokenPairResponseSerializer(serializers.Serializer):
    access = serializers.CharField()
    refresh = serializers.CharField()


class TokenAccessResponseSerializer(serializers.Serializer):
    access = serializers.CharField()
