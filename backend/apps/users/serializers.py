from rest_framework import serializers


class UserSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    name = serializers.CharField()
    email = serializers.EmailField()
    phone = serializers.CharField(allow_null=True)
    birthDate = serializers.CharField(source="birth_date", allow_null=True)
    roles = serializers.ListField(child=serializers.CharField())
