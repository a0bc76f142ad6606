from drf_spectacular.utils import inline_serializer
from rest_framework import serializers


class ErrorResponseSerializer(serializers.Serializer):
    timestamp = serializers.DateTimeField()
    status = serializers.IntegerField()
    error = serializers.CharField()
    path = serializers.CharField(allow_null=True)


class FieldMessageSerializer(serializers.Serializer):
    field = serializers.CharField()
    message = serializers.CharField()


class ValidationErrorResponseSerializer(ErrorResponseSerializer):
    errors = FieldMessageSerializer(many=True)


def paginated_response(
    item_serializer_class: type[serializers.Serializer],
) -> type[serializers.Serializer]:
    """Create an inline serializer with the Spring Data page shape around ``item_serializer_class``."""
    name = getattr(item_serializer_class, "__name__", "Items")
    return inline_serializer(
        name=f"Page{name}",
        fields={
            "content": item_serializer_class(many=True),
            "pageable": serializers.DictField(),
            "sort": serializers.DictField(),
            "totalElements": serializers.IntegerField(),
            "totalPages": serializers.IntegerField(),
            "size": serializers.IntegerField(),
            "number": serializers.IntegerField(),
            "first": serializers.BooleanField(),
            "last": serializers.BooleanField(),
            "numberOfElements": serializers.IntegerField(),
            "empty": serializers.BooleanField(),
        },
    )
