from rest_framework import serializers

from .dtos import CategoryDTO, ProductDTO, ProductMinDTO


class CategorySerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()

    def to_representation(self, instance):
        # Dataclass DTOs are read directly
        if isinstance(instance, CategoryDTO):
            return {"id": instance.id, "name": instance.name}
        return super().to_representation(instance)


class ProductReadSerializer(serializers.Serializer):
    # Matches ProductDTO for single-item responses
    id = serializers.IntegerField()
    name = serializers.CharField()
    description = serializers.CharField()
    price = serializers.DecimalField(max_digits=10, decimal_places=2, coerce_to_string=False)
    imgUrl = serializers.CharField(source="img_url")
    categories = CategorySerializer(many=True)

    def to_representation(self, instance):
        if isinstance(instance, ProductDTO):
            return {
                "id": instance.id,
                "name": instance.name,
                "description": instance.description,
                "price": self.fields["price"].to_representation(instance.price),
                "imgUrl": instance.img_url,
                "categories": CategorySerializer(instance.categories, many=True).data,
            }
        return super().to_representation(instance)


class ProductMinSerializer(serializers.Serializer):
    # Matches ProductMinDTO for page content
    id = serializers.IntegerField()
    name = serializers.CharField()
    price = serializers.DecimalField(max_digits=10, decimal_places=2, coerce_to_string=False)
    imgUrl = serializers.CharField(source="img_url")

    def to_representation(self, instance):
        if isinstance(instance, ProductMinDTO):
            return {
                "id": instance.id,
                "name": instance.name,
                "price": self.fields["price"].to_representation(instance.price),
                "imgUrl": instance.img_url,
            }
        return super().to_representation(instance)


class CategoryReferenceSerializer(serializers.Serializer):
    id = serializers.IntegerField(min_value=1)
    name = serializers.CharField(required=False, allow_blank=True)


class ProductWriteSerializer(serializers.Serializer):
    # Payload for insert and full replacement; a client supplied id is ignored
    name = serializers.CharField(
        min_length=3,
        max_length=80,
        error_messages={
            "min_length": "Name must be between 3 and 80 characters",
            "max_length": "Name must be between 3 and 80 characters",
        },
    )
    description = serializers.CharField(
        min_length=10,
        error_messages={"min_length": "Description must have at least 10 characters"},
    )
    price = serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        error_messages={
            "max_decimal_places": "Price must have at most 2 decimal places",
            "max_digits": "Price must have at most 10 digits",
        },
    )
    imgUrl = serializers.CharField(
        source="img_url", allow_blank=True, default=""
    )
    categories = CategoryReferenceSerializer(many=True, default=list)

    def validate_price(self, value):
        if value <= 0:
            raise serializers.ValidationError("Price must be positive")
        return value
