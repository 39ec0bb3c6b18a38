from django.conf import settings
from rest_framework import serializers

from .commands import BATCH_ACTIONS
from .models import MAX_CART_QUANTITY

BATCH_MAX_IDS = getattr(settings, "CART_BATCH_MAX_IDS", 100)


# --- read side ---


class CartProductReadSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    mainImage = serializers.CharField(source="main_image", allow_blank=True)
    brand = serializers.CharField(allow_blank=True)
    active = serializers.BooleanField()


class CartSkuReadSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    productId = serializers.IntegerField(source="product_id")
    skuCode = serializers.CharField(source="sku_code", allow_blank=True)
    price = serializers.DecimalField(max_digits=12, decimal_places=2)
    stock = serializers.IntegerField()
    attributes = serializers.DictField()
    active = serializers.BooleanField()
    product = CartProductReadSerializer()


class CartItemReadSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    userId = serializers.IntegerField(source="user_id")
    skuId = serializers.IntegerField(source="sku_id")
    quantity = serializers.IntegerField()
    checked = serializers.BooleanField()
    createdAt = serializers.DateTimeField(source="created_at")
    updatedAt = serializers.DateTimeField(source="updated_at")
    sku = CartSkuReadSerializer(allow_null=True)
    totalPrice = serializers.DecimalField(source="total_price", max_digits=12, decimal_places=2)
    available = serializers.BooleanField()
    unavailableReason = serializers.CharField(source="unavailable_reason", allow_null=True)


class CartStatisticsSerializer(serializers.Serializer):
    totalItems = serializers.IntegerField(source="total_items")
    checkedItems = serializers.IntegerField(source="checked_items")
    totalPrice = serializers.DecimalField(source="total_price", max_digits=14, decimal_places=2)
    checkedPrice = serializers.DecimalField(source="checked_price", max_digits=14, decimal_places=2)
    availableItems = serializers.IntegerField(source="available_items")
    unavailableItems = serializers.IntegerField(source="unavailable_items")


class InvalidCartItemSerializer(serializers.Serializer):
    cartId = serializers.IntegerField(source="cart_id")
    skuId = serializers.IntegerField(source="sku_id")
    productName = serializers.CharField(source="product_name")
    reason = serializers.CharField()
    currentStock = serializers.IntegerField(source="current_stock", allow_null=True)
    requestedQuantity = serializers.IntegerField(source="requested_quantity", allow_null=True)


class CartValidationSerializer(serializers.Serializer):
    valid = serializers.BooleanField()
    invalidItems = InvalidCartItemSerializer(source="invalid_items", many=True)


class CartListSerializer(serializers.Serializer):
    items = CartItemReadSerializer(many=True)
    total = serializers.IntegerField()
    page = serializers.IntegerField()
    size = serializers.IntegerField()
    statistics = CartStatisticsSerializer()
    validation = CartValidationSerializer()


class BatchItemResultSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    success = serializers.BooleanField()
    error = serializers.CharField(allow_null=True)


class BatchResultSerializer(serializers.Serializer):
    success = serializers.IntegerField()
    failed = serializers.IntegerField()
    details = BatchItemResultSerializer(many=True)


class CartCountSerializer(serializers.Serializer):
    count = serializers.IntegerField()


class CartClearResultSerializer(serializers.Serializer):
    removed = serializers.IntegerField()


# --- write side ---


class AddToCartSerializer(serializers.Serializer):
    skuId = serializers.IntegerField(min_value=1)
    quantity = serializers.IntegerField(min_value=1, max_value=MAX_CART_QUANTITY)


class UpdateCartItemSerializer(serializers.Serializer):
    quantity = serializers.IntegerField(
        min_value=1, max_value=MAX_CART_QUANTITY, required=False
    )
    checked = serializers.BooleanField(required=False)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError(
                "At least one of quantity or checked is required"
            )
        return attrs


class BatchCartSerializer(serializers.Serializer):
    ids = serializers.ListField(
        child=serializers.IntegerField(min_value=1),
        min_length=1,
        max_length=BATCH_MAX_IDS,
    )
    action = serializers.ChoiceField(choices=BATCH_ACTIONS)


class ValidateCartSerializer(serializers.Serializer):
    cartIds = serializers.ListField(
        child=serializers.IntegerField(min_value=1), required=False
    )

