from rest_framework import serializers

from marketplace.catalog.api.serializers.product_serializers import ProductSerializer


class AddCartItemRequestSerializer(serializers.Serializer):
    """Request body for adding item to cart"""

    product_id = serializers.UUIDField(help_text="Product UUID to add")
    quantity = serializers.IntegerField(min_value=1, default=1, help_text="Quantity to add (default: 1)")


class CartLineRequestSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)


class ReplaceCartRequestSerializer(serializers.Serializer):
    """Request body for replacing every cart line"""

    items = CartLineRequestSerializer(many=True, allow_empty=True, help_text="The complete new line list")


class CartItemSerializer(serializers.Serializer):
    """Single cart line; product is null once the product was deleted"""

    id = serializers.IntegerField()
    product_id = serializers.UUIDField(allow_null=True)
    product = ProductSerializer(allow_null=True)
    quantity = serializers.IntegerField()
    line_total = serializers.DecimalField(max_digits=12, decimal_places=2, allow_null=True)


class CartTotalsSerializer(serializers.Serializer):
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2)
    tax = serializers.DecimalField(max_digits=12, decimal_places=2)
    shipping = serializers.DecimalField(max_digits=12, decimal_places=2)
    total = serializers.DecimalField(max_digits=12, decimal_places=2)
    item_count = serializers.IntegerField()


class CartSerializer(serializers.Serializer):
    """Serializes the dict returned by CartService.get_cart"""

    id = serializers.IntegerField()
    items = CartItemSerializer(many=True)
    items_count = serializers.IntegerField()
    totals = CartTotalsSerializer()
    updated_at = serializers.DateTimeField()
