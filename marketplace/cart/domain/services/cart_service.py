"""
CartService - Shopping Cart Operations

Validates cart lines against live product constraints (stock, minimum
order quantity, self-purchase) and keeps one cart per user.
"""

import logging
import uuid
from collections import OrderedDict
from typing import Dict, Iterable

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import F

from marketplace.cart.domain.models.cart import Cart, CartItem
from marketplace.catalog.domain.models.catalog import Product
from marketplace.infra.observability.metrics import cart_rejections_total
from marketplace.ordering.domain.models.order import Order
from marketplace.services.base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok

from .pricing_service import PricingService


User = get_user_model()
logger = logging.getLogger(__name__)


class CartService(BaseService):
    """
    Service for managing shopping cart operations.

    Responsibilities:
    - Get user's cart with totals
    - Add items (validated), merge quantities into existing lines
    - Remove items (idempotent)
    - Replace the whole line list (validated against MOQ)
    - Clear cart after order placement

    Dependencies:
    - PricingService: Calculate cart totals
    """

    def __init__(self, pricing_service: PricingService = None):
        super().__init__()
        self.pricing_service = pricing_service or PricingService()

    @BaseService.log_performance
    def get_cart(self, user: User, fulfillment_method: str = Order.FULFILLMENT_DELIVERY) -> ServiceResult[Dict]:
        """
        Get user's shopping cart with items and totals.

        The cart is created on first access. Lines whose product was deleted
        are returned with ``product=None`` and left out of the totals.

        Example:
            >>> result = cart_service.get_cart(user)
            >>> if result.ok:
            ...     total = result.value["totals"]["total"]
        """
        try:
            cart, _ = Cart.objects.get_or_create(user=user)
            cart_items = list(cart.items.select_related("product", "product__seller").order_by("added_at", "id"))

            totals_result = self.pricing_service.compute_totals(cart_items, fulfillment_method)
            if not totals_result.ok:
                return totals_result

            items_data = [
                {
                    "id": item.id,
                    "product": item.product,
                    "product_id": item.product_id,
                    "quantity": item.quantity,
                    "line_total": item.line_total,
                    "added_at": item.added_at,
                }
                for item in cart_items
            ]

            return service_ok(
                {
                    "id": cart.id,
                    "user_id": user.id,
                    "items": items_data,
                    "items_count": len(items_data),
                    "totals": totals_result.value,
                    "updated_at": cart.updated_at,
                }
            )

        except Exception as e:
            self.logger.error(f"Error getting cart for user {user.id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def add_item(self, user: User, product_id, quantity: int) -> ServiceResult[Dict]:
        """
        Add a product to the cart.

        Checks, in order: product exists, quantity within current stock,
        quantity at least the product's minimum order, buyer is not the
        seller. An existing line is incremented in the database; the merged
        quantity is only checked again at order placement.
        """
        try:
            if quantity <= 0:
                return service_err(ErrorCodes.INVALID_QUANTITY, "Quantity must be positive")

            product = self._find_product(product_id)
            if product is None:
                return self._reject("not_found", ErrorCodes.PRODUCT_NOT_FOUND, f"Product {product_id} not found")

            if quantity > product.stock:
                return self._reject(
                    "stock",
                    ErrorCodes.INSUFFICIENT_STOCK,
                    f"Insufficient stock for {product.name}. Available: {product.stock}",
                )

            if quantity < product.min_order_quantity:
                return self._reject(
                    "moq",
                    ErrorCodes.BELOW_MINIMUM_ORDER,
                    f"Minimum order quantity for {product.name} is {product.min_order_quantity}",
                )

            if product.seller_id == user.id:
                return self._reject("self_purchase", ErrorCodes.SELF_PURCHASE, "You cannot buy your own product")

            cart, _ = Cart.objects.get_or_create(user=user)
            cart_item, created = CartItem.objects.get_or_create(
                cart=cart, product=product, defaults={"quantity": quantity}
            )

            if not created:
                CartItem.objects.filter(pk=cart_item.pk).update(quantity=F("quantity") + quantity)
                self.logger.info(f"Merged {quantity}x {product.name} into cart of user {user.id}")
            else:
                self.logger.info(f"Added to cart for user {user.id}: {quantity}x {product.name}")

            cart.save(update_fields=["updated_at"])
            return self.get_cart(user)

        except Exception as e:
            self.logger.error(f"Error adding to cart for user {user.id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def remove_item(self, user: User, product_id) -> ServiceResult[Dict]:
        """Remove a product's line. Removing an absent line is a no-op."""
        try:
            deleted, _ = CartItem.objects.filter(cart__user=user, product_id=product_id).delete()
            self.logger.info(f"Removed product {product_id} from cart of user {user.id} (lines deleted: {deleted})")
            return self.get_cart(user)

        except (ValidationError, ValueError):
            # Not a valid product id, so it cannot be in the cart
            return self.get_cart(user)
        except Exception as e:
            self.logger.error(f"Error removing from cart for user {user.id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def replace_items(self, user: User, items: Iterable[Dict]) -> ServiceResult[Dict]:
        """
        Replace every line in the cart.

        Args:
            items: Dicts with ``product_id`` and ``quantity``. Repeated
                product ids are summed. Lines naming a product that no
                longer exists are dropped.

        Returns:
            ServiceResult with the new cart, or BELOW_MINIMUM_ORDER with the
            cart left untouched.
        """
        try:
            requested = self._merge_lines(items)
            products = self._resolve_products(requested.keys())

            for product_id, quantity in requested.items():
                product = products.get(product_id)
                if product is not None and quantity < product.min_order_quantity:
                    return self._reject(
                        "moq",
                        ErrorCodes.BELOW_MINIMUM_ORDER,
                        f"Minimum order quantity for {product.name} is {product.min_order_quantity}",
                    )

            with transaction.atomic():
                cart, _ = Cart.objects.select_for_update().get_or_create(user=user)
                cart.items.all().delete()
                CartItem.objects.bulk_create(
                    [
                        CartItem(cart=cart, product=products[product_id], quantity=quantity)
                        for product_id, quantity in requested.items()
                        if product_id in products
                    ]
                )
                cart.save(update_fields=["updated_at"])

            self.logger.info(f"Replaced cart of user {user.id} with {len(requested)} requested lines")
            return self.get_cart(user)

        except Exception as e:
            self.logger.error(f"Error replacing cart for user {user.id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def clear_cart(self, user: User) -> ServiceResult[bool]:
        try:
            deleted, _ = CartItem.objects.filter(cart__user=user).delete()
            self.logger.info(f"Cleared cart for user {user.id}: {deleted} lines removed")
            return service_ok(True)

        except Exception as e:
            self.logger.error(f"Error clearing cart for user {user.id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    def _find_product(self, product_id):
        try:
            return Product.objects.filter(id=product_id).first()
        except (ValidationError, ValueError):
            return None

    def _resolve_products(self, product_ids) -> Dict[str, Product]:
        """Existing products keyed by string id; malformed ids resolve to nothing."""
        valid_ids = []
        for product_id in product_ids:
            try:
                valid_ids.append(uuid.UUID(product_id))
            except ValueError:
                continue
        return {str(product.id): product for product in Product.objects.filter(id__in=valid_ids)}

    def _merge_lines(self, items: Iterable[Dict]) -> "OrderedDict":
        merged: "OrderedDict" = OrderedDict()
        for item in items:
            product_id = str(item["product_id"])
            merged[product_id] = merged.get(product_id, 0) + int(item["quantity"])
        return merged

    def _reject(self, reason: str, code: str, detail: str) -> ServiceResult:
        cart_rejections_total.labels(reason=reason).inc()
        return service_err(code, detail)
