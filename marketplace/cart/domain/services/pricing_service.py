"""
PricingService - Price Calculations

Computes subtotal, tax, shipping and total for a set of line items.
All calculations use Decimal for precision (no floating point errors).
"""

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, Optional

from django.conf import settings

from marketplace.ordering.domain.models.order import Order
from marketplace.services.base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok


logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


def quantize_money(value: Decimal) -> Decimal:
    return Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


class PricingService(BaseService):
    """
    Service for calculating order and cart totals.

    Line items are any objects (or dicts) exposing ``product`` and
    ``quantity``. A line whose product no longer resolves (``None``) is
    skipped, never an error.

    All methods are stateless for easy testing.
    """

    def __init__(self):
        super().__init__()
        self.tax_rates = getattr(settings, "TAX_RATES", {"default": Decimal("0.10")})

    def tax_rate(self, region: Optional[str] = None) -> Decimal:
        return Decimal(str(self.tax_rates.get(region or "default", self.tax_rates["default"])))

    def shipping_cost(self, fulfillment_method: str = Order.FULFILLMENT_DELIVERY) -> Decimal:
        if fulfillment_method == Order.FULFILLMENT_PICKUP:
            return Decimal("0.00")
        return quantize_money(Decimal(str(getattr(settings, "SHIPPING_FLAT_RATE", "10.00"))))

    @BaseService.log_performance
    def compute_totals(
        self, items: Iterable, fulfillment_method: str = Order.FULFILLMENT_DELIVERY
    ) -> ServiceResult[Dict[str, Decimal]]:
        """
        Calculate totals for line items.

        Args:
            items: Line items with ``product`` and ``quantity``
            fulfillment_method: 'delivery' (flat shipping) or 'pickup' (free)

        Returns:
            ServiceResult with subtotal, tax, shipping, total and item_count

        Example:
            >>> result = pricing_service.compute_totals(cart.items.all(), "delivery")
            >>> result.value["total"]
            Decimal('340.00')
        """
        try:
            subtotal = Decimal("0")
            item_count = 0

            for item in items:
                product = item["product"] if isinstance(item, dict) else item.product
                quantity = item["quantity"] if isinstance(item, dict) else item.quantity

                if product is None:
                    continue

                subtotal += Decimal(str(product.price)) * quantity
                item_count += quantity

            subtotal = quantize_money(subtotal)
            tax = quantize_money(subtotal * self.tax_rate())
            shipping = self.shipping_cost(fulfillment_method)

            return service_ok(
                {
                    "subtotal": subtotal,
                    "tax": tax,
                    "shipping": shipping,
                    "total": subtotal + tax + shipping,
                    "item_count": item_count,
                }
            )

        except Exception as e:
            self.logger.error(f"Error computing totals: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))
