"""
InventoryService - Stock Management

Stock only ever changes through single conditional UPDATE statements, so
concurrent orders for the same product cannot oversell it: the database
applies ``stock = stock - n`` only on rows where ``stock >= n``.
"""

import logging

from django.db.models import F
from django.utils import timezone

from marketplace.catalog.domain.models.catalog import Product
from marketplace.infra.observability.metrics import stock_decrement_failures
from marketplace.services.base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok


logger = logging.getLogger(__name__)


class InventoryService(BaseService):
    """
    Service for mutating product stock.

    ``decrement_stock`` does not open its own transaction; callers that need
    several decrements to commit together (order placement) wrap them in one.
    """

    @BaseService.log_performance
    def check_availability(self, product: Product, quantity: int) -> ServiceResult[bool]:
        """Point-in-time check against an already loaded product."""
        if quantity <= 0:
            return service_err(ErrorCodes.INVALID_QUANTITY, "Quantity must be positive")
        return service_ok(product.stock >= quantity)

    @BaseService.log_performance
    def decrement_stock(self, product_id, quantity: int) -> ServiceResult[dict]:
        """
        Atomically take ``quantity`` units out of stock.

        Returns:
            ServiceResult with product_id and quantity, or INSUFFICIENT_STOCK
            when the conditional update matched no row.
        """
        if quantity <= 0:
            return service_err(ErrorCodes.INVALID_QUANTITY, "Quantity must be positive")

        updated = Product.objects.filter(id=product_id, stock__gte=quantity).update(
            stock=F("stock") - quantity, updated_at=timezone.now()
        )

        if updated == 0:
            stock_decrement_failures.inc()
            self.logger.warning(f"Stock decrement refused for product {product_id}: requested {quantity}")
            return service_err(
                ErrorCodes.INSUFFICIENT_STOCK,
                f"Insufficient stock for product {product_id}. Requested: {quantity}",
            )

        self.logger.info(f"Decremented stock for product {product_id} by {quantity}")
        return service_ok({"product_id": str(product_id), "quantity": quantity})

    @BaseService.log_performance
    def release_stock(self, product_id, quantity: int, reason: str = "") -> ServiceResult[dict]:
        """
        Return units to stock (order cancellation).

        A product that has since been deleted is skipped without error.
        """
        if quantity <= 0:
            return service_err(ErrorCodes.INVALID_QUANTITY, "Quantity must be positive")

        updated = Product.objects.filter(id=product_id).update(
            stock=F("stock") + quantity, updated_at=timezone.now()
        )

        if updated == 0:
            self.logger.info(f"Product {product_id} no longer exists, nothing to restock ({reason})")
        else:
            self.logger.info(f"Released {quantity} units of product {product_id} ({reason})")

        return service_ok({"product_id": str(product_id), "quantity": quantity, "restocked": bool(updated)})
