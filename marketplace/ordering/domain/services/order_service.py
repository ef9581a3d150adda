"""
OrderService - Order Lifecycle Management

Handles order placement, status updates, payment recording and order reads.
Orchestrates cart, inventory and pricing services for the placement workflow.

Placement commits the order, its line snapshots and every stock decrement
together or not at all. Notifications and domain events go out only after
that commit.
"""

import logging
import secrets
import string
import time
from collections import OrderedDict
from typing import Dict, Iterable, Optional

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.db.models import Q

from infrastructure.events import get_event_bus
from infrastructure.notifications import NotificationContact, NotificationLine
from marketplace.cart.domain.services.cart_service import CartService
from marketplace.cart.domain.services.inventory_service import InventoryService
from marketplace.cart.domain.services.pricing_service import PricingService, quantize_money
from marketplace.catalog.domain.models.catalog import Product
from marketplace.domain.events.order_events import OrderPlacedEvent, OrderStatusChangedEvent, PaymentRecordedEvent
from marketplace.infra.observability.metrics import (
    notification_failures_total,
    order_status_transitions_total,
    order_value,
    orders_placed_total,
    payment_results_total,
)
from marketplace.infra.observability.tracing import tracer
from marketplace.ordering.domain.models.order import Order, OrderItem
from marketplace.services.base import BaseService, ErrorCodes, ServiceResult, paginate, service_err, service_ok


User = get_user_model()
logger = logging.getLogger(__name__)

ORDER_NUMBER_ALPHABET = string.ascii_uppercase + string.digits
ORDER_NUMBER_SUFFIX_LENGTH = 9


class _StockDecrementFailed(Exception):
    """Raised inside the placement transaction to roll it back."""


class _RestockFailed(Exception):
    """Raised inside the cancellation transaction to roll it back."""


def generate_order_number(prefix: Optional[str] = None) -> str:
    """
    Build ``<prefix>-<epoch ms>-<9 uppercase alphanumerics>``.

    Uniqueness is enforced by the database, not here.
    """
    prefix = prefix or getattr(settings, "ORDER_NUMBER_PREFIX", "ORD")
    suffix = "".join(secrets.choice(ORDER_NUMBER_ALPHABET) for _ in range(ORDER_NUMBER_SUFFIX_LENGTH))
    return f"{prefix}-{int(time.time() * 1000)}-{suffix}"


class OrderService(BaseService):
    """
    Service for managing order lifecycle.

    Status flow: pending -> confirmed -> processing -> shipped -> delivered,
    skipping forward allowed; any non-terminal status may move to cancelled.
    Delivered and cancelled are terminal.
    """

    def __init__(
        self,
        cart_service: CartService = None,
        inventory_service: InventoryService = None,
        pricing_service: PricingService = None,
        notifier=None,
        event_bus=None,
    ):
        """
        Initialize OrderService.

        Args:
            cart_service: Service for cart operations (injected)
            inventory_service: Service for stock management (injected)
            pricing_service: Service for price calculations (injected)
            notifier: OrderNotifier for email/SMS (injected)
            event_bus: Event bus for publishing domain events (injected)
        """
        super().__init__()
        self.pricing_service = pricing_service or PricingService()
        self.cart_service = cart_service or CartService(pricing_service=self.pricing_service)
        self.inventory_service = inventory_service or InventoryService()
        if notifier is None:
            from infrastructure.container import container

            notifier = container.notifier()
        self.notifier = notifier
        self.event_bus = event_bus or get_event_bus()

    # ------------------------------------------------------------------
    # Placement
    # ------------------------------------------------------------------

    @BaseService.log_performance
    def place_order(
        self,
        user: User,
        line_items: Iterable[Dict],
        shipping_address: Dict,
        payment_method: str = "cod",
        fulfillment_method: str = Order.FULFILLMENT_DELIVERY,
        scheduled_date=None,
        notes: str = "",
        retailer_id=None,
    ) -> ServiceResult[Order]:
        """
        Place an order for explicit line items.

        Args:
            user: The principal placing the order
            line_items: Dicts with ``product_id`` and ``quantity``; repeated
                products are summed
            shipping_address: Snapshot {address, city, state, zip_code, phone}
            retailer_id: When given, the principal is placing the order as a
                retailer for this counterpart, who becomes the customer. The
                principal's cart is left untouched.

        Returns:
            ServiceResult with the created Order, or one of CART_EMPTY,
            PRODUCT_NOT_FOUND, INSUFFICIENT_STOCK, USER_NOT_FOUND, CONFLICT

        Example:
            >>> result = order_service.place_order(
            ...     user=customer,
            ...     line_items=[{"product_id": product.id, "quantity": 3}],
            ...     shipping_address={"address": "12 MG Road", "city": "Pune", "state": "MH",
            ...                       "zip_code": "411001", "phone": "+919800000000"},
            ... )
            >>> result.value.total
            Decimal('340.00')
        """
        with tracer.start_as_current_span("order_place_transaction") as span:
            span.set_attribute("user.id", str(user.id))

            try:
                requested = self._merge_lines(line_items)
                if not requested:
                    return service_err(ErrorCodes.CART_EMPTY, "Cannot place an order without items")

                customer, retailer = user, None
                if retailer_id is not None:
                    try:
                        customer = User.objects.get(id=retailer_id)
                    except (User.DoesNotExist, ValidationError, ValueError):
                        return service_err(ErrorCodes.USER_NOT_FOUND, f"User {retailer_id} not found")
                    retailer = user

                # Step 1: Resolve products and check stock at this point in time
                with tracer.start_as_current_span("validate_lines"):
                    lines = []
                    for product_id, quantity in requested.items():
                        if quantity <= 0:
                            return service_err(ErrorCodes.INVALID_QUANTITY, "Quantity must be positive")

                        product = self._find_product(product_id)
                        if product is None:
                            return service_err(ErrorCodes.PRODUCT_NOT_FOUND, f"Product {product_id} not found")

                        availability = self.inventory_service.check_availability(product, quantity)
                        if not availability.ok:
                            return availability
                        if not availability.value:
                            orders_placed_total.labels(status="insufficient_stock").inc()
                            return service_err(
                                ErrorCodes.INSUFFICIENT_STOCK,
                                f"Insufficient stock for {product.name}. Available: {product.stock}",
                            )

                        lines.append({"product": product, "quantity": quantity})

                # Step 2: Totals from live prices
                with tracer.start_as_current_span("calculate_totals"):
                    totals_result = self.pricing_service.compute_totals(lines, fulfillment_method)
                    if not totals_result.ok:
                        return totals_result
                    totals = totals_result.value

                # Step 3: Order, line snapshots and stock decrements commit together
                with tracer.start_as_current_span("save_order"):
                    with transaction.atomic():
                        order = Order.objects.create(
                            order_number=generate_order_number(),
                            customer=customer,
                            retailer=retailer,
                            payment_method=payment_method,
                            fulfillment_method=fulfillment_method,
                            subtotal=totals["subtotal"],
                            tax=totals["tax"],
                            shipping=totals["shipping"],
                            total=totals["total"],
                            shipping_address=shipping_address,
                            scheduled_date=scheduled_date,
                            notes=notes or "",
                        )

                        for line in lines:
                            product = line["product"]
                            decrement = self.inventory_service.decrement_stock(product.id, line["quantity"])
                            if not decrement.ok:
                                raise _StockDecrementFailed(f"Insufficient stock for {product.name}")

                        OrderItem.objects.bulk_create(
                            [
                                OrderItem(
                                    order=order,
                                    product=line["product"],
                                    seller_id=line["product"].seller_id,
                                    quantity=line["quantity"],
                                    unit_price=line["product"].price,
                                    line_total=quantize_money(line["product"].price * line["quantity"]),
                                    product_name=line["product"].name,
                                )
                                for line in lines
                            ]
                        )

                        if retailer is None:
                            clear_result = self.cart_service.clear_cart(user)
                            if not clear_result.ok:
                                # Don't rollback order - cart clear is not critical
                                self.logger.warning(
                                    f"Failed to clear cart after order {order.order_number} "
                                    f"for user {user.id}: {clear_result.error}"
                                )

                        transaction.on_commit(lambda: self._after_order_placed(order.id))

            except _StockDecrementFailed as e:
                orders_placed_total.labels(status="insufficient_stock").inc()
                span.set_attribute("order.rolled_back", True)
                return service_err(ErrorCodes.INSUFFICIENT_STOCK, str(e))
            except IntegrityError as e:
                self.logger.warning(f"Order number collision for user {user.id}: {e}")
                orders_placed_total.labels(status="conflict").inc()
                return service_err(ErrorCodes.CONFLICT, "Order could not be created, please retry")
            except Exception as e:
                self.logger.error(f"Error placing order for user {user.id}: {e}", exc_info=True)
                span.record_exception(e)
                orders_placed_total.labels(status="failure").inc()
                return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

            # Metrics
            orders_placed_total.labels(status="success").inc()
            order_value.observe(float(order.total))

            span.set_attribute("order.id", str(order.id))
            span.set_attribute("order.total", str(order.total))
            self.logger.info(
                f"Placed order {order.order_number} for customer {customer.id}: "
                f"{len(lines)} lines, total {order.total}"
            )

            return service_ok(order)

    def _after_order_placed(self, order_id) -> None:
        """Confirmation to the customer plus the order.placed event. Never raises."""
        try:
            order = Order.objects.select_related("customer").prefetch_related("items").get(id=order_id)
        except Order.DoesNotExist:
            self.logger.error(f"Order {order_id} vanished before its confirmation could be sent")
            return

        try:
            report = self.notifier.send_order_confirmation(
                self._contact_for(order),
                order.order_number,
                [NotificationLine(item.product_name, item.quantity, item.line_total) for item in order.items.all()],
                order.total,
            )
            for kind in report.errors:
                notification_failures_total.labels(kind=kind).inc()
        except Exception as e:
            notification_failures_total.labels(kind="confirmation").inc()
            self.logger.error(f"Order confirmation for {order.order_number} failed: {e}")

        self._publish(
            OrderPlacedEvent(
                order_id=str(order.id),
                order_number=order.order_number,
                customer_id=str(order.customer_id),
                total=order.total,
            )
        )

    # ------------------------------------------------------------------
    # Status updates
    # ------------------------------------------------------------------

    def is_owner_of_any_line_item(self, user: User, order: Order) -> bool:
        """True when ``user`` sold at least one line of ``order``."""
        return order.items.filter(seller_id=user.id).exists()

    @BaseService.log_performance
    def update_order_status(
        self,
        order_id,
        user: User,
        status: Optional[str] = None,
        tracking_number: Optional[str] = None,
        delivery_date=None,
    ) -> ServiceResult[Order]:
        """
        Update status and fulfillment details (sellers of the order only).

        Delivering an order whose payment is still pending marks it paid.
        Cancelling returns every line's quantity to stock; the status change
        and the restock commit together or not at all. The customer is
        notified only on the transition into delivered.
        """
        try:
            with transaction.atomic():
                try:
                    order = Order.objects.select_for_update().select_related("customer").get(id=order_id)
                except (Order.DoesNotExist, ValidationError, ValueError):
                    return service_err(ErrorCodes.ORDER_NOT_FOUND, f"Order {order_id} not found")

                if not self.is_owner_of_any_line_item(user, order):
                    self.logger.warning(f"Update status: Permission denied for user {user.id} on order {order_id}")
                    return service_err(ErrorCodes.PERMISSION_DENIED, "You don't have permission to update this order")

                if order.is_terminal:
                    return service_err(
                        ErrorCodes.INVALID_ORDER_STATE, f"Order in status '{order.status}' can no longer be changed"
                    )

                previous_status = order.status
                if status is not None and status != previous_status:
                    transition = self._check_transition(previous_status, status)
                    if not transition.ok:
                        return transition
                    order.status = status

                if tracking_number is not None:
                    order.tracking_number = tracking_number
                if delivery_date is not None:
                    order.delivery_date = delivery_date

                transitioned = order.status != previous_status
                if order.status == Order.STATUS_DELIVERED and order.payment_status == Order.PAYMENT_PENDING:
                    order.payment_status = Order.PAYMENT_PAID

                if transitioned and order.status == Order.STATUS_CANCELLED:
                    self._restock(order)

                order.save()

                if transitioned:
                    event = OrderStatusChangedEvent(
                        order_id=str(order.id),
                        previous_status=previous_status,
                        status=order.status,
                        changed_by=str(user.id),
                    )
                    transaction.on_commit(lambda: self._publish(event))

                    if order.status == Order.STATUS_DELIVERED:
                        transaction.on_commit(lambda: self._send_delivery_notification(order))

        except Exception as e:
            # The atomic block has already rolled back by the time we get here
            self.logger.error(f"Error updating order {order_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

        if transitioned:
            order_status_transitions_total.labels(to_status=order.status).inc()
        self.logger.info(f"Updated order {order.order_number}: {previous_status} -> {order.status} by {user.id}")
        return service_ok(order)

    def _check_transition(self, current: str, target: str) -> ServiceResult[bool]:
        if target not in dict(Order.STATUS_CHOICES):
            return service_err(ErrorCodes.VALIDATION_ERROR, f"Unknown order status '{target}'")

        if target == Order.STATUS_CANCELLED:
            return service_ok(True)

        if Order.STATUS_FLOW.index(target) < Order.STATUS_FLOW.index(current):
            return service_err(
                ErrorCodes.INVALID_ORDER_STATE, f"Cannot move order from '{current}' back to '{target}'"
            )
        return service_ok(True)

    def _restock(self, order: Order) -> None:
        for item in order.items.exclude(product_id__isnull=True):
            release = self.inventory_service.release_stock(
                item.product_id, item.quantity, reason=f"order_cancelled_{order.order_number}"
            )
            if not release.ok:
                raise _RestockFailed(f"Failed to restock product {item.product_id} for {order.order_number}")

    def _send_delivery_notification(self, order: Order) -> None:
        if order.customer_id is None:
            self.logger.info(f"Order {order.order_number} has no customer account left to notify")
            return
        try:
            report = self.notifier.send_delivery_notification(
                self._contact_for(order), order.order_number, order.tracking_number or None
            )
            for kind in report.errors:
                notification_failures_total.labels(kind=kind).inc()
        except Exception as e:
            notification_failures_total.labels(kind="delivery").inc()
            self.logger.error(f"Delivery notification for {order.order_number} failed: {e}")

    # ------------------------------------------------------------------
    # Payments
    # ------------------------------------------------------------------

    @BaseService.log_performance
    def mark_payment_result(self, order_id, outcome: str, external_payment_id: str = "") -> ServiceResult[Order]:
        """
        Record a payment outcome ('paid' or 'failed') against an order.

        Paid advances a pending order to confirmed. Repeating an outcome
        already recorded is a no-op, so redelivered webhooks are harmless.
        A failure reported after the order was paid is refused.
        """
        if outcome not in (Order.PAYMENT_PAID, Order.PAYMENT_FAILED):
            return service_err(ErrorCodes.VALIDATION_ERROR, f"Unknown payment outcome '{outcome}'")

        try:
            with transaction.atomic():
                try:
                    order = Order.objects.select_for_update().get(id=order_id)
                except (Order.DoesNotExist, ValidationError, ValueError):
                    return service_err(ErrorCodes.ORDER_NOT_FOUND, f"Order {order_id} not found")

                if order.payment_status == outcome and (
                    not external_payment_id or order.payment_id == external_payment_id
                ):
                    self.logger.info(f"Order {order.order_number} payment already '{outcome}', skipping")
                    return service_ok(order)

                if order.payment_status == Order.PAYMENT_PAID and outcome == Order.PAYMENT_FAILED:
                    return service_err(ErrorCodes.ORDER_ALREADY_PAID, f"Order {order.order_number} is already paid")

                order.payment_status = outcome
                if external_payment_id:
                    order.payment_id = external_payment_id
                if outcome == Order.PAYMENT_PAID and order.status == Order.STATUS_PENDING:
                    order.status = Order.STATUS_CONFIRMED

                order.save(update_fields=["payment_status", "payment_id", "status", "updated_at"])

                event = PaymentRecordedEvent(order_id=str(order.id), outcome=outcome, payment_id=order.payment_id)
                transaction.on_commit(lambda: self._publish(event))

        except Exception as e:
            self.logger.error(f"Error recording payment for order {order_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

        payment_results_total.labels(outcome=outcome).inc()
        self.logger.info(f"Recorded payment '{outcome}' for order {order.order_number}")
        return service_ok(order)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @BaseService.log_performance
    def get_order(self, order_id, user: User) -> ServiceResult[Order]:
        """
        Get order details.

        Visible to the customer, the retailer who placed it, and the seller
        of any of its lines.
        """
        try:
            order = (
                Order.objects.select_related("customer", "retailer")
                .prefetch_related("items__product")
                .get(id=order_id)
            )

            if user.id not in (order.customer_id, order.retailer_id) and not self.is_owner_of_any_line_item(
                user, order
            ):
                return service_err(ErrorCodes.PERMISSION_DENIED, "You don't have permission to view this order")

            return service_ok(order)

        except (Order.DoesNotExist, ValidationError, ValueError):
            return service_err(ErrorCodes.ORDER_NOT_FOUND, f"Order {order_id} not found")
        except Exception as e:
            self.logger.error(f"Error getting order {order_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def list_orders(
        self, user: User, status: Optional[str] = None, page: int = 1, page_size: Optional[int] = None
    ) -> ServiceResult[Dict]:
        """
        List the orders visible to ``user``, newest first.

        - customer: orders where they are the customer
        - retailer: orders where they are the customer or the placing
          retailer, plus orders containing their products
        - wholesaler: orders they placed as retailer counterpart, plus
          orders containing their products

        Example:
            >>> result = order_service.list_orders(user, status="pending")
            >>> if result.ok:
            ...     orders = result.value["results"]
        """
        try:
            if status and status not in dict(Order.STATUS_CHOICES):
                return service_err(ErrorCodes.VALIDATION_ERROR, f"Unknown order status '{status}'")

            sold = Q(id__in=OrderItem.objects.filter(seller_id=user.id).values("order_id"))
            if user.role == User.ROLE_RETAILER:
                visible = Q(customer_id=user.id) | Q(retailer_id=user.id) | sold
            elif user.role == User.ROLE_WHOLESALER:
                visible = Q(retailer_id=user.id) | sold
            else:
                visible = Q(customer_id=user.id)

            queryset = (
                Order.objects.filter(visible)
                .select_related("customer", "retailer")
                .prefetch_related("items__product")
            )
            if status:
                queryset = queryset.filter(status=status)

            # Order by newest first
            queryset = queryset.order_by("-created_at", "-id")

            page_size = page_size or getattr(settings, "MARKETPLACE_DEFAULT_PAGE_SIZE", 20)
            result_data = paginate(queryset, page, page_size)

            self.logger.info(f"Listed orders for user {user.id}: {result_data['count']} total, page {page}")
            return service_ok(result_data)

        except Exception as e:
            self.logger.error(f"Error listing orders for user {user.id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _merge_lines(self, line_items: Iterable[Dict]) -> "OrderedDict":
        merged: "OrderedDict" = OrderedDict()
        for item in line_items or []:
            product_id = str(item["product_id"])
            merged[product_id] = merged.get(product_id, 0) + int(item["quantity"])
        return merged

    def _find_product(self, product_id) -> Optional[Product]:
        try:
            return Product.objects.select_related("seller").filter(id=product_id).first()
        except (ValidationError, ValueError):
            return None

    def _contact_for(self, order: Order) -> NotificationContact:
        customer = order.customer
        return NotificationContact(name=customer.display_name, email=customer.email, phone=customer.phone)

    def _publish(self, event) -> None:
        try:
            self.event_bus.publish(event.event_type, event.payload)
            self.logger.info(f"Published event: {event.to_dict()}")
        except Exception as e:
            self.logger.error(f"Failed to publish {event.event_type}: {e}")
