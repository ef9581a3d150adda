import uuid

from django.contrib.auth import get_user_model
from django.db import models

from marketplace.catalog.domain.models.catalog import Product


User = get_user_model()


class Order(models.Model):
    STATUS_PENDING = "pending"
    STATUS_CONFIRMED = "confirmed"
    STATUS_PROCESSING = "processing"
    STATUS_SHIPPED = "shipped"
    STATUS_DELIVERED = "delivered"
    STATUS_CANCELLED = "cancelled"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_CONFIRMED, "Confirmed"),
        (STATUS_PROCESSING, "Processing"),
        (STATUS_SHIPPED, "Shipped"),
        (STATUS_DELIVERED, "Delivered"),
        (STATUS_CANCELLED, "Cancelled"),
    ]

    # Forward chain; an order may skip ahead but never move back
    STATUS_FLOW = [STATUS_PENDING, STATUS_CONFIRMED, STATUS_PROCESSING, STATUS_SHIPPED, STATUS_DELIVERED]
    TERMINAL_STATUSES = (STATUS_DELIVERED, STATUS_CANCELLED)

    PAYMENT_PENDING = "pending"
    PAYMENT_PAID = "paid"
    PAYMENT_FAILED = "failed"
    PAYMENT_REFUNDED = "refunded"

    PAYMENT_STATUS_CHOICES = [
        (PAYMENT_PENDING, "Pending"),
        (PAYMENT_PAID, "Paid"),
        (PAYMENT_FAILED, "Failed"),
        (PAYMENT_REFUNDED, "Refunded"),
    ]

    PAYMENT_METHOD_CHOICES = [
        ("online", "Online"),
        ("offline", "Offline"),
        ("cod", "Cash on Delivery"),
    ]

    FULFILLMENT_DELIVERY = "delivery"
    FULFILLMENT_PICKUP = "pickup"

    FULFILLMENT_METHOD_CHOICES = [
        (FULFILLMENT_DELIVERY, "Delivery"),
        (FULFILLMENT_PICKUP, "Pickup"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order_number = models.CharField(max_length=40, unique=True)
    # Orders stay on record for sellers when the customer deletes the account
    customer = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, related_name="orders")
    # Set when a retailer places the order against a wholesaler on behalf of a counterpart
    retailer = models.ForeignKey(
        User, on_delete=models.SET_NULL, null=True, blank=True, related_name="placed_orders"
    )

    # Order Details
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)
    payment_status = models.CharField(max_length=20, choices=PAYMENT_STATUS_CHOICES, default=PAYMENT_PENDING)
    payment_method = models.CharField(max_length=20, choices=PAYMENT_METHOD_CHOICES, default="cod")
    fulfillment_method = models.CharField(
        max_length=20, choices=FULFILLMENT_METHOD_CHOICES, default=FULFILLMENT_DELIVERY
    )
    payment_id = models.CharField(max_length=255, blank=True)
    # Gateway intent/order reference issued for this order; checkout signatures must name it
    gateway_order_ref = models.CharField(max_length=255, blank=True, db_index=True)

    # Pricing (fixed at creation)
    subtotal = models.DecimalField(max_digits=12, decimal_places=2)
    tax = models.DecimalField(max_digits=12, decimal_places=2)
    shipping = models.DecimalField(max_digits=12, decimal_places=2)
    total = models.DecimalField(max_digits=12, decimal_places=2)

    # Shipping Information
    shipping_address = models.JSONField()
    scheduled_date = models.DateTimeField(null=True, blank=True)
    delivery_date = models.DateTimeField(null=True, blank=True)
    tracking_number = models.CharField(max_length=100, blank=True)
    notes = models.TextField(blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        app_label = "marketplace"
        indexes = [
            models.Index(fields=["customer", "-created_at"], name="order_customer_created_idx"),
            models.Index(fields=["retailer", "-created_at"], name="order_retailer_created_idx"),
            models.Index(fields=["status"], name="order_status_idx"),
        ]

    @property
    def is_terminal(self) -> bool:
        return self.status in self.TERMINAL_STATUSES

    def __str__(self):
        return f"Order {self.order_number}"


class OrderItem(models.Model):
    """Immutable snapshot of one ordered line."""

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="items")
    product = models.ForeignKey(Product, on_delete=models.SET_NULL, null=True, related_name="order_items")
    seller = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, related_name="sold_items")

    quantity = models.PositiveIntegerField()
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)
    line_total = models.DecimalField(max_digits=12, decimal_places=2)

    # Product snapshot at time of purchase
    product_name = models.CharField(max_length=200)

    class Meta:
        app_label = "marketplace"

    def __str__(self):
        return f"{self.quantity}x {self.product_name} in order {self.order.order_number}"
