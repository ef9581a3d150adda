import uuid
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.validators import MinValueValidator
from django.db import models


User = get_user_model()


class Product(models.Model):
    STATUS_ACTIVE = "active"
    STATUS_INACTIVE = "inactive"
    STATUS_OUT_OF_STOCK = "out_of_stock"

    STATUS_CHOICES = [
        (STATUS_ACTIVE, "Active"),
        (STATUS_INACTIVE, "Inactive"),
        (STATUS_OUT_OF_STOCK, "Out of Stock"),
    ]

    SELLER_TYPE_CHOICES = [
        ("retailer", "Retailer"),
        ("wholesaler", "Wholesaler"),
    ]

    # Basic Information
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    description = models.TextField()
    category = models.CharField(max_length=100)
    subcategory = models.CharField(max_length=100, blank=True)

    # Seller
    seller = models.ForeignKey(User, on_delete=models.CASCADE, related_name="products")
    seller_type = models.CharField(max_length=20, choices=SELLER_TYPE_CHOICES)

    # Retailer listing that fronts a wholesaler's inventory
    is_proxy = models.BooleanField(default=False)
    proxy_source = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="proxied_products",
        limit_choices_to={"role": "wholesaler"},
    )

    # Pricing and Inventory
    price = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(Decimal("0.01"))])
    stock = models.PositiveIntegerField(default=0)
    min_order_quantity = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    availability_date = models.DateField(null=True, blank=True)

    # Product Attributes
    images = models.JSONField(default=list, blank=True, help_text="Image URLs")
    specifications = models.JSONField(default=dict, blank=True)
    tags = models.JSONField(default=list, blank=True, help_text="Product tags")

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_ACTIVE)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        app_label = "marketplace"
        indexes = [
            models.Index(fields=["status", "-created_at"], name="product_status_created_idx"),
            models.Index(fields=["status", "price"], name="product_status_price_idx"),
            models.Index(fields=["category", "status"], name="product_category_idx"),
            models.Index(fields=["seller", "status"], name="product_seller_idx"),
            models.Index(fields=["seller_type", "status"], name="product_seller_type_idx"),
        ]

    def normalize_proxy(self):
        """A proxy source only makes sense on a proxy listing, and a proxy listing needs a source."""
        if not self.is_proxy or self.proxy_source_id is None:
            self.is_proxy = False
            self.proxy_source = None

    def save(self, *args, **kwargs):
        self.normalize_proxy()
        super().save(*args, **kwargs)

    def __str__(self):
        return self.name
