import uuid

from django.contrib.auth import get_user_model
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from marketplace.catalog.domain.models.catalog import Product
from marketplace.ordering.domain.models.order import Order


User = get_user_model()


class Feedback(models.Model):
    TYPE_PRODUCT = "product"
    TYPE_SERVICE = "service"
    TYPE_GENERAL = "general"

    TYPE_CHOICES = [
        (TYPE_PRODUCT, "Product"),
        (TYPE_SERVICE, "Service"),
        (TYPE_GENERAL, "General"),
    ]

    STATUS_PENDING = "pending"
    STATUS_APPROVED = "approved"
    STATUS_REJECTED = "rejected"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_APPROVED, "Approved"),
        (STATUS_REJECTED, "Rejected"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name="feedback")
    product = models.ForeignKey(Product, on_delete=models.SET_NULL, null=True, blank=True, related_name="feedback")
    order = models.ForeignKey(Order, on_delete=models.SET_NULL, null=True, blank=True, related_name="feedback")

    type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    rating = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(5)])
    comment = models.TextField()
    images = models.JSONField(default=list, blank=True, help_text="Image URLs")

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)
    # Reply from the seller of the product
    response = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        app_label = "marketplace"
        verbose_name_plural = "Feedback"
        indexes = [
            models.Index(fields=["product"], name="feedback_product_idx"),
            models.Index(fields=["user"], name="feedback_user_idx"),
            models.Index(fields=["status"], name="feedback_status_idx"),
        ]

    def __str__(self):
        return f"{self.get_type_display()} feedback ({self.rating}/5) by {self.user.email}"
