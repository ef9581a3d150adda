import uuid

from django.contrib.auth import get_user_model
from django.db import models

from marketplace.catalog.domain.models.catalog import Product
from marketplace.ordering.domain.models.order import Order


User = get_user_model()


class SupportQuery(models.Model):
    STATUS_OPEN = "open"
    STATUS_IN_PROGRESS = "in_progress"
    STATUS_RESOLVED = "resolved"
    STATUS_CLOSED = "closed"

    STATUS_CHOICES = [
        (STATUS_OPEN, "Open"),
        (STATUS_IN_PROGRESS, "In Progress"),
        (STATUS_RESOLVED, "Resolved"),
        (STATUS_CLOSED, "Closed"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name="support_queries")
    order = models.ForeignKey(
        Order, on_delete=models.SET_NULL, null=True, blank=True, related_name="support_queries"
    )
    product = models.ForeignKey(
        Product, on_delete=models.SET_NULL, null=True, blank=True, related_name="support_queries"
    )

    subject = models.CharField(max_length=200)
    message = models.TextField()
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_OPEN)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        app_label = "marketplace"
        verbose_name = "Support Query"
        verbose_name_plural = "Support Queries"
        indexes = [
            models.Index(fields=["user"], name="query_user_idx"),
            models.Index(fields=["status"], name="query_status_idx"),
            models.Index(fields=["-created_at"], name="query_created_idx"),
        ]

    def __str__(self):
        return f"{self.subject} ({self.status})"


class QueryResponse(models.Model):
    query = models.ForeignKey(SupportQuery, on_delete=models.CASCADE, related_name="responses")
    # Replies stay in the thread when their author deletes the account
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, related_name="query_responses")
    message = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]
        app_label = "marketplace"

    def __str__(self):
        author = self.user.email if self.user else "<deleted user>"
        return f"Reply by {author} on {self.query.subject}"
