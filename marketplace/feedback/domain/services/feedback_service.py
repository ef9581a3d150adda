"""
FeedbackService - Ratings and Comments

Customers rate a product, the service they got on an order, or the
marketplace in general. Entries start pending; the seller of the product
may reply, and staff moderate entries to approved or rejected.
"""

import logging
from typing import Any, Dict, Optional

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError

from marketplace.catalog.domain.models.catalog import Product
from marketplace.feedback.domain.models.feedback import Feedback
from marketplace.infra.observability.metrics import feedback_submitted_total
from marketplace.ordering.domain.models.order import Order
from marketplace.services.base import BaseService, ErrorCodes, ServiceResult, paginate, service_err, service_ok


User = get_user_model()
logger = logging.getLogger(__name__)


class FeedbackService(BaseService):
    """
    Service for managing feedback.

    Responsibilities:
    - Submit feedback (optionally about a product or one of the user's orders)
    - List feedback filtered by product, order or status
    - Seller replies and staff moderation
    """

    DEFAULT_PAGE_SIZE = 20

    @BaseService.log_performance
    def submit_feedback(self, user: User, data: Dict[str, Any]) -> ServiceResult[Feedback]:
        """
        Create a pending feedback entry.

        Args:
            user: Author
            data: type, rating (1-5), comment, and optional product_id,
                order_id and images

        Returns:
            ServiceResult with the created Feedback
        """
        feedback_type = data.get("type")
        if feedback_type not in dict(Feedback.TYPE_CHOICES):
            return service_err(ErrorCodes.VALIDATION_ERROR, f"Unknown feedback type '{feedback_type}'")

        rating = data.get("rating")
        if not isinstance(rating, int) or not 1 <= rating <= 5:
            return service_err(ErrorCodes.VALIDATION_ERROR, "Rating must be between 1 and 5")

        comment = (data.get("comment") or "").strip()
        if not comment:
            return service_err(ErrorCodes.VALIDATION_ERROR, "Comment is required")

        product = None
        if data.get("product_id"):
            product = self._get_or_none(Product, data["product_id"])
            if product is None:
                return service_err(ErrorCodes.PRODUCT_NOT_FOUND, f"Product {data['product_id']} not found")

        order = None
        if data.get("order_id"):
            order = self._get_or_none(Order, data["order_id"])
            if order is None:
                return service_err(ErrorCodes.ORDER_NOT_FOUND, f"Order {data['order_id']} not found")
            if user.id not in (order.customer_id, order.retailer_id):
                return service_err(ErrorCodes.PERMISSION_DENIED, "You can only leave feedback on your own orders")

        try:
            feedback = Feedback.objects.create(
                user=user,
                product=product,
                order=order,
                type=feedback_type,
                rating=rating,
                comment=comment,
                images=list(data.get("images") or []),
            )
        except Exception as e:
            self.logger.error(f"Error creating feedback for user {user.id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

        feedback_submitted_total.labels(type=feedback_type).inc()
        self.logger.info(f"Created {feedback_type} feedback {feedback.id} by user {user.id}")
        return service_ok(feedback)

    def list_feedback(
        self,
        filters: Optional[Dict[str, Any]] = None,
        page: int = 1,
        page_size: Optional[int] = None,
    ) -> ServiceResult[Dict[str, Any]]:
        """
        List feedback, newest first.

        Args:
            filters: Optional product_id, order_id and status
            page: Page number (1-indexed)
            page_size: Items per page

        Returns:
            ServiceResult with the paginated entries
        """
        filters = filters or {}
        try:
            queryset = Feedback.objects.select_related("user", "product", "order")
            if filters.get("product_id"):
                queryset = queryset.filter(product_id=filters["product_id"])
            if filters.get("order_id"):
                queryset = queryset.filter(order_id=filters["order_id"])
            if filters.get("status"):
                queryset = queryset.filter(status=filters["status"])

            return service_ok(paginate(queryset.order_by("-created_at"), page, page_size or self.DEFAULT_PAGE_SIZE))

        except (ValidationError, ValueError) as e:
            return service_err(ErrorCodes.VALIDATION_ERROR, str(e))
        except Exception as e:
            self.logger.error(f"Error listing feedback: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    def get_feedback(self, feedback_id) -> ServiceResult[Feedback]:
        feedback = self._get_or_none(Feedback.objects.select_related("user", "product", "order"), feedback_id)
        if feedback is None:
            return service_err(ErrorCodes.FEEDBACK_NOT_FOUND, f"Feedback {feedback_id} not found")
        return service_ok(feedback)

    @BaseService.log_performance
    def respond_to_feedback(
        self,
        feedback_id,
        user: User,
        response: Optional[str] = None,
        status: Optional[str] = None,
    ) -> ServiceResult[Feedback]:
        """
        Reply to or moderate a feedback entry.

        Only the seller of the product the feedback is about may reply.
        Changing the moderation status is reserved for staff, who may also
        reply to any entry.
        """
        result = self.get_feedback(feedback_id)
        if not result.ok:
            return result
        feedback = result.value

        if response is None and status is None:
            return service_err(ErrorCodes.VALIDATION_ERROR, "Nothing to update")

        is_product_seller = feedback.product is not None and feedback.product.seller_id == user.id
        if response is not None and not (is_product_seller or user.is_staff):
            return service_err(ErrorCodes.PERMISSION_DENIED, "Only the seller of this product can reply")

        if status is not None:
            if not user.is_staff:
                return service_err(ErrorCodes.PERMISSION_DENIED, "Only staff can moderate feedback")
            if status not in dict(Feedback.STATUS_CHOICES):
                return service_err(ErrorCodes.VALIDATION_ERROR, f"Unknown feedback status '{status}'")
            feedback.status = status

        if response is not None:
            feedback.response = response

        try:
            feedback.save()
        except Exception as e:
            self.logger.error(f"Error updating feedback {feedback_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

        self.logger.info(f"Feedback {feedback.id} updated by {user.id}: status={feedback.status}")
        return service_ok(feedback)

    @staticmethod
    def _get_or_none(source, pk):
        manager = source.objects if isinstance(source, type) else source
        try:
            return manager.filter(id=pk).first()
        except (ValidationError, ValueError):
            return None
