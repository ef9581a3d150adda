"""
SupportService - Customer Support Queries

A query is opened by any user, optionally about an order or a product, and
collects a thread of replies. Sellers see the open queries about their own
products and orders. The first reply moves an open query to in_progress;
closed queries accept no further replies.
"""

import logging
from typing import Any, Dict, Optional

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Q

from marketplace.catalog.domain.models.catalog import Product
from marketplace.infra.observability.metrics import support_queries_total
from marketplace.ordering.domain.models.order import Order
from marketplace.services.base import BaseService, ErrorCodes, ServiceResult, paginate, service_err, service_ok
from marketplace.support.domain.models.support_query import QueryResponse, SupportQuery


User = get_user_model()
logger = logging.getLogger(__name__)


class SupportService(BaseService):
    """
    Service for support queries.

    Responsibilities:
    - Open a query
    - List the queries a user can see
    - Get a query with its replies
    - Reply to a query and change its status
    """

    DEFAULT_PAGE_SIZE = 20

    @BaseService.log_performance
    def open_query(self, user: User, data: Dict[str, Any]) -> ServiceResult[SupportQuery]:
        """
        Open a new query.

        Args:
            user: Author
            data: subject, message, and optional order_id and product_id

        Returns:
            ServiceResult with the created SupportQuery (status open)
        """
        subject = (data.get("subject") or "").strip()
        message = (data.get("message") or "").strip()
        if not subject or not message:
            return service_err(ErrorCodes.VALIDATION_ERROR, "Subject and message are required")

        order = None
        if data.get("order_id"):
            order = self._find(Order, data["order_id"])
            if order is None:
                return service_err(ErrorCodes.ORDER_NOT_FOUND, f"Order {data['order_id']} not found")

        product = None
        if data.get("product_id"):
            product = self._find(Product, data["product_id"])
            if product is None:
                return service_err(ErrorCodes.PRODUCT_NOT_FOUND, f"Product {data['product_id']} not found")

        try:
            query = SupportQuery.objects.create(
                user=user, order=order, product=product, subject=subject, message=message
            )
        except Exception as e:
            self.logger.error(f"Error opening query for user {user.id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

        support_queries_total.labels(action="opened").inc()
        self.logger.info(f"Opened query {query.id} by user {user.id}")
        return service_ok(query)

    def list_queries(
        self,
        user: User,
        status: Optional[str] = None,
        page: int = 1,
        page_size: Optional[int] = None,
    ) -> ServiceResult[Dict[str, Any]]:
        """
        List the queries visible to ``user``, newest first.

        Customers see their own queries. Sellers also see the queries that
        are not closed and concern one of their products or an order they
        sold a line in. Staff see everything.
        """
        try:
            queryset = SupportQuery.objects.select_related("user", "order", "product").prefetch_related(
                "responses__user"
            )
            if not user.is_staff:
                visible = Q(user_id=user.id)
                if user.is_seller:
                    about_mine = Q(product__seller_id=user.id) | Q(order__items__seller_id=user.id)
                    visible |= about_mine & ~Q(status=SupportQuery.STATUS_CLOSED)
                queryset = queryset.filter(visible).distinct()
            if status:
                queryset = queryset.filter(status=status)

            return service_ok(paginate(queryset.order_by("-created_at"), page, page_size or self.DEFAULT_PAGE_SIZE))

        except Exception as e:
            self.logger.error(f"Error listing queries for user {user.id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    def get_query(self, query_id, user: User) -> ServiceResult[SupportQuery]:
        """Get a query and its replies (participants and staff only)."""
        query = self._find(
            SupportQuery.objects.select_related("user", "order", "product").prefetch_related("responses__user"),
            query_id,
        )
        if query is None:
            return service_err(ErrorCodes.QUERY_NOT_FOUND, f"Query {query_id} not found")

        if not self.can_participate(user, query):
            self.logger.warning(f"Query {query_id}: access denied for user {user.id}")
            return service_err(ErrorCodes.PERMISSION_DENIED, "You don't have access to this query")
        return service_ok(query)

    @BaseService.log_performance
    def update_query(
        self,
        query_id,
        user: User,
        message: Optional[str] = None,
        status: Optional[str] = None,
    ) -> ServiceResult[SupportQuery]:
        """
        Reply to a query and/or change its status.

        A reply on an open query moves it to in_progress unless an explicit
        status is given in the same call. Replies to a closed query are
        refused; changing the status (e.g. reopening) is still allowed.
        """
        message = (message or "").strip() or None
        if message is None and status is None:
            return service_err(ErrorCodes.VALIDATION_ERROR, "Provide a message or a status")
        if status is not None and status not in dict(SupportQuery.STATUS_CHOICES):
            return service_err(ErrorCodes.VALIDATION_ERROR, f"Unknown query status '{status}'")

        try:
            with transaction.atomic():
                query = self._find(SupportQuery.objects.select_for_update(), query_id)
                if query is None:
                    return service_err(ErrorCodes.QUERY_NOT_FOUND, f"Query {query_id} not found")

                if not self.can_participate(user, query):
                    return service_err(ErrorCodes.PERMISSION_DENIED, "You don't have access to this query")

                if message is not None:
                    if query.status == SupportQuery.STATUS_CLOSED:
                        return service_err(ErrorCodes.QUERY_CLOSED, "This query is closed")
                    QueryResponse.objects.create(query=query, user=user, message=message)
                    if query.status == SupportQuery.STATUS_OPEN:
                        query.status = SupportQuery.STATUS_IN_PROGRESS

                if status is not None:
                    query.status = status

                query.save()

        except Exception as e:
            self.logger.error(f"Error updating query {query_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

        if message is not None:
            support_queries_total.labels(action="replied").inc()
        self.logger.info(f"Query {query.id} updated by {user.id}: status={query.status}")
        return self.get_query(query.id, user)

    def can_participate(self, user: User, query: SupportQuery) -> bool:
        """Author, staff, the seller of the product, or a seller on the order."""
        if user.is_staff or query.user_id == user.id:
            return True
        if query.product_id and Product.objects.filter(id=query.product_id, seller_id=user.id).exists():
            return True
        if query.order_id and Order.objects.filter(id=query.order_id, items__seller_id=user.id).exists():
            return True
        return False

    @staticmethod
    def _find(source, pk):
        manager = source.objects if isinstance(source, type) else source
        try:
            return manager.filter(id=pk).first()
        except (ValidationError, ValueError):
            return None
