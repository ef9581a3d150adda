import uuid

from django.test import TestCase

from marketplace.models import QueryResponse, SupportQuery
from marketplace.services import ErrorCodes, SupportService
from marketplace.tests.factories import (
    OrderFactory,
    OrderItemFactory,
    ProductFactory,
    RetailerFactory,
    SupportQueryFactory,
    UserFactory,
    WholesalerFactory,
)


class OpenQueryTest(TestCase):
    def setUp(self):
        self.service = SupportService()
        self.customer = UserFactory()

    def test_open_query_about_order(self):
        order = OrderFactory(customer=self.customer)

        result = self.service.open_query(
            self.customer, {"subject": "Missing item", "message": "Rice was not in the box", "order_id": order.id}
        )

        self.assertTrue(result.ok)
        query = SupportQuery.objects.get(id=result.value.id)
        self.assertEqual(query.status, SupportQuery.STATUS_OPEN)
        self.assertEqual(query.order, order)
        self.assertEqual(query.responses.count(), 0)

    def test_subject_and_message_required(self):
        result = self.service.open_query(self.customer, {"subject": "Help", "message": ""})

        self.assertFalse(result.ok)
        self.assertEqual(result.error, ErrorCodes.VALIDATION_ERROR)

    def test_unknown_product(self):
        result = self.service.open_query(
            self.customer, {"subject": "Stock?", "message": "When?", "product_id": uuid.uuid4()}
        )

        self.assertEqual(result.error, ErrorCodes.PRODUCT_NOT_FOUND)


class ListQueriesTest(TestCase):
    def setUp(self):
        self.service = SupportService()
        self.customer = UserFactory()
        self.seller = RetailerFactory()
        product = ProductFactory(seller=self.seller)
        order = OrderFactory(customer=self.customer)
        OrderItemFactory(order=order, product=product)

        self.own = SupportQueryFactory(user=self.customer, order=order)
        self.closed = SupportQueryFactory(user=self.customer, product=product, status=SupportQuery.STATUS_CLOSED)
        self.unrelated = SupportQueryFactory()

    def ids(self, result):
        return {q.id for q in result.value["results"]}

    def test_customer_sees_own_queries(self):
        result = self.service.list_queries(self.customer)

        self.assertEqual(self.ids(result), {self.own.id, self.closed.id})

    def test_seller_sees_open_queries_about_their_sales(self):
        result = self.service.list_queries(self.seller)

        self.assertEqual(self.ids(result), {self.own.id})

    def test_unrelated_seller_sees_nothing(self):
        result = self.service.list_queries(WholesalerFactory())

        self.assertEqual(result.value["count"], 0)

    def test_status_filter(self):
        result = self.service.list_queries(self.customer, status=SupportQuery.STATUS_CLOSED)

        self.assertEqual(self.ids(result), {self.closed.id})


class UpdateQueryTest(TestCase):
    def setUp(self):
        self.service = SupportService()
        self.customer = UserFactory()
        self.seller = RetailerFactory()
        self.query = SupportQueryFactory(user=self.customer, product=ProductFactory(seller=self.seller))

    def test_first_reply_moves_open_query_in_progress(self):
        result = self.service.update_query(self.query.id, self.seller, message="Restocking on Monday")

        self.assertTrue(result.ok)
        self.assertEqual(result.value.status, SupportQuery.STATUS_IN_PROGRESS)
        reply = QueryResponse.objects.get(query=self.query)
        self.assertEqual(reply.user, self.seller)
        self.assertEqual(reply.message, "Restocking on Monday")

    def test_reply_with_explicit_status(self):
        result = self.service.update_query(
            self.query.id, self.customer, message="Thanks, sorted", status=SupportQuery.STATUS_RESOLVED
        )

        self.assertEqual(result.value.status, SupportQuery.STATUS_RESOLVED)
        self.assertEqual(result.value.responses.count(), 1)

    def test_replies_keep_thread_order(self):
        self.service.update_query(self.query.id, self.customer, message="first")
        result = self.service.update_query(self.query.id, self.seller, message="second")

        self.assertEqual([r.message for r in result.value.responses.all()], ["first", "second"])

    def test_closed_query_refuses_replies_but_can_reopen(self):
        self.query.status = SupportQuery.STATUS_CLOSED
        self.query.save()

        refused = self.service.update_query(self.query.id, self.customer, message="Still broken")
        reopened = self.service.update_query(self.query.id, self.customer, status=SupportQuery.STATUS_OPEN)

        self.assertEqual(refused.error, ErrorCodes.QUERY_CLOSED)
        self.assertTrue(reopened.ok)
        self.assertEqual(reopened.value.status, SupportQuery.STATUS_OPEN)
        self.assertFalse(QueryResponse.objects.exists())

    def test_outsider_cannot_reply(self):
        result = self.service.update_query(self.query.id, UserFactory(), message="Me too")

        self.assertEqual(result.error, ErrorCodes.PERMISSION_DENIED)
        self.assertFalse(QueryResponse.objects.exists())

    def test_nothing_to_update(self):
        result = self.service.update_query(self.query.id, self.customer, message="  ")

        self.assertEqual(result.error, ErrorCodes.VALIDATION_ERROR)

    def test_missing_query(self):
        result = self.service.update_query(uuid.uuid4(), self.customer, status=SupportQuery.STATUS_CLOSED)

        self.assertEqual(result.error, ErrorCodes.QUERY_NOT_FOUND)
