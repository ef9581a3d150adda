from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from marketplace.models import SupportQuery
from marketplace.tests.factories import (
    OrderFactory,
    OrderItemFactory,
    ProductFactory,
    RetailerFactory,
    SupportQueryFactory,
    UserFactory,
)


class SupportQueryViewIntegrationTest(TestCase):
    def setUp(self):
        self.client = APIClient()

        self.customer = UserFactory()
        self.seller = RetailerFactory()
        product = ProductFactory(seller=self.seller)
        self.order = OrderFactory(customer=self.customer)
        OrderItemFactory(order=self.order, product=product)

        self.list_url = reverse("marketplace:query-list")

    def detail_url(self, query_id):
        return reverse("marketplace:query-detail", kwargs={"pk": query_id})

    def test_requires_authentication(self):
        response = self.client.get(self.list_url)

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_open_query(self):
        self.client.force_authenticate(user=self.customer)

        response = self.client.post(
            self.list_url,
            {"subject": "Late delivery", "message": "Order hasn't arrived", "order_id": str(self.order.id)},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["status"], "open")
        self.assertEqual(response.data["order_number"], self.order.order_number)
        self.assertEqual(response.data["responses"], [])

    def test_subject_required(self):
        self.client.force_authenticate(user=self.customer)

        response = self.client.post(self.list_url, {"message": "Help"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("subject", response.data)

    def test_seller_reply_threads_and_moves_in_progress(self):
        query = SupportQueryFactory(user=self.customer, order=self.order)
        self.client.force_authenticate(user=self.seller)

        listed = self.client.get(self.list_url)
        response = self.client.patch(self.detail_url(query.id), {"message": "Out for delivery today"}, format="json")

        self.assertEqual(listed.data["count"], 1)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], "in_progress")
        self.assertEqual(len(response.data["responses"]), 1)
        self.assertEqual(response.data["responses"][0]["author_role"], "retailer")

    def test_outsider_cannot_read_query(self):
        query = SupportQueryFactory(user=self.customer)
        self.client.force_authenticate(user=UserFactory())

        response = self.client.get(self.detail_url(query.id))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_reply_to_closed_query_conflicts(self):
        query = SupportQueryFactory(user=self.customer, status=SupportQuery.STATUS_CLOSED)
        self.client.force_authenticate(user=self.customer)

        response = self.client.patch(self.detail_url(query.id), {"message": "Hello?"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["code"], "query_closed")

    def test_invalid_status(self):
        query = SupportQueryFactory(user=self.customer)
        self.client.force_authenticate(user=self.customer)

        response = self.client.patch(self.detail_url(query.id), {"status": "escalated"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
