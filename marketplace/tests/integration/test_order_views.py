import uuid
from decimal import Decimal

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from infrastructure.container import container
from marketplace.models import CartItem, Order, OrderItem
from marketplace.tests.factories import (
    CartFactory,
    CartItemFactory,
    OrderFactory,
    OrderItemFactory,
    ProductFactory,
    RetailerFactory,
    UserFactory,
    WholesalerFactory,
)


SHIPPING_ADDRESS = {
    "address": "12 MG Road",
    "city": "Pune",
    "state": "MH",
    "zip_code": "411001",
    "phone": "+919800000000",
}


class OrderViewIntegrationTest(TestCase):
    def setUp(self):
        self.client = APIClient()

        self.customer = UserFactory(email="meera@example.com")
        self.seller = RetailerFactory()
        self.other_seller = RetailerFactory()
        self.product = ProductFactory(seller=self.seller, price=Decimal("100.00"), stock=5)

        self.list_url = reverse("marketplace:order-list")

    def detail_url(self, order_id):
        return reverse("marketplace:order-detail", kwargs={"pk": order_id})

    def place(self, quantity=3, **extra):
        payload = {
            "items": [{"product_id": str(self.product.id), "quantity": quantity}],
            "shipping_address": SHIPPING_ADDRESS,
        }
        payload.update(extra)
        return self.client.post(self.list_url, payload, format="json")

    def test_place_order(self):
        cart = CartFactory(user=self.customer)
        CartItemFactory(cart=cart, product=self.product, quantity=3)
        self.client.force_authenticate(user=self.customer)

        with self.captureOnCommitCallbacks(execute=True):
            response = self.place()

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["total"], "340.00")
        self.assertEqual(response.data["status"], "pending")
        self.assertEqual(len(response.data["items"]), 1)

        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, 2)
        self.assertFalse(CartItem.objects.filter(cart=cart).exists())

        sent = container.email().sent_messages
        self.assertEqual(len(sent), 1)
        self.assertEqual(sent[0].to, ["meera@example.com"])

    def test_second_order_beyond_stock_is_conflict(self):
        self.client.force_authenticate(user=self.customer)
        self.place()

        self.client.force_authenticate(user=UserFactory())
        response = self.place()

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["code"], "insufficient_stock")
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, 2)
        self.assertEqual(Order.objects.count(), 1)

    def test_place_order_without_items(self):
        self.client.force_authenticate(user=self.customer)

        response = self.client.post(
            self.list_url, {"items": [], "shipping_address": SHIPPING_ADDRESS}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["code"], "cart_empty")

    def test_place_order_needs_shipping_address(self):
        self.client.force_authenticate(user=self.customer)

        response = self.client.post(
            self.list_url, {"items": [{"product_id": str(self.product.id), "quantity": 1}]}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("shipping_address", response.data)

    def test_retailer_orders_from_wholesaler_for_counterpart(self):
        wholesaler = WholesalerFactory()
        self.product = ProductFactory(seller=wholesaler, stock=100, price=Decimal("10.00"))
        self.client.force_authenticate(user=self.seller)

        response = self.place(quantity=50, retailer_id=str(self.customer.id))

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        order = Order.objects.get(id=response.data["id"])
        self.assertEqual(order.customer, self.customer)
        self.assertEqual(order.retailer, self.seller)

    def test_pickup_order_has_no_shipping(self):
        self.client.force_authenticate(user=self.customer)

        response = self.place(quantity=1, fulfillment_method="pickup")

        self.assertEqual(response.data["shipping"], "0.00")
        self.assertEqual(response.data["total"], "110.00")

    def test_list_orders_by_role(self):
        order = OrderFactory(customer=self.customer)
        OrderItemFactory(order=order, product=self.product)
        OrderFactory()

        self.client.force_authenticate(user=self.customer)
        customer_view = self.client.get(self.list_url)
        self.client.force_authenticate(user=self.seller)
        seller_view = self.client.get(self.list_url)
        self.client.force_authenticate(user=self.other_seller)
        other_view = self.client.get(self.list_url)

        self.assertEqual([item["id"] for item in customer_view.data["results"]], [str(order.id)])
        self.assertEqual([item["id"] for item in seller_view.data["results"]], [str(order.id)])
        self.assertEqual(other_view.data["count"], 0)

    def test_list_rejects_unknown_status(self):
        self.client.force_authenticate(user=self.customer)

        response = self.client.get(self.list_url, {"status": "lost"})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_retrieve_visibility(self):
        order = OrderFactory(customer=self.customer)
        OrderItemFactory(order=order, product=self.product)

        self.client.force_authenticate(user=self.seller)
        self.assertEqual(self.client.get(self.detail_url(order.id)).status_code, status.HTTP_200_OK)

        self.client.force_authenticate(user=self.other_seller)
        self.assertEqual(self.client.get(self.detail_url(order.id)).status_code, status.HTTP_403_FORBIDDEN)

        self.assertEqual(self.client.get(self.detail_url(uuid.uuid4())).status_code, status.HTTP_404_NOT_FOUND)

    def test_seller_ships_then_delivers(self):
        order = OrderFactory(customer=self.customer)
        OrderItemFactory(order=order, product=self.product)
        self.client.force_authenticate(user=self.seller)

        shipped = self.client.patch(
            self.detail_url(order.id), {"status": "shipped", "tracking_number": "TRK1"}, format="json"
        )
        with self.captureOnCommitCallbacks(execute=True):
            delivered = self.client.patch(self.detail_url(order.id), {"status": "delivered"}, format="json")

        self.assertEqual(shipped.status_code, status.HTTP_200_OK)
        self.assertEqual(delivered.status_code, status.HTTP_200_OK)
        self.assertEqual(delivered.data["payment_status"], "paid")
        self.assertEqual(len(container.email().sent_messages), 1)

    def test_backward_transition_rejected(self):
        order = OrderFactory(customer=self.customer, status=Order.STATUS_SHIPPED)
        OrderItemFactory(order=order, product=self.product)
        self.client.force_authenticate(user=self.seller)

        response = self.client.patch(self.detail_url(order.id), {"status": "confirmed"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["code"], "invalid_order_state")

    def test_customer_cannot_update_status(self):
        order = OrderFactory(customer=self.customer)
        OrderItemFactory(order=order, product=self.product)
        self.client.force_authenticate(user=self.customer)

        response = self.client.patch(self.detail_url(order.id), {"status": "cancelled"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_empty_update_rejected(self):
        order = OrderFactory(customer=self.customer)
        self.client.force_authenticate(user=self.seller)

        response = self.client.patch(self.detail_url(order.id), {}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(OrderItem.objects.count(), 0)
