import uuid
from decimal import Decimal

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from marketplace.models import CartItem
from marketplace.tests.factories import CartFactory, CartItemFactory, ProductFactory, RetailerFactory, UserFactory


class CartViewIntegrationTest(TestCase):
    def setUp(self):
        self.client = APIClient()

        self.customer = UserFactory()
        self.seller = RetailerFactory()
        self.product = ProductFactory(seller=self.seller, price=Decimal("100.00"), stock=5)
        self.bulk_product = ProductFactory(seller=self.seller, price=Decimal("20.00"), stock=50, min_order_quantity=10)

        self.cart_url = reverse("marketplace:cart-list")
        self.add_url = reverse("marketplace:cart-add-item")
        self.replace_url = reverse("marketplace:cart-replace")

        self.client.force_authenticate(user=self.customer)

    def remove_url(self, product_id):
        return reverse("marketplace:cart-remove-item", kwargs={"product_id": product_id})

    def test_cart_requires_authentication(self):
        self.client.force_authenticate(user=None)

        response = self.client.get(self.cart_url)

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_empty_cart_created_on_first_access(self):
        response = self.client.get(self.cart_url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["items"], [])
        self.assertEqual(response.data["totals"]["subtotal"], "0.00")
        self.assertEqual(response.data["totals"]["item_count"], 0)

    def test_add_item_returns_cart_with_totals(self):
        response = self.client.post(self.add_url, {"product_id": str(self.product.id), "quantity": 3}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["items_count"], 1)
        self.assertEqual(response.data["totals"]["subtotal"], "300.00")
        self.assertEqual(response.data["totals"]["tax"], "30.00")
        self.assertEqual(response.data["totals"]["shipping"], "10.00")
        self.assertEqual(response.data["totals"]["total"], "340.00")

    def test_add_beyond_stock_is_conflict(self):
        response = self.client.post(self.add_url, {"product_id": str(self.product.id), "quantity": 6}, format="json")

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["code"], "insufficient_stock")

    def test_add_below_minimum_order(self):
        response = self.client.post(
            self.add_url, {"product_id": str(self.bulk_product.id), "quantity": 4}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["code"], "below_minimum_order")

    def test_add_unknown_product(self):
        response = self.client.post(self.add_url, {"product_id": str(uuid.uuid4())}, format="json")

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_seller_cannot_add_own_product(self):
        self.client.force_authenticate(user=self.seller)

        response = self.client.post(self.add_url, {"product_id": str(self.product.id)}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["code"], "self_purchase")

    def test_replace_cart(self):
        cart = CartFactory(user=self.customer)
        CartItemFactory(cart=cart, product=self.product, quantity=1)

        response = self.client.put(
            self.replace_url,
            {"items": [{"product_id": str(self.bulk_product.id), "quantity": 12}]},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item["product_id"] for item in response.data["items"]], [str(self.bulk_product.id)])
        self.assertEqual(response.data["items"][0]["quantity"], 12)

    def test_remove_item_is_idempotent(self):
        cart = CartFactory(user=self.customer)
        CartItemFactory(cart=cart, product=self.product, quantity=1)

        first = self.client.delete(self.remove_url(self.product.id))
        second = self.client.delete(self.remove_url(self.product.id))

        self.assertEqual(first.status_code, status.HTTP_200_OK)
        self.assertEqual(second.status_code, status.HTTP_200_OK)
        self.assertFalse(CartItem.objects.filter(cart=cart).exists())

    def test_deleted_product_line_shows_null_product(self):
        cart = CartFactory(user=self.customer)
        CartItemFactory(cart=cart, product=self.product, quantity=2)
        CartItem.objects.filter(cart=cart).update(product=None)

        response = self.client.get(self.cart_url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNone(response.data["items"][0]["product"])
        self.assertEqual(response.data["totals"]["subtotal"], "0.00")
