from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from marketplace.models import Feedback
from marketplace.tests.factories import FeedbackFactory, ProductFactory, RetailerFactory, UserFactory


class FeedbackViewIntegrationTest(TestCase):
    def setUp(self):
        self.client = APIClient()

        self.customer = UserFactory()
        self.seller = RetailerFactory()
        self.product = ProductFactory(seller=self.seller)

        self.list_url = reverse("marketplace:feedback-list")

    def respond_url(self, feedback_id):
        return reverse("marketplace:feedback-respond", kwargs={"pk": feedback_id})

    def test_list_is_public_and_hides_contact_details(self):
        FeedbackFactory(product=self.product, user=self.customer)

        response = self.client.get(self.list_url, {"product_id": str(self.product.id)})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["count"], 1)
        entry = response.data["results"][0]
        self.assertEqual(entry["author_name"], self.customer.display_name)
        self.assertEqual(entry["product_name"], self.product.name)
        self.assertNotIn("user", entry)

    def test_create_requires_authentication(self):
        response = self.client.post(
            self.list_url, {"type": "general", "rating": 5, "comment": "Great app"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_create_product_feedback(self):
        self.client.force_authenticate(user=self.customer)

        response = self.client.post(
            self.list_url,
            {"type": "product", "rating": 4, "comment": "Good quality", "product_id": str(self.product.id)},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["status"], "pending")
        self.assertEqual(Feedback.objects.filter(user=self.customer).count(), 1)

    def test_product_feedback_must_name_product(self):
        self.client.force_authenticate(user=self.customer)

        response = self.client.post(self.list_url, {"type": "product", "rating": 4, "comment": "?"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("product_id", response.data)

    def test_rating_out_of_range(self):
        self.client.force_authenticate(user=self.customer)

        response = self.client.post(self.list_url, {"type": "general", "rating": 9, "comment": "!"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("rating", response.data)

    def test_seller_replies(self):
        feedback = FeedbackFactory(product=self.product)
        self.client.force_authenticate(user=self.seller)

        response = self.client.post(self.respond_url(feedback.id), {"response": "Thank you!"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["response"], "Thank you!")

    def test_customer_cannot_moderate(self):
        feedback = FeedbackFactory(product=self.product)
        self.client.force_authenticate(user=self.customer)

        response = self.client.post(self.respond_url(feedback.id), {"status": "approved"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["code"], "permission_denied")
