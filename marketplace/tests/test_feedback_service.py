import uuid

from django.test import TestCase

from marketplace.models import Feedback
from marketplace.services import ErrorCodes, FeedbackService
from marketplace.tests.factories import (
    FeedbackFactory,
    OrderFactory,
    ProductFactory,
    RetailerFactory,
    UserFactory,
)


class SubmitFeedbackTest(TestCase):
    def setUp(self):
        self.service = FeedbackService()
        self.customer = UserFactory()
        self.seller = RetailerFactory()
        self.product = ProductFactory(seller=self.seller)

    def test_product_feedback_starts_pending(self):
        result = self.service.submit_feedback(
            self.customer,
            {"type": "product", "rating": 5, "comment": "Fresh and well packed", "product_id": self.product.id},
        )

        self.assertTrue(result.ok)
        feedback = Feedback.objects.get(id=result.value.id)
        self.assertEqual(feedback.status, Feedback.STATUS_PENDING)
        self.assertEqual(feedback.product, self.product)
        self.assertEqual(feedback.user, self.customer)
        self.assertEqual(feedback.images, [])

    def test_rating_outside_range_is_rejected(self):
        for rating in (0, 6):
            result = self.service.submit_feedback(self.customer, {"type": "general", "rating": rating, "comment": "x"})

            self.assertFalse(result.ok)
            self.assertEqual(result.error, ErrorCodes.VALIDATION_ERROR)
        self.assertEqual(Feedback.objects.count(), 0)

    def test_blank_comment_is_rejected(self):
        result = self.service.submit_feedback(self.customer, {"type": "general", "rating": 3, "comment": "   "})

        self.assertFalse(result.ok)
        self.assertEqual(result.error, ErrorCodes.VALIDATION_ERROR)

    def test_unknown_product(self):
        result = self.service.submit_feedback(
            self.customer, {"type": "product", "rating": 3, "comment": "ok", "product_id": uuid.uuid4()}
        )

        self.assertFalse(result.ok)
        self.assertEqual(result.error, ErrorCodes.PRODUCT_NOT_FOUND)

    def test_service_feedback_on_own_order(self):
        order = OrderFactory(customer=self.customer)

        result = self.service.submit_feedback(
            self.customer, {"type": "service", "rating": 4, "comment": "Quick delivery", "order_id": order.id}
        )

        self.assertTrue(result.ok)
        self.assertEqual(result.value.order, order)

    def test_feedback_on_someone_elses_order_is_denied(self):
        order = OrderFactory()

        result = self.service.submit_feedback(
            self.customer, {"type": "service", "rating": 1, "comment": "Late", "order_id": order.id}
        )

        self.assertFalse(result.ok)
        self.assertEqual(result.error, ErrorCodes.PERMISSION_DENIED)


class ListFeedbackTest(TestCase):
    def setUp(self):
        self.service = FeedbackService()
        self.product = ProductFactory()
        self.other_product = ProductFactory()
        self.approved = FeedbackFactory(product=self.product, status=Feedback.STATUS_APPROVED)
        self.pending = FeedbackFactory(product=self.product)
        FeedbackFactory(product=self.other_product)

    def test_filter_by_product(self):
        result = self.service.list_feedback({"product_id": self.product.id})

        self.assertTrue(result.ok)
        self.assertEqual(result.value["count"], 2)

    def test_filter_by_status(self):
        result = self.service.list_feedback({"product_id": self.product.id, "status": Feedback.STATUS_APPROVED})

        self.assertEqual([f.id for f in result.value["results"]], [self.approved.id])

    def test_no_filters_lists_everything(self):
        result = self.service.list_feedback()

        self.assertEqual(result.value["count"], 3)


class RespondToFeedbackTest(TestCase):
    def setUp(self):
        self.service = FeedbackService()
        self.seller = RetailerFactory()
        self.feedback = FeedbackFactory(product=ProductFactory(seller=self.seller))
        self.staff = UserFactory(is_staff=True)

    def test_seller_of_product_can_reply(self):
        result = self.service.respond_to_feedback(self.feedback.id, self.seller, response="Thanks!")

        self.assertTrue(result.ok)
        self.feedback.refresh_from_db()
        self.assertEqual(self.feedback.response, "Thanks!")
        self.assertEqual(self.feedback.status, Feedback.STATUS_PENDING)

    def test_other_seller_cannot_reply(self):
        result = self.service.respond_to_feedback(self.feedback.id, RetailerFactory(), response="Hi")

        self.assertFalse(result.ok)
        self.assertEqual(result.error, ErrorCodes.PERMISSION_DENIED)

    def test_only_staff_moderates(self):
        denied = self.service.respond_to_feedback(self.feedback.id, self.seller, status=Feedback.STATUS_APPROVED)
        allowed = self.service.respond_to_feedback(self.feedback.id, self.staff, status=Feedback.STATUS_REJECTED)

        self.assertEqual(denied.error, ErrorCodes.PERMISSION_DENIED)
        self.assertTrue(allowed.ok)
        self.feedback.refresh_from_db()
        self.assertEqual(self.feedback.status, Feedback.STATUS_REJECTED)

    def test_missing_feedback(self):
        result = self.service.respond_to_feedback(uuid.uuid4(), self.staff, response="?")

        self.assertEqual(result.error, ErrorCodes.FEEDBACK_NOT_FOUND)
