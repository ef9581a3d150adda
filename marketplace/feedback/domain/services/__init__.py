from .feedback_service import FeedbackService


__all__ = [
    "FeedbackService",
]
