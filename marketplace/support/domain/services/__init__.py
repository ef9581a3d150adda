from .support_service import SupportService


__all__ = [
    "SupportService",
]
