from .support_query import QueryResponse, SupportQuery


__all__ = [
    "SupportQuery",
    "QueryResponse",
]
