from prometheus_client import Counter, Histogram


# Order Metrics
orders_placed_total = Counter("marketplace_orders_placed_total", "Total orders placed", ["status"])
order_value = Histogram(
    "marketplace_order_value",
    "Order value distribution",
    buckets=[10, 50, 100, 200, 500, 1000, 2000, 5000, float("inf")],
)
order_status_transitions_total = Counter(
    "marketplace_order_status_transitions_total", "Order status transitions", ["to_status"]
)

# Stock Metrics
stock_decrement_failures = Counter("marketplace_stock_decrement_failure", "Conditional stock decrements refused")

# Cart Metrics
cart_rejections_total = Counter("marketplace_cart_rejections_total", "Cart additions rejected", ["reason"])

# Collaborator Metrics
notification_failures_total = Counter(
    "marketplace_notification_failures_total", "Order notifications that failed to send", ["kind"]
)
payment_results_total = Counter("marketplace_payment_results_total", "Payment outcomes recorded", ["outcome"])

# Performance Metrics
catalog_query_duration = Histogram("marketplace_catalog_query_seconds", "Product listing time")

# Feedback & Support Metrics
feedback_submitted_total = Counter("marketplace_feedback_submitted_total", "Feedback entries submitted", ["type"])
support_queries_total = Counter("marketplace_support_queries_total", "Support query activity", ["action"])
