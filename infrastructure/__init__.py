"""
Infrastructure Package
======================

Provides abstraction layers for external dependencies following the Dependency Inversion Principle.

Modules:
    - email: Email service abstraction (Django mail, mock)
    - notifications: Order notifications over email and SMS (Twilio, mock)
    - payments: Payment provider abstraction (Stripe, mock)
    - geocoding: Address to coordinates (Nominatim, mock)
    - events: Domain event bus (Redis pub/sub, in-memory)
    - container: Lazily-built service locator
"""
