"""HMAC helpers for checkout signature verification."""

import hashlib
import hmac


def compute_checkout_signature(secret: str, gateway_order_ref: str, payment_id: str) -> str:
    message = f"{gateway_order_ref}|{payment_id}".encode()
    return hmac.new(secret.encode(), message, hashlib.sha256).hexdigest()


def checkout_signature_matches(secret: str, gateway_order_ref: str, payment_id: str, signature: str) -> bool:
    if not secret or not signature:
        return False
    expected = compute_checkout_signature(secret, gateway_order_ref, payment_id)
    return hmac.compare_digest(expected, signature)
