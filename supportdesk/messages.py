"""Canned reply lookup.

Every reply here is returned verbatim without consulting a knowledge
document, so the same key always yields byte-identical text.
"""

from __future__ import annotations

_MESSAGES: dict[str, str] = {
    # Conversational intents
    "intent.greeting": (
        "Hello! I'm here to help you with returns, shipping, payments, orders, "
        "and warranty. How can I assist you today?"
    ),
    "intent.how_are_you": (
        "I'm doing great, thank you for asking! I'm here and ready to help you with "
        "any questions about returns, shipping, payments, orders, or warranty. "
        "What can I do for you today?"
    ),
    "intent.help": (
        "I'd be happy to help! I can assist you with returns, shipping, payments, "
        "orders, and warranty. What would you like to know about?"
    ),
    "intent.thanks": "You're very welcome! Is there anything else I can help you with today?",
    "intent.goodbye": (
        "Thank you for contacting us! Have a wonderful day! If you need anything else, "
        "feel free to reach out anytime."
    ),

    # Per-topic fallbacks when extraction finds nothing
    "topic.returns": (
        "I can help you with returns and refunds. Items can be returned within 30 days "
        "of purchase in original condition. Would you like more details about our return policy?"
    ),
    "topic.shipping": (
        "Standard shipping takes 5-7 business days. Express is 2-3 days, and overnight is "
        "next business day. Free shipping available on orders over $75. "
        "Would you like more shipping information?"
    ),
    "topic.payments": (
        "We accept all major credit cards, debit cards, PayPal, Apple Pay, and Google Pay. "
        "All payments are processed securely. Would you like more payment information?"
    ),
    "topic.warranty": (
        "All of our products come with a standard manufacturer's warranty, usually between "
        "12 and 36 months depending on the product. Tell me which product you have and "
        "I'll look up its warranty period and repair options."
    ),
    "topic.none": (
        "I can help you with information about returns, shipping, payments, orders, and "
        "warranty. Could you tell me what specific topic you'd like to know more about?"
    ),

    # Narrower order replies tried before the generic one
    "orders.order_id": (
        "You can view all your order IDs by logging into your account at "
        "www.oursite.com/my-orders. Your order history page shows all past orders with "
        "their order numbers. You can also find order IDs in your order confirmation emails."
    ),
    "orders.latest": (
        "To view your latest order, log into your account at www.oursite.com/my-orders. "
        "You can see all your past orders there, with the most recent orders at the top. "
        "You can also check your email for order confirmation messages."
    ),
    "orders.tracking": (
        "You can track your order using your order number and email at "
        "www.oursite.com/my-orders. You'll also receive email updates at each stage of "
        "your order. Login to see real-time tracking information."
    ),
    "orders.cancel": (
        "You can cancel your order within 1 hour of placing it. After that, contact us "
        "immediately and we'll try to help if the order hasn't shipped yet."
    ),
    "orders.generic": (
        "I can help you with your orders. You can view your order history, track orders, "
        "and manage your account at www.oursite.com/my-orders. What specific information "
        "do you need about your order?"
    ),

    # Degradation and service messages
    "error.source_unavailable": (
        "I'm sorry, I can't reach our knowledge base right now. Please try again in a few "
        "minutes, or contact our support team directly."
    ),
    "error.message_required": "Message is required",
    "error.rate_limited": "Too many requests. Please try again later.",
    "error.assistant_not_ready": "Service is starting up. Please try again in a moment.",
    "products.unavailable": (
        "Product information is currently unavailable. Please visit "
        "https://www.samsung.com/uk/ for the latest products."
    ),
    "cache.cleared": "Knowledge cache cleared.",
}


def msg(key: str) -> str:
    """Return a message by key, or the key itself if not found."""
    return _MESSAGES.get(key, key)
