"""Default message templates, keyed by the message key a notification carries.

User interfaces normally translate the key themselves; these English strings
are the fallback used by ``Notification.render``.
"""

MESSAGE_TEMPLATES: dict[str, str] = {
    "notification_order_update": "Order #{orderId} is now {status}.",
    "notification_new_order": "New order #{orderId} placed for €{total}",
    "notification_seller_rated": "You received a {rating}-star rating for order #{orderId}.",
}


def render_message(message_key: str, replacements: dict | None = None) -> str:
    """Fill a template; unknown keys render as the key itself."""
    template = MESSAGE_TEMPLATES.get(message_key)
    if template is None:
        return message_key
    try:
        return template.format(**(replacements or {}))
    except KeyError:
        return template
