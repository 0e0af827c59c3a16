"""Display helpers for prices and form values (emails, UI, API)."""
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional


SERVICE_TYPE_LABELS = {
    'irons': 'Iron Paint Fill',
    'putter': 'Putter Paint Fill',
    'both': 'Iron & Putter Paint Fill',
    'grips_only': 'Grip Installation Only',
}

GRIP_SERVICE_LABELS = {
    'none': 'None',
    'install_customer_supplied': 'Install Customer Grips',
    'supply_and_install': 'Supply & Install',
}

STATUS_LABELS = {
    'pending': 'Pending',
    'received': 'Received',
    'in_progress': 'In Progress',
    'ready': 'Ready',
    'completed': 'Completed',
    'shipped': 'Shipped',
    'cancelled': 'Cancelled',
}


def _label(labels: dict, value) -> str:
    key = getattr(value, 'value', value)
    return labels.get(key, key)


def format_service_type(value) -> str:
    return _label(SERVICE_TYPE_LABELS, value)


def format_grip_service(value) -> str:
    return _label(GRIP_SERVICE_LABELS, value)


def format_status(value) -> str:
    return _label(STATUS_LABELS, value)


def format_price(cents: int) -> str:
    """Whole-dollar display, e.g. 10550 -> "$106"."""
    dollars = (Decimal(int(cents)) / 100).quantize(Decimal('1'), rounding=ROUND_HALF_UP)
    return f"${dollars}"


def format_price_range(min_cents: int, max_cents: int) -> str:
    """Price range joined with an en dash, e.g. "$105 – $110"."""
    return f"{format_price(min_cents)} – {format_price(max_cents)}"


def dollars_to_cents(dollars) -> Optional[int]:
    """Convert a dollar amount from a form field to cents. Blank stays None; $0 is 0."""
    if dollars is None or dollars == '':
        return None
    return int((Decimal(str(dollars)) * 100).quantize(Decimal('1'), rounding=ROUND_HALF_UP))
