"""
Order form validation.

Runs before the pricing engine: everything the engine assumes about its
input (required choices present, counts within 0..14) is enforced here.
"""
import re
import secrets
from dataclasses import dataclass, field
from typing import Optional

from ..engine.models import ServiceType, PaintStyle, PaintCondition, GripService


MAX_CLUBS = 14
MAX_GRIPS = 14
MAX_EXTRA_WRAPS = 4

CONTACT_METHODS = ('email', 'text')
GRIP_SIZES = ('standard', 'midsize', 'jumbo')

ORDER_STATUSES = (
    'pending',
    'received',
    'in_progress',
    'ready',
    'completed',
    'shipped',
    'cancelled',
)

# Excludes look-alike characters: I, O, 0, 1
SHORT_ID_ALPHABET = 'ABCDEFGHJKLMNPQRSTUVWXYZ23456789'
SHORT_ID_PREFIX = 'CM-'
SHORT_ID_LENGTH = 6

EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')


@dataclass
class ValidationResult:
    """Result of order form validation (field name -> message)."""
    valid: bool
    errors: dict[str, str] = field(default_factory=dict)

    def add_error(self, name: str, message: str):
        self.errors[name] = message
        self.valid = False


def _blank(value) -> bool:
    return value is None or not str(value).strip()


def _value(value) -> Optional[str]:
    return getattr(value, 'value', value)


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email.strip()))


def validate_order_form(data: dict) -> ValidationResult:
    """
    Validate a submitted order form.

    Args:
        data: Form fields keyed by snake_case name (missing keys are treated as empty)

    Returns:
        ValidationResult with one message per failing field
    """
    result = ValidationResult(valid=True)

    # Customer
    if _blank(data.get('full_name')):
        result.add_error('full_name', 'Full name is required')

    email = data.get('email')
    if _blank(email):
        result.add_error('email', 'Email is required')
    elif not is_valid_email(email):
        result.add_error('email', 'Please enter a valid email address')

    if _blank(data.get('shipping_address')):
        result.add_error('shipping_address', 'Shipping address is required')

    contact = _value(data.get('preferred_contact_method'))
    if _blank(contact):
        result.add_error('preferred_contact_method', 'Please select a contact method')
    elif contact not in CONTACT_METHODS:
        result.add_error('preferred_contact_method', 'Invalid contact method')

    # Service
    service_type = _value(data.get('service_type'))
    if _blank(service_type):
        result.add_error('service_type', 'Please select a service type')
    elif service_type not in {s.value for s in ServiceType}:
        result.add_error('service_type', 'Invalid service type')

    # Paint fill details for everything except grips-only
    if not _blank(service_type) and service_type != ServiceType.GRIPS_ONLY.value:
        club_count = data.get('club_count')
        if not club_count or club_count < 1:
            result.add_error('club_count', 'Please enter the number of clubs')
        elif club_count > MAX_CLUBS:
            result.add_error('club_count', f'Maximum {MAX_CLUBS} clubs per order')

        condition = _value(data.get('current_paint_condition'))
        if _blank(condition):
            result.add_error('current_paint_condition', 'Please select current paint condition')
        elif condition not in {c.value for c in PaintCondition}:
            result.add_error('current_paint_condition', 'Invalid paint condition')

        style = _value(data.get('paint_style'))
        if _blank(style):
            result.add_error('paint_style', 'Please select a paint style')
        elif style not in {s.value for s in PaintStyle}:
            result.add_error('paint_style', 'Invalid paint style')

        if _blank(data.get('primary_color')):
            result.add_error('primary_color', 'Primary color is required')

    # Grips
    grip_service = _value(data.get('grip_service')) or GripService.NONE.value
    if grip_service not in {g.value for g in GripService}:
        result.add_error('grip_service', 'Invalid grip service')
    elif grip_service != GripService.NONE.value:
        grip_count = data.get('grip_count')
        if not grip_count or grip_count < 1:
            result.add_error('grip_count', 'Please enter the number of grips')
        elif grip_count > MAX_GRIPS:
            result.add_error('grip_count', f'Maximum {MAX_GRIPS} grips per order')

        grip_size = _value(data.get('grip_size'))
        if _blank(grip_size):
            result.add_error('grip_size', 'Please select grip size')
        elif grip_size not in GRIP_SIZES:
            result.add_error('grip_size', 'Invalid grip size')

        if grip_service == GripService.SUPPLY_AND_INSTALL.value and _blank(data.get('grip_model')):
            result.add_error('grip_model', 'Please specify the grip model you want')

        extra_wraps = data.get('extra_wraps')
        if extra_wraps is not None and not 0 <= extra_wraps <= MAX_EXTRA_WRAPS:
            result.add_error('extra_wraps', f'Extra wraps must be between 0 and {MAX_EXTRA_WRAPS}')

    if service_type == ServiceType.GRIPS_ONLY.value and grip_service == GripService.NONE.value:
        result.add_error('grip_service', 'Please select a grip service for grips-only orders')

    if _blank(data.get('turnstile_token')):
        result.add_error('turnstile_token', 'Please complete the security check')

    return result


def generate_short_id() -> str:
    """Customer-facing order reference, e.g. CM-7KQ2XD."""
    return SHORT_ID_PREFIX + ''.join(secrets.choice(SHORT_ID_ALPHABET) for _ in range(SHORT_ID_LENGTH))
