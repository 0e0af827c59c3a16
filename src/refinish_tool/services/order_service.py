"""
Order Service - turns a validated form submission into a stored, priced order.

Steps:
1. Validate form fields
2. Verify bot-check token (when a secret is configured)
3. Allocate ids (uuid + unique short id)
4. Price the order once with the engine
5. Store the order and its upload records
"""
import uuid
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional
import logging

from ..config.settings import Settings
from ..engine.models import OrderSpecification, PriceEstimate
from ..engine.pricing_engine import PricingEngine
from ..errors import OrderValidationError, BotCheckFailedError, ShortIdExhaustedError
from .bot_check import verify_turnstile
from .email_service import OrderEmailData
from .order_store import Order, OrderStore, OrderUpload
from .order_validation import validate_order_form, generate_short_id

logger = logging.getLogger(__name__)

SHORT_ID_ATTEMPTS = 10

# Columns copied verbatim from the form into the stored order
_OPTIONAL_TEXT_FIELDS = (
    'phone', 'current_paint_condition', 'paint_style', 'primary_color',
    'secondary_color', 'notes', 'grip_model', 'grip_size',
)
_OPTIONAL_INT_FIELDS = ('club_count', 'grip_count', 'extra_wraps')


@dataclass
class OrderCreated:
    """Outcome of a successful submission."""
    order: Order
    estimate: PriceEstimate
    uploads: list[OrderUpload]

    def email_data(self) -> OrderEmailData:
        return OrderEmailData(
            order_id=self.order.id,
            short_id=self.order.short_id,
            full_name=self.order.full_name,
            email=self.order.email,
            service_type=self.order.service_type,
            est_price_min=self.order.est_price_min,
            est_price_max=self.order.est_price_max,
        )


def _enum_value(value):
    return getattr(value, 'value', value)


class OrderService:
    """Coordinates validation, pricing and storage for new orders."""

    def __init__(
        self,
        store: OrderStore,
        engine: PricingEngine,
        settings: Settings,
        verifier: Callable[[str, str], Awaitable[bool]] = verify_turnstile,
        short_id_factory: Callable[[], str] = generate_short_id,
    ):
        self.store = store
        self.engine = engine
        self.settings = settings
        self.verifier = verifier
        self.short_id_factory = short_id_factory

    def allocate_short_id(self) -> str:
        """Generate a short id not used by any stored order."""
        for _ in range(SHORT_ID_ATTEMPTS):
            short_id = self.short_id_factory()
            if not self.store.short_id_exists(short_id):
                return short_id
        raise ShortIdExhaustedError(
            f"No unused short id after {SHORT_ID_ATTEMPTS} attempts"
        )

    def estimate(self, data: dict) -> PriceEstimate:
        """Price form fields without storing anything."""
        return self.engine.calculate(OrderSpecification.from_dict(data))

    async def create_order(self, data: dict, uploads: Optional[list[dict]] = None) -> OrderCreated:
        """
        Validate, price and store a submission.

        Args:
            data: Form fields keyed by snake_case name
            uploads: Upload records previously returned by the upload endpoint

        Raises:
            OrderValidationError: one or more fields failed validation
            BotCheckFailedError: the bot-check token was rejected
            ShortIdExhaustedError: no unused short id could be generated
        """
        validation = validate_order_form(data)
        if not validation.valid:
            raise OrderValidationError(validation.errors)

        if self.settings.bot_check_enabled:
            passed = await self.verifier(data.get('turnstile_token'), self.settings.turnstile_secret_key)
            if not passed:
                logger.warning("Bot check failed for submission from %s", data.get('email'))
                raise BotCheckFailedError()

        order_id = str(uuid.uuid4())
        short_id = self.allocate_short_id()

        estimate = self.estimate(data)

        order = Order(
            id=order_id,
            short_id=short_id,
            full_name=data['full_name'].strip(),
            email=data['email'].strip(),
            shipping_address=data['shipping_address'].strip(),
            preferred_contact_method=_enum_value(data['preferred_contact_method']),
            service_type=_enum_value(data['service_type']),
            grip_service=_enum_value(data.get('grip_service')) or 'none',
            est_price_min=estimate.est_price_min,
            est_price_max=estimate.est_price_max,
        )
        for name in _OPTIONAL_TEXT_FIELDS:
            setattr(order, name, _enum_value(data.get(name)) or None)
        for name in _OPTIONAL_INT_FIELDS:
            value = data.get(name)
            setattr(order, name, int(value) if value not in (None, '') else None)

        self.store.create_order(order)

        stored_uploads = []
        for upload in uploads or []:
            stored_uploads.append(self.store.create_order_upload(OrderUpload(
                id=str(uuid.uuid4()),
                order_id=order_id,
                r2_key=upload['r2_key'],
                original_filename=upload['original_filename'],
                content_type=upload['content_type'],
                size_bytes=upload['size_bytes'],
            )))

        logger.info(
            "Created order %s: %s, estimate %d-%d cents, %d uploads",
            short_id, order.service_type, estimate.est_price_min, estimate.est_price_max, len(stored_uploads)
        )
        return OrderCreated(order=order, estimate=estimate, uploads=stored_uploads)
