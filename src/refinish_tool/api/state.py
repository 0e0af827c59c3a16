"""
Shared service instances for the API.

Built once per app from Settings and stored on ``app.state.services``.
"""
from dataclasses import dataclass
import logging

from fastapi import Request

from ..config.settings import Settings
from ..engine.pricing_engine import PricingEngine
from ..engine.price_table import load_price_table
from ..services.email_service import EmailService
from ..services.order_service import OrderService
from ..services.order_store import OrderStore
from ..services.upload_service import UploadService

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    settings: Settings
    engine: PricingEngine
    store: OrderStore
    uploads: UploadService
    emails: EmailService
    orders: OrderService


def build_state(settings: Settings) -> AppState:
    """Wire up services for one app instance."""
    if settings.price_table_csv:
        prices = load_price_table(settings.price_table_csv)
        logger.info("Loaded price table override from %s", settings.price_table_csv)
    else:
        prices = None
    engine = PricingEngine(prices)

    store = OrderStore(settings.orders_csv, settings.uploads_csv)
    return AppState(
        settings=settings,
        engine=engine,
        store=store,
        uploads=UploadService(settings.upload_dir),
        emails=EmailService(settings),
        orders=OrderService(store, engine, settings),
    )


def get_state(request: Request) -> AppState:
    """FastAPI dependency returning the app's services."""
    return request.app.state.services
