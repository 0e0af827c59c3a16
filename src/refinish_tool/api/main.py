"""
FastAPI entrypoint - order intake, uploads and price estimates.

Run with:
    uvicorn refinish_tool.api.main:app
"""
from typing import Optional
import logging

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from ..config.settings import Settings, get_settings
from ..engine.formatting import format_price_range
from ..engine.models import OrderSpecification, ServiceType, PaintStyle, PaintCondition, GripService
from ..services.order_validation import MAX_CLUBS, MAX_GRIPS
from .orders_api import router as orders_router
from .state import AppState, build_state, get_state
from .uploads_api import router as uploads_router

logger = logging.getLogger(__name__)


class EstimateRequest(BaseModel):
    """Pricing-relevant order fields."""
    service_type: ServiceType
    club_count: int = Field(default=0, ge=0, le=MAX_CLUBS)
    paint_style: PaintStyle = PaintStyle.SINGLE_COLOR
    current_paint_condition: PaintCondition = PaintCondition.GOOD
    grip_service: GripService = GripService.NONE
    grip_count: int = Field(default=0, ge=0, le=MAX_GRIPS)


def configure_logging(level: str):
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the API app bound to ``settings`` (defaults to environment settings)."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Refinish Tool API",
        description="Order intake and price estimates for golf club refinishing",
        version="1.0.0",
    )

    # Enable CORS for the order form frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.services = build_state(settings)

    app.include_router(orders_router)
    app.include_router(uploads_router)

    @app.get("/")
    async def root():
        return {"status": "online", "message": "Refinish Tool API Active"}

    @app.post("/api/estimate")
    async def estimate(req: EstimateRequest, state: AppState = Depends(get_state)):
        """Price an order specification without storing it."""
        result = state.engine.calculate(OrderSpecification(**req.model_dump()))
        return {
            **result.to_dict(),
            "price_range": format_price_range(result.est_price_min, result.est_price_max),
            "trace": [t.__dict__ for t in result.trace],
        }

    logger.info(
        "API ready (data dir %s, emails %s, bot check %s)",
        settings.data_dir,
        "on" if settings.emails_enabled else "off",
        "on" if settings.bot_check_enabled else "off",
    )
    return app


app = create_app()
