"""
Orders API - FastAPI router for order intake and admin updates.
"""
from typing import Optional
import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from pydantic import BaseModel, Field

from ..errors import OrderValidationError, BotCheckFailedError, OrderNotFoundError, ShortIdExhaustedError
from ..services.order_validation import ORDER_STATUSES
from .state import AppState, get_state

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/orders", tags=["orders"])


# Pydantic models for API

class UploadRef(BaseModel):
    """An upload previously returned by POST /api/uploads."""
    r2_key: str
    original_filename: str
    content_type: str
    size_bytes: int = Field(ge=0)


class OrderCreate(BaseModel):
    """
    Request model for a new order.

    Fields are loosely typed here; the order form validator reports
    per-field messages instead of a schema error.
    """
    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    shipping_address: Optional[str] = None
    preferred_contact_method: Optional[str] = None
    service_type: Optional[str] = None
    club_count: Optional[int] = None
    current_paint_condition: Optional[str] = None
    paint_style: Optional[str] = None
    primary_color: Optional[str] = None
    secondary_color: Optional[str] = None
    notes: Optional[str] = None
    grip_service: Optional[str] = "none"
    grip_count: Optional[int] = None
    grip_model: Optional[str] = None
    grip_size: Optional[str] = None
    extra_wraps: Optional[int] = None
    uploads: list[UploadRef] = Field(default_factory=list)
    turnstile_token: Optional[str] = None


class OrderCreatedResponse(BaseModel):
    success: bool
    short_id: str
    est_price_min: int
    est_price_max: int


class OrderUpdate(BaseModel):
    """Request model for admin updates."""
    status: Optional[str] = None
    quoted_price: Optional[int] = Field(default=None, ge=0)
    admin_notes: Optional[str] = None


# Endpoints

@router.post("", response_model=OrderCreatedResponse)
async def create_order(
    order_data: OrderCreate,
    background_tasks: BackgroundTasks,
    state: AppState = Depends(get_state),
):
    """Create a new order, price it and queue confirmation emails."""
    data = order_data.model_dump(exclude={'uploads'})
    uploads = [u.model_dump() for u in order_data.uploads]

    try:
        created = await state.orders.create_order(data, uploads)
    except OrderValidationError as e:
        raise HTTPException(status_code=400, detail={"errors": e.errors})
    except BotCheckFailedError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except (ShortIdExhaustedError, OSError):
        logger.exception("Order creation failed")
        raise HTTPException(status_code=500, detail="Failed to create order. Please try again.")

    if state.settings.emails_enabled:
        background_tasks.add_task(state.emails.send_order_emails, created.email_data())

    return OrderCreatedResponse(
        success=True,
        short_id=created.order.short_id,
        est_price_min=created.estimate.est_price_min,
        est_price_max=created.estimate.est_price_max,
    )


@router.get("")
async def list_orders(
    status: Optional[str] = None,
    limit: int = 50,
    offset: int = 0,
    state: AppState = Depends(get_state),
):
    """List orders newest first (admin)."""
    if limit < 1 or offset < 0:
        raise HTTPException(status_code=400, detail="limit must be positive and offset non-negative")
    orders, total = state.store.list_orders(status=status, limit=limit, offset=offset)
    return {
        "orders": [o.__dict__ for o in orders],
        "total": total,
    }


@router.get("/stats")
async def get_stats(state: AppState = Depends(get_state)):
    """Order counts by status."""
    return state.store.get_stats()


@router.get("/{short_id}")
async def get_order(short_id: str, state: AppState = Depends(get_state)):
    """Get an order and its uploads by short id."""
    order = state.store.get_order_by_short_id(short_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    uploads = state.store.get_order_uploads(order.id)
    return {
        "order": order.__dict__,
        "uploads": [u.__dict__ for u in uploads],
    }


@router.post("/{order_id}/update")
async def update_order(order_id: str, updates: OrderUpdate, state: AppState = Depends(get_state)):
    """Update status, quoted price or admin notes (admin)."""
    if not state.store.get_order_by_id(order_id):
        raise HTTPException(status_code=404, detail="Order not found")

    # Only fields present in the body are applied, including explicit nulls
    update_dict = updates.model_dump(exclude_unset=True)

    if 'status' in update_dict and update_dict['status'] not in ORDER_STATUSES:
        raise HTTPException(status_code=400, detail="Invalid status value")
    if not update_dict:
        raise HTTPException(status_code=400, detail="No updates provided")

    try:
        state.store.update_order_admin(order_id, **update_dict)
    except OrderNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return {"success": True}
