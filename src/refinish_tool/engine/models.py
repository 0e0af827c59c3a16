"""
Data models for the pricing engine.

Uses frozen dataclasses for the order specification and the computed
estimate; enum-like form fields are str Enums so they compare equal to
their raw form values.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union


class ServiceType(str, Enum):
    IRONS = "irons"
    PUTTER = "putter"
    BOTH = "both"
    GRIPS_ONLY = "grips_only"


class PaintStyle(str, Enum):
    SINGLE_COLOR = "single_color"
    MULTI_COLOR = "multi_color"
    MATCH_THEME = "match_theme"


class PaintCondition(str, Enum):
    GOOD = "good"
    CHIPPED = "chipped"
    STRIP_REDO = "strip_redo"


class GripService(str, Enum):
    NONE = "none"
    INSTALL_CUSTOMER_SUPPLIED = "install_customer_supplied"
    SUPPLY_AND_INSTALL = "supply_and_install"


# Service types that include iron / putter paint fill
IRON_SERVICES = (ServiceType.IRONS, ServiceType.BOTH)
PUTTER_SERVICES = (ServiceType.PUTTER, ServiceType.BOTH)
MULTI_COLOR_STYLES = (PaintStyle.MULTI_COLOR, PaintStyle.MATCH_THEME)


def coerce_choice(enum_cls, value):
    """
    Convert a raw form value to its enum member.

    Unrecognized values are returned unchanged so the engine can treat
    them as "no match" instead of failing.
    """
    if isinstance(value, enum_cls) or value is None:
        return value
    try:
        return enum_cls(value)
    except ValueError:
        return value


@dataclass(frozen=True)
class OrderSpecification:
    """The pricing-relevant part of an order."""
    service_type: Union[ServiceType, str]
    club_count: Optional[int] = 0
    paint_style: Union[PaintStyle, str, None] = PaintStyle.SINGLE_COLOR
    current_paint_condition: Union[PaintCondition, str, None] = PaintCondition.GOOD
    grip_service: Union[GripService, str] = GripService.NONE
    grip_count: Optional[int] = 0

    @classmethod
    def from_dict(cls, data: dict) -> 'OrderSpecification':
        """Build a specification from form-style keys (missing paint fields use defaults)."""
        return cls(
            service_type=coerce_choice(ServiceType, data.get('service_type')),
            club_count=data.get('club_count') or 0,
            paint_style=coerce_choice(PaintStyle, data.get('paint_style') or PaintStyle.SINGLE_COLOR),
            current_paint_condition=coerce_choice(
                PaintCondition, data.get('current_paint_condition') or PaintCondition.GOOD
            ),
            grip_service=coerce_choice(GripService, data.get('grip_service') or GripService.NONE),
            grip_count=data.get('grip_count') or 0,
        )


@dataclass(frozen=True)
class TraceStep:
    """A single step in the pricing resolution trace."""
    step: str
    description: str
    value: Optional[str] = None


@dataclass(frozen=True)
class PriceBreakdown:
    """Itemized components of an estimate, all in cents."""
    base_price: int = 0
    multi_color_addon: int = 0
    strip_redo_addon: int = 0
    grip_cost: int = 0
    shipping_estimate: int = 0

    @property
    def subtotal(self) -> int:
        """Everything except shipping."""
        return self.base_price + self.multi_color_addon + self.strip_redo_addon + self.grip_cost

    def to_dict(self) -> dict:
        return {
            "base_price": self.base_price,
            "multi_color_addon": self.multi_color_addon,
            "strip_redo_addon": self.strip_redo_addon,
            "grip_cost": self.grip_cost,
            "shipping_estimate": self.shipping_estimate,
        }


@dataclass(frozen=True)
class PriceEstimate:
    """Complete result of a pricing calculation."""
    est_price_min: int
    est_price_max: int
    breakdown: PriceBreakdown
    trace: tuple[TraceStep, ...] = field(default=(), compare=False)

    def get_trace_text(self) -> str:
        """Get human-readable trace as formatted text."""
        lines = []
        for t in self.trace:
            if t.value:
                lines.append(f"• {t.step}: {t.description} = {t.value}")
            else:
                lines.append(f"• {t.step}: {t.description}")
        return "\n".join(lines)

    def to_dict(self) -> dict:
        return {
            "est_price_min": self.est_price_min,
            "est_price_max": self.est_price_max,
            "breakdown": self.breakdown.to_dict(),
        }
