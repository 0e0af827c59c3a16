"""
Pricing Engine - maps an order specification to a price range.

Resolution order:
1. Base price from service type (club-count tier for irons)
2. Multi-color addon per painted part
3. Strip & redo surcharge
4. Grip labor
5. Shipping tier
6. Totals with the fixed shipping variance buffer

Every branch has a zero default, so any input (including values outside
the enum domains) produces a result. Validation happens before this point.
"""
from typing import Optional

from .models import (
    OrderSpecification, PriceBreakdown, PriceEstimate, TraceStep,
    ServiceType, PaintCondition, GripService,
    IRON_SERVICES, PUTTER_SERVICES, MULTI_COLOR_STYLES,
)
from .price_table import PriceTable, DEFAULT_PRICES, SHIPPING_VARIANCE


def _cents(value: int) -> str:
    return f"${value / 100:.2f}"


def _count(value: Optional[int]) -> int:
    return value or 0


class PricingEngine:
    """
    Stateless calculator bound to a price table.

    Safe to share between threads and requests.
    """

    def __init__(self, prices: Optional[PriceTable] = None):
        self.prices = prices or DEFAULT_PRICES

    def club_tier_price(self, club_count: int) -> tuple[int, str]:
        """
        Iron paint fill price for a club count.

        Returns (cents, tier description). Counts of 0 or below match no tier.
        """
        p = self.prices
        if 7 <= club_count <= 9:
            return p.irons_7_9, "7-9 clubs"
        if 4 <= club_count <= 6:
            return p.irons_4_6, "4-6 clubs"
        if club_count == 1:
            return p.single_club, "single club"
        if club_count in (2, 3):
            # Per-club pricing, never more than the 4-6 flat rate
            return min(p.single_club * club_count, p.irons_4_6), f"{club_count} clubs (capped at 4-6 rate)"
        if club_count > 9:
            return p.irons_7_9, f"{club_count} clubs (7-9 rate)"
        return 0, "no club tier"

    def calculate(self, spec: OrderSpecification) -> PriceEstimate:
        """
        Calculate the estimate with a trace of each step.

        Args:
            spec: OrderSpecification built from validated form fields

        Returns:
            PriceEstimate with breakdown and trace
        """
        p = self.prices
        trace = []
        club_count = _count(spec.club_count)
        grip_count = _count(spec.grip_count)

        # 1. Base price
        base_price = 0
        if spec.service_type == ServiceType.GRIPS_ONLY:
            trace.append(TraceStep("Base Price", "Grips only, no paint fill", _cents(0)))
        elif spec.service_type == ServiceType.PUTTER:
            base_price = p.putter
            trace.append(TraceStep("Base Price", "Putter paint fill", _cents(base_price)))
        elif spec.service_type in IRON_SERVICES:
            base_price, tier = self.club_tier_price(club_count)
            trace.append(TraceStep("Base Price", f"Iron paint fill, {tier}", _cents(base_price)))
            if spec.service_type == ServiceType.BOTH:
                base_price += p.putter
                trace.append(TraceStep("Base Price", "Putter added", _cents(base_price)))
        else:
            trace.append(TraceStep("Base Price", f"Unrecognized service type {spec.service_type!r}", _cents(0)))

        # 2. Multi-color addon
        multi_color_addon = 0
        if spec.paint_style in MULTI_COLOR_STYLES:
            if spec.service_type in IRON_SERVICES:
                multi_color_addon += p.multi_color_irons
            if spec.service_type in PUTTER_SERVICES:
                multi_color_addon += p.multi_color_putter
            if multi_color_addon:
                trace.append(TraceStep("Multi-Color", "Multi-color paint style", _cents(multi_color_addon)))

        # 3. Strip & redo (applies to any service type)
        strip_redo_addon = 0
        if spec.current_paint_condition == PaintCondition.STRIP_REDO:
            strip_redo_addon = p.strip_redo
            trace.append(TraceStep("Strip & Redo", "Existing paint removed first", _cents(strip_redo_addon)))

        # 4. Grip labor
        grip_cost = 0
        if spec.grip_service == GripService.INSTALL_CUSTOMER_SUPPLIED and grip_count > 0:
            grip_cost = p.grip_customer_supplied * grip_count
            trace.append(TraceStep("Grips", f"Install {grip_count} customer grips", _cents(grip_cost)))
        elif spec.grip_service == GripService.SUPPLY_AND_INSTALL and grip_count > 0:
            # Labor only; the grips themselves are quoted separately
            grip_cost = p.grip_supply_install * grip_count
            trace.append(TraceStep("Grips", f"Supply & install {grip_count} grips (labor)", _cents(grip_cost)))

        # 5. Shipping
        if spec.service_type == ServiceType.PUTTER:
            shipping_estimate = p.shipping_putter
            trace.append(TraceStep("Shipping", "Putter shipping", _cents(shipping_estimate)))
        elif spec.service_type == ServiceType.GRIPS_ONLY:
            # Grip volume stands in for package size
            if grip_count > 6:
                shipping_estimate = p.shipping_irons
                trace.append(TraceStep("Shipping", f"{grip_count} grips, iron set rate", _cents(shipping_estimate)))
            else:
                shipping_estimate = p.shipping_putter
                trace.append(TraceStep("Shipping", f"{grip_count} grips, putter rate", _cents(shipping_estimate)))
        else:
            shipping_estimate = p.shipping_irons
            trace.append(TraceStep("Shipping", "Iron set shipping", _cents(shipping_estimate)))

        breakdown = PriceBreakdown(
            base_price=base_price,
            multi_color_addon=multi_color_addon,
            strip_redo_addon=strip_redo_addon,
            grip_cost=grip_cost,
            shipping_estimate=shipping_estimate,
        )

        # 6. Totals
        est_price_min = breakdown.subtotal + shipping_estimate
        est_price_max = est_price_min + SHIPPING_VARIANCE
        trace.append(TraceStep("Subtotal", "Base + addons + grips", _cents(breakdown.subtotal)))
        trace.append(TraceStep("Estimate", "Subtotal + shipping (+ variance)",
                               f"{_cents(est_price_min)} - {_cents(est_price_max)}"))

        return PriceEstimate(
            est_price_min=est_price_min,
            est_price_max=est_price_max,
            breakdown=breakdown,
            trace=tuple(trace),
        )


_default_engine = PricingEngine()


def calculate_pricing(spec: OrderSpecification, prices: Optional[PriceTable] = None) -> PriceEstimate:
    """Calculate an estimate using ``prices`` (or the default table)."""
    if prices is None:
        return _default_engine.calculate(spec)
    return PricingEngine(prices).calculate(spec)
