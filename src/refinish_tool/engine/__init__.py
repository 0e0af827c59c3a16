"""Engine subpackage - core pricing logic and price table."""
from .pricing_engine import PricingEngine, calculate_pricing
from .price_table import PriceTable, DEFAULT_PRICES, SHIPPING_VARIANCE, load_price_table
from .models import (
    OrderSpecification, PriceBreakdown, PriceEstimate, TraceStep,
    ServiceType, PaintStyle, PaintCondition, GripService,
)

__all__ = [
    'PricingEngine', 'calculate_pricing',
    'PriceTable', 'DEFAULT_PRICES', 'SHIPPING_VARIANCE', 'load_price_table',
    'OrderSpecification', 'PriceBreakdown', 'PriceEstimate', 'TraceStep',
    'ServiceType', 'PaintStyle', 'PaintCondition', 'GripService',
]
