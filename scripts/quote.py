#!/usr/bin/env python
"""
Print a price estimate for an order from the command line.

Usage:
    python scripts/quote.py irons --clubs 8
    python scripts/quote.py both --clubs 7 --style match_theme --condition strip_redo
    python scripts/quote.py grips_only --grips supply_and_install --grip-count 8
    python scripts/quote.py putter --prices data/prices.csv
"""
import argparse
import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from refinish_tool.engine import (
    PricingEngine, OrderSpecification, load_price_table,
    ServiceType, PaintStyle, PaintCondition, GripService,
)
from refinish_tool.engine.formatting import format_price_range, format_service_type
from refinish_tool.errors import PriceTableError


def _choices(enum_cls):
    return [e.value for e in enum_cls]


def main():
    parser = argparse.ArgumentParser(description="Estimate a refinishing order")
    parser.add_argument('service', choices=_choices(ServiceType))
    parser.add_argument('--clubs', type=int, default=0)
    parser.add_argument('--style', choices=_choices(PaintStyle), default='single_color')
    parser.add_argument('--condition', choices=_choices(PaintCondition), default='good')
    parser.add_argument('--grips', choices=_choices(GripService), default='none')
    parser.add_argument('--grip-count', type=int, default=0)
    parser.add_argument('--prices', type=Path, help="Price table override CSV (key,cents)")
    args = parser.parse_args()

    try:
        prices = load_price_table(args.prices) if args.prices else None
    except PriceTableError as e:
        print(f"ERROR: {e}")
        sys.exit(1)

    spec = OrderSpecification(
        service_type=ServiceType(args.service),
        club_count=args.clubs,
        paint_style=PaintStyle(args.style),
        current_paint_condition=PaintCondition(args.condition),
        grip_service=GripService(args.grips),
        grip_count=args.grip_count,
    )
    result = PricingEngine(prices).calculate(spec)

    print("=" * 60)
    print(f"ESTIMATE: {format_service_type(spec.service_type)}")
    print("=" * 60)
    print(result.get_trace_text())
    print()
    for name, cents in result.breakdown.to_dict().items():
        print(f"  {name:<20} ${cents / 100:>8.2f}")
    print()
    print(f"Estimated price: {format_price_range(result.est_price_min, result.est_price_max)}")


if __name__ == "__main__":
    main()
