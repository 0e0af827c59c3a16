"""
Price table - the fixed amounts (in cents) the engine draws from.

Kept as data so price changes never touch the tier logic. An override
table can be loaded from a two-column CSV (key,cents).
"""
from dataclasses import dataclass, fields, replace
from pathlib import Path

import pandas as pd

from ..errors import PriceTableError


@dataclass(frozen=True)
class PriceTable:
    """All prices in cents."""
    irons_7_9: int = 8500
    irons_4_6: int = 6500
    single_club: int = 4000
    putter: int = 5500
    multi_color_irons: int = 2000
    multi_color_putter: int = 1500
    strip_redo: int = 2500
    grip_customer_supplied: int = 500  # per grip
    grip_supply_install: int = 700  # per grip, labor only
    shipping_irons: int = 2000
    shipping_putter: int = 1500

    @classmethod
    def keys(cls) -> list[str]:
        return [f.name for f in fields(cls)]

    def to_dict(self) -> dict[str, int]:
        return {key: getattr(self, key) for key in self.keys()}


DEFAULT_PRICES = PriceTable()

# $5 buffer between the low and high end of every estimate
SHIPPING_VARIANCE = 500


def load_price_table(path: Path, base: PriceTable = DEFAULT_PRICES) -> PriceTable:
    """
    Load a price table override from CSV.

    Expected columns: ``key`` and ``cents``. Keys not present in the file
    keep the value from ``base``.

    Raises:
        PriceTableError: missing, empty or unparseable file, missing columns,
            unknown keys, or values that are not non-negative whole cents.
    """
    path = Path(path)
    if not path.exists():
        raise PriceTableError(f"Price table not found at {path}")

    try:
        df = pd.read_csv(path, dtype=str).fillna('')
    except (pd.errors.EmptyDataError, pd.errors.ParserError) as e:
        raise PriceTableError(f"Price table {path.name} could not be read: {e}") from e
    df.columns = [c.strip().lower() for c in df.columns]

    missing = {'key', 'cents'} - set(df.columns)
    if missing:
        raise PriceTableError(f"Price table {path.name} is missing columns: {', '.join(sorted(missing))}")

    known = set(PriceTable.keys())
    overrides = {}
    errors = []

    for _, row in df.iterrows():
        key = row['key'].strip()
        raw = row['cents'].strip()
        if not key:
            continue
        if key not in known:
            errors.append(f"Unknown price key '{key}'")
            continue
        # ASCII only: isdigit() also accepts characters like '²' that int() rejects
        if not (raw.isascii() and raw.isdigit()):
            errors.append(f"Price for '{key}' must be a non-negative whole number of cents, got '{raw}'")
            continue
        overrides[key] = int(raw)

    if errors:
        raise PriceTableError("; ".join(errors))

    return replace(base, **overrides)
