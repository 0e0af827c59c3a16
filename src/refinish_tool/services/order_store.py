"""
Order Store - CSV-backed persistence for orders and their photo uploads.

Two files live in the data directory:
- orders.csv: one row per order
- order_uploads.csv: one row per stored photo, linked by order_id
"""
import csv
import threading
from dataclasses import dataclass, asdict, fields
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional
import logging

from ..errors import OrderNotFoundError

logger = logging.getLogger(__name__)

_UNSET = object()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _opt_str(value: str) -> Optional[str]:
    return value if value else None


def _opt_int(value: str) -> Optional[int]:
    return int(value) if value not in (None, '') else None


@dataclass
class Order:
    """A stored order."""
    id: str
    short_id: str
    full_name: str
    email: str
    shipping_address: str
    preferred_contact_method: str
    service_type: str
    grip_service: str
    est_price_min: int
    est_price_max: int
    created_at: str = ''
    status: str = 'pending'
    phone: Optional[str] = None
    club_count: Optional[int] = None
    current_paint_condition: Optional[str] = None
    paint_style: Optional[str] = None
    primary_color: Optional[str] = None
    secondary_color: Optional[str] = None
    notes: Optional[str] = None
    grip_count: Optional[int] = None
    grip_model: Optional[str] = None
    grip_size: Optional[str] = None
    extra_wraps: Optional[int] = None
    quoted_price: Optional[int] = None
    admin_notes: Optional[str] = None

    INT_FIELDS = ('club_count', 'grip_count', 'extra_wraps', 'quoted_price')

    def to_csv_row(self) -> dict:
        """Convert to CSV row format."""
        return {key: '' if value is None else str(value) for key, value in asdict(self).items()}

    @classmethod
    def from_csv_row(cls, row: dict) -> 'Order':
        """Create Order from CSV row."""
        values = {}
        for f in fields(cls):
            raw = row.get(f.name, '') or ''
            if f.name in ('est_price_min', 'est_price_max'):
                values[f.name] = int(raw or 0)
            elif f.name in cls.INT_FIELDS:
                values[f.name] = _opt_int(raw)
            elif f.name in ('phone', 'current_paint_condition', 'paint_style', 'primary_color',
                            'secondary_color', 'notes', 'grip_model', 'grip_size', 'admin_notes'):
                values[f.name] = _opt_str(raw)
            else:
                values[f.name] = raw
        return cls(**values)


@dataclass
class OrderUpload:
    """A photo stored for an order."""
    id: str
    order_id: str
    r2_key: str
    original_filename: str
    content_type: str
    size_bytes: int
    created_at: str = ''

    def to_csv_row(self) -> dict:
        return {key: str(value) for key, value in asdict(self).items()}

    @classmethod
    def from_csv_row(cls, row: dict) -> 'OrderUpload':
        return cls(
            id=row.get('id', ''),
            order_id=row.get('order_id', ''),
            r2_key=row.get('r2_key', ''),
            original_filename=row.get('original_filename', ''),
            content_type=row.get('content_type', ''),
            size_bytes=int(row.get('size_bytes') or 0),
            created_at=row.get('created_at', ''),
        )


class OrderStore:
    """Service for reading and writing orders."""

    ORDER_COLUMNS = [f.name for f in fields(Order)]
    UPLOAD_COLUMNS = [f.name for f in fields(OrderUpload)]

    def __init__(self, orders_csv_path: Path, uploads_csv_path: Path):
        self.orders_csv_path = Path(orders_csv_path)
        self.uploads_csv_path = Path(uploads_csv_path)
        self._lock = threading.RLock()
        self.orders_csv_path.parent.mkdir(parents=True, exist_ok=True)
        self.uploads_csv_path.parent.mkdir(parents=True, exist_ok=True)

    # ------------------------------------------------------------------
    # File helpers
    # ------------------------------------------------------------------

    def _read_rows(self, path: Path) -> list[dict]:
        if not path.exists():
            return []
        with open(path, 'r', encoding='utf-8', newline='') as f:
            return list(csv.DictReader(f))

    def _write_rows(self, path: Path, columns: list[str], rows: list[dict]):
        tmp_path = path.with_suffix(path.suffix + '.tmp')
        with open(tmp_path, 'w', encoding='utf-8', newline='') as f:
            writer = csv.DictWriter(f, fieldnames=columns)
            writer.writeheader()
            for row in rows:
                writer.writerow(row)
        tmp_path.replace(path)

    def _append_row(self, path: Path, columns: list[str], row: dict):
        new_file = not path.exists()
        with open(path, 'a', encoding='utf-8', newline='') as f:
            writer = csv.DictWriter(f, fieldnames=columns)
            if new_file:
                writer.writeheader()
            writer.writerow(row)

    def _load_orders(self) -> list[Order]:
        return [Order.from_csv_row(row) for row in self._read_rows(self.orders_csv_path) if row.get('id')]

    # ------------------------------------------------------------------
    # Orders
    # ------------------------------------------------------------------

    def create_order(self, order: Order) -> Order:
        """Insert a new order."""
        with self._lock:
            if self.get_order_by_id(order.id):
                raise ValueError(f"Order with ID '{order.id}' already exists")
            if self.short_id_exists(order.short_id):
                raise ValueError(f"Short ID '{order.short_id}' already in use")
            if not order.created_at:
                order.created_at = _now()
            self._append_row(self.orders_csv_path, self.ORDER_COLUMNS, order.to_csv_row())
        logger.info("Stored order %s (%s)", order.short_id, order.id)
        return order

    def get_order_by_id(self, order_id: str) -> Optional[Order]:
        for order in self._load_orders():
            if order.id == order_id:
                return order
        return None

    def get_order_by_short_id(self, short_id: str) -> Optional[Order]:
        for order in self._load_orders():
            if order.short_id == short_id:
                return order
        return None

    def short_id_exists(self, short_id: str) -> bool:
        return self.get_order_by_short_id(short_id) is not None

    def list_orders(self, status: Optional[str] = None, limit: int = 50, offset: int = 0) -> tuple[list[Order], int]:
        """
        List orders newest first.

        Returns (page of orders, total matching count). A status of None or
        "all" disables filtering.
        """
        orders = self._load_orders()
        if status and status != 'all':
            orders = [o for o in orders if o.status == status]

        # Reverse first so equal timestamps keep newest-inserted first
        orders = sorted(reversed(orders), key=lambda o: o.created_at, reverse=True)
        total = len(orders)
        return orders[offset:offset + limit], total

    def update_order_admin(self, order_id: str, status=_UNSET, quoted_price=_UNSET, admin_notes=_UNSET) -> Order:
        """
        Update admin-managed fields. Only arguments that are passed change.

        Raises:
            OrderNotFoundError: no order with this id
        """
        with self._lock:
            orders = self._load_orders()
            for order in orders:
                if order.id == order_id:
                    break
            else:
                raise OrderNotFoundError(order_id)

            if status is not _UNSET:
                order.status = status
            if quoted_price is not _UNSET:
                order.quoted_price = quoted_price
            if admin_notes is not _UNSET:
                order.admin_notes = admin_notes

            self._write_rows(self.orders_csv_path, self.ORDER_COLUMNS, [o.to_csv_row() for o in orders])

        logger.info("Updated order %s (status=%s)", order.short_id, order.status)
        return order

    # ------------------------------------------------------------------
    # Uploads
    # ------------------------------------------------------------------

    def create_order_upload(self, upload: OrderUpload) -> OrderUpload:
        with self._lock:
            if not upload.created_at:
                upload.created_at = _now()
            self._append_row(self.uploads_csv_path, self.UPLOAD_COLUMNS, upload.to_csv_row())
        return upload

    def get_order_uploads(self, order_id: str) -> list[OrderUpload]:
        """Uploads for an order, oldest first."""
        uploads = [
            OrderUpload.from_csv_row(row)
            for row in self._read_rows(self.uploads_csv_path)
            if row.get('order_id') == order_id
        ]
        return sorted(uploads, key=lambda u: u.created_at)

    def get_stats(self) -> dict:
        """Order counts by status."""
        orders = self._load_orders()
        by_status = {}
        for o in orders:
            by_status[o.status] = by_status.get(o.status, 0) + 1
        return {
            'total': len(orders),
            'by_status': by_status,
        }
