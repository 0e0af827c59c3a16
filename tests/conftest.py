import os
import sys

import pytest

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from refinish_tool.config.settings import Settings
from refinish_tool.engine import PricingEngine
from refinish_tool.services.order_store import OrderStore
from refinish_tool.services.upload_service import UploadService


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at a throwaway data dir, emails and bot check off."""
    return Settings(
        project_root=tmp_path,
        data_dir=tmp_path,
        orders_csv=tmp_path / 'orders.csv',
        uploads_csv=tmp_path / 'order_uploads.csv',
        upload_dir=tmp_path / 'objects',
    )


@pytest.fixture
def engine():
    return PricingEngine()


@pytest.fixture
def store(settings):
    return OrderStore(settings.orders_csv, settings.uploads_csv)


@pytest.fixture
def upload_service(settings):
    return UploadService(settings.upload_dir)


@pytest.fixture
def order_form():
    """A complete, valid irons + grips submission."""
    return {
        'full_name': 'Pat Golfer',
        'email': 'pat@example.com',
        'phone': '555-0100',
        'shipping_address': '1 Fairway Dr, Springfield',
        'preferred_contact_method': 'email',
        'service_type': 'irons',
        'club_count': 8,
        'current_paint_condition': 'good',
        'paint_style': 'single_color',
        'primary_color': 'red',
        'secondary_color': None,
        'notes': None,
        'grip_service': 'none',
        'grip_count': None,
        'grip_model': None,
        'grip_size': None,
        'extra_wraps': None,
        'turnstile_token': 'token-123',
    }
