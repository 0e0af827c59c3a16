"""Order creation: validation, bot check, short ids, pricing and storage."""
import asyncio
from dataclasses import replace

import pytest

from refinish_tool.errors import OrderValidationError, BotCheckFailedError, ShortIdExhaustedError
from refinish_tool.services.order_service import OrderService
from refinish_tool.services.order_store import Order


UPLOADS = [
    {'r2_key': 'uploads/1-a.jpg', 'original_filename': 'front.jpg', 'content_type': 'image/jpeg', 'size_bytes': 10},
    {'r2_key': 'uploads/2-b.png', 'original_filename': 'back.png', 'content_type': 'image/png', 'size_bytes': 20},
]


def make_service(store, engine, settings, verifier=None, short_ids=None):
    kwargs = {}
    if verifier:
        kwargs['verifier'] = verifier
    if short_ids is not None:
        ids = iter(short_ids)
        kwargs['short_id_factory'] = lambda: next(ids)
    return OrderService(store, engine, settings, **kwargs)


def run(coro):
    return asyncio.run(coro)


def test_create_prices_and_stores_order(store, engine, settings, order_form):
    service = make_service(store, engine, settings)
    created = run(service.create_order(order_form, UPLOADS))

    assert created.estimate.est_price_min == 10500
    assert created.estimate.est_price_max == 11000

    stored = store.get_order_by_short_id(created.order.short_id)
    assert stored.id == created.order.id
    assert stored.status == 'pending'
    assert (stored.est_price_min, stored.est_price_max) == (10500, 11000)
    assert stored.primary_color == 'red'
    assert stored.grip_count is None

    uploads = store.get_order_uploads(stored.id)
    assert sorted(u.original_filename for u in uploads) == ['back.png', 'front.jpg']


def test_email_data_carries_estimate(store, engine, settings, order_form):
    created = run(make_service(store, engine, settings).create_order(order_form))
    data = created.email_data()

    assert data.short_id == created.order.short_id
    assert data.email == 'pat@example.com'
    assert (data.est_price_min, data.est_price_max) == (10500, 11000)


def test_grips_only_order_uses_paint_defaults(store, engine, settings, order_form):
    order_form.update(
        service_type='grips_only', club_count=None, paint_style=None,
        current_paint_condition=None, primary_color=None,
        grip_service='install_customer_supplied', grip_count=8, grip_size='standard',
    )
    created = run(make_service(store, engine, settings).create_order(order_form))

    # 8 x $5 labor + iron-rate shipping for more than 6 grips
    assert created.estimate.est_price_min == 4000 + 2000
    assert created.order.paint_style is None


def test_invalid_form_stores_nothing(store, engine, settings, order_form):
    order_form['email'] = ''
    with pytest.raises(OrderValidationError) as exc:
        run(make_service(store, engine, settings).create_order(order_form))

    assert exc.value.errors == {'email': 'Email is required'}
    assert store.list_orders()[1] == 0


def test_bot_check_runs_when_secret_configured(store, engine, settings, order_form):
    calls = []

    async def reject(token, secret):
        calls.append((token, secret))
        return False

    settings = replace(settings, turnstile_secret_key='shh')
    with pytest.raises(BotCheckFailedError):
        run(make_service(store, engine, settings, verifier=reject).create_order(order_form))

    assert calls == [('token-123', 'shh')]
    assert store.list_orders()[1] == 0


def test_bot_check_skipped_without_secret(store, engine, settings, order_form):
    async def explode(token, secret):
        raise AssertionError("should not be called")

    created = run(make_service(store, engine, settings, verifier=explode).create_order(order_form))
    assert created.order.short_id


def test_short_id_retries_on_collision(store, engine, settings, order_form):
    store.create_order(Order(
        id='existing', short_id='CM-AAAAAA', full_name='X', email='x@example.com',
        shipping_address='A', preferred_contact_method='email', service_type='putter',
        grip_service='none', est_price_min=1, est_price_max=501,
    ))
    service = make_service(store, engine, settings, short_ids=['CM-AAAAAA', 'CM-BBBBBB'])

    created = run(service.create_order(order_form))
    assert created.order.short_id == 'CM-BBBBBB'


def test_short_id_gives_up_after_ten_attempts(store, engine, settings):
    store.create_order(Order(
        id='existing', short_id='CM-AAAAAA', full_name='X', email='x@example.com',
        shipping_address='A', preferred_contact_method='email', service_type='putter',
        grip_service='none', est_price_min=1, est_price_max=501,
    ))
    service = make_service(store, engine, settings, short_ids=['CM-AAAAAA'] * 10)

    with pytest.raises(ShortIdExhaustedError):
        service.allocate_short_id()


def test_estimate_does_not_store(store, engine, settings):
    service = make_service(store, engine, settings)
    result = service.estimate({'service_type': 'both', 'club_count': 8, 'paint_style': 'match_theme'})

    assert result.breakdown.base_price == 14000
    assert result.breakdown.multi_color_addon == 3500
    assert store.list_orders()[1] == 0
