"""End-to-end API tests against a throwaway data directory."""
import pytest
from fastapi.testclient import TestClient

from refinish_tool.api.main import create_app

JPEG = b'\xff\xd8\xff\xe0' + b'0' * 64
PNG = b'\x89PNG\r\n\x1a\n' + b'0' * 64


@pytest.fixture
def client(settings):
    return TestClient(create_app(settings))


def upload_photos(client):
    response = client.post('/api/uploads', files=[
        ('files', ('front.jpg', JPEG, 'image/jpeg')),
        ('files', ('back.png', PNG, 'image/png')),
    ])
    assert response.status_code == 200, response.text
    return response.json()['uploads']


def test_root(client):
    assert client.get('/').json()['status'] == 'online'


def test_estimate(client):
    response = client.post('/api/estimate', json={
        'service_type': 'both',
        'club_count': 8,
        'paint_style': 'match_theme',
        'current_paint_condition': 'strip_redo',
        'grip_service': 'supply_and_install',
        'grip_count': 8,
    })
    assert response.status_code == 200
    body = response.json()

    assert body['breakdown'] == {
        'base_price': 14000,
        'multi_color_addon': 3500,
        'strip_redo_addon': 2500,
        'grip_cost': 5600,
        'shipping_estimate': 2000,
    }
    assert (body['est_price_min'], body['est_price_max']) == (27600, 28100)
    assert body['price_range'] == '$276 – $281'
    assert [step['step'] for step in body['trace']][0] == 'Base Price'


def test_estimate_defaults(client):
    body = client.post('/api/estimate', json={'service_type': 'irons', 'club_count': 8}).json()
    assert (body['est_price_min'], body['est_price_max']) == (10500, 11000)
    assert body['price_range'] == '$105 – $110'


@pytest.mark.parametrize("payload", [
    {'service_type': 'irons', 'club_count': 15},
    {'service_type': 'driver', 'club_count': 8},
    {'club_count': 8},
])
def test_estimate_rejects_bad_input(client, payload):
    assert client.post('/api/estimate', json=payload).status_code == 422


def test_upload_and_serve_image(client):
    uploads = upload_photos(client)
    assert [u['original_filename'] for u in uploads] == ['front.jpg', 'back.png']

    response = client.get(f"/api/images/{uploads[1]['r2_key']}")
    assert response.status_code == 200
    assert response.content == PNG
    assert response.headers['content-type'] == 'image/png'
    assert response.headers['x-content-type-options'] == 'nosniff'
    assert 'immutable' in response.headers['cache-control']


def test_upload_rejections(client):
    response = client.post('/api/uploads', files=[('files', ('front.jpg', JPEG, 'image/jpeg'))])
    assert response.status_code == 400
    assert response.json()['detail'] == 'Please upload at least 2 photos'

    response = client.post('/api/uploads', files=[
        ('files', ('a.jpg', JPEG, 'image/jpeg')),
        ('files', ('b.gif', b'GIF89a', 'image/gif')),
    ])
    assert response.status_code == 400
    assert 'b.gif' in response.json()['detail']


def test_missing_image(client):
    assert client.get('/api/images/uploads/nope.jpg').status_code == 404


def test_create_and_fetch_order(client, order_form):
    order_form['uploads'] = upload_photos(client)

    response = client.post('/api/orders', json=order_form)
    assert response.status_code == 200, response.text
    created = response.json()
    assert created['success'] is True
    assert created['short_id'].startswith('CM-')
    assert (created['est_price_min'], created['est_price_max']) == (10500, 11000)

    fetched = client.get(f"/api/orders/{created['short_id']}").json()
    assert fetched['order']['full_name'] == 'Pat Golfer'
    assert fetched['order']['status'] == 'pending'
    assert len(fetched['uploads']) == 2


def test_create_order_validation_errors(client, order_form):
    order_form.update(email='nope', club_count=20)
    response = client.post('/api/orders', json=order_form)

    assert response.status_code == 400
    assert response.json()['detail']['errors'] == {
        'email': 'Please enter a valid email address',
        'club_count': 'Maximum 14 clubs per order',
    }


def test_unknown_order(client):
    response = client.get('/api/orders/CM-ZZZZZZ')
    assert response.status_code == 404
    assert response.json()['detail'] == 'Order not found'


def test_admin_update_flow(client, order_form):
    short_id = client.post('/api/orders', json=order_form).json()['short_id']
    order_id = client.get(f'/api/orders/{short_id}').json()['order']['id']

    response = client.post(f'/api/orders/{order_id}/update', json={'status': 'received', 'quoted_price': 11000})
    assert response.json() == {'success': True}

    order = client.get(f'/api/orders/{short_id}').json()['order']
    assert order['status'] == 'received'
    assert order['quoted_price'] == 11000

    bad = client.post(f'/api/orders/{order_id}/update', json={'status': 'lost'})
    assert bad.status_code == 400 and bad.json()['detail'] == 'Invalid status value'

    empty = client.post(f'/api/orders/{order_id}/update', json={})
    assert empty.status_code == 400 and empty.json()['detail'] == 'No updates provided'

    missing = client.post('/api/orders/nope/update', json={'status': 'received'})
    assert missing.status_code == 404


def test_list_orders_and_stats(client, order_form):
    for name in ('First', 'Second'):
        order_form['full_name'] = name
        client.post('/api/orders', json=order_form)

    body = client.get('/api/orders', params={'limit': 1}).json()
    assert body['total'] == 2
    assert [o['full_name'] for o in body['orders']] == ['Second']

    assert client.get('/api/orders', params={'limit': 0}).status_code == 400
    assert client.get('/api/orders/stats').json() == {'total': 2, 'by_status': {'pending': 2}}
