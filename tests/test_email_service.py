"""Email rendering, Resend delivery and Turnstile verification."""
import asyncio
import json
from dataclasses import replace

import httpx
import pytest

from refinish_tool.services.bot_check import verify_turnstile, TURNSTILE_VERIFY_URL
from refinish_tool.services.email_service import EmailService, OrderEmailData, RESEND_API_URL


@pytest.fixture
def email_data():
    return OrderEmailData(
        order_id='0f6c-uuid',
        short_id='CM-7KQ2XD',
        full_name='Pat <Golfer>',
        email='pat@example.com',
        service_type='both',
        est_price_min=27600,
        est_price_max=28100,
    )


@pytest.fixture
def email_settings(settings):
    return replace(
        settings,
        resend_api_key='re_test',
        admin_email='shop@example.com',
        ship_to_address='Cmart Shop, 1 Main St, Springfield',
        site_url='https://shop.example.com',
    )


class Recorder:
    """httpx transport handler that records requests."""

    def __init__(self, status=200, body=None):
        self.status = status
        self.body = body if body is not None else {'id': 'email-1'}
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status, json=self.body)


def test_customer_email_content(email_settings, email_data):
    message = EmailService(email_settings).render_customer_email(email_data)

    assert message.to == ['pat@example.com']
    assert message.subject == 'We got your customization request — CM-7KQ2XD'
    assert '$276 – $281' in message.html
    assert '$276 – $281' in message.text
    assert 'Iron &amp; Putter Paint Fill' in message.html
    assert 'Iron & Putter Paint Fill' in message.text
    assert 'Pat &lt;Golfer&gt;' in message.html
    assert 'Cmart Shop<br>1 Main St<br>Springfield' in message.html


def test_admin_email_content(email_settings, email_data):
    message = EmailService(email_settings).render_admin_email(email_data)

    assert message.to == ['shop@example.com']
    assert message.subject == 'New order — CM-7KQ2XD'
    assert 'https://shop.example.com/admin/orders/0f6c-uuid' in message.text


def test_send_posts_to_resend(email_settings, email_data):
    recorder = Recorder()
    service = EmailService(email_settings, transport=httpx.MockTransport(recorder))

    results = asyncio.run(service.send_order_emails(email_data))

    assert results == {'customer': True, 'admin': True}
    assert len(recorder.requests) == 2
    request = recorder.requests[0]
    assert str(request.url) == RESEND_API_URL
    assert request.headers['Authorization'] == 'Bearer re_test'
    payload = json.loads(request.content)
    assert payload['to'] == ['pat@example.com']
    assert payload['from'] == 'Cmart Customization Shop <noreply@cmart073.com>'


def test_admin_email_skipped_without_address(email_settings, email_data):
    recorder = Recorder()
    settings = replace(email_settings, admin_email=None)
    service = EmailService(settings, transport=httpx.MockTransport(recorder))

    results = asyncio.run(service.send_order_emails(email_data))

    assert results == {'customer': True}
    assert len(recorder.requests) == 1


def test_send_failure_returns_false(email_settings, email_data):
    service = EmailService(email_settings, transport=httpx.MockTransport(Recorder(status=500)))
    message = service.render_customer_email(email_data)
    assert asyncio.run(service.send(message)) is False


def test_send_connection_error_returns_false(email_settings, email_data):
    def fail(request):
        raise httpx.ConnectError("down", request=request)

    service = EmailService(email_settings, transport=httpx.MockTransport(fail))
    assert asyncio.run(service.send(service.render_customer_email(email_data))) is False


def test_send_disabled_without_api_key(settings, email_data):
    recorder = Recorder()
    service = EmailService(settings, transport=httpx.MockTransport(recorder))

    assert asyncio.run(service.send(service.render_customer_email(email_data))) is False
    assert recorder.requests == []


@pytest.mark.parametrize("body,expected", [
    ({'success': True}, True),
    ({'success': False, 'error-codes': ['invalid-input-response']}, False),
    ({}, False),
])
def test_verify_turnstile(body, expected):
    recorder = Recorder(body=body)
    result = asyncio.run(verify_turnstile('tok', 'secret', transport=httpx.MockTransport(recorder)))

    assert result is expected
    assert str(recorder.requests[0].url) == TURNSTILE_VERIFY_URL
    assert b'secret=secret' in recorder.requests[0].content
    assert b'response=tok' in recorder.requests[0].content


def test_verify_turnstile_errors_are_failures():
    def fail(request):
        raise httpx.ConnectError("down", request=request)

    assert asyncio.run(verify_turnstile('tok', 'secret', transport=httpx.MockTransport(fail))) is False
    assert asyncio.run(verify_turnstile('', 'secret')) is False
