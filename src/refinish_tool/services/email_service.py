"""
Email Service - order confirmation and admin notification via Resend.

Rendering is plain string formatting; delivery is a single JSON POST.
Failures are logged and reported as False, never raised, so an email
problem cannot fail an order that is already stored.
"""
from dataclasses import dataclass
from datetime import datetime
from html import escape
from typing import Optional
import logging

import httpx

from ..config.settings import Settings
from ..engine.formatting import format_price_range, format_service_type

logger = logging.getLogger(__name__)

RESEND_API_URL = 'https://api.resend.com/emails'
SHOP_NAME = 'Cmart Customization Shop'


@dataclass
class OrderEmailData:
    """Fields needed to render order emails."""
    order_id: str
    short_id: str
    full_name: str
    email: str
    service_type: str
    est_price_min: int
    est_price_max: int


@dataclass
class EmailMessage:
    to: list[str]
    subject: str
    html: str
    text: str


class EmailService:
    """Renders and sends transactional emails."""

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self._transport = transport

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render_customer_email(self, data: OrderEmailData) -> EmailMessage:
        price_range = format_price_range(data.est_price_min, data.est_price_max)
        service = format_service_type(data.service_type)
        ship_to = self.settings.ship_to_address
        year = datetime.now().year

        html = f"""<!DOCTYPE html>
<html>
<body style="font-family: -apple-system, sans-serif; line-height: 1.6; max-width: 600px; margin: 0 auto; padding: 20px;">
  <h1 style="color: #1e3a2f;">{SHOP_NAME}</h1>
  <h2>Thank you, {escape(data.full_name)}!</h2>
  <p>We've received your customization request. Your order reference is:</p>
  <p style="font-size: 28px; font-weight: 700; letter-spacing: 2px;">{escape(data.short_id)}</p>
  <h3>Next Steps</h3>
  <p><strong>Ship your clubs to:</strong><br>{'<br>'.join(escape(part.strip()) for part in ship_to.split(','))}</p>
  <table style="width: 100%;">
    <tr><td><strong>Service:</strong></td><td style="text-align: right;">{escape(service)}</td></tr>
    <tr><td><strong>Estimated Price:</strong></td><td style="text-align: right;">{price_range}</td></tr>
    <tr><td><strong>Turnaround:</strong></td><td style="text-align: right;">2–5 business days after receipt</td></tr>
  </table>
  <p><strong>Please note:</strong> All services are cosmetic only. We do not modify club performance or specifications.</p>
  <p style="color: #666; font-size: 14px;">Questions? Reply to this email and we'll get back to you promptly.</p>
  <p style="color: #666; font-size: 12px;">© {year} {SHOP_NAME}</p>
</body>
</html>"""

        text = f"""Thank you, {data.full_name}!

We've received your customization request.

Order Reference: {data.short_id}

NEXT STEPS
Ship your clubs to:
{ship_to}

Service: {service}
Estimated Price: {price_range}
Turnaround: 2–5 business days after receipt

IMPORTANT: All services are cosmetic only. We do not modify club performance or specifications.

Questions? Reply to this email and we'll get back to you promptly.

© {year} {SHOP_NAME}"""

        return EmailMessage(
            to=[data.email],
            subject=f"We got your customization request — {data.short_id}",
            html=html,
            text=text,
        )

    def admin_link(self, order_id: str) -> str:
        return f"{self.settings.site_url}/admin/orders/{order_id}"

    def render_admin_email(self, data: OrderEmailData) -> EmailMessage:
        price_range = format_price_range(data.est_price_min, data.est_price_max)
        service = format_service_type(data.service_type)
        link = self.admin_link(data.order_id)

        html = f"""<!DOCTYPE html>
<html>
<body style="font-family: -apple-system, sans-serif; padding: 20px; max-width: 600px; margin: 0 auto;">
  <h1 style="color: #1e3a2f; font-size: 20px;">New Order</h1>
  <table style="width: 100%;">
    <tr><td><strong>Order ID:</strong></td><td>{escape(data.short_id)}</td></tr>
    <tr><td><strong>Name:</strong></td><td>{escape(data.full_name)}</td></tr>
    <tr><td><strong>Email:</strong></td><td>{escape(data.email)}</td></tr>
    <tr><td><strong>Service:</strong></td><td>{escape(service)}</td></tr>
    <tr><td><strong>Estimate:</strong></td><td>{price_range}</td></tr>
  </table>
  <p><a href="{escape(link)}">View Order</a></p>
</body>
</html>"""

        text = f"""New Order

Order ID: {data.short_id}
Name: {data.full_name}
Email: {data.email}
Service: {service}
Estimate: {price_range}

View Order: {link}"""

        return EmailMessage(
            to=[self.settings.admin_email] if self.settings.admin_email else [],
            subject=f"New order — {data.short_id}",
            html=html,
            text=text,
        )

    # ------------------------------------------------------------------
    # Delivery
    # ------------------------------------------------------------------

    async def send(self, message: EmailMessage) -> bool:
        """POST a message to Resend. Returns True on a 2xx response."""
        if not self.settings.emails_enabled:
            logger.info("Email disabled (no RESEND_API_KEY), skipping '%s'", message.subject)
            return False
        if not message.to:
            logger.warning("Email '%s' has no recipients, skipping", message.subject)
            return False

        payload = {
            'from': f"{SHOP_NAME} <{self.settings.from_email}>",
            'to': message.to,
            'subject': message.subject,
            'html': message.html,
            'text': message.text,
        }
        headers = {'Authorization': f"Bearer {self.settings.resend_api_key}"}

        try:
            async with httpx.AsyncClient(timeout=10.0, transport=self._transport) as client:
                response = await client.post(RESEND_API_URL, json=payload, headers=headers)
                response.raise_for_status()
            logger.info("Sent email '%s' to %s", message.subject, ", ".join(message.to))
            return True
        except httpx.HTTPStatusError as e:
            logger.error("Resend returned status %s for '%s': %s",
                         e.response.status_code, message.subject, e.response.text[:500])
        except httpx.RequestError as e:
            logger.error("Could not reach Resend for '%s': %s", message.subject, e)
        return False

    async def send_order_emails(self, data: OrderEmailData) -> dict[str, bool]:
        """Send the customer confirmation and, if configured, the admin notification."""
        results = {'customer': await self.send(self.render_customer_email(data))}
        if self.settings.admin_email_enabled:
            results['admin'] = await self.send(self.render_admin_email(data))
        return results
