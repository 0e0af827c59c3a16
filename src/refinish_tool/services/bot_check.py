"""Turnstile bot-check verification."""
from typing import Optional
import logging

import httpx

logger = logging.getLogger(__name__)

TURNSTILE_VERIFY_URL = 'https://challenges.cloudflare.com/turnstile/v0/siteverify'


async def verify_turnstile(
    token: str,
    secret_key: str,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> bool:
    """Return True only if the verify endpoint reports success."""
    if not token:
        return False
    try:
        async with httpx.AsyncClient(timeout=10.0, transport=transport) as client:
            response = await client.post(
                TURNSTILE_VERIFY_URL,
                data={'secret': secret_key, 'response': token},
            )
            response.raise_for_status()
            return response.json().get('success') is True
    except (httpx.HTTPError, ValueError) as e:
        logger.error("Turnstile verification error: %s", e)
        return False
