"""
seo_analyzer/services/webhook_client.py
Forwards an analysis submission to the external automation workflow.
"""
from typing import Any, Dict

import httpx
from loguru import logger

from ..config import get_settings
from ..exceptions import WebhookError, WebhookResponseError

settings = get_settings()


async def post_to_webhook(payload: Dict[str, Any]) -> Any:
    """POST `payload` as JSON and return the decoded response body."""
    try:
        async with httpx.AsyncClient(timeout=settings.webhook_timeout_seconds) as client:
            resp = await client.post(
                settings.webhook_url,
                json=payload,
                headers={"Content-Type": "application/json"},
            )
    except httpx.TimeoutException:
        raise WebhookError(f"Webhook timed out after {settings.webhook_timeout_seconds}s")
    except httpx.HTTPError as e:
        raise WebhookError(f"Webhook request failed: {str(e)[:120]}")

    if not resp.is_success:
        raise WebhookError(f"Webhook responded with status: {resp.status_code} {resp.reason_phrase}")

    try:
        return resp.json()
    except ValueError as e:
        logger.error("Failed to parse webhook response: {}", e)
        raise WebhookResponseError()
