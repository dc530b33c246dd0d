"""Report delivery via the Telegram Bot API."""

from __future__ import annotations

import logging

import requests

from .config import TELEGRAM_API_URL

logger = logging.getLogger(__name__)


def send_report(
    message: str,
    token: str,
    chat_id: str,
    timeout: float = 10.0,
) -> bool:
    """Post ``message`` to the chat; return whether Telegram accepted it."""
    url = TELEGRAM_API_URL.format(token=token)
    try:
        response = requests.post(
            url,
            data={"chat_id": chat_id, "text": message},
            timeout=timeout,
        )
        response.raise_for_status()
    except requests.RequestException as exc:
        # The exception text may embed the request URL, which carries the token.
        detail = str(exc)
        if token:
            detail = detail.replace(f"bot{token}", "bot***")
        logger.error("Failed to send report to Telegram chat %s: %s", chat_id, detail)
        return False

    logger.info("Sent report to Telegram chat %s (%d chars)", chat_id, len(message))
    return True
