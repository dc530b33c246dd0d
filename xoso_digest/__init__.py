"""Daily lottery-result digest delivered to Telegram."""
