"""
Credential Generation

Secrets handed to tenants: webhook signing secrets and API keys.
"""

import secrets

from ..config import get_config


def generate_webhook_secret() -> str:
    """Return a URL-safe random signing secret for a new webhook."""
    return secrets.token_urlsafe(get_config().webhook_secret_bytes)


def generate_api_key() -> str:
    """
    Return a new API key.

    Keys carry the configured prefix (``nk_`` by default) so they can be
    recognized in logs and secret scanners.
    """
    config = get_config()
    return f"{config.api_key_prefix}{secrets.token_urlsafe(config.api_key_token_bytes)}"
