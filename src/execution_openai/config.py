"""Environment-derived settings and defaults."""

from __future__ import annotations

import os

PROVIDER_NAME = "openai"
DEFAULT_MODEL = "gpt-4"
DEFAULT_BASE_URL = "https://api.openai.com"
CHAT_PATH = "/v1/chat/completions"

OPENAI_API_KEY_ENV = "OPENAI_API_KEY"
OPENAI_BASE_URL_ENV = "OPENAI_BASE_URL"
ENVIRONMENT_ENV = "EXECUTION_ENV"

_PROXY_ENV_VARS = ("HTTPS_PROXY", "https_proxy", "HTTP_PROXY", "http_proxy")


def get_api_key() -> str | None:
    """Return the fallback API key from the environment, if any."""
    return os.environ.get(OPENAI_API_KEY_ENV) or None


def get_base_url() -> str:
    return os.environ.get(OPENAI_BASE_URL_ENV) or DEFAULT_BASE_URL


def get_proxy_url() -> str | None:
    """Return the first configured proxy URL, HTTPS taking precedence."""
    for var in _PROXY_ENV_VARS:
        value = os.environ.get(var)
        if value:
            return value
    return None


def get_environment() -> str:
    """Return ``"production"`` or ``"development"``."""
    value = (os.environ.get(ENVIRONMENT_ENV) or "").strip().lower()
    return "production" if value == "production" else "development"
