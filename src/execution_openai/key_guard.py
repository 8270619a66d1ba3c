"""OpenAI credential validation and redaction registration."""

from __future__ import annotations

import re
from functools import cache

from execution_openai.config import OPENAI_API_KEY_ENV, PROVIDER_NAME, get_api_key, get_environment
from execution_openai.errors import InvalidCredentialError, MissingCredentialError
from execution_openai.redaction import SecretPattern, get_redactor
from execution_openai.sanitize import (
    CustomPattern,
    configure_error_sanitizer,
    configure_secret_guard,
)

# first entry is the full accepted key shape and must be applied first
OPENAI_KEY_PATTERNS = (
    re.compile(r"sk-(?:proj-)?[a-zA-Z0-9_-]{20,}"),
    re.compile(r"sk-[a-zA-Z0-9]{20,}"),
    re.compile(r"sk-proj-[a-zA-Z0-9_-]+"),
)


def is_valid_api_key(key: str) -> bool:
    return OPENAI_KEY_PATTERNS[0].fullmatch(key) is not None


@cache
def register_openai_secrets() -> None:
    """Register OpenAI key patterns and configure error sanitization.

    Runs once per process; later calls are no-ops.
    """
    get_redactor().register(
        SecretPattern(
            name=PROVIDER_NAME,
            patterns=OPENAI_KEY_PATTERNS,
            validator=is_valid_api_key,
            env_var=OPENAI_API_KEY_ENV,
            description="OpenAI API keys",
        )
    )

    production = get_environment() == "production"
    configure_error_sanitizer(
        enabled=True,
        environment="production" if production else "development",
        include_correlation_id=True,
        sanitize_stack_traces=production,
        max_message_length=500,
    )
    configure_secret_guard(
        enabled=True,
        redaction_text="[REDACTED]",
        preserve_partial=False,
        preserve_length=0,
        custom_patterns=(
            CustomPattern("openai-key", OPENAI_KEY_PATTERNS[0], "OpenAI API key (any accepted shape)"),
            CustomPattern("openai", OPENAI_KEY_PATTERNS[1], "OpenAI API key"),
            CustomPattern("openai-proj", OPENAI_KEY_PATTERNS[2], "OpenAI project key"),
        ),
    )


def resolve_api_key(explicit: str | None) -> str:
    """Return a usable key from ``explicit`` or the environment.

    Raises MissingCredentialError or InvalidCredentialError before any network
    interaction happens.
    """
    api_key = explicit or get_api_key()
    if not api_key:
        raise MissingCredentialError("OpenAI", OPENAI_API_KEY_ENV)

    validation = get_redactor().validate_key(api_key, PROVIDER_NAME)
    if not validation.valid:
        raise InvalidCredentialError("OpenAI")
    return api_key


register_openai_secrets()
