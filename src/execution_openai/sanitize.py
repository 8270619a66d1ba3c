"""Error sanitization: turn arbitrary failures into credential-free errors.

Configuration is process-wide and is expected to be set once at import time
(see :func:`execution_openai.key_guard.register_openai_secrets`). Every
message that leaves :func:`create_safe_error` has gone through the secret
guard, which redacts both the guard's own custom patterns and everything in
the shared :class:`~execution_openai.redaction.SecretRegistry`.
"""

from __future__ import annotations

import re
import threading
import traceback
import uuid
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Literal

from execution_openai.errors import ProviderError
from execution_openai.redaction import DEFAULT_MASK, get_redactor

Environment = Literal["development", "production"]


@dataclass(frozen=True, slots=True)
class CustomPattern:
    name: str
    pattern: re.Pattern[str]
    description: str = ""


@dataclass(frozen=True, slots=True)
class ErrorSanitizerConfig:
    enabled: bool = True
    environment: Environment = "development"
    include_correlation_id: bool = True
    sanitize_stack_traces: bool = False
    max_message_length: int = 500


@dataclass(frozen=True, slots=True)
class SecretGuardConfig:
    enabled: bool = True
    redaction_text: str = DEFAULT_MASK
    preserve_partial: bool = False
    preserve_length: int = 0
    custom_patterns: tuple[CustomPattern, ...] = field(default_factory=tuple)


class SafeProviderError(ProviderError):
    """ProviderError built by the sanitizer.

    ``original_type`` names the class of the wrapped failure. ``details``
    holds the redacted traceback unless stack traces are sanitized.
    """

    def __init__(
        self,
        provider: str,
        message: str,
        *,
        status_code: int | None = None,
        correlation_id: str | None = None,
        original_type: str | None = None,
        details: str | None = None,
    ) -> None:
        super().__init__(provider, message, status_code=status_code, correlation_id=correlation_id)
        self.original_type = original_type
        self.details = details


_lock = threading.Lock()
_sanitizer_config = ErrorSanitizerConfig()
_guard_config = SecretGuardConfig()


def configure_error_sanitizer(
    *,
    enabled: bool = True,
    environment: Environment = "development",
    include_correlation_id: bool = True,
    sanitize_stack_traces: bool = False,
    max_message_length: int = 500,
) -> ErrorSanitizerConfig:
    global _sanitizer_config
    config = ErrorSanitizerConfig(
        enabled=enabled,
        environment=environment,
        include_correlation_id=include_correlation_id,
        sanitize_stack_traces=sanitize_stack_traces,
        max_message_length=max_message_length,
    )
    with _lock:
        _sanitizer_config = config
    return config


def configure_secret_guard(
    *,
    enabled: bool = True,
    redaction_text: str = DEFAULT_MASK,
    preserve_partial: bool = False,
    preserve_length: int = 0,
    custom_patterns: Iterable[CustomPattern] = (),
) -> SecretGuardConfig:
    global _guard_config
    config = SecretGuardConfig(
        enabled=enabled,
        redaction_text=redaction_text,
        preserve_partial=preserve_partial,
        preserve_length=preserve_length,
        custom_patterns=tuple(custom_patterns),
    )
    with _lock:
        _guard_config = config
    return config


def get_error_sanitizer_config() -> ErrorSanitizerConfig:
    return _sanitizer_config


def get_secret_guard_config() -> SecretGuardConfig:
    return _guard_config


def redact_secrets(text: str) -> str:
    """Redact every known secret in ``text`` according to the secret guard."""
    guard = _guard_config
    if not guard.enabled:
        return text
    keep = guard.preserve_length if guard.preserve_partial else 0
    return get_redactor().redact(
        text,
        mask=guard.redaction_text,
        preserve_length=keep,
        extra_patterns=[c.pattern for c in guard.custom_patterns],
    )


def _truncate(message: str, limit: int) -> str:
    if limit > 0 and len(message) > limit:
        return message[: max(limit - 3, 0)] + "..."
    return message


def _status_code(exc: BaseException) -> int | None:
    for attr in ("status_code", "status"):
        value = getattr(exc, attr, None)
        if isinstance(value, int) and 100 <= value <= 599:
            return value
    response = getattr(exc, "response", None)
    value = getattr(response, "status_code", None)
    if isinstance(value, int) and 100 <= value <= 599:
        return value
    return None


def create_safe_error(exc: BaseException, *, provider: str) -> SafeProviderError:
    """Build a credential-free error describing ``exc``.

    The returned error never references ``exc``; callers should raise it with
    ``from None`` so the raw exception does not travel along as ``__cause__``.
    """
    config = _sanitizer_config
    correlation_id = uuid.uuid4().hex if config.include_correlation_id else None
    status_code = _status_code(exc)

    if isinstance(exc, ProviderError):
        # message already carries the "<provider>: " prefix and status suffix
        raw = str(exc.args[0]) if exc.args else str(exc)
        prefix = f"{exc.provider}: "
        raw = raw.removeprefix(prefix)
        if exc.status_code is not None:
            raw = raw.removesuffix(f" (status {exc.status_code})")
    elif config.enabled and config.environment == "production":
        # internal failures only report their type in production
        raw = f"request failed ({type(exc).__name__})"
    else:
        raw = str(exc) or type(exc).__name__

    if not config.enabled:
        # sanitizing messages is off, secret redaction still applies
        message = redact_secrets(raw)
        return SafeProviderError(
            provider,
            message,
            status_code=status_code,
            correlation_id=correlation_id,
            original_type=type(exc).__name__,
        )

    message = _truncate(redact_secrets(raw), config.max_message_length)
    details = None
    if not config.sanitize_stack_traces:
        details = redact_secrets("".join(traceback.format_exception(exc)))

    return SafeProviderError(
        provider,
        message,
        status_code=status_code,
        correlation_id=correlation_id,
        original_type=type(exc).__name__,
        details=details,
    )

