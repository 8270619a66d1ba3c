"""Process-wide registry of secret patterns used to redact credentials."""

from __future__ import annotations

import re
import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from functools import lru_cache

DEFAULT_MASK = "[REDACTED]"


@dataclass(frozen=True, slots=True)
class SecretPattern:
    """Describes one family of secrets (e.g. a vendor's API keys)."""

    name: str
    patterns: tuple[re.Pattern[str], ...]
    validator: Callable[[str], bool] | None = None
    env_var: str | None = None
    description: str = ""


@dataclass(frozen=True, slots=True)
class KeyValidation:
    """Outcome of validating a key against a registered pattern family."""

    valid: bool
    reason: str | None = None


@dataclass
class SecretRegistry:
    """Registered secret families, in registration order."""

    mask: str = DEFAULT_MASK
    _entries: dict[str, SecretPattern] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def register(self, entry: SecretPattern) -> None:
        """Register (or replace) a secret family by name."""
        with self._lock:
            self._entries[entry.name] = entry

    def get(self, name: str) -> SecretPattern | None:
        return self._entries.get(name)

    def names(self) -> list[str]:
        return list(self._entries)

    def patterns(self) -> tuple[re.Pattern[str], ...]:
        """All registered patterns, flattened."""
        compiled: list[re.Pattern[str]] = []
        for entry in list(self._entries.values()):
            compiled.extend(entry.patterns)
        return tuple(compiled)

    def validate_key(self, key: str, name: str) -> KeyValidation:
        entry = self._entries.get(name)
        if entry is None:
            return KeyValidation(False, f"no secret pattern registered for '{name}'")
        if not key:
            return KeyValidation(False, "key is empty")
        if entry.validator is not None:
            ok = entry.validator(key)
        else:
            ok = any(p.fullmatch(key) for p in entry.patterns)
        return KeyValidation(True) if ok else KeyValidation(False, f"key does not match {name} format")

    def redact(
        self,
        text: str,
        *,
        mask: str | None = None,
        preserve_length: int = 0,
        extra_patterns: Iterable[re.Pattern[str]] = (),
    ) -> str:
        """Redact ``extra_patterns`` first, then every registered pattern."""
        patterns = [*extra_patterns, *self.patterns()]
        return redact_with(text, patterns, mask or self.mask, preserve_length=preserve_length)


def redact_with(
    text: str,
    patterns: Iterable[re.Pattern[str]],
    mask: str = DEFAULT_MASK,
    *,
    preserve_length: int = 0,
) -> str:
    """Replace every match of ``patterns`` in ``text`` with ``mask``.

    With ``preserve_length > 0`` the first characters of each match are kept
    in front of the mask, which helps telling keys apart in logs.
    """

    def _replace(match: re.Match[str]) -> str:
        if preserve_length > 0:
            return match.group(0)[:preserve_length] + mask
        return mask

    for pattern in patterns:
        text = pattern.sub(_replace, text)
    return text


@lru_cache(maxsize=1)
def get_redactor() -> SecretRegistry:
    """Return the shared process-wide registry."""
    return SecretRegistry()
