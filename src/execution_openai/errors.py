"""Package specific exception hierarchy."""

from __future__ import annotations


class ExecutionError(Exception):
    """Base exception for execution_openai package."""


class MissingCredentialError(ExecutionError):
    """Raised when no API key can be resolved from options or environment."""

    def __init__(self, provider: str, env_var: str) -> None:
        super().__init__(f"{provider}: API key is required. Set {env_var} environment variable.")
        self.provider = provider
        self.env_var = env_var


class InvalidCredentialError(ExecutionError):
    """Raised when an API key does not have the expected shape."""

    def __init__(self, provider: str) -> None:
        # never echo the key itself
        super().__init__(f"{provider}: invalid API key format.")
        self.provider = provider


class ProviderError(ExecutionError):
    """Represents provider-specific HTTP or API errors."""

    def __init__(
        self,
        provider: str,
        message: str,
        status_code: int | None = None,
        correlation_id: str | None = None,
    ) -> None:
        suffix = f" (status {status_code})" if status_code is not None else ""
        super().__init__(f"{provider}: {message}{suffix}")
        self.provider = provider
        self.status_code = status_code
        self.correlation_id = correlation_id
