"""Provider-agnostic base interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator

from execution_openai.types import ChatRequest, ExecutionOptions, ProviderResponse, StreamChunk


class Provider(ABC):
    """Abstract base class for provider implementations."""

    name: str

    @abstractmethod
    def supports_model(self, model: str | None) -> bool:
        """Return True if the model identifier belongs to this provider."""
        raise NotImplementedError

    @abstractmethod
    async def execute(
        self,
        request: ChatRequest,
        options: ExecutionOptions | None = None,
        *,
        model: str | None = None,
    ) -> ProviderResponse:
        """Execute a non-streaming chat request."""
        raise NotImplementedError

    @abstractmethod
    def execute_stream(
        self,
        request: ChatRequest,
        options: ExecutionOptions | None = None,
        *,
        model: str | None = None,
    ) -> AsyncIterator[StreamChunk]:
        """Return an async iterator of stream chunks for the request."""
        raise NotImplementedError


def resolve_model(
    request: ChatRequest,
    options: ExecutionOptions,
    explicit: str | None,
    default: str,
) -> str:
    """Pick the effective model: explicit > options > request > default."""
    return explicit or options.model or request.model or default
