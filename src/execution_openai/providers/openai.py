"""OpenAI provider implementation."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import aclosing
from typing import Any

import httpx

from execution_openai.client import OpenAIClient
from execution_openai.config import DEFAULT_MODEL, PROVIDER_NAME
from execution_openai.key_guard import resolve_api_key
from execution_openai.mapping import from_openai_response, to_openai_messages, to_openai_tools
from execution_openai.providers.base import Provider, resolve_model
from execution_openai.sanitize import SafeProviderError, create_safe_error
from execution_openai.streaming import reassemble
from execution_openai.types import ChatRequest, ExecutionOptions, ProviderResponse, StreamChunk

_MODEL_PREFIXES = ("gpt", "o1", "o3", "o4")


class OpenAIProvider(Provider):
    """Chat Completions adapter with tool calling and streaming."""

    name = PROVIDER_NAME
    _logger = logging.getLogger(__name__)

    def __init__(
        self,
        *,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url
        self._transport = transport

    def supports_model(self, model: str | None) -> bool:
        if not model:
            return True
        return model.startswith(_MODEL_PREFIXES)

    async def execute(
        self,
        request: ChatRequest,
        options: ExecutionOptions | None = None,
        *,
        model: str | None = None,
    ) -> ProviderResponse:
        """Call OpenAI Chat Completions and normalize the first choice."""
        options = options or ExecutionOptions()
        api_key = resolve_api_key(options.api_key)

        try:
            async with self._make_client(api_key, options) as client:
                payload = self._build_payload(request, options, model)
                if request.response_format is not None:
                    payload["response_format"] = request.response_format
                self._logger.debug(
                    "openai completion: model=%s messages=%d", payload["model"], len(payload["messages"])
                )
                data = await client.create_completion(payload)
                return from_openai_response(data)
        except Exception as exc:
            raise self._safe_error(exc) from None

    def execute_stream(
        self,
        request: ChatRequest,
        options: ExecutionOptions | None = None,
        *,
        model: str | None = None,
    ) -> AsyncIterator[StreamChunk]:
        """Return an async iterator of chunks, ending with a DoneChunk.

        Credentials are checked immediately, before the iterator is consumed.
        """
        options = options or ExecutionOptions()
        api_key = resolve_api_key(options.api_key)

        async def _gen() -> AsyncIterator[StreamChunk]:
            try:
                async with self._make_client(api_key, options) as client:
                    payload = self._build_payload(request, options, model)
                    payload["stream_options"] = {"include_usage": True}
                    self._logger.debug(
                        "openai stream: model=%s messages=%d", payload["model"], len(payload["messages"])
                    )
                    async with aclosing(client.stream_completion(payload)) as fragments:
                        async with aclosing(reassemble(fragments)) as chunks:
                            async for chunk in chunks:
                                yield chunk
            except Exception as exc:
                raise self._safe_error(exc) from None

        return _gen()

    def _make_client(self, api_key: str, options: ExecutionOptions) -> OpenAIClient:
        return OpenAIClient.from_environment(
            api_key=api_key,
            base_url=self._base_url,
            timeout_s=options.timeout,
            retries=options.retries,
            transport=self._transport,
        )

    def _build_payload(
        self,
        req: ChatRequest,
        options: ExecutionOptions,
        model: str | None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "model": resolve_model(req, options, model, DEFAULT_MODEL),
            "messages": to_openai_messages(req.messages),
        }

        if options.temperature is not None:
            payload["temperature"] = options.temperature
        if options.max_tokens is not None:
            payload["max_tokens"] = options.max_tokens

        if req.tools:
            payload["tools"] = to_openai_tools(req.tools)

        return payload

    def _safe_error(self, exc: Exception) -> SafeProviderError:
        error = create_safe_error(exc, provider=self.name)
        self._logger.warning(
            "openai request failed [%s]: %s", error.correlation_id or "-", error
        )
        return error


def create_openai_provider() -> OpenAIProvider:
    """Create a new OpenAI provider instance."""
    return OpenAIProvider()
