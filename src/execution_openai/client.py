"""Thin async transport for the OpenAI Chat Completions endpoint."""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator
from typing import Any, cast

import httpx

from execution_openai.config import CHAT_PATH, PROVIDER_NAME, get_base_url, get_proxy_url
from execution_openai.errors import ProviderError

_DEFAULT_TIMEOUT_S = 60.0


class OpenAIClient:
    """Per-request client handle bound to one API key.

    Use as an async context manager so the underlying connection pool is
    closed when the request (or stream) is over.
    """

    name = PROVIDER_NAME
    _logger = logging.getLogger(__name__)

    def __init__(
        self,
        *,
        api_key: str,
        base_url: str | None = None,
        timeout_s: float | None = None,
        retries: int | None = None,
        proxy: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if transport is None and retries:
            # connection-level retries only; request retries are not ours
            transport = httpx.AsyncHTTPTransport(retries=retries, proxy=proxy)
        self._client = httpx.AsyncClient(
            base_url=base_url or get_base_url(),
            timeout=timeout_s if timeout_s is not None else _DEFAULT_TIMEOUT_S,
            proxy=proxy if transport is None else None,
            transport=transport,
            trust_env=False,
        )
        self._headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

    @classmethod
    def from_environment(cls, **kwargs: Any) -> OpenAIClient:
        """Build a client routed through the environment's proxy, if any."""
        kwargs.setdefault("proxy", get_proxy_url())
        return cls(**kwargs)

    async def __aenter__(self) -> OpenAIClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def create_completion(self, payload: dict[str, Any]) -> dict[str, Any]:
        """POST a single-shot completion and return the decoded JSON body."""
        response = await self._client.post(CHAT_PATH, headers=self._headers, json=payload)
        return self._json_or_error(response)

    async def stream_completion(self, payload: dict[str, Any]) -> AsyncIterator[dict[str, Any]]:
        """Yield decoded SSE fragments until the server sends ``[DONE]``."""
        payload = {**payload, "stream": True}

        async with self._client.stream(
            "POST",
            CHAT_PATH,
            headers=self._headers,
            json=payload,
        ) as response:
            if response.status_code >= 400:
                body = await response.aread()
                raise ProviderError(
                    self.name,
                    body.decode(errors="replace") or response.reason_phrase,
                    status_code=response.status_code,
                )

            async for line in response.aiter_lines():
                if not line:
                    continue
                line = line.strip()

                # OpenAI streaming uses SSE. We only care about "data:" lines.
                if not line.startswith("data:"):
                    continue

                data_str = line[len("data:") :].strip()
                if data_str == "[DONE]":
                    return

                try:
                    fragment = json.loads(data_str)
                except json.JSONDecodeError:
                    self._logger.debug("Skipping non-JSON streaming chunk")
                    continue

                if isinstance(fragment, dict):
                    yield fragment

    def _json_or_error(self, response: httpx.Response) -> dict[str, Any]:
        if response.status_code >= 400:
            raise ProviderError(
                self.name,
                response.text or response.reason_phrase,
                status_code=response.status_code,
            )
        return cast(dict[str, Any], response.json())
