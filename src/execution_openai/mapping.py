"""Translation between neutral models and OpenAI Chat Completions payloads."""

from __future__ import annotations

import json
from collections.abc import Iterable
from typing import Any

from execution_openai.types import (
    FunctionCall,
    Message,
    ProviderResponse,
    ToolCall,
    ToolDefinition,
    Usage,
)


def coerce_content(content: Any) -> str:
    """Return ``content`` as text; non-strings become compact JSON.

    This is lossy on purpose: lists of strings are sent as their JSON text
    rather than as multi-part content.
    """
    if isinstance(content, str):
        return content
    return json.dumps(content, separators=(",", ":"), ensure_ascii=False)


def to_openai_message(message: Message) -> dict[str, Any]:
    if message.role == "tool":
        return {
            "role": "tool",
            "content": coerce_content(message.content),
            "tool_call_id": message.tool_call_id or "",
        }

    if message.role == "assistant" and message.tool_calls:
        return {
            "role": "assistant",
            "content": message.content,
            "tool_calls": [tc.model_dump() for tc in message.tool_calls],
        }

    # OpenAI has no "developer" role on this endpoint
    role = "system" if message.role == "developer" else message.role
    payload: dict[str, Any] = {"role": role, "content": coerce_content(message.content)}
    if message.name is not None:
        payload["name"] = message.name
    return payload


def to_openai_messages(messages: Iterable[Message]) -> list[dict[str, Any]]:
    return [to_openai_message(m) for m in messages]


def to_openai_tools(tools: Iterable[ToolDefinition]) -> list[dict[str, Any]]:
    return [
        {
            "type": "function",
            "function": {
                "name": t.name,
                "description": t.description,
                "parameters": t.parameters,
            },
        }
        for t in tools
    ]


def to_usage(raw: dict[str, Any] | None) -> Usage | None:
    if not raw:
        return None
    return Usage(
        input_tokens=int(raw.get("prompt_tokens") or 0),
        output_tokens=int(raw.get("completion_tokens") or 0),
    )


def from_openai_tool_calls(raw: list[dict[str, Any]] | None) -> list[ToolCall] | None:
    calls = [
        ToolCall(
            id=tc["id"],
            function=FunctionCall(
                name=tc["function"]["name"],
                arguments=tc["function"].get("arguments") or "",
            ),
        )
        for tc in raw or []
        if tc.get("type") == "function"
    ]
    return calls or None


def from_openai_response(data: dict[str, Any]) -> ProviderResponse:
    """Normalize the first choice of a Chat Completions response.

    ``data`` must contain at least one choice.
    """
    message = data["choices"][0].get("message") or {}
    return ProviderResponse(
        content=message.get("content") or "",
        model=data.get("model") or "",
        usage=to_usage(data.get("usage")),
        tool_calls=from_openai_tool_calls(message.get("tool_calls")),
    )
