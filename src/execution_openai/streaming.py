"""Reassembly of Chat Completions stream fragments into StreamChunk events."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterable, AsyncIterator
from dataclasses import dataclass
from typing import Any

from execution_openai.mapping import to_usage
from execution_openai.types import (
    DoneChunk,
    StreamChunk,
    TextChunk,
    ToolCallDelta,
    ToolCallDeltaChunk,
    ToolCallEnd,
    ToolCallEndChunk,
    ToolCallStart,
    ToolCallStartChunk,
    UsageChunk,
)


@dataclass
class _PendingToolCall:
    id: str
    name: str
    arguments: str = ""


class StreamReassembler:
    """Turns vendor fragments into chunks for one stream.

    Tool calls are tracked by the vendor's per-response ``index``. An instance
    must not be shared between streams.
    """

    _logger = logging.getLogger(__name__)

    def __init__(self) -> None:
        self._in_progress: dict[int, _PendingToolCall] = {}

    @property
    def pending_arguments(self) -> dict[int, str]:
        """Accumulated argument text per index."""
        return {index: call.arguments for index, call in self._in_progress.items()}

    def feed(self, fragment: dict[str, Any]) -> list[StreamChunk]:
        chunks: list[StreamChunk] = []
        choices = fragment.get("choices") or []
        choice = choices[0] if choices else {}
        delta = choice.get("delta") or {}

        content = delta.get("content")
        if content:
            chunks.append(TextChunk(text=content))

        for tc in delta.get("tool_calls") or []:
            chunks.extend(self._feed_tool_call(tc))

        if choice.get("finish_reason") == "tool_calls":
            for index, call in self._in_progress.items():
                chunks.append(
                    ToolCallEndChunk(tool_call=ToolCallEnd(id=call.id, index=index, name=call.name))
                )

        usage = to_usage(fragment.get("usage"))
        if usage is not None:
            chunks.append(UsageChunk(usage=usage))

        return chunks

    def _feed_tool_call(self, tc: dict[str, Any]) -> list[StreamChunk]:
        chunks: list[StreamChunk] = []
        index = int(tc.get("index") or 0)
        function = tc.get("function") or {}

        if tc.get("id"):
            # the vendor never reuses an index within one response
            self._in_progress[index] = _PendingToolCall(id=tc["id"], name=function.get("name") or "")
            chunks.append(
                ToolCallStartChunk(
                    tool_call=ToolCallStart(id=tc["id"], index=index, name=function.get("name"))
                )
            )

        arguments = function.get("arguments")
        if arguments:
            call = self._in_progress.get(index)
            if call is None:
                # Orphan delta: dropped on purpose so one bad fragment does
                # not abort an otherwise usable stream.
                self._logger.debug("Dropping arguments delta for unknown tool call index %d", index)
                return chunks
            call.arguments += arguments
            chunks.append(
                ToolCallDeltaChunk(tool_call=ToolCallDelta(index=index, arguments_delta=arguments))
            )

        return chunks

    def finish(self) -> DoneChunk:
        self._in_progress.clear()
        return DoneChunk()


async def reassemble(fragments: AsyncIterable[dict[str, Any]]) -> AsyncIterator[StreamChunk]:
    """Yield chunks for ``fragments`` followed by exactly one DoneChunk."""
    reassembler = StreamReassembler()
    async for fragment in fragments:
        for chunk in reassembler.feed(fragment):
            yield chunk
    yield reassembler.finish()
