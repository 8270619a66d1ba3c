"""Provider-agnostic request/response models."""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field

Role = Literal["user", "assistant", "system", "developer", "tool"]


class FunctionCall(BaseModel):
    """Function name plus its raw (unparsed) JSON argument text."""

    name: str
    arguments: str


class ToolCall(BaseModel):
    """A tool invocation requested by the model."""

    id: str
    type: Literal["function"] = "function"
    function: FunctionCall


class Message(BaseModel):
    """Single chat message."""

    role: Role
    content: str | list[str] | None = None
    name: str | None = None
    # only meaningful for role="tool"
    tool_call_id: str | None = None
    # only meaningful for role="assistant"
    tool_calls: list[ToolCall] | None = None


ToolParameterSchema = dict[str, Any]
"""JSON-schema object describing a tool's arguments, forwarded untouched."""


def _empty_object_schema() -> ToolParameterSchema:
    return {"type": "object", "properties": {}}


class ToolDefinition(BaseModel):
    """Caller supplied function-like capability."""

    name: str
    description: str = ""
    parameters: ToolParameterSchema = Field(default_factory=_empty_object_schema)


class ChatRequest(BaseModel):
    """Normalized request handed to a provider."""

    messages: list[Message] = Field(default_factory=list)
    model: str = ""
    response_format: dict[str, Any] | None = None
    tools: list[ToolDefinition] | None = None

    def add_message(self, message: Message) -> None:
        """Append a message to the conversation."""
        self.messages.append(message)


class Usage(BaseModel):
    """Token accounting reported by the vendor."""

    input_tokens: int
    output_tokens: int


class ProviderResponse(BaseModel):
    """Normalized non-streaming response."""

    content: str = ""
    model: str
    usage: Usage | None = None
    tool_calls: list[ToolCall] | None = None


class ExecutionOptions(BaseModel):
    """Per-call overrides. ``timeout`` is in seconds."""

    api_key: str | None = None
    model: str | None = None
    temperature: float | None = None
    max_tokens: int | None = None
    timeout: float | None = None
    retries: int | None = None


class ToolCallStart(BaseModel):
    id: str
    index: int
    name: str | None = None


class ToolCallDelta(BaseModel):
    index: int
    arguments_delta: str


class ToolCallEnd(BaseModel):
    id: str
    index: int
    name: str


class TextChunk(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ToolCallStartChunk(BaseModel):
    type: Literal["tool_call_start"] = "tool_call_start"
    tool_call: ToolCallStart


class ToolCallDeltaChunk(BaseModel):
    type: Literal["tool_call_delta"] = "tool_call_delta"
    tool_call: ToolCallDelta


class ToolCallEndChunk(BaseModel):
    type: Literal["tool_call_end"] = "tool_call_end"
    tool_call: ToolCallEnd


class UsageChunk(BaseModel):
    type: Literal["usage"] = "usage"
    usage: Usage


class DoneChunk(BaseModel):
    type: Literal["done"] = "done"


StreamChunk = Annotated[
    Union[
        TextChunk,
        ToolCallStartChunk,
        ToolCallDeltaChunk,
        ToolCallEndChunk,
        UsageChunk,
        DoneChunk,
    ],
    Field(discriminator="type"),
]
