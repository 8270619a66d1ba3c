"""OpenAI provider adapter for vendor-neutral chat execution."""

from execution_openai.errors import (
    ExecutionError,
    InvalidCredentialError,
    MissingCredentialError,
    ProviderError,
)
from execution_openai.providers import OpenAIProvider, Provider, create_openai_provider
from execution_openai.types import (
    ChatRequest,
    DoneChunk,
    ExecutionOptions,
    Message,
    ProviderResponse,
    StreamChunk,
    TextChunk,
    ToolCall,
    ToolCallDeltaChunk,
    ToolCallEndChunk,
    ToolCallStartChunk,
    ToolDefinition,
    Usage,
    UsageChunk,
)

VERSION = "0.0.1"

__all__ = [
    "VERSION",
    "ChatRequest",
    "DoneChunk",
    "ExecutionError",
    "ExecutionOptions",
    "InvalidCredentialError",
    "Message",
    "MissingCredentialError",
    "OpenAIProvider",
    "Provider",
    "ProviderError",
    "ProviderResponse",
    "StreamChunk",
    "TextChunk",
    "ToolCall",
    "ToolCallDeltaChunk",
    "ToolCallEndChunk",
    "ToolCallStartChunk",
    "ToolDefinition",
    "Usage",
    "UsageChunk",
]
