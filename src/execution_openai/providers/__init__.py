"""Provider definitions for execution_openai."""

from .base import Provider
from .openai import OpenAIProvider, create_openai_provider

__all__ = [
    "Provider",
    "OpenAIProvider",
    "create_openai_provider",
]
