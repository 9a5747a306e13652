"""LLM provider clients used by the sentiment strategy chain"""

from .anthropic_client import AnthropicClient
from .base import BaseLLMClient, LLMCompletion, LLMProviderError
from .openai_client import OpenAIClient

__all__ = [
    "BaseLLMClient",
    "LLMCompletion",
    "LLMProviderError",
    "AnthropicClient",
    "OpenAIClient",
]
