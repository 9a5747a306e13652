"""Anthropic LLM Client"""
from typing import Any, Optional

import httpx

from .base import BaseLLMClient

DEFAULT_ENDPOINT = "https://api.anthropic.com/v1/messages"
API_VERSION = "2023-06-01"


class AnthropicClient(BaseLLMClient):
    """Anthropic Messages API client"""

    provider_name = "anthropic"
    # Pricing per 1M tokens (input/output)
    pricing = {
        "claude-sonnet-4-20250514": (3.00, 15.00),
        "claude-3-5-sonnet-20241022": (3.00, 15.00),
        "claude-3-5-haiku-20241022": (0.80, 4.00),
    }

    def __init__(
        self,
        api_key: str,
        model: str = "claude-sonnet-4-20250514",
        endpoint: Optional[str] = None,
        timeout: float = 30.0,
        max_attempts: int = 3,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(api_key, model, endpoint or DEFAULT_ENDPOINT, timeout, max_attempts, transport)

    def _request(self, prompt: str, system_prompt: str) -> tuple[dict[str, str], dict[str, Any]]:
        headers = {
            "x-api-key": self.api_key,
            "anthropic-version": API_VERSION,
            "Content-Type": "application/json",
        }
        body = {
            "model": self.model,
            "max_tokens": 1024,
            "system": system_prompt,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": 0.2,
        }
        return headers, body

    def _extract_text(self, response: dict[str, Any]) -> str:
        # Content is a list of blocks; only text blocks carry the answer
        for block in response["content"]:
            if block.get("type") == "text":
                return block["text"]
        raise KeyError("text block")

    def _usage(self, response: dict[str, Any]) -> tuple[int, int]:
        usage = response.get("usage") or {}
        return int(usage.get("input_tokens", 0)), int(usage.get("output_tokens", 0))
