"""OpenAI LLM Client"""
from typing import Any, Optional

import httpx

from .base import BaseLLMClient

DEFAULT_ENDPOINT = "https://api.openai.com/v1/chat/completions"


class OpenAIClient(BaseLLMClient):
    """OpenAI chat completions client"""

    provider_name = "openai"
    # Pricing per 1M tokens (input/output)
    pricing = {
        "gpt-4o": (2.50, 10.00),
        "gpt-4o-mini": (0.15, 0.60),
        "gpt-4-turbo": (10.00, 30.00),
    }
    default_pricing = (2.50, 10.00)

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        endpoint: Optional[str] = None,
        timeout: float = 30.0,
        max_attempts: int = 3,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(api_key, model, endpoint or DEFAULT_ENDPOINT, timeout, max_attempts, transport)

    def _request(self, prompt: str, system_prompt: str) -> tuple[dict[str, str], dict[str, Any]]:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        body = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt},
            ],
            "temperature": 0.2,
            "response_format": {"type": "json_object"},
        }
        return headers, body

    def _extract_text(self, response: dict[str, Any]) -> str:
        return response["choices"][0]["message"]["content"]

    def _usage(self, response: dict[str, Any]) -> tuple[int, int]:
        usage = response.get("usage") or {}
        return int(usage.get("prompt_tokens", 0)), int(usage.get("completion_tokens", 0))
