"""Base LLM Client Interface"""
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

import httpx
from tenacity import AsyncRetrying, retry_if_exception, stop_after_attempt, wait_exponential

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = {408, 409, 429, 500, 502, 503, 504, 529}


class LLMProviderError(RuntimeError):
    """Raised when a provider call cannot produce completion text"""


@dataclass
class LLMCompletion:
    """Raw text answer from a provider plus usage bookkeeping"""

    text: str
    provider: str  # "anthropic", "openai"
    model: str
    execution_time: float  # Seconds
    token_count: Optional[int] = None
    cost_estimate: Optional[float] = None  # Estimated cost in USD


def _is_retryable(exc: BaseException) -> bool:
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code in RETRYABLE_STATUS_CODES
    return isinstance(exc, httpx.RequestError)


class BaseLLMClient(ABC):
    """Abstract base class for LLM providers"""

    provider_name = "llm"
    pricing: dict[str, tuple[float, float]] = {}
    default_pricing: tuple[float, float] = (3.00, 15.00)

    def __init__(
        self,
        api_key: str,
        model: str,
        endpoint: str,
        timeout: float = 30.0,
        max_attempts: int = 3,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize LLM client

        Args:
            api_key: API key for the provider
            model: Model name to use
            endpoint: Endpoint URL
            timeout: Per-request timeout in seconds
            max_attempts: Attempts for retryable failures (429, 5xx, network)
            transport: Optional httpx transport, used by tests
        """
        self.api_key = api_key
        self.model = model
        self.endpoint = endpoint
        self.timeout = timeout
        self.max_attempts = max(1, max_attempts)
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    @abstractmethod
    def _request(self, prompt: str, system_prompt: str) -> tuple[dict[str, str], dict[str, Any]]:
        """Return (headers, json body) for one completion request"""

    @abstractmethod
    def _extract_text(self, response: dict[str, Any]) -> str:
        """Pull the completion text out of a provider response"""

    @abstractmethod
    def _usage(self, response: dict[str, Any]) -> tuple[int, int]:
        """Return (input tokens, output tokens)"""

    async def _call_api(self, prompt: str, system_prompt: str) -> dict[str, Any]:
        """Make API call with retry logic"""
        headers, body = self._request(prompt, system_prompt)
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            retry=retry_if_exception(_is_retryable),
            reraise=True,
        ):
            with attempt:
                async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                    try:
                        response = await client.post(self.endpoint, headers=headers, json=body)
                        response.raise_for_status()
                        return response.json()
                    except httpx.HTTPStatusError as e:
                        if e.response.status_code == 429:
                            logger.warning("%s rate limit hit", self.provider_name)
                        else:
                            logger.error("%s HTTP error: %s", self.provider_name, e.response.status_code)
                        raise
                    except httpx.RequestError as e:
                        logger.error("%s request error: %s", self.provider_name, e)
                        raise
        raise LLMProviderError(f"{self.provider_name} request was not attempted")  # pragma: no cover

    async def complete(self, prompt: str, system_prompt: str) -> LLMCompletion:
        """
        Send one prompt and return the completion text

        Raises:
            LLMProviderError: missing key, HTTP failure or an unusable response body
        """
        if not self.configured:
            raise LLMProviderError(f"{self.provider_name} API key is not configured")

        with self._track_execution() as tracker:
            try:
                response = await self._call_api(prompt, system_prompt)
            except (httpx.HTTPError, ValueError) as e:
                raise LLMProviderError(f"{self.provider_name} call failed: {e}") from e

        try:
            text = self._extract_text(response)
        except (KeyError, IndexError, TypeError) as e:
            raise LLMProviderError(f"Unexpected {self.provider_name} response shape: {e}") from e

        input_tokens, output_tokens = self._usage(response)
        return LLMCompletion(
            text=text,
            provider=self.provider_name,
            model=self.model,
            execution_time=tracker.execution_time,
            token_count=input_tokens + output_tokens,
            cost_estimate=self._estimate_cost(input_tokens, output_tokens),
        )

    def _estimate_cost(self, input_tokens: int, output_tokens: int) -> float:
        """Estimate cost based on token usage"""
        input_price, output_price = self.pricing.get(self.model, self.default_pricing)
        return (input_tokens / 1_000_000) * input_price + (output_tokens / 1_000_000) * output_price

    def _track_execution(self):
        """Context manager to track execution time"""
        class ExecutionTracker:
            def __init__(self):
                self.start_time = None
                self.execution_time = 0.0

            def __enter__(self):
                self.start_time = time.perf_counter()
                return self

            def __exit__(self, exc_type, exc_val, exc_tb):
                self.execution_time = time.perf_counter() - self.start_time

        return ExecutionTracker()
