"""Transcript retrieval through the ScrapeCreators API."""
from __future__ import annotations

import logging
import re
from typing import Any, Optional

import httpx
from tenacity import AsyncRetrying, retry_if_exception, stop_after_attempt, wait_exponential

from reelpulse.core.config import Settings, get_settings
from reelpulse.services import monitoring

logger = logging.getLogger(__name__)

PLATFORM_ENDPOINTS = {
    "tiktok": "/tiktok/video",
    "reels": "/instagram/reel",
    "shorts": "/youtube/shorts",
}
TRANSCRIPT_FIELDS = ("transcript", "captions", "text")
RETRYABLE_STATUS_CODES = {408, 429, 500, 502, 503, 504}

FALLBACK_TRANSCRIPTS = {
    "tiktok": (
        "Hey everyone! Just tried this amazing new recipe and I'm absolutely obsessed! The flavors are "
        "incredible and it's so easy to make. You definitely need to try this at home. Link in bio for the "
        "full recipe! #cooking #recipe #foodie #delicious"
    ),
    "reels": (
        "Good morning beautiful souls! Starting my day with some positive affirmations and gratitude. "
        "Remember, you are enough exactly as you are. Sending love and light to everyone watching this. "
        "Have an amazing day! #positivity #mindfulness #selfcare #motivation"
    ),
    "shorts": (
        "This productivity hack literally changed my life! I used to struggle with time management but this "
        "simple technique helped me get so much more done. Try it for a week and let me know how it goes in "
        "the comments below! #productivity #lifehacks #timemanagement #success"
    ),
}

_ARTIFACT_RE = re.compile(r"\[(?:music|applause|laughter|inaudible)\]", re.IGNORECASE)
_WHITESPACE_RE = re.compile(r"\s+")


class TranscriptError(RuntimeError):
    """Transcript lookup failed; never escapes ``get_transcript``."""


def clean_transcript(transcript: str) -> str:
    cleaned = _ARTIFACT_RE.sub("", transcript or "")
    return _WHITESPACE_RE.sub(" ", cleaned).strip()


def fallback_transcript(platform: str) -> str:
    return FALLBACK_TRANSCRIPTS.get(platform, FALLBACK_TRANSCRIPTS["tiktok"])


def _is_retryable(exc: BaseException) -> bool:
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code in RETRYABLE_STATUS_CODES
    return isinstance(exc, httpx.RequestError)


def _pick_transcript(payload: Any) -> str:
    if not isinstance(payload, dict):
        return ""
    candidates = [payload]
    if isinstance(payload.get("data"), dict):
        candidates.append(payload["data"])
    for candidate in candidates:
        for field in TRANSCRIPT_FIELDS:
            value = candidate.get(field)
            if isinstance(value, str) and value.strip():
                return value
    return ""


class TranscriptClient:
    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.scrapecreators.com",
        timeout: float = 30.0,
        max_attempts: int = 3,
        dev_fallback: bool = False,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_attempts = max(1, max_attempts)
        self.dev_fallback = dev_fallback
        self._transport = transport
        if not api_key:
            logger.warning("ScrapeCreators API key not configured; transcripts will be unavailable")

    @classmethod
    def from_settings(cls, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> "TranscriptClient":
        return cls(
            api_key=settings.scrapecreators_api_key,
            base_url=settings.scrapecreators_base_url,
            timeout=settings.provider_timeout_seconds,
            max_attempts=settings.provider_max_attempts,
            dev_fallback=settings.transcript_dev_fallback,
            transport=transport,
        )

    async def _fetch(self, url: str, platform: str) -> str:
        endpoint = PLATFORM_ENDPOINTS.get(platform)
        if endpoint is None:
            raise TranscriptError(f"Unsupported platform: {platform}")
        if not self.api_key:
            raise TranscriptError("ScrapeCreators API key is not configured")

        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
            "X-API-Key": self.api_key,
        }
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.max_attempts),
                wait=wait_exponential(multiplier=1, min=1, max=10),
                retry=retry_if_exception(_is_retryable),
                reraise=True,
            ):
                with attempt:
                    async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                        response = await client.post(f"{self.base_url}{endpoint}", headers=headers, json={"url": url})
                        response.raise_for_status()
                        payload = response.json()
        except httpx.HTTPStatusError as exc:
            raise TranscriptError(
                f"ScrapeCreators returned {exc.response.status_code}: {exc.response.text[:200]}"
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise TranscriptError(f"ScrapeCreators request failed: {exc}") from exc

        transcript = clean_transcript(_pick_transcript(payload))
        if not transcript:
            raise TranscriptError("No transcript in ScrapeCreators response")
        return transcript

    async def get_transcript(self, url: str, platform: str) -> str | None:
        """Return the cleaned transcript, or ``None`` when it cannot be obtained."""
        try:
            transcript = await self._fetch(url, platform)
        except TranscriptError as exc:
            logger.warning("Transcript unavailable for %s: %s", url, exc)
            if self.dev_fallback:
                logger.info("Using development fallback transcript for platform=%s", platform)
                monitoring.record_transcript(platform, True)
                return fallback_transcript(platform)
            monitoring.record_transcript(platform, False)
            return None
        monitoring.record_transcript(platform, True)
        return transcript


async def get_transcript(url: str, platform: str) -> str | None:
    return await TranscriptClient.from_settings(get_settings()).get_transcript(url, platform)
