from __future__ import annotations

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from collections import Counter
from typing import Any, Iterable, Mapping

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from reelpulse.core.config import Settings
from reelpulse.services.lexicon import LEXICON_SOURCE, analyze_locally
from reelpulse.services.llm_providers import AnthropicClient, BaseLLMClient, LLMProviderError, OpenAIClient
from reelpulse.services.score_normalizer import SCORE_KEYS, clamp_confidence, normalize_scores
from reelpulse.services.segmentation import split_sentences
from reelpulse.services.sentiment_types import SentimentLabel, SentimentResult
from reelpulse.services.text_preprocessor import preprocess

logger = logging.getLogger(__name__)

MIN_SENTENCE_LENGTH = 3
COMPREHEND_MAX_BYTES = 5000
COMPREHEND_SCORE_KEYS = ("Positive", "Neutral", "Negative", "Mixed")

SYSTEM_PROMPT = """You are a customer insights analyst who reads transcripts of short-form social videos (TikTok, Instagram Reels, YouTube Shorts). Creators use slang, irony and exaggeration; judge the overall attitude of the speaker.

Classify the transcript as POSITIVE, NEGATIVE or NEUTRAL.

IMPORTANT: respond with a single JSON object and nothing else, using exactly these keys:
{
  "sentiment": "POSITIVE" | "NEGATIVE" | "NEUTRAL",
  "confidence": integer between 60 and 95,
  "scores": {"positive": number, "neutral": number, "negative": number}
}
The three scores are percentages and must add up to 100."""


class StrategyError(RuntimeError):
    """A provider could not produce a sentiment result; the chain moves on."""


class ResponseParseError(StrategyError):
    """The provider answered, but the payload is not a usable sentiment result."""


class SentimentStrategy(ABC):
    name: str = "strategy"

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the provider is configured; unavailable strategies are skipped silently."""

    @abstractmethod
    async def analyze(self, text: str) -> SentimentResult:
        """Return a result or raise; every exception is treated as a soft failure by the chain."""


# ---- LLM -------------------------------------------------------------------------


def build_prompt(text: str) -> str:
    return f"Transcript:\n{text}\n\nReturn the JSON object now."


def extract_json_object(content: str) -> dict[str, Any]:
    """Return the first JSON object embedded in ``content`` (prose and code fences are ignored)."""
    decoder = json.JSONDecoder()
    index = content.find("{")
    while index != -1:
        try:
            candidate, _ = decoder.raw_decode(content, index)
        except json.JSONDecodeError:
            candidate = None
        if isinstance(candidate, dict):
            return candidate
        index = content.find("{", index + 1)
    raise ResponseParseError("LLM response contains no JSON object")


def parse_llm_sentiment(content: str, source: str = "llm") -> SentimentResult:
    data = extract_json_object(content or "")

    missing = [key for key in ("sentiment", "confidence", "scores") if key not in data]
    if missing:
        raise ResponseParseError(f"LLM response missing fields: {', '.join(missing)}")
    raw_scores = data["scores"]
    if not isinstance(raw_scores, Mapping) or any(key not in raw_scores for key in SCORE_KEYS):
        raise ResponseParseError("LLM response scores must contain positive, neutral and negative")

    try:
        label = SentimentLabel.parse(data["sentiment"])
        scores = normalize_scores(raw_scores)
    except (TypeError, ValueError) as exc:
        raise ResponseParseError(f"Invalid LLM sentiment payload: {exc}") from exc
    if scores.total <= 0 or all(float(raw_scores[key] or 0) <= 0 for key in SCORE_KEYS):
        raise ResponseParseError("LLM response scores are all zero")

    confidence = clamp_confidence(data["confidence"])
    if 0 < confidence <= 1:
        confidence = round(confidence * 100, 1)
    return SentimentResult(sentiment=label, confidence=confidence, scores=scores, source=source)


class LlmStrategy(SentimentStrategy):
    name = "llm"

    def __init__(self, client: BaseLLMClient | None) -> None:
        self.client = client

    def is_available(self) -> bool:
        return self.client is not None and self.client.configured

    async def analyze(self, text: str) -> SentimentResult:
        if self.client is None:
            raise StrategyError("No LLM client configured")
        cleaned = preprocess(text)
        if not cleaned:
            raise StrategyError("Transcript is empty after preprocessing")
        try:
            completion = await self.client.complete(build_prompt(cleaned), SYSTEM_PROMPT)
        except LLMProviderError as exc:
            raise StrategyError(str(exc)) from exc
        logger.debug(
            "LLM sentiment completion | provider=%s model=%s tokens=%s latency_s=%.2f",
            completion.provider,
            completion.model,
            completion.token_count,
            completion.execution_time,
        )
        return parse_llm_sentiment(completion.text, source=f"llm:{completion.provider}")


# ---- AWS Comprehend ----------------------------------------------------------------


def _truncate_utf8(text: str, limit: int = COMPREHEND_MAX_BYTES) -> str:
    encoded = text.encode("utf-8")
    if len(encoded) <= limit:
        return text
    return encoded[:limit].decode("utf-8", errors="ignore")


def aggregate_comprehend(responses: Iterable[Mapping[str, Any]], source: str = "comprehend") -> SentimentResult:
    """Combine per-sentence ``DetectSentiment`` responses into one result.

    The label is the most frequent sentence label (MIXED counts as NEUTRAL, ties
    resolve to NEUTRAL); scores are the mean raw probabilities times 100 and the
    confidence is the mean of each sentence's highest raw score times 100.
    """
    rows = list(responses)
    if not rows:
        raise StrategyError("Comprehend returned no sentence results")

    counts: Counter[SentimentLabel] = Counter()
    totals = {key: 0.0 for key in SCORE_KEYS}
    confidence_total = 0.0
    for row in rows:
        counts[SentimentLabel.parse(row.get("Sentiment"))] += 1
        raw = row.get("SentimentScore") or {}
        totals["positive"] += float(raw.get("Positive") or 0.0)
        totals["neutral"] += float(raw.get("Neutral") or 0.0)
        totals["negative"] += float(raw.get("Negative") or 0.0)
        confidence_total += max(float(raw.get(key) or 0.0) for key in COMPREHEND_SCORE_KEYS)

    top = counts.most_common()
    label = top[0][0]
    if len(top) > 1 and top[1][1] == top[0][1]:
        label = SentimentLabel.NEUTRAL

    count = len(rows)
    scores = normalize_scores({key: totals[key] / count * 100 for key in SCORE_KEYS})
    confidence = round(confidence_total / count * 100, 1)
    return SentimentResult(sentiment=label, confidence=confidence, scores=scores, source=source)


class ComprehendStrategy(SentimentStrategy):
    name = "comprehend"

    def __init__(self, client: Any | None, language_code: str = "en", spacy_model: str = "") -> None:
        self.client = client
        self.language_code = language_code
        self.spacy_model = spacy_model

    def is_available(self) -> bool:
        return self.client is not None

    def _detect(self, sentence: str) -> Mapping[str, Any]:
        return self.client.detect_sentiment(Text=_truncate_utf8(sentence), LanguageCode=self.language_code)

    async def analyze(self, text: str) -> SentimentResult:
        if self.client is None:
            raise StrategyError("No Comprehend client configured")
        sentences = [
            sentence for sentence in split_sentences(text, self.spacy_model) if len(sentence) >= MIN_SENTENCE_LENGTH
        ]
        if not sentences:
            raise StrategyError("No sentences long enough for Comprehend")

        responses: list[Mapping[str, Any]] = []
        for sentence in sentences:
            try:
                responses.append(await asyncio.to_thread(self._detect, sentence))
            except (BotoCoreError, ClientError) as exc:
                raise StrategyError(f"Comprehend DetectSentiment failed: {exc}") from exc
        return aggregate_comprehend(responses)


# ---- Local lexicon -----------------------------------------------------------------


class LexiconStrategy(SentimentStrategy):
    name = LEXICON_SOURCE

    def is_available(self) -> bool:
        return True

    async def analyze(self, text: str) -> SentimentResult:
        return analyze_locally(text)


# ---- Factories ---------------------------------------------------------------------


def build_llm_client(settings: Settings) -> BaseLLMClient | None:
    if not settings.llm_api_key:
        return None
    common = {"timeout": settings.provider_timeout_seconds, "max_attempts": settings.provider_max_attempts}
    if settings.llm_provider == "openai":
        return OpenAIClient(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            endpoint=settings.openai_endpoint,
            **common,
        )
    if settings.llm_provider != "anthropic":
        logger.warning("Unknown LLM provider '%s', falling back to Anthropic", settings.llm_provider)
    return AnthropicClient(
        api_key=settings.anthropic_api_key,
        model=settings.anthropic_model,
        endpoint=settings.anthropic_endpoint,
        **common,
    )


def build_comprehend_client(settings: Settings) -> Any | None:
    if not settings.aws_configured:
        return None
    session = boto3.session.Session(
        aws_access_key_id=settings.aws_access_key_id,
        aws_secret_access_key=settings.aws_secret_access_key,
        region_name=settings.aws_region or None,
    )
    config = BotoConfig(
        connect_timeout=settings.provider_timeout_seconds,
        read_timeout=settings.provider_timeout_seconds,
        retries={"max_attempts": settings.provider_max_attempts, "mode": "standard"},
    )
    try:
        return session.client("comprehend", config=config)
    except (BotoCoreError, ClientError) as exc:
        logger.warning("Failed to initialize AWS Comprehend client: %s", exc)
        return None


def build_strategies(settings: Settings) -> list[SentimentStrategy]:
    """Strategies in priority order: LLM, managed cloud NLP, local lexicon."""
    return [
        LlmStrategy(build_llm_client(settings)),
        ComprehendStrategy(
            build_comprehend_client(settings),
            language_code=settings.comprehend_language_code,
            spacy_model=settings.spacy_model_name,
        ),
        LexiconStrategy(),
    ]
