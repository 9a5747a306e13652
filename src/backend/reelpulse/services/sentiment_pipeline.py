from __future__ import annotations

import asyncio
import logging
import threading
import time
from dataclasses import replace
from typing import Sequence

from reelpulse.core.config import Settings, get_settings
from reelpulse.services import monitoring
from reelpulse.services.lexicon import analyze_locally
from reelpulse.services.score_normalizer import clamp_confidence, normalize_scores
from reelpulse.services.sentiment_strategies import SentimentStrategy, build_strategies
from reelpulse.services.sentiment_types import SentimentResult

logger = logging.getLogger(__name__)


class SentimentPipeline:
    """Ordered provider chain: the first strategy that answers wins.

    ``analyze`` never raises. Unconfigured strategies are skipped, failing or
    slow ones are logged and skipped, and when nothing answers the local
    lexicon result is returned.
    """

    def __init__(self, strategies: Sequence[SentimentStrategy], timeout_seconds: float = 30.0) -> None:
        self.strategies = list(strategies)
        self.timeout_seconds = timeout_seconds

    @classmethod
    def from_settings(cls, settings: Settings) -> "SentimentPipeline":
        return cls(build_strategies(settings), timeout_seconds=settings.provider_timeout_seconds)

    @property
    def strategy_names(self) -> list[str]:
        return [strategy.name for strategy in self.strategies]

    async def analyze(self, text: str) -> SentimentResult:
        text = text or ""
        for strategy in self.strategies:
            if not strategy.is_available():
                monitoring.record_strategy(strategy.name, "skipped")
                continue

            start = time.perf_counter()
            try:
                result = await asyncio.wait_for(strategy.analyze(text), timeout=self.timeout_seconds)
            except asyncio.TimeoutError:
                latency_ms = (time.perf_counter() - start) * 1000.0
                logger.warning(
                    "Sentiment strategy %s timed out after %.1fs; trying next provider",
                    strategy.name,
                    self.timeout_seconds,
                )
                monitoring.record_strategy(strategy.name, "timeout", latency_ms)
                continue
            except Exception as exc:
                latency_ms = (time.perf_counter() - start) * 1000.0
                logger.warning("Sentiment strategy %s failed; trying next provider: %s", strategy.name, exc)
                monitoring.record_strategy(strategy.name, "failed", latency_ms)
                continue

            latency_ms = (time.perf_counter() - start) * 1000.0
            monitoring.record_strategy(strategy.name, "ok", latency_ms)
            finalized = self._finalize(result)
            logger.info(
                "Sentiment resolved | strategy=%s label=%s confidence=%.1f latency_ms=%.2f",
                strategy.name,
                finalized.sentiment.value,
                finalized.confidence,
                latency_ms,
            )
            return finalized

        logger.warning("No sentiment provider succeeded; using local lexicon scores")
        return analyze_locally(text)

    @staticmethod
    def _finalize(result: SentimentResult) -> SentimentResult:
        return replace(
            result,
            scores=normalize_scores(result.scores.to_dict()),
            confidence=clamp_confidence(result.confidence),
        )


_PIPELINE: SentimentPipeline | None = None
_PIPELINE_LOCK = threading.Lock()


def get_sentiment_pipeline(settings: Settings | None = None) -> SentimentPipeline:
    global _PIPELINE
    if settings is None:
        settings = get_settings()
    with _PIPELINE_LOCK:
        if _PIPELINE is None:
            _PIPELINE = SentimentPipeline.from_settings(settings)
            logger.info("Sentiment chain initialized | strategies=%s", ",".join(_PIPELINE.strategy_names))
    return _PIPELINE


async def analyze_sentiment(text: str) -> SentimentResult:
    return await get_sentiment_pipeline().analyze(text)
