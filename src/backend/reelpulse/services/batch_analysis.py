from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Protocol, Sequence

from reelpulse.core.config import Settings
from reelpulse.services import monitoring
from reelpulse.services.aggregation import MEAN, summarize_batch
from reelpulse.services.phrase_extractor import extract_phrases
from reelpulse.services.score_normalizer import NEUTRAL_ONLY
from reelpulse.services.sentiment_pipeline import SentimentPipeline
from reelpulse.services.sentiment_types import (
    BatchSentimentSummary,
    SentimentLabel,
    SentimentResult,
    VideoAnalysis,
)
from reelpulse.services.storage import AnalysisStore
from reelpulse.services.transcripts import TranscriptClient

logger = logging.getLogger(__name__)

PLACEHOLDER_SOURCE = "unavailable"
PLACEHOLDER_RESULT = SentimentResult(
    sentiment=SentimentLabel.NEUTRAL,
    confidence=0.0,
    scores=NEUTRAL_ONLY,
    source=PLACEHOLDER_SOURCE,
)


class TranscriptSource(Protocol):
    async def get_transcript(self, url: str, platform: str) -> str | None:
        ...


class SentimentAnalyzer(Protocol):
    async def analyze(self, text: str) -> SentimentResult:
        ...


@dataclass(frozen=True, slots=True)
class BatchOutcome:
    batch_id: int | None
    videos: tuple[VideoAnalysis, ...]
    summary: BatchSentimentSummary

    @property
    def analyzed_count(self) -> int:
        return sum(1 for video in self.videos if not video.is_placeholder)


def count_words(transcript: str) -> int:
    return len(transcript.split())


def placeholder_video(url: str, platform: str, error: str) -> VideoAnalysis:
    return VideoAnalysis(
        url=url,
        platform=platform,
        result=PLACEHOLDER_RESULT,
        transcript="",
        word_count=0,
        error=error,
    )


class BatchAnalysisService:
    """Fetch, score and summarize a batch of video URLs.

    Every submitted URL yields exactly one row, in submission order. Videos
    that cannot be analyzed become NEUTRAL placeholders carrying an error
    message and are left out of the summary.
    """

    def __init__(
        self,
        transcripts: TranscriptSource,
        analyzer: SentimentAnalyzer,
        store: AnalysisStore | None = None,
        concurrency: int = 1,
        aggregation_mode: str = MEAN,
    ) -> None:
        self.transcripts = transcripts
        self.analyzer = analyzer
        self.store = store
        self.concurrency = max(1, concurrency)
        self.aggregation_mode = aggregation_mode

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        analyzer: SentimentAnalyzer | None = None,
        store: AnalysisStore | None = None,
    ) -> "BatchAnalysisService":
        return cls(
            transcripts=TranscriptClient.from_settings(settings),
            analyzer=analyzer or SentimentPipeline.from_settings(settings),
            store=store,
            concurrency=settings.batch_concurrency,
            aggregation_mode=settings.batch_score_aggregation,
        )

    async def analyze_video(self, url: str, platform: str) -> VideoAnalysis:
        try:
            transcript = await self.transcripts.get_transcript(url, platform)
            if not transcript:
                return placeholder_video(url, platform, "Transcript unavailable")
            result = await self.analyzer.analyze(transcript)
            phrases = extract_phrases(transcript)
        except Exception as exc:
            logger.exception("Failed to analyze video %s", url)
            return placeholder_video(url, platform, f"Analysis failed: {exc}")

        return VideoAnalysis(
            url=url,
            platform=platform,
            result=result,
            transcript=transcript,
            word_count=count_words(transcript),
            phrases=phrases,
        )

    async def _analyze_all(self, urls: Sequence[str], platform: str) -> list[VideoAnalysis]:
        if self.concurrency == 1:
            return [await self.analyze_video(url, platform) for url in urls]

        semaphore = asyncio.Semaphore(self.concurrency)

        async def _bounded(url: str) -> VideoAnalysis:
            async with semaphore:
                return await self.analyze_video(url, platform)

        return list(await asyncio.gather(*(_bounded(url) for url in urls)))

    async def analyze_batch(self, urls: Sequence[str], platform: str) -> BatchOutcome:
        start = time.perf_counter()
        videos = await self._analyze_all(urls, platform)
        processing_time_ms = (time.perf_counter() - start) * 1000.0

        summary = summarize_batch(videos, processing_time_ms, mode=self.aggregation_mode)
        monitoring.record_batch(len(videos), summary.failed_videos, summary.processing_time_ms)
        logger.info(
            "Batch analyzed | platform=%s videos=%d failed=%d processing_ms=%.1f",
            platform,
            len(videos),
            summary.failed_videos,
            summary.processing_time_ms,
        )

        batch_id = None
        if self.store is not None and summary.total_videos:
            batch_id = self.store.save_batch(summary, videos, platform)
        return BatchOutcome(batch_id=batch_id, videos=tuple(videos), summary=summary)
