from __future__ import annotations

from typing import Iterable, Sequence

from .sentiment_types import (
    BatchSentimentSummary,
    SentimentLabel,
    SentimentResult,
    SentimentScores,
    VideoAnalysis,
)

MEAN = "mean"
SUM_NORMALIZED = "sum_normalized"
ZERO_SCORES = SentimentScores(positive=0.0, neutral=0.0, negative=0.0)


class _BatchAccumulator:
    __slots__ = ("_totals", "_counts", "_confidence", "_words", "_videos", "_failed")

    def __init__(self) -> None:
        self._totals: dict[str, float] = {"positive": 0.0, "neutral": 0.0, "negative": 0.0}
        self._counts: dict[SentimentLabel, int] = {label: 0 for label in SentimentLabel}
        self._confidence = 0.0
        self._words = 0
        self._videos = 0
        self._failed = 0

    def add(self, result: SentimentResult, word_count: int = 0) -> None:
        self._counts[result.sentiment] += 1
        self._totals["positive"] += result.scores.positive
        self._totals["neutral"] += result.scores.neutral
        self._totals["negative"] += result.scores.negative
        self._confidence += result.confidence
        self._words += max(word_count, 0)
        self._videos += 1

    def skip(self) -> None:
        self._failed += 1

    def scores(self, mode: str = MEAN) -> SentimentScores:
        if self._videos == 0:
            return ZERO_SCORES
        if mode == SUM_NORMALIZED:
            divisor = sum(self._totals.values()) / 100.0
        elif mode == MEAN:
            divisor = float(self._videos)
        else:
            raise ValueError(f"Unknown score aggregation mode: {mode}")
        if divisor <= 0:
            return ZERO_SCORES
        return SentimentScores(
            positive=round(self._totals["positive"] / divisor, 1),
            neutral=round(self._totals["neutral"] / divisor, 1),
            negative=round(self._totals["negative"] / divisor, 1),
        )

    def finalize(self, processing_time_ms: float, mode: str = MEAN) -> BatchSentimentSummary:
        avg_confidence = round(self._confidence / self._videos, 1) if self._videos else 0.0
        return BatchSentimentSummary(
            sentiment_counts=dict(self._counts),
            sentiment_scores=self.scores(mode),
            avg_confidence=avg_confidence,
            total_words=self._words,
            total_videos=self._videos,
            processing_time_ms=round(float(processing_time_ms), 1),
            failed_videos=self._failed,
        )


class BatchAggregationCalculator:
    """Pure batch aggregation that can be unit tested without providers or storage.

    Scores are the per-component mean over analyzed videos (``mean``), or the
    component sums divided by the grand total (``sum_normalized``). Label counts
    are tallied independently, so the majority label may differ from the
    largest averaged component. Placeholder rows are counted as failures and
    kept out of every other field.
    """

    def __init__(self, videos: Iterable[VideoAnalysis], mode: str = MEAN) -> None:
        self._videos = list(videos)
        self.mode = mode

    def run(self, processing_time_ms: float = 0.0) -> BatchSentimentSummary:
        accumulator = _BatchAccumulator()
        for video in self._videos:
            if video.is_placeholder:
                accumulator.skip()
                continue
            accumulator.add(video.result, video.word_count)
        return accumulator.finalize(processing_time_ms, self.mode)


def summarize_batch(
    videos: Iterable[VideoAnalysis],
    processing_time_ms: float = 0.0,
    mode: str = MEAN,
) -> BatchSentimentSummary:
    return BatchAggregationCalculator(videos, mode=mode).run(processing_time_ms)


def aggregate_scores(results: Sequence[SentimentResult], mode: str = MEAN) -> SentimentScores:
    accumulator = _BatchAccumulator()
    for result in results:
        accumulator.add(result)
    return accumulator.scores(mode)
