from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping


class SentimentLabel(str, enum.Enum):
    POSITIVE = "POSITIVE"
    NEUTRAL = "NEUTRAL"
    NEGATIVE = "NEGATIVE"

    @classmethod
    def parse(cls, value: Any) -> "SentimentLabel":
        """Map provider spellings (``positive``, ``Positive``, ``MIXED``...) onto the three labels."""
        normalized = str(value or "").strip().upper()
        if normalized in cls.__members__:
            return cls[normalized]
        if normalized == "MIXED":
            return cls.NEUTRAL
        raise ValueError(f"Unknown sentiment label: {value!r}")


@dataclass(frozen=True, slots=True)
class SentimentScores:
    """Percentage split across the three sentiment classes."""

    positive: float
    neutral: float
    negative: float

    @property
    def total(self) -> float:
        return self.positive + self.neutral + self.negative

    def to_dict(self) -> Dict[str, float]:
        return {"positive": self.positive, "neutral": self.neutral, "negative": self.negative}


@dataclass(frozen=True, slots=True)
class SentimentResult:
    sentiment: SentimentLabel
    confidence: float
    scores: SentimentScores
    source: str = "lexicon"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sentiment": self.sentiment.value,
            "confidence": self.confidence,
            "scores": self.scores.to_dict(),
            "source": self.source,
        }


@dataclass(frozen=True, slots=True)
class ExtractedPhrases:
    positive_phrases: tuple[str, ...] = ()
    negative_phrases: tuple[str, ...] = ()

    @property
    def best_positive(self) -> str | None:
        return self.positive_phrases[0] if self.positive_phrases else None

    @property
    def best_negative(self) -> str | None:
        return self.negative_phrases[0] if self.negative_phrases else None

    def to_dict(self) -> Dict[str, list[str]]:
        return {
            "positivePhrases": list(self.positive_phrases),
            "negativePhrases": list(self.negative_phrases),
        }


@dataclass(frozen=True, slots=True)
class VideoAnalysis:
    """One result row per submitted URL; placeholders keep the rows aligned with the input."""

    url: str
    platform: str
    result: SentimentResult
    transcript: str
    word_count: int
    phrases: ExtractedPhrases = field(default_factory=ExtractedPhrases)
    error: str | None = None

    @property
    def is_placeholder(self) -> bool:
        return self.error is not None


@dataclass(frozen=True, slots=True)
class BatchSentimentSummary:
    sentiment_counts: Mapping[SentimentLabel, int]
    sentiment_scores: SentimentScores
    avg_confidence: float
    total_words: int
    total_videos: int
    processing_time_ms: float
    failed_videos: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sentimentCounts": {label.value: self.sentiment_counts.get(label, 0) for label in SentimentLabel},
            "sentimentScores": self.sentiment_scores.to_dict(),
            "avgConfidence": self.avg_confidence,
            "totalWords": self.total_words,
            "totalVideos": self.total_videos,
            "processingTimeMs": self.processing_time_ms,
            "failedVideos": self.failed_videos,
        }
