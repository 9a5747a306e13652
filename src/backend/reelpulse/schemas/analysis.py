from __future__ import annotations

import datetime as dt
from typing import Dict, List, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from reelpulse.services.batch_analysis import BatchOutcome
from reelpulse.services.sentiment_types import SentimentLabel, VideoAnalysis
from reelpulse.services.url_sanitizer import UnsafeUrlError, sanitize_url

ContentType = Literal["tiktok", "reels", "shorts"]


class AnalyzeVideosRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    urls: List[str] = Field(min_length=1)
    content_type: ContentType = Field(validation_alias=AliasChoices("content_type", "contentType"))
    include_timestamps: bool = Field(
        default=False, validation_alias=AliasChoices("include_timestamps", "includeTimestamps")
    )

    @field_validator("urls")
    @classmethod
    def _sanitize_urls(cls, value: List[str]) -> List[str]:
        sanitized: list[str] = []
        for url in value:
            try:
                sanitized.append(sanitize_url(url))
            except UnsafeUrlError as exc:
                raise ValueError(str(exc)) from exc
        return sanitized


class SentimentScoresModel(BaseModel):
    positive: float
    neutral: float
    negative: float


class PhrasesModel(BaseModel):
    positive: List[str] = Field(default_factory=list)
    negative: List[str] = Field(default_factory=list)


class VideoResult(BaseModel):
    url: str
    platform: str
    sentiment: SentimentLabel
    confidence: float
    source: str
    transcript: str
    word_count: int
    sentiment_scores: SentimentScoresModel
    phrases: PhrasesModel
    error: str | None = None

    @classmethod
    def from_analysis(cls, video: VideoAnalysis) -> "VideoResult":
        return cls(
            url=video.url,
            platform=video.platform,
            sentiment=video.result.sentiment,
            confidence=video.result.confidence,
            source=video.result.source,
            transcript=video.transcript,
            word_count=video.word_count,
            sentiment_scores=SentimentScoresModel(**video.result.scores.to_dict()),
            phrases=PhrasesModel(
                positive=list(video.phrases.positive_phrases),
                negative=list(video.phrases.negative_phrases),
            ),
            error=video.error,
        )


class BatchSummary(BaseModel):
    total_videos: int
    failed_videos: int
    total_words: int
    avg_confidence: float
    processing_time: float
    sentiment_counts: Dict[SentimentLabel, int]
    sentiment_scores: SentimentScoresModel


class AnalyzeVideosResponse(BaseModel):
    batch_id: int | None
    results: List[VideoResult]
    summary: BatchSummary
    generated_at: dt.datetime

    @classmethod
    def from_outcome(cls, outcome: BatchOutcome) -> "AnalyzeVideosResponse":
        summary = outcome.summary
        return cls(
            batch_id=outcome.batch_id,
            results=[VideoResult.from_analysis(video) for video in outcome.videos],
            summary=BatchSummary(
                total_videos=summary.total_videos,
                failed_videos=summary.failed_videos,
                total_words=summary.total_words,
                avg_confidence=summary.avg_confidence,
                processing_time=summary.processing_time_ms,
                sentiment_counts={label: summary.sentiment_counts.get(label, 0) for label in SentimentLabel},
                sentiment_scores=SentimentScoresModel(**summary.sentiment_scores.to_dict()),
            ),
            generated_at=dt.datetime.now(dt.timezone.utc),
        )
