from __future__ import annotations

import datetime as dt
import json
import logging
import threading
from dataclasses import asdict, dataclass, field
from typing import Any, Protocol, Sequence

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from reelpulse.core.config import Settings
from reelpulse.services.sentiment_types import BatchSentimentSummary, VideoAnalysis

logger = logging.getLogger(__name__)

DEFAULT_MAX_BATCHES = 500


def _dumps(payload: Any) -> str:
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))


@dataclass(slots=True)
class AnalysisRecord:
    id: int
    batch_id: int
    url: str
    platform: str
    sentiment: str
    confidence: float
    transcript: str
    word_count: int
    sentiment_scores: str
    phrases: str
    error: str | None
    created_at: dt.datetime


@dataclass(slots=True)
class BatchRecord:
    id: int
    content_type: str
    total_videos: int
    total_words: int
    avg_confidence: float
    processing_time: float
    failed_videos: int
    sentiment_counts: str
    sentiment_scores: str
    created_at: dt.datetime
    results: list[AnalysisRecord] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["created_at"] = self.created_at.isoformat()
        for result in payload["results"]:
            result["created_at"] = result["created_at"].isoformat()
        return payload


class AnalysisStore(Protocol):
    def save_batch(self, summary: BatchSentimentSummary, videos: Sequence[VideoAnalysis], content_type: str) -> int:
        ...

    def get_batch(self, batch_id: int) -> BatchRecord | None:
        ...


def build_batch_record(
    batch_id: int,
    summary: BatchSentimentSummary,
    videos: Sequence[VideoAnalysis],
    content_type: str,
    first_result_id: int = 1,
) -> BatchRecord:
    """Flatten analysis objects into storage rows; nested fields become JSON strings here and nowhere else."""
    created_at = dt.datetime.now(dt.timezone.utc)
    summary_payload = summary.to_dict()
    results = [
        AnalysisRecord(
            id=first_result_id + offset,
            batch_id=batch_id,
            url=video.url,
            platform=video.platform,
            sentiment=video.result.sentiment.value,
            confidence=video.result.confidence,
            transcript=video.transcript,
            word_count=video.word_count,
            sentiment_scores=_dumps(video.result.scores.to_dict()),
            phrases=_dumps(video.phrases.to_dict()),
            error=video.error,
            created_at=created_at,
        )
        for offset, video in enumerate(videos)
    ]
    return BatchRecord(
        id=batch_id,
        content_type=content_type,
        total_videos=summary.total_videos,
        total_words=summary.total_words,
        avg_confidence=summary.avg_confidence,
        processing_time=summary.processing_time_ms,
        failed_videos=summary.failed_videos,
        sentiment_counts=_dumps(summary_payload["sentimentCounts"]),
        sentiment_scores=_dumps(summary_payload["sentimentScores"]),
        created_at=created_at,
        results=results,
    )


class InMemoryAnalysisStore:
    """Process-local store; ids are sequential per process.

    Only the newest ``max_batches`` records are kept. Older ones are evicted, so
    use the S3 archive for anything that must outlive the process.
    """

    def __init__(self, max_batches: int = DEFAULT_MAX_BATCHES) -> None:
        self.max_batches = max(1, max_batches)
        self._batches: dict[int, BatchRecord] = {}
        self._next_batch_id = 1
        self._next_result_id = 1
        self._lock = threading.Lock()

    def save_batch(self, summary: BatchSentimentSummary, videos: Sequence[VideoAnalysis], content_type: str) -> int:
        with self._lock:
            batch_id = self._next_batch_id
            record = build_batch_record(batch_id, summary, videos, content_type, self._next_result_id)
            self._batches[batch_id] = record
            while len(self._batches) > self.max_batches:
                del self._batches[next(iter(self._batches))]
            self._next_batch_id += 1
            self._next_result_id += len(record.results)
        self._archive(record)
        return batch_id

    def get_batch(self, batch_id: int) -> BatchRecord | None:
        with self._lock:
            return self._batches.get(batch_id)

    def _archive(self, record: BatchRecord) -> None:
        return None


class S3ArchivedAnalysisStore(InMemoryAnalysisStore):
    """In-memory store that also uploads every saved batch to S3 as a JSON document."""

    def __init__(self, settings: Settings, client: Any | None = None) -> None:
        super().__init__(settings.analysis_max_batches)
        self.bucket = (settings.aws_s3_bucket or "").strip()
        self.prefix = (settings.s3_analysis_prefix or "").strip("/")
        if client is None:
            session = boto3.session.Session(
                aws_access_key_id=settings.aws_access_key_id or None,
                aws_secret_access_key=settings.aws_secret_access_key or None,
                region_name=settings.aws_region or None,
            )
            client = session.client("s3")
        self.client = client

    def _object_key(self, record: BatchRecord) -> str:
        key = f"{record.created_at:%Y/%m/%d}/batch-{record.created_at:%H%M%S}-{record.id}.json"
        return f"{self.prefix}/{key}" if self.prefix else key

    def _archive(self, record: BatchRecord) -> None:
        if not self.bucket:
            logger.warning("Skipping S3 archive because AWS_S3_BUCKET is not configured.")
            return
        object_key = self._object_key(record)
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=object_key,
                Body=_dumps(record.to_dict()).encode("utf-8"),
                ContentType="application/json",
            )
        except (BotoCoreError, ClientError) as exc:
            logger.error("Failed to archive batch %s to s3://%s/%s: %s", record.id, self.bucket, object_key, exc)


def create_analysis_store(settings: Settings) -> AnalysisStore:
    if settings.analysis_store == "s3":
        return S3ArchivedAnalysisStore(settings)
    return InMemoryAnalysisStore(settings.analysis_max_batches)
