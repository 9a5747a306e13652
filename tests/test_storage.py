import json

from botocore.exceptions import ClientError

from conftest import make_result, make_video
from reelpulse.services.aggregation import summarize_batch
from reelpulse.services.sentiment_types import ExtractedPhrases, VideoAnalysis
from reelpulse.services.storage import InMemoryAnalysisStore, S3ArchivedAnalysisStore, create_analysis_store


class FakeS3:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.objects: list[dict] = []

    def put_object(self, **kwargs):
        if self.error is not None:
            raise self.error
        self.objects.append(kwargs)
        return {"ETag": "etag"}


def _videos() -> list[VideoAnalysis]:
    video = make_video(make_result(70, 20, 10, "POSITIVE"), word_count=4)
    return [
        VideoAnalysis(
            url=video.url,
            platform=video.platform,
            result=video.result,
            transcript=video.transcript,
            word_count=video.word_count,
            phrases=ExtractedPhrases(positive_phrases=("Love it",)),
        )
    ]


def test_in_memory_store_assigns_sequential_ids() -> None:
    store = InMemoryAnalysisStore()
    videos = _videos()
    summary = summarize_batch(videos, processing_time_ms=10.0)

    first = store.save_batch(summary, videos, "tiktok")
    second = store.save_batch(summary, videos, "tiktok")

    assert (first, second) == (1, 2)
    record = store.get_batch(2)
    assert record is not None
    assert record.results[0].id == 2
    assert record.results[0].batch_id == 2
    assert store.get_batch(3) is None


def test_records_serialize_nested_fields() -> None:
    store = InMemoryAnalysisStore()
    videos = _videos()
    batch_id = store.save_batch(summarize_batch(videos), videos, "reels")

    payload = store.get_batch(batch_id).to_dict()

    assert json.loads(payload["sentiment_scores"]) == {"positive": 70.0, "neutral": 20.0, "negative": 10.0}
    result = payload["results"][0]
    assert json.loads(result["phrases"]) == {"positivePhrases": ["Love it"], "negativePhrases": []}
    assert json.loads(result["sentiment_scores"])["neutral"] == 20.0
    assert isinstance(result["created_at"], str)


def test_s3_store_archives_each_batch(offline_settings) -> None:
    settings = offline_settings.model_copy(update={"aws_s3_bucket": "reel-bucket", "s3_analysis_prefix": "analyses/"})
    client = FakeS3()
    store = S3ArchivedAnalysisStore(settings, client=client)
    videos = _videos()

    batch_id = store.save_batch(summarize_batch(videos), videos, "shorts")

    assert store.get_batch(batch_id) is not None
    assert len(client.objects) == 1
    uploaded = client.objects[0]
    assert uploaded["Bucket"] == "reel-bucket"
    assert uploaded["Key"].startswith("analyses/")
    assert uploaded["Key"].endswith(f"-{batch_id}.json")
    assert json.loads(uploaded["Body"])["content_type"] == "shorts"


def test_s3_archive_failures_do_not_lose_the_batch(offline_settings) -> None:
    settings = offline_settings.model_copy(update={"aws_s3_bucket": "reel-bucket"})
    error = ClientError({"Error": {"Code": "AccessDenied", "Message": "denied"}}, "PutObject")
    store = S3ArchivedAnalysisStore(settings, client=FakeS3(error=error))
    videos = _videos()

    batch_id = store.save_batch(summarize_batch(videos), videos, "tiktok")

    assert store.get_batch(batch_id) is not None


def test_s3_store_without_bucket_skips_upload(offline_settings) -> None:
    client = FakeS3()
    store = S3ArchivedAnalysisStore(offline_settings, client=client)
    videos = _videos()

    store.save_batch(summarize_batch(videos), videos, "tiktok")

    assert client.objects == []


def test_create_analysis_store_defaults_to_memory(offline_settings) -> None:
    assert isinstance(create_analysis_store(offline_settings), InMemoryAnalysisStore)
    assert not isinstance(create_analysis_store(offline_settings), S3ArchivedAnalysisStore)


def test_in_memory_store_evicts_oldest_batches_past_the_cap() -> None:
    store = InMemoryAnalysisStore(max_batches=2)
    videos = _videos()
    summary = summarize_batch(videos)

    ids = [store.save_batch(summary, videos, "tiktok") for _ in range(3)]

    assert ids == [1, 2, 3]
    assert store.get_batch(1) is None
    assert store.get_batch(2) is not None
    assert store.get_batch(3) is not None


def test_create_analysis_store_uses_configured_cap(offline_settings) -> None:
    settings = offline_settings.model_copy(update={"analysis_max_batches": 7})

    assert create_analysis_store(settings).max_batches == 7
