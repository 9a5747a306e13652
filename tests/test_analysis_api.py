from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from reelpulse.api import deps
from reelpulse.core.config import get_settings
from reelpulse.main import app
from reelpulse.services import sentiment_pipeline
from reelpulse.services.batch_analysis import BatchAnalysisService
from reelpulse.services.sentiment_pipeline import SentimentPipeline
from reelpulse.services.sentiment_strategies import LexiconStrategy
from reelpulse.services.storage import InMemoryAnalysisStore

TIKTOK_URL = "https://www.tiktok.com/@chef/video/1"
SECOND_URL = "https://www.tiktok.com/@chef/video/2"


class StubTranscripts:
    def __init__(self, transcripts: dict[str, str]) -> None:
        self.transcripts = transcripts

    async def get_transcript(self, url: str, platform: str) -> str | None:
        return self.transcripts.get(url)


@pytest.fixture()
def api_client(offline_settings, monkeypatch: pytest.MonkeyPatch):
    store = InMemoryAnalysisStore()
    transcripts = StubTranscripts(
        {
            TIKTOK_URL: "Just tried this amazing new recipe and I'm absolutely obsessed! The flavors are incredible.",
        }
    )

    def override_service() -> BatchAnalysisService:
        return BatchAnalysisService(transcripts, SentimentPipeline([LexiconStrategy()]), store=store)

    monkeypatch.setattr(sentiment_pipeline, "_PIPELINE", None)
    app.dependency_overrides[get_settings] = lambda: offline_settings
    app.dependency_overrides[deps.get_batch_service] = override_service
    app.dependency_overrides[deps.get_analysis_store] = lambda: store
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


def test_health_endpoints(api_client: TestClient) -> None:
    assert api_client.get("/healthz").json() == {"status": "ok"}
    assert api_client.get("/api/v1/health").json() == {"status": "ok"}

    ready = api_client.get("/api/v1/ready").json()
    assert ready["status"] == "ready"
    assert ready["strategies"] == ["lexicon"]
    assert ready["transcripts_configured"] is False


def test_analyze_returns_results_and_summary(api_client: TestClient) -> None:
    response = api_client.post("/api/v1/analyze", json={"urls": [TIKTOK_URL, SECOND_URL], "contentType": "tiktok"})

    assert response.status_code == 200
    body = response.json()
    assert body["batch_id"] == 1
    assert [result["url"] for result in body["results"]] == [TIKTOK_URL, SECOND_URL]

    analyzed, missing = body["results"]
    assert analyzed["sentiment"] == "POSITIVE"
    assert analyzed["source"] == "lexicon"
    assert analyzed["word_count"] == 14
    assert analyzed["phrases"]["positive"]
    assert missing["error"] == "Transcript unavailable"
    assert missing["sentiment_scores"] == {"positive": 0.0, "neutral": 100.0, "negative": 0.0}

    summary = body["summary"]
    assert summary["total_videos"] == 1
    assert summary["failed_videos"] == 1
    assert summary["total_words"] == 14
    assert summary["sentiment_counts"] == {"POSITIVE": 1, "NEUTRAL": 0, "NEGATIVE": 0}
    assert sum(summary["sentiment_scores"].values()) == pytest.approx(100.0)


def test_stored_batch_can_be_read_back(api_client: TestClient) -> None:
    api_client.post("/api/v1/analyze", json={"urls": [TIKTOK_URL], "content_type": "tiktok"})

    response = api_client.get("/api/v1/batches/1")

    assert response.status_code == 200
    assert response.json()["content_type"] == "tiktok"
    assert api_client.get("/api/v1/batches/42").status_code == 404
    assert api_client.get("/api/v1/batches/0").status_code == 422


def test_batch_without_transcripts_is_rejected(api_client: TestClient) -> None:
    response = api_client.post("/api/v1/analyze", json={"urls": [SECOND_URL], "contentType": "tiktok"})

    assert response.status_code == 400
    assert "No videos could be processed" in response.json()["detail"]


@pytest.mark.parametrize(
    "payload",
    [
        {"urls": [], "contentType": "tiktok"},
        {"urls": ["https://evil.com/video"], "contentType": "tiktok"},
        {"urls": ["http://www.tiktok.com/@chef/video/1"], "contentType": "tiktok"},
        {"urls": [TIKTOK_URL], "contentType": "vimeo"},
        {"urls": [TIKTOK_URL]},
    ],
)
def test_invalid_requests_are_rejected(api_client: TestClient, payload: dict) -> None:
    assert api_client.post("/api/v1/analyze", json=payload).status_code == 422


def test_configured_url_limit_is_enforced(api_client: TestClient, offline_settings) -> None:
    app.dependency_overrides[get_settings] = lambda: offline_settings.model_copy(update={"batch_max_urls": 1})

    response = api_client.post("/api/v1/analyze", json={"urls": [TIKTOK_URL, SECOND_URL], "contentType": "tiktok"})

    assert response.status_code == 400


def test_default_url_limit_rejects_six_urls(api_client: TestClient) -> None:
    response = api_client.post("/api/v1/analyze", json={"urls": [TIKTOK_URL] * 6, "contentType": "tiktok"})

    assert response.status_code == 400


def test_raised_url_limit_accepts_more_than_five_urls(api_client: TestClient, offline_settings) -> None:
    app.dependency_overrides[get_settings] = lambda: offline_settings.model_copy(update={"batch_max_urls": 10})

    response = api_client.post("/api/v1/analyze", json={"urls": [TIKTOK_URL] * 6, "contentType": "tiktok"})

    assert response.status_code == 200
    assert len(response.json()["results"]) == 6
