import json

import httpx
import pytest

from reelpulse.services.transcripts import TranscriptClient, clean_transcript, fallback_transcript


def _client(handler, **kwargs) -> TranscriptClient:
    return TranscriptClient(api_key="sc-key", transport=httpx.MockTransport(handler), max_attempts=1, **kwargs)


def test_clean_transcript_drops_markers_and_whitespace() -> None:
    assert clean_transcript("[Music] hello   [APPLAUSE]\n world [inaudible] [laughter]") == "hello world"
    assert clean_transcript("") == ""


@pytest.mark.asyncio
async def test_fetches_transcript_for_platform_endpoint() -> None:
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        seen["auth"] = request.headers["authorization"]
        seen["api_key"] = request.headers["x-api-key"]
        return httpx.Response(200, json={"transcript": "[music] hi   there"})

    transcript = await _client(handler).get_transcript("https://www.tiktok.com/@a/video/1", "tiktok")

    assert transcript == "hi there"
    assert seen == {
        "path": "/tiktok/video",
        "body": {"url": "https://www.tiktok.com/@a/video/1"},
        "auth": "Bearer sc-key",
        "api_key": "sc-key",
    }


@pytest.mark.asyncio
async def test_reads_captions_from_nested_data() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/youtube/shorts"
        return httpx.Response(200, json={"data": {"captions": "short and sweet"}})

    assert await _client(handler).get_transcript("https://youtu.be/x", "shorts") == "short and sweet"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(404, text="not found"),
        httpx.Response(200, json={"transcript": ""}),
        httpx.Response(200, text="not json"),
    ],
)
async def test_failures_return_none(response: httpx.Response) -> None:
    assert await _client(lambda request: response).get_transcript("https://www.instagram.com/reel/x", "reels") is None


@pytest.mark.asyncio
async def test_missing_key_and_unknown_platform_return_none() -> None:
    client = TranscriptClient(api_key="")

    assert await client.get_transcript("https://www.tiktok.com/@a/video/1", "tiktok") is None
    assert await _client(lambda request: httpx.Response(200)).get_transcript("https://x", "vimeo") is None


@pytest.mark.asyncio
async def test_dev_fallback_transcript_when_enabled() -> None:
    client = TranscriptClient(api_key="", dev_fallback=True)

    transcript = await client.get_transcript("https://www.instagram.com/reel/x", "reels")

    assert transcript == fallback_transcript("reels")
    assert transcript.startswith("Good morning beautiful souls!")
    assert fallback_transcript("vimeo") == fallback_transcript("tiktok")


def test_client_from_settings(offline_settings) -> None:
    settings = offline_settings.model_copy(
        update={"scrapecreators_api_key": "abc", "scrapecreators_base_url": "https://scrape.test/"}
    )

    client = TranscriptClient.from_settings(settings)

    assert client.api_key == "abc"
    assert client.base_url == "https://scrape.test"
    assert client.dev_fallback is False


@pytest.mark.asyncio
async def test_module_level_get_transcript_never_raises(monkeypatch: pytest.MonkeyPatch, offline_settings) -> None:
    from reelpulse.services import transcripts

    monkeypatch.setattr(transcripts, "get_settings", lambda: offline_settings)

    assert await transcripts.get_transcript("https://www.tiktok.com/@a/video/1", "tiktok") is None
