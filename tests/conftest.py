import pathlib
import sys

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
BACKEND_PATH = ROOT / "src" / "backend"
if str(BACKEND_PATH) not in sys.path:
    sys.path.insert(0, str(BACKEND_PATH))

from reelpulse.core.config import Settings  # noqa: E402
from reelpulse.services.sentiment_types import (  # noqa: E402
    ExtractedPhrases,
    SentimentLabel,
    SentimentResult,
    SentimentScores,
    VideoAnalysis,
)


@pytest.fixture()
def offline_settings() -> Settings:
    """Settings with every provider credential blanked, regardless of the host environment."""
    return Settings(
        _env_file=None,
        anthropic_api_key="",
        openai_api_key="",
        aws_access_key_id="",
        aws_secret_access_key="",
        scrapecreators_api_key="",
        transcript_dev_fallback=False,
        statsd_host=None,
    )


def make_result(positive: float, neutral: float, negative: float, label: str, confidence: float = 80.0) -> SentimentResult:
    return SentimentResult(
        sentiment=SentimentLabel(label),
        confidence=confidence,
        scores=SentimentScores(positive=positive, neutral=neutral, negative=negative),
        source="test",
    )


def make_video(result: SentimentResult, url: str = "https://www.tiktok.com/@a/video/1", word_count: int = 10) -> VideoAnalysis:
    return VideoAnalysis(
        url=url,
        platform="tiktok",
        result=result,
        transcript="word " * word_count,
        word_count=word_count,
        phrases=ExtractedPhrases(),
    )
