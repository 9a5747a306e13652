"""Analyze Videos Job

Runs the sentiment chain from the command line, either on a batch of video URLs
or on a piece of raw text, and prints the result as JSON.

Usage:
    python -m jobs.analyze_videos --platform tiktok https://www.tiktok.com/@user/video/123
    python -m jobs.analyze_videos --text "This is fire, no cap!!"
"""
import argparse
import asyncio
import json
import logging
import sys

from reelpulse.core.config import get_settings
from reelpulse.core.logging import configure_logging
from reelpulse.schemas.analysis import AnalyzeVideosResponse
from reelpulse.services.batch_analysis import BatchAnalysisService
from reelpulse.services.monitoring import configure_metrics
from reelpulse.services.phrase_extractor import extract_phrases
from reelpulse.services.sentiment_pipeline import SentimentPipeline
from reelpulse.services.url_sanitizer import UnsafeUrlError, sanitize_url

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Analyze sentiment of short-form video transcripts")
    parser.add_argument("urls", nargs="*", help="Video URLs to analyze")
    parser.add_argument(
        "--platform",
        choices=["tiktok", "reels", "shorts"],
        default="tiktok",
        help="Platform the URLs belong to (default tiktok)",
    )
    parser.add_argument("--text", help="Analyze this text instead of fetching transcripts")
    return parser


async def analyze_text(text: str) -> dict:
    pipeline = SentimentPipeline.from_settings(get_settings())
    result = await pipeline.analyze(text)
    payload = result.to_dict()
    payload.update(extract_phrases(text).to_dict())
    return payload


async def analyze_urls(urls: list[str], platform: str) -> dict:
    settings = get_settings()
    sanitized = [sanitize_url(url) for url in urls[: settings.batch_max_urls]]
    if len(urls) > len(sanitized):
        logger.warning("Only the first %d URLs are analyzed", settings.batch_max_urls)
    service = BatchAnalysisService.from_settings(settings)
    outcome = await service.analyze_batch(sanitized, platform)
    return AnalyzeVideosResponse.from_outcome(outcome).model_dump(mode="json")


async def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(settings)
    configure_metrics(settings)

    if args.text is None and not args.urls:
        logger.error("Provide at least one URL or --text")
        return 2

    try:
        if args.text is not None:
            payload = await analyze_text(args.text)
        else:
            payload = await analyze_urls(args.urls, args.platform)
    except UnsafeUrlError as exc:
        logger.error("%s", exc)
        return 2

    print(json.dumps(payload, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
