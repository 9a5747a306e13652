from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from reelpulse.core.config import Settings, get_settings
from reelpulse.services.sentiment_pipeline import get_sentiment_pipeline

router = APIRouter(tags=["health"])


@router.get("/health", summary="Liveness probe")
def health_check() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/ready", summary="Readiness probe")
def readiness_check(settings: Settings = Depends(get_settings)) -> dict[str, Any]:
    pipeline = get_sentiment_pipeline(settings)
    return {
        "status": "ready",
        "strategies": [strategy.name for strategy in pipeline.strategies if strategy.is_available()],
        "transcripts_configured": bool(settings.scrapecreators_api_key),
    }
