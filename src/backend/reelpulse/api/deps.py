from __future__ import annotations

from functools import lru_cache

from fastapi import Depends

from reelpulse.core.config import Settings, get_settings
from reelpulse.services.batch_analysis import BatchAnalysisService
from reelpulse.services.sentiment_pipeline import get_sentiment_pipeline
from reelpulse.services.storage import AnalysisStore, create_analysis_store


@lru_cache(maxsize=1)
def get_analysis_store() -> AnalysisStore:
    return create_analysis_store(get_settings())


def get_batch_service(
    settings: Settings = Depends(get_settings),
    store: AnalysisStore = Depends(get_analysis_store),
) -> BatchAnalysisService:
    return BatchAnalysisService.from_settings(settings, analyzer=get_sentiment_pipeline(settings), store=store)
