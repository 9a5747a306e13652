from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Path, status

from reelpulse.api import deps
from reelpulse.core.config import Settings, get_settings
from reelpulse.schemas.analysis import AnalyzeVideosRequest, AnalyzeVideosResponse
from reelpulse.services.batch_analysis import BatchAnalysisService
from reelpulse.services.storage import AnalysisStore

router = APIRouter(tags=["analysis"])


@router.post("/analyze", response_model=AnalyzeVideosResponse)
async def analyze_videos(
    payload: AnalyzeVideosRequest,
    settings: Settings = Depends(get_settings),
    service: BatchAnalysisService = Depends(deps.get_batch_service),
) -> AnalyzeVideosResponse:
    if len(payload.urls) > settings.batch_max_urls:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"At most {settings.batch_max_urls} URLs can be analyzed per batch.",
        )

    outcome = await service.analyze_batch(payload.urls, payload.content_type)
    if outcome.analyzed_count == 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No videos could be processed. Please check your URLs and try again.",
        )
    return AnalyzeVideosResponse.from_outcome(outcome)


@router.get("/batches/{batch_id}")
def get_batch(
    batch_id: int = Path(gt=0),
    store: AnalysisStore = Depends(deps.get_analysis_store),
) -> dict[str, Any]:
    record = store.get_batch(batch_id)
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Batch not found")
    return record.to_dict()
