from reelpulse.schemas.analysis import (
    AnalyzeVideosRequest,
    AnalyzeVideosResponse,
    BatchSummary,
    PhrasesModel,
    SentimentScoresModel,
    VideoResult,
)

__all__ = [
    "AnalyzeVideosRequest",
    "AnalyzeVideosResponse",
    "BatchSummary",
    "PhrasesModel",
    "SentimentScoresModel",
    "VideoResult",
]
