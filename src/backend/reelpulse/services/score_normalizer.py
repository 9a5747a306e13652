from __future__ import annotations

import math
from typing import Any, Mapping

from .sentiment_types import SentimentLabel, SentimentScores

SCORE_KEYS = ("positive", "neutral", "negative")
SUM_TOLERANCE = 1.0
NEUTRAL_ONLY = SentimentScores(positive=0.0, neutral=100.0, negative=0.0)


def _coerce(value: Any) -> float:
    if value is None:
        return 0.0
    number = float(value)
    if not math.isfinite(number) or number < 0:
        return 0.0
    return number


def _as_mapping(raw: Mapping[str, Any] | SentimentScores) -> Mapping[str, Any]:
    if isinstance(raw, SentimentScores):
        return raw.to_dict()
    return raw


def normalize_scores(raw: Mapping[str, Any] | SentimentScores, tolerance: float = SUM_TOLERANCE) -> SentimentScores:
    """Express any provider's score triple as non-negative percentages summing to 100.

    Triples already within ``tolerance`` of 100 are kept (rounded to one decimal);
    anything else, including 0-1 probabilities, is rescaled proportionally.
    Raises ``ValueError`` when a component is not numeric.
    """
    mapping = _as_mapping(raw)
    values = [_coerce(mapping.get(key)) for key in SCORE_KEYS]
    total = sum(values)
    if total <= 0:
        return NEUTRAL_ONLY

    if abs(total - 100.0) <= tolerance:
        positive, neutral, negative = (round(value, 1) for value in values)
        return SentimentScores(positive=positive, neutral=neutral, negative=negative)

    scaled = [round(value * 100.0 / total, 1) for value in values]
    residue = round(100.0 - sum(scaled), 1)
    if residue:
        largest = max(range(len(scaled)), key=lambda index: scaled[index])
        scaled[largest] = round(scaled[largest] + residue, 1)
    positive, neutral, negative = scaled
    return SentimentScores(positive=positive, neutral=neutral, negative=negative)


def dominant_sentiment(scores: SentimentScores) -> SentimentLabel:
    """Return the strictly largest component; any tie resolves to NEUTRAL."""
    if scores.positive > scores.neutral and scores.positive > scores.negative:
        return SentimentLabel.POSITIVE
    if scores.negative > scores.neutral and scores.negative > scores.positive:
        return SentimentLabel.NEGATIVE
    return SentimentLabel.NEUTRAL


def clamp_confidence(value: Any, default: float = 75.0) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number):
        return default
    return round(max(0.0, min(100.0, number)), 1)
