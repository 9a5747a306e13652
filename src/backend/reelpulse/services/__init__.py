"""
Sentiment services: the provider chain, local scoring and batch summaries.
"""

from .aggregation import summarize_batch  # noqa: F401
from .phrase_extractor import extract_phrases  # noqa: F401
from .score_normalizer import normalize_scores  # noqa: F401
from .sentiment_pipeline import analyze_sentiment  # noqa: F401
from .text_preprocessor import preprocess  # noqa: F401
