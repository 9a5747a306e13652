"""Sentiment analysis for short-form video transcripts."""

__version__ = "0.1.0"
