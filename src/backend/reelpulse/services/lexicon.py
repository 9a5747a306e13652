"""Dependency-free weighted keyword sentiment scorer.

Used as the last strategy of the chain, so it has to accept any string and
always produce a valid score split.
"""
from __future__ import annotations

import re
from dataclasses import dataclass

from .score_normalizer import dominant_sentiment
from .sentiment_types import SentimentResult, SentimentScores

LEXICON_SOURCE = "lexicon"

STRONG_POSITIVE = frozenset({
    "amazing", "awesome", "incredible", "outstanding", "fantastic", "excellent", "perfect",
    "brilliant", "phenomenal", "love", "loved", "obsessed", "masterpiece", "superb", "flawless",
    "fire", "slaps", "bussin", "goated", "iconic", "legendary",
})
MODERATE_POSITIVE = frozenset({
    "great", "wonderful", "beautiful", "gorgeous", "stunning", "happy", "excited", "thrilled",
    "delighted", "impressive", "recommend", "fun", "delicious",
    "lit", "valid", "hype", "based", "vibes", "clean", "fresh",
})
MILD_POSITIVE = frozenset({
    "good", "nice", "cool", "pleased", "helpful", "useful", "decent", "solid", "glad",
    "enjoy", "enjoyed", "interesting", "cute", "sweet", "okay",
})
MILD_NEGATIVE = frozenset({
    "meh", "confused", "worried", "concerned", "weird", "boring", "tired", "slow", "expensive",
    "overrated", "mid", "basic", "sus", "awkward",
})
MODERATE_NEGATIVE = frozenset({
    "bad", "sad", "angry", "upset", "disappointed", "disappointing", "annoying", "frustrating",
    "useless", "broken", "overpriced", "waste",
    "cringe", "salty", "yikes", "fake", "messy", "sketchy", "flop",
})
STRONG_NEGATIVE = frozenset({
    "terrible", "awful", "horrible", "worst", "hate", "hated", "disgusting", "pathetic",
    "ridiculous", "stupid", "scam", "disaster",
    "trash", "garbage", "toxic",
})

WEIGHTED_SETS: tuple[tuple[frozenset[str], int], ...] = (
    (STRONG_POSITIVE, 3),
    (MODERATE_POSITIVE, 2),
    (MILD_POSITIVE, 1),
    (MILD_NEGATIVE, -1),
    (MODERATE_NEGATIVE, -2),
    (STRONG_NEGATIVE, -3),
)

# Tokens are compared after non-word characters are stripped ("don't" -> "dont").
# "no" is left out so that "no cap" stays positive.
NEGATIONS = frozenset({
    "not", "never", "dont", "doesnt", "didnt", "isnt", "wasnt", "arent", "werent",
    "cant", "cannot", "couldnt", "wont", "wouldnt", "shouldnt", "nothing", "nobody",
    "neither", "nor", "hardly",
})
INTENSIFIERS = frozenset({"very", "really", "extremely"})

_NON_WORD_RE = re.compile(r"[^\w]")
_EXCLAMATION_RE = re.compile(r"!{2,}")
_ALL_CAPS_RE = re.compile(r"\b[A-Z]{3,}\b")


@dataclass(frozen=True, slots=True)
class LexiconScore:
    total: float
    word_count: int
    sentiment_words: int

    @property
    def density(self) -> float:
        if not self.word_count:
            return 0.0
        return self.sentiment_words / self.word_count


def _token_weight(token: str) -> int:
    for words, weight in WEIGHTED_SETS:
        if token in words:
            return weight
    return 0


def score_text(text: str) -> LexiconScore:
    raw_tokens = text.split()
    tokens = [_NON_WORD_RE.sub("", token.lower()) for token in raw_tokens]

    total = 0.0
    sentiment_words = 0
    for token in tokens:
        weight = _token_weight(token)
        if weight:
            total += weight
            sentiment_words += 1

    if _EXCLAMATION_RE.search(text):
        total += 1
    if _ALL_CAPS_RE.search(text):
        total += 0.5

    token_set = set(tokens)
    if token_set & INTENSIFIERS:
        if total > 0:
            total += 1
        elif total < 0:
            total -= 1
    if token_set & NEGATIONS:
        total *= -0.5

    return LexiconScore(total=total, word_count=len(raw_tokens), sentiment_words=sentiment_words)


def _band(total: float, word_count: int) -> SentimentScores:
    magnitude = abs(total)
    if magnitude > 1:
        normalized = min(1.0, magnitude / (word_count * 3)) if word_count else 1.0
        dominant = round(50 + 35 * normalized)
        opposite = max(5, round(15 * (1 - normalized)))
    elif magnitude > 0:
        dominant = round(45 + 25 * magnitude)
        opposite = max(5, round(10 - 5 * magnitude))
    else:
        return SentimentScores(positive=20.0, neutral=60.0, negative=20.0)

    neutral = float(100 - dominant - opposite)
    if total > 0:
        return SentimentScores(positive=float(dominant), neutral=neutral, negative=float(opposite))
    return SentimentScores(positive=float(opposite), neutral=neutral, negative=float(dominant))


def analyze_locally(text: str) -> SentimentResult:
    score = score_text(text or "")
    scores = _band(score.total, score.word_count)
    confidence = min(90.0, max(60.0, 60 + score.density * 20 + abs(score.total) * 5))
    return SentimentResult(
        sentiment=dominant_sentiment(scores),
        confidence=float(round(confidence)),
        scores=scores,
        source=LEXICON_SOURCE,
    )
