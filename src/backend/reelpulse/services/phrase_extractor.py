"""Extractive positive/negative phrase picker for transcript display.

The heuristic is order dependent: the first candidates that match win and
there is no ranking or de-duplication.
"""
from __future__ import annotations

import re
from typing import Sequence

from .sentiment_types import ExtractedPhrases

POSITIVE_INDICATORS: tuple[str, ...] = (
    "love", "amazing", "awesome", "great", "excellent", "fantastic", "wonderful",
    "perfect", "beautiful", "incredible", "impressive", "outstanding", "brilliant",
    "good", "nice", "cool", "sweet", "solid", "quality", "recommend", "best",
    "worth it", "happy", "satisfied", "pleased", "excited", "thrilled",
    "fire", "slaps", "hits different", "no cap", "bussin", "chef's kiss", "obsessed",
    "iconic", "legendary", "goated", "clean", "smooth", "crisp", "fresh", "stunning",
    "gorgeous", "flawless", "genius", "mindblowing", "game changer", "must have",
    "super excited", "totally worth", "highly recommend", "absolutely love",
)

NEGATIVE_INDICATORS: tuple[str, ...] = (
    "bad", "terrible", "awful", "horrible", "disappointing", "worst", "hate",
    "annoying", "frustrating", "useless", "waste", "broken", "cheap", "poor",
    "fail", "problem", "issue", "wrong", "boring", "overpriced", "expensive",
    "not worth", "regret", "disappointed", "angry", "upset", "confused",
    "cringe", "yikes", "oof", "mid", "trash", "sus", "cap", "fake", "basic",
    "awkward", "messy", "chaotic", "disaster", "flop", "rough", "sketchy",
    "not it", "pass", "nope", "hard pass", "red flag", "toxic", "problematic",
)

MIN_CANDIDATE_LENGTH = 8
MAX_CANDIDATE_LENGTH = 120
MAX_PHRASE_LENGTH = 60
MAX_WINDOW_WORDS = 8
COLLECT_LIMIT = 3
RETURN_LIMIT = 2

_SENTENCE_SPLIT_RE = re.compile(r"[.!?\n]+|(?:\s{2,})|(?:,\s+(?:and|but|so|then|now|well|okay|alright)\s+)")
def split_candidates(text: str) -> list[str]:
    return [part.strip() for part in _SENTENCE_SPLIT_RE.split(text) if part and part.strip()]


def _extract_window(sentence: str, indicators: Sequence[str]) -> str:
    if len(sentence) <= MAX_PHRASE_LENGTH:
        return sentence

    found = next((indicator for indicator in indicators if indicator in sentence), None)
    if found is None:
        return sentence[:MAX_PHRASE_LENGTH]

    index = sentence.index(found)
    padding = max(0, (MAX_PHRASE_LENGTH - len(found)) // 2)
    start = max(0, index - padding)
    end = min(len(sentence), index + len(found) + padding)
    phrase = sentence[start:end].strip()

    words = phrase.split(" ")
    if len(words) > MAX_WINDOW_WORDS:
        middle_start = max(0, len(words) // 4)
        middle_end = min(len(words), (len(words) * 3) // 4)
        phrase = " ".join(words[middle_start:middle_end])

    # Drop partial words at the cut edges.
    if start > 0 and not phrase.startswith(" "):
        first_space = phrase.find(" ")
        if first_space > 0:
            phrase = phrase[first_space + 1:]
    if end < len(sentence) and not phrase.endswith(" "):
        last_space = phrase.rfind(" ")
        if last_space > 0:
            phrase = phrase[:last_space]

    return phrase.strip() or sentence[:MAX_PHRASE_LENGTH]


def _capitalize(phrase: str) -> str:
    start = next((index for index, char in enumerate(phrase) if char.isalpha()), len(phrase))
    phrase = phrase[start:]
    return phrase[:1].upper() + phrase[1:]


def extract_phrases(transcript: str) -> ExtractedPhrases:
    """Pick up to two positive and two negative phrases, in order of appearance."""
    positive: list[str] = []
    negative: list[str] = []

    for sentence in split_candidates((transcript or "").lower()):
        if len(sentence) < MIN_CANDIDATE_LENGTH or len(sentence) > MAX_CANDIDATE_LENGTH:
            continue

        has_positive = any(indicator in sentence for indicator in POSITIVE_INDICATORS)
        has_negative = any(indicator in sentence for indicator in NEGATIVE_INDICATORS)

        if has_positive and len(positive) < COLLECT_LIMIT:
            phrase = _capitalize(_extract_window(sentence, POSITIVE_INDICATORS))
            if phrase:
                positive.append(phrase)
        if has_negative and len(negative) < COLLECT_LIMIT:
            phrase = _capitalize(_extract_window(sentence, NEGATIVE_INDICATORS))
            if phrase:
                negative.append(phrase)

    return ExtractedPhrases(
        positive_phrases=tuple(positive[:RETURN_LIMIT]),
        negative_phrases=tuple(negative[:RETURN_LIMIT]),
    )
