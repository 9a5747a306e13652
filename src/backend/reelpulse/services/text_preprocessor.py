"""Normalization of social-media phrasing before a transcript is sent to an LLM.

Slang is expanded before the emphasis and punctuation rules run, since those
rules would otherwise rewrite characters inside dictionary terms. Collapsing a
letter run can expose a term ("gggoat" becomes "very goat"), so slang is
expanded once more afterwards.
"""
from __future__ import annotations

import re

# No expansion contains a key, so a second pass leaves the text unchanged.
SLANG_EXPANSIONS: dict[str, str] = {
    "lol": "laughing out loud",
    "lmao": "laughing hard",
    "omg": "oh my god",
    "smh": "shaking my head",
    "tbh": "to be honest",
    "ngl": "not gonna lie",
    "imo": "in my opinion",
    "idk": "i do not know",
    "fr": "for real",
    "no cap": "no lie",
    "fire": "excellent",
    "lit": "exciting",
    "slaps": "is excellent",
    "bussin": "really good",
    "goated": "the best",
    "goat": "greatest of all time",
    "lowkey": "somewhat",
    "highkey": "very much",
    "mid": "mediocre",
    "sus": "suspicious",
    "cringe": "embarrassing",
    "salty": "bitter",
    "periodt": "definitely",
    "hits different": "is uniquely good",
    "vibes": "atmosphere",
    "stan": "strongly support",
    "rizz": "charm",
}

_WHITESPACE_RE = re.compile(r"\s+")
_EMPHASIS_RE = re.compile(r"([A-Za-z])\1{2,}")
_EXCITEMENT_RE = re.compile(r"!{2,}")
_CONFUSION_RE = re.compile(r"\?{2,}")


def _compile_slang_pattern(terms: list[str]) -> re.Pattern[str]:
    # Longest terms first so "goated" wins over "goat" and "no cap" is matched as a unit.
    ordered = sorted(terms, key=len, reverse=True)
    alternation = "|".join(r"\s+".join(re.escape(part) for part in term.split()) for term in ordered)
    return re.compile(rf"\b(?:{alternation})\b", flags=re.IGNORECASE)


_SLANG_RE = _compile_slang_pattern(list(SLANG_EXPANSIONS))


def _expand_slang(match: re.Match[str]) -> str:
    key = _WHITESPACE_RE.sub(" ", match.group(0).lower())
    return SLANG_EXPANSIONS[key]


def preprocess(text: str) -> str:
    if not text:
        return ""
    processed = _SLANG_RE.sub(_expand_slang, text)
    processed = _EMPHASIS_RE.sub(lambda match: f"very {match.group(1)}", processed)
    processed = _SLANG_RE.sub(_expand_slang, processed)
    processed = _EXCITEMENT_RE.sub(" with excitement", processed)
    processed = _CONFUSION_RE.sub(" with confusion", processed)
    return _WHITESPACE_RE.sub(" ", processed).strip()
