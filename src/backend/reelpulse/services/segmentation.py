from __future__ import annotations

import logging
import re
from functools import lru_cache

import spacy
from spacy.language import Language

logger = logging.getLogger(__name__)

SENTENCE_PIPES = {"parser", "senter", "sentencizer"}
_FALLBACK_SPLIT_RE = re.compile(r"[.!?]+")


@lru_cache(maxsize=4)
def load_sentence_pipeline(model_name: str = "") -> Language:
    """Load ``model_name`` or a blank English pipeline, with sentence boundaries enabled."""
    nlp: Language
    if model_name:
        try:
            nlp = spacy.load(model_name, exclude=["ner", "lemmatizer", "textcat"])
        except OSError:
            logger.warning(
                "spaCy model '%s' unavailable; falling back to blank English pipeline. "
                "Install the model (python -m spacy download %s) for better sentence splitting.",
                model_name,
                model_name,
            )
            nlp = spacy.blank("en")
    else:
        nlp = spacy.blank("en")

    if not SENTENCE_PIPES.intersection(nlp.pipe_names):
        nlp.add_pipe("sentencizer")
    return nlp


def regex_sentences(text: str) -> list[str]:
    return [part.strip() for part in _FALLBACK_SPLIT_RE.split(text) if part.strip()]


def split_sentences(text: str, model_name: str = "") -> list[str]:
    if not text or not text.strip():
        return []
    try:
        doc = load_sentence_pipeline(model_name)(text)
        sentences = [sent.text.strip() for sent in doc.sents if sent.text.strip()]
    except Exception as exc:  # pragma: no cover - spaCy runtime failures
        logger.warning("spaCy sentence segmentation failed, using punctuation split: %s", exc)
        return regex_sentences(text)
    return sentences or regex_sentences(text)
