import pytest

from reelpulse.services.lexicon import LEXICON_SOURCE, analyze_locally, score_text
from reelpulse.services.sentiment_types import SentimentLabel


def test_slang_heavy_praise_is_positive() -> None:
    result = analyze_locally("This is fire, no cap, lowkey amazing!!")

    assert result.sentiment is SentimentLabel.POSITIVE
    assert result.confidence >= 60
    assert result.confidence == 90.0
    assert result.scores.positive == 62
    assert result.scores.negative == 10
    assert result.source == LEXICON_SOURCE


def test_empty_text_is_neutral() -> None:
    result = analyze_locally("")

    assert result.sentiment is SentimentLabel.NEUTRAL
    assert result.scores.to_dict() == {"positive": 20.0, "neutral": 60.0, "negative": 20.0}
    assert result.confidence == 60.0


def test_strong_negative_text() -> None:
    result = analyze_locally("this is terrible")

    assert result.sentiment is SentimentLabel.NEGATIVE
    assert result.scores.negative > result.scores.neutral > result.scores.positive


def test_negation_flips_and_dampens() -> None:
    assert score_text("this is not good").total == pytest.approx(-0.5)

    result = analyze_locally("this is not good")
    assert result.sentiment is SentimentLabel.NEGATIVE
    assert result.scores.to_dict() == {"positive": 8.0, "neutral": 34.0, "negative": 58.0}


def test_mild_positive_band_keeps_dominant_side_ahead() -> None:
    result = analyze_locally("it was nice")

    assert result.scores.to_dict() == {"positive": 70.0, "neutral": 25.0, "negative": 5.0}
    assert result.sentiment is SentimentLabel.POSITIVE


def test_intensifier_and_caps_adjustments() -> None:
    assert score_text("really bad").total == pytest.approx(-3)
    assert score_text("WOW nice").total == pytest.approx(1.5)
    assert score_text("nice!!").total == pytest.approx(2)


@pytest.mark.parametrize(
    "text",
    [
        "",
        "meh",
        "I love it but the shipping was awful and I hate waiting",
        "NOT BAD AT ALL!!",
        "random words with no feelings at all",
        "worst worst worst worst trash garbage",
    ],
)
def test_lexicon_scores_always_sum_to_one_hundred(text: str) -> None:
    result = analyze_locally(text)

    assert result.scores.total == pytest.approx(100.0)
    assert min(result.scores.to_dict().values()) >= 0
    assert 60.0 <= result.confidence <= 90.0
