import pytest
from pydantic import ValidationError

from reelpulse.core.config import Settings


def _settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


def test_defaults() -> None:
    settings = _settings(anthropic_api_key="", aws_access_key_id="", aws_secret_access_key="")

    assert settings.llm_provider == "anthropic"
    assert settings.provider_timeout_seconds == 30.0
    assert settings.batch_max_urls == 5
    assert settings.batch_concurrency == 1
    assert settings.batch_score_aggregation == "mean"
    assert settings.analysis_store == "memory"
    assert settings.aws_configured is False


def test_cors_origins_parsing() -> None:
    assert _settings(cors_origins="https://a.test, https://b.test").cors_origins == ["https://a.test", "https://b.test"]
    assert _settings(cors_origins='["https://c.test"]').cors_origins == ["https://c.test"]
    assert _settings(cors_origins="").cors_origins == []


def test_provider_selection_drives_llm_key() -> None:
    settings = _settings(llm_provider=" OpenAI ", openai_api_key="sk-open", anthropic_api_key="sk-ant")

    assert settings.llm_provider == "openai"
    assert settings.llm_api_key == "sk-open"
    assert _settings(llm_provider="", anthropic_api_key="sk-ant").llm_api_key == "sk-ant"


def test_aggregation_mode_validation() -> None:
    assert _settings(batch_score_aggregation="Sum-Normalized").batch_score_aggregation == "sum_normalized"
    with pytest.raises(ValidationError):
        _settings(batch_score_aggregation="median")
    with pytest.raises(ValidationError):
        _settings(analysis_store="postgres")


def test_counts_are_at_least_one() -> None:
    settings = _settings(batch_concurrency=0, batch_max_urls=-2, provider_max_attempts=0)

    assert (settings.batch_concurrency, settings.batch_max_urls, settings.provider_max_attempts) == (1, 1, 1)


def test_scrapecreators_key_accepts_both_env_names(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SCRAPECREATORS_API_KEY", raising=False)
    monkeypatch.setenv("SCRAPE_CREATORS_API_KEY", "legacy-key")

    assert Settings(_env_file=None).scrapecreators_api_key == "legacy-key"


def test_secret_values_lists_credentials() -> None:
    settings = _settings(anthropic_api_key="a", openai_api_key="b", aws_secret_access_key="c", scrapecreators_api_key="d")

    assert settings.secret_values() == ["a", "b", "c", "d"]
