import pytest

from portability_copier.config import ConfigManager
from portability_copier.core import RetryClassifier


@pytest.mark.parametrize("message", [None, ""])
def test_missing_message_is_retryable(message) -> None:
    decision = RetryClassifier().classify(message)

    assert decision.can_retry is True
    assert decision.max_attempts == 5


def test_default_glob_matches_fatal_case_insensitively() -> None:
    classifier = RetryClassifier()

    decision = classifier.classify("FATAL: refresh token revoked")

    assert decision.can_retry is False
    assert decision.max_attempts == 0
    assert decision.matched_pattern == "*fatal*"


def test_unmatched_message_is_retryable() -> None:
    decision = RetryClassifier().classify("503 Service Unavailable")

    assert decision.can_retry is True
    assert decision.max_attempts == 5


def test_substring_mode() -> None:
    classifier = RetryClassifier(fatal_patterns=["unauthorized"], match_mode="substring")

    assert classifier.classify("HTTP 401 Unauthorized").can_retry is False
    assert classifier.classify("HTTP 500").can_retry is True


def test_regex_mode_searches_message() -> None:
    classifier = RetryClassifier(fatal_patterns=[r"\b40[13]\b"], match_mode="regex")

    assert classifier.classify("request failed with 403 forbidden").can_retry is False
    assert classifier.classify("request failed with 4031").can_retry is True


def test_from_config_reads_overrides() -> None:
    config = ConfigManager()
    config.set("retry.max_attempts", 2)
    config.set("retry.fatal_patterns", ["*quota*"])

    classifier = RetryClassifier.from_config(config)

    assert classifier.max_attempts == 2
    assert classifier.classify("daily quota exceeded").can_retry is False
    assert classifier.classify("fatal error").max_attempts == 2


def test_invalid_settings_rejected() -> None:
    with pytest.raises(ValueError):
        RetryClassifier(max_attempts=0)
    with pytest.raises(ValueError):
        RetryClassifier(match_mode="exact")
