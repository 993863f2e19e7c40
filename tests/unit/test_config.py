import json
from pathlib import Path

import pytest

from portability_copier.config import ConfigManager


def test_config_load_defaults() -> None:
    config = ConfigManager()
    assert config.get("retry.max_attempts") == 5
    assert config.get("retry.fatal_patterns") == ["*fatal*"]
    assert config.get("retry.match_mode") == "glob"
    assert config.get("cache.journal_dir") == ".transfer_jobs"
    assert config.get("cache.persist") is True
    assert config.get("file_ops.max_retries") == 3
    assert config.get("local_photos.album_page_size") == 20
    assert ".jpg" in config.get("local_photos.image_extensions")
    assert config.get("missing.key", "fallback") == "fallback"


def test_config_validation() -> None:
    config = ConfigManager()
    config.set("retry.max_attempts", 0)
    config.set("retry.match_mode", "exact")
    errors = config.validate_config()
    assert any(error.startswith("retry.max_attempts") for error in errors)
    assert any(error.startswith("retry.match_mode") for error in errors)


def test_config_validation_rejects_bad_regex() -> None:
    config = ConfigManager()
    config.set("retry.match_mode", "regex")
    config.set("retry.fatal_patterns", ["(unclosed"])
    errors = config.validate_config()
    assert any("invalid regex" in error for error in errors)


def test_defaults_valid() -> None:
    assert ConfigManager().validate_config() == []


def test_user_config_merges_over_defaults(tmp_path: Path) -> None:
    path = tmp_path / "user.json"
    path.write_text(json.dumps({"retry": {"max_attempts": 2}}), encoding="utf-8")

    config = ConfigManager(path)

    assert config.get("retry.max_attempts") == 2
    assert config.get("retry.match_mode") == "glob"


def test_runtime_set_does_not_leak_into_new_managers() -> None:
    first = ConfigManager()
    first.set("retry.fatal_patterns", ["*revoked*"])

    assert ConfigManager().get("retry.fatal_patterns") == ["*fatal*"]


def test_save_user_config_roundtrip(tmp_path: Path) -> None:
    config = ConfigManager()
    config.set("local_photos.photo_page_size", 10)
    path = tmp_path / "saved" / "config.json"

    config.save_user_config(path)

    assert ConfigManager(path).get("local_photos.photo_page_size") == 10


def test_saved_file_holds_only_overrides(tmp_path: Path) -> None:
    config = ConfigManager()
    config.set("retry.max_attempts", 3)
    path = tmp_path / "config.json"

    config.save_user_config(path)

    assert json.loads(path.read_text(encoding="utf-8")) == {"retry": {"max_attempts": 3}}


def test_missing_user_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        ConfigManager(tmp_path / "absent.json")


def test_invalid_user_file_raises(tmp_path: Path) -> None:
    broken = tmp_path / "broken.json"
    broken.write_text("{retry:", encoding="utf-8")
    listed = tmp_path / "list.json"
    listed.write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(ValueError, match="invalid JSON"):
        ConfigManager(broken)
    with pytest.raises(ValueError, match="must be an object"):
        ConfigManager(listed)
