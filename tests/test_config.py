"""환경 변수 설정 로딩 테스트."""

from pathlib import Path

import pytest

from adreport.config import DEFAULT_DAILY_TITLE, DEFAULT_WEEKLY_ISSUE_NOTE, load_settings

ENV_NAMES = [
    "ADREPORT_OUTPUT_DIR",
    "ADREPORT_LOG_LEVEL",
    "ADREPORT_DAILY_TITLE",
    "ADREPORT_DAILY_FILE_PREFIX",
    "ADREPORT_WEEKLY_TITLE",
    "ADREPORT_WEEKLY_SUBTITLE",
    "ADREPORT_WEEKLY_FILE_PREFIX",
    "ADREPORT_WEEKLY_ISSUE_NOTE",
    "ADREPORT_WRITE_JSON",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = load_settings()

    assert settings.output_dir == Path("output")
    assert settings.log_level == "INFO"
    assert settings.daily_title == DEFAULT_DAILY_TITLE
    assert settings.weekly_issue_note == DEFAULT_WEEKLY_ISSUE_NOTE
    assert settings.write_json is False


def test_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("ADREPORT_OUTPUT_DIR", str(tmp_path))
    monkeypatch.setenv("ADREPORT_LOG_LEVEL", "debug")
    monkeypatch.setenv("ADREPORT_WEEKLY_TITLE", "  주간 운영  ")
    monkeypatch.setenv("ADREPORT_WRITE_JSON", "true")

    settings = load_settings()

    assert settings.output_dir == tmp_path
    assert settings.log_level == "DEBUG"
    assert settings.weekly_title == "주간 운영"
    assert settings.write_json is True


def test_blank_text_falls_back_to_default(monkeypatch):
    monkeypatch.setenv("ADREPORT_DAILY_TITLE", "   ")

    assert load_settings().daily_title == DEFAULT_DAILY_TITLE


def test_invalid_log_level(monkeypatch):
    monkeypatch.setenv("ADREPORT_LOG_LEVEL", "LOUD")

    with pytest.raises(ValueError, match="ADREPORT_LOG_LEVEL"):
        load_settings()


def test_invalid_flag(monkeypatch):
    monkeypatch.setenv("ADREPORT_WRITE_JSON", "maybe")

    with pytest.raises(ValueError, match="ADREPORT_WRITE_JSON"):
        load_settings()
