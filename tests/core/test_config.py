"""Configuration parsing tests."""

from zoneinfo import ZoneInfo

import pytest
from pydantic import ValidationError

from src.core.config import DEFAULT_CORS_ORIGINS, Settings


def test_cors_origins_accepts_csv(monkeypatch) -> None:
    """CSV string in env parses into a list of origins."""
    monkeypatch.setenv(
        "CORS_ORIGINS",
        "https://app.afclean.com.br/, http://localhost:5173,https://app.afclean.com.br",
    )
    cfg = Settings()
    assert cfg.cors_origins == ["https://app.afclean.com.br", "http://localhost:5173"]


def test_cors_origins_accepts_json_array(monkeypatch) -> None:
    monkeypatch.setenv("CORS_ORIGINS", '["https://app.afclean.com.br","http://localhost:5173"]')
    cfg = Settings()
    assert cfg.cors_origins == ["https://app.afclean.com.br", "http://localhost:5173"]


def test_cors_origins_blank_falls_back_to_defaults(monkeypatch) -> None:
    monkeypatch.setenv("CORS_ORIGINS", "  ")
    assert Settings().cors_origins == DEFAULT_CORS_ORIGINS


def test_cors_origins_rejects_invalid_object(monkeypatch) -> None:
    """Invalid values fail with a clear validation error."""
    monkeypatch.setenv("CORS_ORIGINS", '{"invalid":"json"}')
    with pytest.raises(ValidationError, match="CORS_ORIGINS"):
        Settings()


def test_business_timezone_resolves(monkeypatch) -> None:
    monkeypatch.setenv("BUSINESS_TIMEZONE", "America/Manaus")
    assert Settings().tzinfo == ZoneInfo("America/Manaus")


def test_business_timezone_rejects_unknown_name(monkeypatch) -> None:
    monkeypatch.setenv("BUSINESS_TIMEZONE", "Mars/Olympus_Mons")
    with pytest.raises(ValidationError, match="BUSINESS_TIMEZONE"):
        Settings()


def test_reminder_interval_must_be_positive(monkeypatch) -> None:
    monkeypatch.setenv("REMINDER_INTERVAL_MONTHS", "0")
    with pytest.raises(ValidationError, match="REMINDER_INTERVAL_MONTHS"):
        Settings()


def test_business_defaults() -> None:
    cfg = Settings()
    assert cfg.reminder_interval_months == 6
    assert cfg.income_category == "Limpeza"
    assert cfg.whatsapp_country_code == "55"
