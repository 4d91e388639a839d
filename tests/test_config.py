from __future__ import annotations

import logging

from bowling_signup.config import DEFAULT_ADMIN_PASSWORD, DEFAULT_COLLECTION, Settings


def test_reads_prefixed_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("SIGNUP_DB_PATH", str(tmp_path / "env.sqlite"))
    monkeypatch.setenv("SIGNUP_COLLECTION", "league")
    monkeypatch.setenv("SIGNUP_ADMIN_PASSWORD", "spare")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")

    settings = Settings()

    assert settings.db_path == str(tmp_path / "env.sqlite")
    assert settings.collection == "league"
    assert settings.admin_password == "spare"
    assert settings.log_level == "DEBUG"


def test_defaults_warn_about_admin_password(monkeypatch, caplog):
    for name in ("SIGNUP_DB_PATH", "SIGNUP_COLLECTION", "SIGNUP_ADMIN_PASSWORD", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)

    with caplog.at_level(logging.WARNING):
        settings = Settings()

    assert settings.collection == DEFAULT_COLLECTION
    assert settings.admin_password == DEFAULT_ADMIN_PASSWORD
    assert settings.log_level == "INFO"
    assert "default admin password" in caplog.text


def test_keyword_overrides(tmp_path):
    settings = Settings(db_path=str(tmp_path / "kw.sqlite"), admin_password="x", log_level="WARNING")
    assert settings.admin_password == "x"
    assert settings.log_level == "WARNING"
