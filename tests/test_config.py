from __future__ import annotations

import pytest

from config import get_settings_module


@pytest.mark.parametrize(
    "app_env, expected",
    [
        ("production", "config.production"),
        ("PROD", "config.production"),
        ("test", "config.testing"),
        ("development", "config.development"),
        ("staging", "config.development"),
    ],
)
def test_app_env_selects_settings(monkeypatch, app_env, expected):
    monkeypatch.delenv("SETTINGS_MODULE", raising=False)
    monkeypatch.setenv("APP_ENV", app_env)

    assert get_settings_module() == expected


def test_explicit_settings_module_wins(monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")
    monkeypatch.setenv("SETTINGS_MODULE", "config.testing")

    assert get_settings_module() == "config.testing"
