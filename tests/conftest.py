"""Shared fixtures: every test starts from the base windowing config."""

import pytest

from windowing import config as windowing_config


@pytest.fixture(autouse=True)
def base_config(monkeypatch):
    monkeypatch.setattr(windowing_config, "_config_cache", None)
    monkeypatch.setattr(windowing_config, "_active_config", None)
    yield
