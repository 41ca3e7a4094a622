"""
Tests for the windowing YAML config loader and profiles.
"""

import pandas as pd
import pytest

from windowing import WindowSpecError, activate_profile, get_config, load_windowing_config
from windowing.config import _deep_merge


# ─────────────────────────────────────────────────────────────────────
# Tests: Defaults
# ─────────────────────────────────────────────────────────────────────

class TestDefaults:

    def test_base_config(self):
        config = load_windowing_config()

        assert config.execution.parallel is False
        assert config.execution.max_workers == 4
        assert config.execution.min_windows == 1000
        assert config.execution.chunk_size == 64
        assert config.period.origin == pd.Timestamp("1970-01-01")
        assert config.bind.row_align == 'strict'
        assert config.bind.name_repair == 'unique'
        assert config.profile is None

    def test_base_config_is_cached(self):
        assert load_windowing_config() is load_windowing_config()

    def test_profiles_listed(self):
        assert set(load_windowing_config().list_profiles()) >= {'parallel', 'lenient'}

    def test_execution_repr(self):
        assert "sequential" in repr(load_windowing_config().execution)


# ─────────────────────────────────────────────────────────────────────
# Tests: Profiles
# ─────────────────────────────────────────────────────────────────────

class TestProfiles:

    def test_parallel_profile(self):
        config = load_windowing_config(profile='parallel')
        assert config.execution.parallel is True
        assert config.profile == 'parallel'
        # untouched sections keep base values
        assert config.bind.row_align == 'strict'

    def test_unknown_profile(self):
        with pytest.raises(KeyError):
            load_windowing_config(profile='turbo')

    def test_activate_and_reset(self):
        activate_profile('lenient')
        assert get_config().bind.row_align == 'union'

        activate_profile(None)
        assert get_config().bind.row_align == 'strict'

    def test_profile_does_not_replace_base_cache(self):
        base = load_windowing_config()
        load_windowing_config(profile='parallel')
        assert load_windowing_config() is base
        assert base.execution.parallel is False

    def test_deep_merge(self):
        merged = _deep_merge({"a": {"b": 1, "c": 2}, "d": 3}, {"a": {"b": 10}})
        assert merged == {"a": {"b": 10, "c": 2}, "d": 3}


# ─────────────────────────────────────────────────────────────────────
# Tests: Working-directory override
# ─────────────────────────────────────────────────────────────────────

class TestOverride:

    def _write(self, tmp_path, text):
        (tmp_path / "config").mkdir()
        (tmp_path / "config" / "windowing.yaml").write_text(text)

    def test_cwd_config_takes_precedence(self, tmp_path, monkeypatch):
        self._write(tmp_path, "period:\n  origin: '2000-01-03'\nbind:\n  name_repair: check_unique\n")
        monkeypatch.chdir(tmp_path)

        config = load_windowing_config(force_reload=True)

        assert config.period.origin == pd.Timestamp("2000-01-03")
        assert config.bind.name_repair == 'check_unique'
        # missing keys fall back to defaults
        assert config.execution.max_workers == 4

    def test_invalid_value(self, tmp_path, monkeypatch):
        self._write(tmp_path, "bind:\n  row_align: outer\n")
        monkeypatch.chdir(tmp_path)

        with pytest.raises(WindowSpecError):
            load_windowing_config(force_reload=True)

    def test_invalid_workers(self, tmp_path, monkeypatch):
        self._write(tmp_path, "execution:\n  max_workers: 0\n")
        monkeypatch.chdir(tmp_path)

        with pytest.raises(WindowSpecError):
            load_windowing_config(force_reload=True)

    def test_chunk_size_override(self, tmp_path, monkeypatch):
        self._write(tmp_path, "execution:\n  chunk_size: 8\n")
        monkeypatch.chdir(tmp_path)

        assert load_windowing_config(force_reload=True).execution.chunk_size == 8

    def test_invalid_chunk_size(self, tmp_path, monkeypatch):
        self._write(tmp_path, "execution:\n  chunk_size: 0\n")
        monkeypatch.chdir(tmp_path)

        with pytest.raises(WindowSpecError):
            load_windowing_config(force_reload=True)


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
