"""
PRISM Windowing Configuration Loader
====================================

Loads execution, period and binding defaults from windowing.yaml.

Lookup order:
    1. config/windowing.yaml in the current working directory
    2. windowing/data/windowing.yaml shipped with the package

Usage:
    from windowing.config import get_config, activate_profile

    config = get_config()
    print(config.execution.parallel)   # False
    print(config.period.origin)        # 1970-01-01 00:00:00

    # Switch every subsequent call to the thread pool
    activate_profile('parallel')
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import pandas as pd
import yaml

from windowing.errors import WindowSpecError

logger = logging.getLogger(__name__)

ROW_ALIGN_MODES = ('strict', 'union')
NAME_REPAIR_MODES = ('unique', 'check_unique')


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass
class ExecutionConfig:
    """How the hop engine applies the user function."""
    parallel: bool = False
    max_workers: int = 4
    min_windows: int = 1000
    chunk_size: int = 64

    def __repr__(self) -> str:
        mode = f"parallel x{self.max_workers} (>= {self.min_windows} windows)" if self.parallel else "sequential"
        return f"ExecutionConfig({mode})"


@dataclass
class PeriodConfig:
    """Defaults for period-based block windows."""
    origin: pd.Timestamp = pd.Timestamp('1970-01-01')


@dataclass
class BindConfig:
    """Defaults for row/column binding of window results."""
    row_align: str = 'strict'
    name_repair: str = 'unique'


@dataclass
class WindowingConfig:
    """Complete windowing configuration."""
    execution: ExecutionConfig
    period: PeriodConfig
    bind: BindConfig
    profiles: Dict[str, Dict[str, Any]]
    profile: Optional[str] = None

    def list_profiles(self) -> list:
        """List all profile names."""
        return list(self.profiles.keys())


# =============================================================================
# CONFIG LOADING
# =============================================================================

_config_cache: Optional[WindowingConfig] = None
_active_config: Optional[WindowingConfig] = None


def _find_config_path() -> Path:
    """Find the windowing.yaml config file."""
    cwd_path = Path.cwd() / "config" / "windowing.yaml"
    if cwd_path.exists():
        return cwd_path

    package_path = Path(__file__).parent / "data" / "windowing.yaml"
    if package_path.exists():
        return package_path

    raise FileNotFoundError(
        f"Could not find windowing.yaml config. Tried:\n"
        f"  {cwd_path}\n"
        f"  {package_path}"
    )


def _parse(raw: Dict[str, Any], profiles: Dict[str, Dict[str, Any]], profile: Optional[str]) -> WindowingConfig:
    """Build a WindowingConfig from a raw YAML mapping."""
    execution_raw = raw.get('execution') or {}
    period_raw = raw.get('period') or {}
    bind_raw = raw.get('bind') or {}

    execution = ExecutionConfig(
        parallel=bool(execution_raw.get('parallel', False)),
        max_workers=int(execution_raw.get('max_workers', 4)),
        min_windows=int(execution_raw.get('min_windows', 1000)),
        chunk_size=int(execution_raw.get('chunk_size', 64)),
    )
    if execution.max_workers < 1:
        raise WindowSpecError(f"execution.max_workers must be >= 1, got {execution.max_workers}")
    if execution.chunk_size < 1:
        raise WindowSpecError(f"execution.chunk_size must be >= 1, got {execution.chunk_size}")

    period = PeriodConfig(origin=pd.Timestamp(period_raw.get('origin', '1970-01-01')))

    bind = BindConfig(
        row_align=bind_raw.get('row_align', 'strict'),
        name_repair=bind_raw.get('name_repair', 'unique'),
    )
    if bind.row_align not in ROW_ALIGN_MODES:
        raise WindowSpecError(f"bind.row_align must be one of {ROW_ALIGN_MODES}, got {bind.row_align!r}")
    if bind.name_repair not in NAME_REPAIR_MODES:
        raise WindowSpecError(f"bind.name_repair must be one of {NAME_REPAIR_MODES}, got {bind.name_repair!r}")

    return WindowingConfig(
        execution=execution,
        period=period,
        bind=bind,
        profiles=profiles,
        profile=profile,
    )


def load_windowing_config(profile: Optional[str] = None, force_reload: bool = False) -> WindowingConfig:
    """
    Load windowing configuration from YAML.

    Args:
        profile: Optional profile name to apply (e.g., 'parallel')
        force_reload: If True, reload from disk even if cached

    Returns:
        WindowingConfig with profile overrides applied
    """
    global _config_cache

    if _config_cache is not None and not force_reload and profile is None:
        return _config_cache

    config_path = _find_config_path()
    logger.info(f"Loading windowing config from {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    profiles = raw.get('profiles') or {}

    if profile is not None:
        if profile not in profiles:
            available = ', '.join(profiles.keys())
            raise KeyError(f"Unknown windowing profile: {profile}. Available: {available}")
        raw = _deep_merge(raw, profiles[profile])
        logger.info(f"Applied profile: {profile}")

    config = _parse(raw, profiles, profile)

    # Cache if no profile (base config)
    if profile is None:
        _config_cache = config

    return config


def _deep_merge(base: Dict, override: Dict) -> Dict:
    """Deep merge two dictionaries, override takes precedence."""
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result


# =============================================================================
# ACTIVE CONFIG
# =============================================================================

def get_config() -> WindowingConfig:
    """Config used by the engine: the active profile, else the base config."""
    if _active_config is not None:
        return _active_config
    return load_windowing_config()


def activate_profile(profile: Optional[str]) -> WindowingConfig:
    """
    Make a profile the active configuration.

    Pass None to return to the base configuration.
    """
    global _active_config

    if profile is None:
        _active_config = None
        logger.info("Windowing profile reset to base config")
        return load_windowing_config()

    _active_config = load_windowing_config(profile=profile)
    logger.info(f"Active windowing profile: {profile} ({_active_config.execution!r})")
    return _active_config
