"""Application configuration helpers."""

from __future__ import annotations

from .env import env_flag
from .errors import ConfigurationError
from .logging import configure_logging
from .reconcile import ReconcileConfig, get_reconcile_config
from .storage import get_data_dir, get_database_uri

__all__ = [
    "ConfigurationError",
    "ReconcileConfig",
    "configure_logging",
    "env_flag",
    "get_data_dir",
    "get_database_uri",
    "get_reconcile_config",
]
