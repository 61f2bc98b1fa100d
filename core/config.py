"""
Application configuration from config.yaml.

Values missing from the file fall back to DEFAULT_CONFIG. Lexicon tables
and thresholds live here so tests and deployments can swap them without
touching code.
"""

import copy
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from core.env_loader import PROJECT_ROOT, get_env, get_env_list
from utils.logger import get_logger

logger = get_logger("config")

DEFAULT_CONFIG: Dict[str, Any] = {
    "timezone": "America/Los_Angeles",
    "modules": {
        "workout": {"enabled": True},
        "knowledge": {"enabled": True},
    },
    "classifier": {"max_words": 50},
    "lexicons": {},
    "retrieval": {
        "threshold": 0.7,
        "dimension": 1536,
        "shards": 1,
        "knowledge_paths": ["datasets/sleep_recovery_embeddings.json"],
    },
    "weekly_report": {
        "day": "sunday",
        "time": "18:00",
        "min_account_age_days": 5,
    },
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively overlay override onto a copy of base."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    Load configuration from config.yaml.

    Args:
        path: Explicit file; defaults to CONFIG_FILE or <project root>/config.yaml

    Returns:
        Config dict with defaults filled in. TIMEZONE and KNOWLEDGE_PATHS
        environment variables override the file.
    """
    path = Path(path or get_env("CONFIG_FILE", str(PROJECT_ROOT / "config.yaml")))

    loaded: Dict[str, Any] = {}
    try:
        with path.open("r", encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning(f"{path} not found, using defaults")
    except yaml.YAMLError as e:
        logger.error(f"Error parsing {path}: {e}; using defaults")

    if not isinstance(loaded, dict):
        logger.error(f"{path} does not contain a mapping; using defaults")
        loaded = {}

    config = _merge(DEFAULT_CONFIG, loaded)

    timezone = get_env("TIMEZONE")
    if timezone:
        config["timezone"] = timezone

    knowledge_paths = get_env_list("KNOWLEDGE_PATHS")
    if knowledge_paths:
        config["retrieval"]["knowledge_paths"] = knowledge_paths

    return config


def resolve_path(value: Union[str, Path]) -> Path:
    """Relative paths in config are relative to the project root."""
    path = Path(value)
    return path if path.is_absolute() else PROJECT_ROOT / path
