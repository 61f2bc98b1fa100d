# core/env_loader.py
"""
Environment variable loader with .env file precedence.

- Loads .env from the project root derived from this file's location.
- ENV_FILE can override the path to the .env file.
- .env values override OS environment values (override=True).
"""
import os
from pathlib import Path
from typing import List, Optional, Tuple

from dotenv import load_dotenv

# Determine project root from this file path: <root>/core/env_loader.py
PROJECT_ROOT = Path(__file__).resolve().parent.parent
_DEFAULT_ENV_PATH = PROJECT_ROOT / ".env"


def load_env() -> None:
    """
    Load .env with precedence over OS environment variables.

    ENV_FILE wins when set; otherwise python-dotenv searches from the
    current working directory.
    """
    candidate = Path(os.getenv("ENV_FILE", str(_DEFAULT_ENV_PATH)))
    if candidate.exists():
        load_dotenv(dotenv_path=candidate, override=True)
    else:
        load_dotenv(override=True)


def get_env(var_name: str, default: Optional[str] = None) -> Optional[str]:
    """Return the environment variable or default if not present."""
    return os.getenv(var_name, default)


def get_env_list(var_name: str, default: Optional[List[str]] = None) -> List[str]:
    """Comma-separated variable as a list; blank items dropped."""
    value = os.getenv(var_name)
    if not value:
        return list(default or [])
    return [item.strip() for item in value.split(",") if item.strip()]


def validate_required_vars(var_names: List[str]) -> Tuple[bool, List[str]]:
    """
    Validate that all required environment variables are present.

    Returns:
        (all_present, missing_list)
    """
    missing = [name for name in var_names if not os.getenv(name)]
    return (len(missing) == 0, missing)
