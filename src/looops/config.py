"""Paths, constants, and data directory setup."""

import logging
import os
from pathlib import Path

# Base directories
PROJECT_ROOT = Path(__file__).parent.parent.parent


def _read_env_file() -> dict[str, str]:
    """KEY=value pairs from the project .env, with surrounding quotes dropped."""
    env_file = PROJECT_ROOT / ".env"
    if not env_file.is_file():
        return {}
    values: dict[str, str] = {}
    for raw in env_file.read_text(encoding="utf-8").splitlines():
        entry = raw.strip()
        if entry.startswith("#") or "=" not in entry:
            continue
        name, _, val = entry.partition("=")
        name = name.strip()
        if name:
            values[name] = val.strip().strip("\"'")
    return values


def _load_env() -> None:
    """Copy .env values into os.environ. Variables already set win."""
    for name, val in _read_env_file().items():
        if not os.environ.get(name):
            os.environ[name] = val


def _resolve_data_dir() -> Path:
    """LOOOPS_DATA_DIR from the environment, then .env, else <project>/data.

    Data paths are fixed at import, before init() runs, so .env is read here
    directly rather than through os.environ.
    """
    configured = os.environ.get("LOOOPS_DATA_DIR") or _read_env_file().get("LOOOPS_DATA_DIR")
    return Path(configured) if configured else PROJECT_ROOT / "data"


_env_initialized = False


def init() -> None:
    """Load .env and set env-dependent constants. Safe to call multiple times."""
    global _env_initialized
    if _env_initialized:
        return
    _load_env()
    _init_env_vars()
    _env_initialized = True


def _init_env_vars() -> None:
    """Read environment variables into module-level constants."""
    global DEFAULT_SUGGESTION_COUNT

    try:
        DEFAULT_SUGGESTION_COUNT = int(
            os.environ.get("LOOOPS_SUGGESTION_COUNT", "10")
        )
    except (ValueError, TypeError):
        DEFAULT_SUGGESTION_COUNT = 10
        logging.getLogger(__name__).warning(
            "Invalid LOOOPS_SUGGESTION_COUNT env var, defaulting to 10"
        )


DATA_DIR = _resolve_data_dir()
DB_PATH = DATA_DIR / "looops.db"
PROFILE_PATH = DATA_DIR / "profile.yaml"

# Goal suggestions
DEFAULT_SUGGESTION_COUNT = 10


def ensure_data_dirs() -> None:
    """Create all required data directories if they don't exist."""
    init()
    DATA_DIR.mkdir(parents=True, exist_ok=True)
