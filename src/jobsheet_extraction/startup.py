"""Centralized initialization for jobsheet_extraction entry points.

Loads a ``.env`` file (OpenAI / Azure OpenAI credentials, config overrides)
once per process. The CLI calls ``ensure_initialized()`` before doing any
work; library callers may call it too or manage the environment themselves.
"""

import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Module-level state
_initialized: bool = False
_env_path: Optional[Path] = None


def _find_project_root(start_path: Optional[Path] = None) -> Path:
    """Find the project root by looking for pyproject.toml or .env.

    Args:
        start_path: Starting path for search. Defaults to the current directory.

    Returns:
        Project root directory.
    """
    current = start_path or Path.cwd()
    for parent in [current] + list(current.parents):
        if (parent / ".env").exists() or (parent / "pyproject.toml").exists():
            return parent
    return current


def _load_env(project_root: Path) -> Optional[Path]:
    """Load .env from the project root, if present.

    Returns:
        Path of the loaded file, or None.
    """
    env_path = project_root / ".env"
    if env_path.exists():
        # Variables already set in the environment take precedence
        load_dotenv(env_path, override=False)
        logger.debug(f"Loaded .env from {env_path}")
        return env_path

    logger.debug(f"No .env found at {env_path}")
    return None


def ensure_initialized() -> Optional[Path]:
    """Ensure the environment is initialized (idempotent).

    Returns:
        The .env path that was loaded on first call, or None.
    """
    global _initialized, _env_path

    if _initialized:
        return _env_path

    _env_path = _load_env(_find_project_root())
    _initialized = True
    return _env_path


def reset_for_testing() -> None:
    """Reset initialization state for test isolation."""
    global _initialized, _env_path
    _initialized = False
    _env_path = None
