"""Shared CLI setup: environment, logging and option parsing."""

import logging
from typing import Optional

from rich.logging import RichHandler

from jobsheet_extraction.extraction.spec_loader import FieldSpec, get_spec
from jobsheet_extraction.schemas.extraction_result import ExtractionMethod
from jobsheet_extraction.startup import ensure_initialized as _ensure_initialized

logger = logging.getLogger(__name__)


def ensure_initialized() -> None:
    """Load .env once before any command runs."""
    _ensure_initialized()


def setup_logging(*, verbose: bool = False, quiet: bool = False) -> None:
    """Configure logging with Rich handler."""
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    handler = RichHandler(
        console=None,  # Use default stderr
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    # Suppress noisy third-party loggers
    for name in ("openai", "openai._base_client", "httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.WARNING)


def parse_method(method: str) -> ExtractionMethod:
    """Parse an extraction method name, case-insensitively.

    Raises:
        ValueError: If the name is not a known method
    """
    try:
        return ExtractionMethod(method.strip().upper())
    except ValueError:
        valid = ", ".join(m.value for m in ExtractionMethod)
        raise ValueError(f"Invalid method '{method}'. Valid methods: {valid}")


def resolve_spec(name: Optional[str]) -> Optional[FieldSpec]:
    """Load a named field spec, or None to use the engine default."""
    return get_spec(name) if name else None
