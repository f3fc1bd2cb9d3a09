"""CLI package: Typer-based command-line interface.

Usage:
    jobsheet-extract --help
    python -m jobsheet_extraction.cli extract sheet.txt
"""

from jobsheet_extraction.cli._app import app

# Register command modules (side-effect imports)
import jobsheet_extraction.cli.cmd_extract  # noqa: F401
import jobsheet_extraction.cli.cmd_batch  # noqa: F401
import jobsheet_extraction.cli.cmd_fields  # noqa: F401

__all__ = ["app"]
