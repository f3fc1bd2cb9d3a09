"""Fields command: list the field registry of a spec."""

from typing import Optional

import typer
from rich.markup import escape

from jobsheet_extraction.cli._app import app
from jobsheet_extraction.cli._common import ensure_initialized, setup_logging
from jobsheet_extraction.cli._console import output_table, print_err


@app.command("fields", help="List the fields a spec extracts.")
def fields_cmd(
    ctx: typer.Context,
    spec: Optional[str] = typer.Option(None, "--spec", "-s", help="Field spec name (default: engine config)"),
):
    """Show each field with its requirement, severity and normalizer."""
    ensure_initialized()
    setup_logging(verbose=ctx.obj["verbose"], quiet=ctx.obj["quiet"])

    from jobsheet_extraction.config.engine import get_engine_config
    from jobsheet_extraction.extraction.spec_loader import get_spec

    name = spec or get_engine_config().default_spec
    try:
        field_spec = get_spec(name)
    except (ValueError, FileNotFoundError) as e:
        print_err(escape(str(e)))
        raise SystemExit(1)

    rows = [
        {
            "name": f.name,
            "display_name": f.display_name,
            "required": f.required,
            "severity": f.severity.value,
            "normalizer": f.normalizer.value,
            "patterns": len(f.patterns),
        }
        for f in field_spec.fields
    ]
    output_table(rows, ctx=ctx, title=f"{field_spec.doc_type} ({field_spec.version})")
