"""Extract command: process a single job sheet text file."""

from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape

from jobsheet_extraction.cli._app import app
from jobsheet_extraction.cli._common import (
    ensure_initialized,
    parse_method,
    resolve_spec,
    setup_logging,
)
from jobsheet_extraction.cli._console import output_json, print_err, render_document


@app.command("extract", help="Extract fields from one job sheet text file.")
def extract_cmd(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="Text file holding the job sheet"),
    llm: bool = typer.Option(False, "--llm", help="Allow the LLM fallback for weak fields"),
    method: str = typer.Option(
        "EMBEDDED_TEXT", "--method", "-m", help="How the text was obtained: EMBEDDED_TEXT, OCR, HYBRID"
    ),
    spec: Optional[str] = typer.Option(None, "--spec", "-s", help="Field spec name (default: engine config)"),
):
    """Process one document and print its verdict and fields."""
    ensure_initialized()
    setup_logging(verbose=ctx.obj["verbose"], quiet=ctx.obj["quiet"])

    if not file.is_file():
        print_err(f"File not found: {escape(str(file))}")
        raise SystemExit(1)

    try:
        extraction_method = parse_method(method)
        field_spec = resolve_spec(spec)
    except (ValueError, FileNotFoundError) as e:
        print_err(escape(str(e)))
        raise SystemExit(1)

    from jobsheet_extraction.extraction.document_processor import DocumentProcessor

    text = file.read_text(encoding="utf-8", errors="replace")
    result = DocumentProcessor(spec=field_spec).process(
        text,
        file.name,
        use_llm=llm,
        extraction_method=extraction_method,
    )

    if not output_json(result.model_dump(mode="json"), ctx=ctx):
        render_document(result)
