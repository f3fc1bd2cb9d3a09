"""Batch command: process every job sheet text file in a directory."""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn, TimeElapsedColumn

from jobsheet_extraction.cli._app import app
from jobsheet_extraction.cli._common import ensure_initialized, resolve_spec, setup_logging
from jobsheet_extraction.cli._console import (
    console,
    format_verdict,
    output_json,
    print_err,
    print_ok,
)


@app.command("batch", help="Extract fields from every matching file in a directory.")
def batch_cmd(
    ctx: typer.Context,
    directory: Path = typer.Argument(..., help="Directory of job sheet text files"),
    pattern: str = typer.Option("*.txt", "--pattern", "-p", help="Glob for files to process"),
    llm: bool = typer.Option(False, "--llm", help="Allow the LLM fallback for weak fields"),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", min=1, help="Parallel documents (default: engine config)"),
    spec: Optional[str] = typer.Option(None, "--spec", "-s", help="Field spec name (default: engine config)"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write all results as JSON to this file"),
):
    """Process a directory of documents and print the batch summary."""
    ensure_initialized()
    setup_logging(verbose=ctx.obj["verbose"], quiet=ctx.obj["quiet"])

    if not directory.is_dir():
        print_err(f"Directory not found: {escape(str(directory))}")
        raise SystemExit(1)

    files = sorted(p for p in directory.glob(pattern) if p.is_file())
    if not files:
        print_err(f"No files matching '{escape(pattern)}' in {escape(str(directory))}")
        raise SystemExit(1)

    try:
        field_spec = resolve_spec(spec)
    except (ValueError, FileNotFoundError) as e:
        print_err(escape(str(e)))
        raise SystemExit(1)

    from jobsheet_extraction.extraction.document_processor import DocumentProcessor
    from jobsheet_extraction.pipeline.batch import BatchDocument, process_batch

    documents = [
        BatchDocument(text=p.read_text(encoding="utf-8", errors="replace"), filename=p.name)
        for p in files
    ]
    processor = DocumentProcessor(spec=field_spec)

    show_progress = not (ctx.obj["quiet"] or ctx.obj["json"])
    with Progress(
        TextColumn("[bold blue]Extracting"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=console,
        disable=not show_progress,
    ) as progress:
        task = progress.add_task("documents", total=len(documents))
        batch = process_batch(
            documents,
            use_llm=llm,
            max_workers=workers,
            processor=processor,
            on_progress=lambda _result: progress.advance(task),
        )

    data = batch.model_dump(mode="json")

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        with open(output, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

    if output_json(data, ctx=ctx):
        return

    if not ctx.obj["quiet"]:
        for result in batch.results:
            console.print(
                f"  {format_verdict(result.verdict)}  {escape(result.filename)}  "
                f"quality {result.quality_score}"
            )

    summary = batch.summary
    print_ok(
        f"Processed {summary.total} documents: "
        f"[green]{summary.passed} PASS[/green], "
        f"[red]{summary.failed} FAIL[/red], "
        f"[yellow]{summary.review_queue} REVIEW_QUEUE[/yellow] | "
        f"avg quality {summary.avg_quality_score} | avg confidence {summary.avg_confidence}"
    )
    if output:
        print_ok(f"Results written to {escape(str(output))}")
