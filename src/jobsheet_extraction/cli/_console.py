"""Rich console singleton and output helpers."""

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from jobsheet_extraction.schemas.extraction_result import DocumentExtractionResult, Verdict

# Status/progress to stderr so it doesn't pollute piped JSON output
console = Console(stderr=True)

# Data output to stdout (pipeable to jq)
stdout_console = Console()

VERDICT_STYLES = {
    Verdict.PASS: "green",
    Verdict.FAIL: "red",
    Verdict.REVIEW_QUEUE: "yellow",
}


def print_ok(msg: str) -> None:
    """Print a success message to stderr."""
    console.print(f"[green]✓[/green] {msg}")


def print_err(msg: str) -> None:
    """Print an error message to stderr."""
    console.print(f"[red]✗[/red] {msg}")


def print_warn(msg: str) -> None:
    """Print a warning message to stderr."""
    console.print(f"[yellow]![/yellow] {msg}")


def format_verdict(verdict: Verdict) -> str:
    style = VERDICT_STYLES.get(verdict, "white")
    return f"[{style}]{verdict.value}[/{style}]"


def output_json(data, *, ctx: typer.Context) -> bool:
    """Print data as JSON to stdout when --json is active.

    Returns:
        True if the data was printed.
    """
    if ctx.obj.get("json"):
        stdout_console.print_json(data=data)
        return True
    return False


def output_table(rows: list[dict], *, ctx: typer.Context, title: str = "", columns: list[str] | None = None) -> None:
    """Print rows as JSON array or Rich table."""
    if output_json(rows, ctx=ctx):
        return

    if not rows:
        console.print("[dim]No data[/dim]")
        return

    cols = columns or list(rows[0].keys())
    table = Table(title=title, show_lines=False)
    for col in cols:
        table.add_column(col)
    for row in rows:
        table.add_row(*[str(row.get(c, "")) for c in cols])
    console.print(table)


def render_document(result: DocumentExtractionResult) -> None:
    """Render one document's verdict, scores and field table to stderr."""
    console.print(
        f"{escape(result.filename)}: {format_verdict(result.verdict)} | "
        f"quality {result.quality_score} | avg confidence {result.average_confidence} | "
        f"{result.extracted_count}/{result.total_fields} fields | {result.document_type}"
    )

    table = Table(show_lines=False)
    for col in ("Field", "Value", "Confidence", "Strategy", "Severity"):
        table.add_column(col)
    for detail in result.field_details.values():
        value = escape(detail.value) if detail.value is not None else "[dim]-[/dim]"
        name = f"{detail.display_name} *" if detail.required else detail.display_name
        table.add_row(name, value, f"{detail.confidence:.0f}", detail.strategy, detail.severity.value)
    console.print(table)

    if result.missing_required:
        print_err(f"Missing required: {', '.join(result.missing_required)}")
    if result.low_confidence_fields:
        print_warn(f"Low confidence: {', '.join(result.low_confidence_fields)}")
