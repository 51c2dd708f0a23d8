"""CLI entrypoint using typer."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import structlog
import typer
from rich.console import Console
from rich.table import Table

from cv_formatter_agents.observability import configure_logging, configure_tracing
from cv_formatter_agents.orchestrator.pipeline import Pipeline
from cv_formatter_agents.rules.engine import EHSRuleEngine
from cv_formatter_agents.rules.filename import derive_filename
from cv_formatter_core.config.settings import Settings
from cv_formatter_core.exceptions import CvFormatterError, DraftValidationError
from cv_formatter_core.models.compliance import ComplianceReport
from cv_formatter_core.models.cv_draft import CvDraft
from cv_formatter_core.models.run import ProcessingResult
from cv_formatter_core.validation import validate_cv_draft

app = typer.Typer(
    name="ehs-cv",
    help="Turn résumés into EHS-formatted, schema-validated CV drafts",
)
console = Console()
logger = structlog.get_logger()

__version__ = "0.1.0"


@app.command()
def process(
    file: Path = typer.Argument(..., help="PDF, DOCX or XLSX résumé", exists=True, dir_okay=False),
    mime: str | None = typer.Option(None, "--mime", help="MIME type; defaults to the extension"),
    candidate_id: str | None = typer.Option(
        None, "--candidate-id", help="Candidate BH number for the file name"
    ),
    client: str | None = typer.Option(None, "--client", help="Client label for the file name"),
    provider: list[str] | None = typer.Option(
        None, "--provider", help="Provider order override, repeatable (openai/anthropic/gemini)"
    ),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write the draft JSON here"),
    trace: bool = typer.Option(False, "--trace", help="Print OpenTelemetry spans to the console"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
) -> None:
    """Extract, structure and normalize one résumé."""
    settings = Settings()  # type: ignore[call-arg]
    if provider:
        settings.provider_order = provider  # type: ignore[assignment]
    if verbose:
        settings.log_level = "DEBUG"
    if trace:
        settings.otel_exporter = "console"

    configure_logging(settings)
    configure_tracing(settings)

    console.print(f"[bold green]Processing:[/bold green] {file.name}")
    try:
        result = asyncio.run(
            _run_pipeline(
                settings,
                file,
                mime_type=mime,
                candidate_id=candidate_id,
                client_label=client,
            )
        )
    except CvFormatterError as exc:
        console.print(f"[red]Error ({exc.stage}):[/red] {exc}")
        raise typer.Exit(code=1) from exc

    _print_result(result)

    payload = json.dumps(result.draft.to_payload(), indent=2, ensure_ascii=False)
    if output is not None:
        output.write_text(payload, encoding="utf-8")
        console.print(f"\n[bold]Draft written to:[/bold] {output}")
    else:
        console.print_json(payload)


@app.command()
def check(
    draft_file: Path = typer.Argument(..., help="CV draft JSON", exists=True, dir_okay=False),
    normalize: bool = typer.Option(
        False, "--normalize", help="Apply the EHS rules before checking"
    ),
) -> None:
    """Validate a CV draft JSON file and report EHS compliance."""
    settings = Settings()  # type: ignore[call-arg]
    draft = _load_draft(draft_file)
    engine = EHSRuleEngine(
        bullet_split_threshold=settings.bullet_split_threshold_chars,
        compliance_penalty=settings.compliance_penalty_per_issue,
    )
    if normalize:
        draft = engine.normalize(draft)
    _print_compliance(engine.check_compliance(draft))


@app.command()
def filename(
    draft_file: Path = typer.Argument(..., help="CV draft JSON", exists=True, dir_okay=False),
    candidate_id: str | None = typer.Option(None, "--candidate-id", help="Candidate BH number"),
    client: str | None = typer.Option(None, "--client", help="Client label"),
) -> None:
    """Print the EHS export file name of a CV draft."""
    draft = _load_draft(draft_file)
    console.print(derive_filename(draft, candidate_id=candidate_id, client_label=client))


@app.command()
def version() -> None:
    """Show version."""
    console.print(f"ehs-cv-formatter v{__version__}")


async def _run_pipeline(
    settings: Settings,
    file: Path,
    *,
    mime_type: str | None,
    candidate_id: str | None,
    client_label: str | None,
) -> ProcessingResult:
    """Read the file and run the pipeline on it."""
    data = await asyncio.to_thread(file.read_bytes)
    return await Pipeline(settings).process(
        data,
        mime_type,
        filename=file.name,
        candidate_id=candidate_id,
        client_label=client_label,
    )


def _load_draft(path: Path) -> CvDraft:
    """Parse and validate a draft file, exiting with code 1 on failure."""
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        console.print(f"[red]Error (validation):[/red] {path.name} is not valid JSON: {exc}")
        raise typer.Exit(code=1) from exc

    try:
        return validate_cv_draft(raw)
    except DraftValidationError as exc:
        console.print(f"[red]Error ({exc.stage}):[/red] {path.name} is not a valid CV draft")
        for err in exc.field_errors:
            console.print(f"  {err.path}: {err.message}")
        raise typer.Exit(code=1) from exc


def _print_result(result: ProcessingResult) -> None:
    """Print the run summary."""
    console.print(f"\n[bold]Done:[/bold] {result.document_id}")
    console.print(f"  File name: {result.filename}")
    console.print(
        f"  Source: {result.extraction.source_format}, {result.extraction.page_count} page(s)"
        + (" (OCR)" if result.extraction.used_fallback_ocr else "")
    )
    console.print(f"  Chunks: {result.chunk_count}")
    if result.failed_chunks:
        console.print(f"  [yellow]Failed chunks: {result.failed_chunks}[/yellow]")
    console.print(f"  Providers: {', '.join(result.providers_used)}")
    console.print(f"  Tokens: {result.total_tokens}")
    console.print(f"  Cost: ${result.estimated_cost_usd:.4f}")
    console.print(f"  Duration: {result.duration_seconds:.1f}s")
    _print_compliance(result.compliance)


def _print_compliance(report: ComplianceReport) -> None:
    """Print a compliance report as a table."""
    status = "[green]compliant[/green]" if report.compliant else "[yellow]not compliant[/yellow]"
    console.print(f"\n[bold]EHS compliance:[/bold] {status} (score {report.score}/100)")
    if report.issues:
        table = Table("#", "Issue")
        for i, issue in enumerate(report.issues, start=1):
            table.add_row(str(i), issue)
        console.print(table)


if __name__ == "__main__":
    app()
