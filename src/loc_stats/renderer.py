"""Report rendering: Markdown/JSON/CSV artifacts and a rich terminal summary."""

from __future__ import annotations

import csv
import io
import json
from dataclasses import asdict
from datetime import datetime, timezone

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .aggregator import rank_languages
from .config import Config
from .models import AggregateState


def _format_number(n: int) -> str:
    return f"{n:,}"


def _format_timestamp(generated_at: datetime | None) -> str:
    generated_at = generated_at or datetime.now(timezone.utc)
    if generated_at.tzinfo is not None:
        generated_at = generated_at.astimezone(timezone.utc)
    return generated_at.strftime("%Y-%m-%d %H:%M:%S") + " UTC"


def _cell(value: object) -> str:
    return str(value).replace("|", "\\|")


def write_report(content: str, output_file: str, console: Console | None = None) -> None:
    """Write content to a UTF-8 file and print confirmation."""
    with open(output_file, "w", encoding="utf-8") as f:
        f.write(content)
    (console or Console()).print(f"Saved to {output_file}")


def render_markdown(
    config: Config,
    state: AggregateState,
    generated_at: datetime | None = None,
    username: str | None = None,
) -> str:
    """Render the full report as Markdown text."""
    lines = [
        "# Lines of Code Statistics",
        "",
        f"Generated on: {_format_timestamp(generated_at)}",
        f"Username: {username or config.username or ''}",
        f"Include private repos: {str(config.include_private).lower()}",
        f"Include forks: {str(config.include_forks).lower()}",
        f"Include archived: {str(config.include_archived).lower()}",
    ]
    if config.file_types:
        lines.append(f"File types filter: {', '.join(config.file_types)}")
    if state.discovery_truncated:
        lines.append("")
        lines.append(
            "> **Warning:** repository discovery stopped early "
            f"({state.discovery_error or 'unknown error'}); this report may be incomplete."
        )

    lines += [
        "",
        "## Repository Details",
        "",
        "| Repository | Type | Language | Files | Blank Lines | Comments | Code Lines |",
        "|------------|------|----------|-------|-------------|----------|------------|",
    ]
    for repo in state.processed:
        for lang, stats in repo.languages.items():
            lines.append(
                f"| {_cell(repo.name)} | {repo.visibility} | {_cell(lang)} | {stats.files} "
                f"| {stats.blank} | {stats.comment} | {stats.code} |"
            )

    lines += [
        "",
        "## Language Summary",
        "",
        "| Language | Total Files | Total Lines of Code |",
        "|----------|-------------|---------------------|",
    ]
    for lang, totals in rank_languages(state.languages):
        lines.append(f"| {_cell(lang)} | {totals.files} | {totals.code} |")

    totals = state.totals
    lines += [
        "",
        "## Grand Totals",
        "",
        f"- **Total Repositories Analyzed:** {len(state.processed)}",
        f"- **Total Files:** {_format_number(totals.files)}",
        f"- **Total Blank Lines:** {_format_number(totals.blank)}",
        f"- **Total Comments:** {_format_number(totals.comment)}",
        f"- **Total Lines of Code:** {_format_number(totals.code)}",
        "",
    ]

    if state.skipped:
        lines += ["## Skipped Repositories", "", "The following repositories were skipped:", ""]
        for skipped in state.skipped:
            lines.append(f"- {skipped.name} ({skipped.status.value})")
        lines.append("")

    lines += ["## Successfully Processed Repositories", ""]
    for name in state.processed_names:
        lines.append(f"- {name}")

    return "\n".join(lines) + "\n"


def render_json(
    config: Config,
    state: AggregateState,
    generated_at: datetime | None = None,
    username: str | None = None,
) -> str:
    """Render the report as a JSON document."""
    document = {
        "generated_at": _format_timestamp(generated_at),
        "username": username or config.username,
        "filters": {
            "include_private": config.include_private,
            "include_forks": config.include_forks,
            "include_archived": config.include_archived,
            "file_types": list(config.file_types) if config.file_types else None,
        },
        "discovery_truncated": state.discovery_truncated,
        "discovery_error": state.discovery_error,
        "repositories": [asdict(repo) for repo in state.processed],
        "languages": [
            {"language": lang, **asdict(stats)} for lang, stats in rank_languages(state.languages)
        ],
        "totals": {"repositories": len(state.processed), **asdict(state.totals)},
        "skipped": [
            {"name": s.name, "status": s.status.value, "error": s.error} for s in state.skipped
        ],
    }
    return json.dumps(document, indent=2, ensure_ascii=False) + "\n"


def render_csv(state: AggregateState) -> str:
    """Render the per-repository, per-language rows as CSV."""
    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(["repository", "visibility", "language", "files", "blank", "comment", "code"])
    for repo in state.processed:
        for lang, s in repo.languages.items():
            writer.writerow([repo.name, repo.visibility.lower(), lang, s.files, s.blank, s.comment, s.code])
    return output.getvalue()


def render(
    config: Config,
    state: AggregateState,
    generated_at: datetime | None = None,
    username: str | None = None,
) -> str:
    """Render ``state`` in ``config.output_format``."""
    if config.output_format == "json":
        return render_json(config, state, generated_at, username)
    if config.output_format == "csv":
        return render_csv(state)
    return render_markdown(config, state, generated_at, username)


def render_summary(
    state: AggregateState,
    username: str | None = None,
    top_n: int = 10,
    console: Console | None = None,
) -> None:
    """Print a short summary of ``state`` to the terminal using rich."""
    console = console or Console()

    console.print(Panel(
        Text(f"loc-stats: {username or '-'}", justify="center"),
        style="bold cyan",
    ))

    if state.discovery_truncated:
        console.print(
            "[bold yellow]Warning:[/bold yellow] repository discovery stopped early: "
            f"{state.discovery_error}"
        )
    if state.skipped:
        console.print(
            f"[bold yellow]Warning:[/bold yellow] Skipped {len(state.skipped)} repo(s): "
            + ", ".join(f"{s.name} ({s.status.value})" for s in state.skipped)
        )

    summary = Table(show_header=False, box=None, padding=(0, 2))
    summary.add_column("label", style="dim")
    summary.add_column("value", style="bold")
    summary.add_row("Repositories", _format_number(len(state.processed)))
    summary.add_row("Files", _format_number(state.totals.files))
    summary.add_row("Blank Lines", _format_number(state.totals.blank))
    summary.add_row("Comments", _format_number(state.totals.comment))
    summary.add_row("Code Lines", _format_number(state.totals.code))
    console.print(summary)

    if state.languages:
        lang_table = Table(show_header=True, header_style="bold", title=f"Top Languages (top {top_n})")
        lang_table.add_column("#", justify="right")
        lang_table.add_column("Language")
        lang_table.add_column("Files", justify="right")
        lang_table.add_column("Code ▼", justify="right")
        ranked = rank_languages(state.languages)
        for i, (lang, stats) in enumerate(ranked[:top_n], 1):
            lang_table.add_row(str(i), lang, _format_number(stats.files), _format_number(stats.code))
        console.print(lang_table)
