"""Command-line interface for the Legal Eagle dashboard.

Exposes the dashboard's commands in the terminal with rich output using the
``click`` and ``rich`` libraries.  State is shared with the web dashboard
through the same data directory.

Usage::

    legal-eagle analyze lease.txt --name "Office Lease"
    legal-eagle overview
    legal-eagle documents --sort risk
    legal-eagle deadlines --date 2025-03-01
    legal-eagle status doc-1 "In Review"
"""

from __future__ import annotations

import json
import sys
from datetime import date
from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .activity import describe_event, time_ago
from .aggregations import aggregate, overall_risk
from .config import configure_logging, settings
from .controller import DashboardController
from .deadlines import DeadlineSelection, calendar_days, month_grid
from .errors import LegalEagleError
from .gateway import DemoGateway, build_gateway
from .history import HistoryTable, SortDirection, SortKey
from .layout import WIDGETS, available_widgets
from .models import AnalysisResult, DocumentStatus, ManualDeadline, RiskSeverity, parse_iso_date
from .storage import JsonFileStore
from .upload import extract_text, name_for_upload

console = Console()

STATUS_NAMES = [s.value for s in DocumentStatus]


def _get_risk_style(level: RiskSeverity) -> str:
    """Return a rich style string for a risk level."""
    return {
        RiskSeverity.HIGH: "bold red",
        RiskSeverity.MEDIUM: "bold yellow",
        RiskSeverity.LOW: "dim green",
    }.get(level, "")


def _get_risk_icon(level: RiskSeverity) -> str:
    """Return an emoji icon for a risk level."""
    return {
        RiskSeverity.HIGH: "🔴",
        RiskSeverity.MEDIUM: "🟡",
        RiskSeverity.LOW: "🟢",
    }.get(level, "")


def _fail(error: Exception) -> None:
    console.print(f"[bold red]Error:[/] {error}")
    sys.exit(1)


def _controller(ctx: click.Context) -> DashboardController:
    obj = ctx.ensure_object(dict)
    if "controller" not in obj:
        gateway = DemoGateway() if obj.get("demo") else build_gateway(settings)
        controller = DashboardController(JsonFileStore(obj["data_dir"]), settings, gateway)
        controller.load()
        obj["controller"] = controller
    return obj["controller"]


@click.group()
@click.version_option(package_name="legal-eagle")
@click.option("--data-dir", type=click.Path(file_okay=False, path_type=Path),
              default=None, help="Directory holding the dashboard's JSON state.")
@click.option("--demo", is_flag=True, help="Use canned AI answers instead of calling a model.")
@click.pass_context
def main(ctx: click.Context, data_dir: Path | None, demo: bool) -> None:
    """⚖️ Legal Eagle: AI-assisted legal document dashboard.

    Analyze documents, track deadlines and review document status from
    the terminal.
    """
    configure_logging(settings.log_level)
    ctx.ensure_object(dict)
    ctx.obj["data_dir"] = data_dir or settings.data_dir
    ctx.obj["demo"] = demo


# ------------------------------------------------------------------
# Documents
# ------------------------------------------------------------------


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--name", "-n", default="", help="Document name (defaults to the file name).")
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
@click.option("--save/--no-save", default=True, help="Store the document on the dashboard.")
@click.pass_context
def analyze(ctx: click.Context, file: Path, name: str, output: str, save: bool) -> None:
    """Analyze a legal document and add it to the dashboard.

    Example: legal-eagle analyze lease.txt --name "Office Lease"
    """
    controller = _controller(ctx)
    try:
        text = extract_text(file.name, file.read_bytes())
        name = name_for_upload(name, file.name)
        with console.status("[bold blue]AI is analyzing your document...", spinner="dots"):
            analysis = controller.analyze_text(text, name)
        doc = controller.save_document(text, analysis, name) if save else None
    except LegalEagleError as e:
        _fail(e)

    if output == "json":
        payload = analysis.to_dict()
        if doc is not None:
            payload = {"id": doc.id, "name": doc.name, "analysis": payload}
        click.echo(json.dumps(payload, indent=2))
    else:
        _render_analysis(name, analysis)
        if doc is not None:
            console.print(f"[dim]Saved as {doc.id}[/]")


@main.command()
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
@click.pass_context
def overview(ctx: click.Context, output: str) -> None:
    """Show risk, status, clause and counterparty statistics."""
    summary = aggregate(_controller(ctx).state.documents)
    if output == "json":
        click.echo(json.dumps(summary.to_dict(), indent=2))
        return

    risk = summary.risk
    console.print(Panel(
        f"Total documents: [bold]{risk.total}[/]\n"
        f"🔴 High: {risk.high}   🟡 Medium: {risk.medium}   🟢 Low: {risk.low}",
        title="Risk Overview",
        border_style="blue",
    ))

    status_table = Table(title="Document Status")
    status_table.add_column("Status", style="cyan")
    status_table.add_column("Count", justify="right")
    status_table.add_column("Share", justify="right")
    for status, count in summary.status.counts.items():
        status_table.add_row(status.value, str(count), f"{summary.status.share(status):.0%}")
    console.print(status_table)

    for title, rows in (("Clause Frequency", summary.clauses),
                        ("Counterparties", summary.counterparties)):
        table = Table(title=title)
        table.add_column("Name", style="white")
        table.add_column("Documents", justify="right")
        for label, count in rows:
            table.add_row(label, str(count))
        if not rows:
            table.add_row("[dim]No data yet[/]", "")
        console.print(table)


@main.command()
@click.option("--search", "-q", default="", help="Case-insensitive name filter.")
@click.option("--sort", "sort_key", type=click.Choice([k.value for k in SortKey]),
              default=SortKey.DATE.value, help="Sort column.")
@click.option("--ascending/--descending", default=False, help="Sort direction.")
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
@click.pass_context
def documents(ctx: click.Context, search: str, sort_key: str, ascending: bool, output: str) -> None:
    """List stored documents."""
    table_state = HistoryTable()
    table_state.query = search
    table_state.sort_key = SortKey(sort_key)
    table_state.direction = SortDirection.ASCENDING if ascending else SortDirection.DESCENDING
    rows = table_state.rows(_controller(ctx).state.documents)

    if output == "json":
        click.echo(json.dumps([
            {"id": d.id, "name": d.name, "createdAt": d.created_at,
             "risk": overall_risk(d).value, "status": d.status.value}
            for d in rows
        ], indent=2))
        return

    table = Table(title="Document History", show_lines=False)
    table.add_column("ID", style="dim")
    table.add_column("Name", style="white")
    table.add_column("Date", justify="center")
    table.add_column("Risk", justify="center")
    table.add_column("Status", style="cyan")
    for doc in rows:
        risk = overall_risk(doc)
        table.add_row(
            doc.id,
            doc.name,
            doc.created.strftime("%b %d, %Y"),
            Text(risk.value, style=_get_risk_style(risk)),
            doc.status.value,
        )
    if not rows:
        table.add_row("", "[dim]No documents found[/]", "", "", "")
    console.print(table)


@main.command()
@click.argument("doc_id")
@click.argument("status", type=click.Choice(STATUS_NAMES, case_sensitive=False))
@click.pass_context
def status(ctx: click.Context, doc_id: str, status: str) -> None:
    """Set the status of a document.

    Example: legal-eagle status doc-1 "Awaiting Signature"
    """
    new_status = next(s for s in DocumentStatus if s.value.lower() == status.lower())
    try:
        doc = _controller(ctx).update_document_status(doc_id, new_status)
    except LegalEagleError as e:
        _fail(e)
    console.print(f"{doc.name}: [cyan]{doc.status.value}[/]")


@main.command()
@click.argument("doc_id")
@click.confirmation_option(prompt="Delete this document?")
@click.pass_context
def delete(ctx: click.Context, doc_id: str) -> None:
    """Delete a document (linked manual deadlines are kept)."""
    doc = _controller(ctx).delete_document(doc_id)
    if doc is None:
        _fail(LegalEagleError(f"Document {doc_id!r} not found"))
    console.print(f"Deleted [bold]{doc.name}[/]")


@main.command()
@click.argument("doc_a")
@click.argument("doc_b")
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
@click.pass_context
def compare(ctx: click.Context, doc_a: str, doc_b: str, output: str) -> None:
    """Compare two stored documents with the AI model."""
    try:
        with console.status("[bold blue]Comparing documents...", spinner="dots"):
            first, second, result = _controller(ctx).compare_documents(doc_a, doc_b)
    except LegalEagleError as e:
        _fail(e)

    if output == "json":
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    console.print(Panel(result.overall_summary,
                        title=f"⚖️ {first.name} vs {second.name}", border_style="blue"))
    clauses = Table(title="Clause Comparison", show_lines=True)
    clauses.add_column("Clause", style="cyan")
    clauses.add_column("Difference")
    clauses.add_column(first.name, max_width=40)
    clauses.add_column(second.name, max_width=40)
    for c in result.clause_comparisons:
        clauses.add_row(c.clause_title, c.summary_of_difference, c.details_doc1, c.details_doc2)
    console.print(clauses)

    risks = Table(title="Risk Profile Differences", show_lines=True)
    risks.add_column("Risk", style="cyan")
    risks.add_column("Difference")
    risks.add_column(first.name, justify="center")
    risks.add_column(second.name, justify="center")
    for r in result.risk_profile_differences:
        risks.add_row(r.risk_title, r.summary_of_difference, r.risk_in_doc1, r.risk_in_doc2)
    console.print(risks)


@main.command()
@click.option("--limit", "-l", default=10, show_default=True, help="Number of events to show.")
@click.pass_context
def activity(ctx: click.Context, limit: int) -> None:
    """Show the team activity feed."""
    events = _controller(ctx).activity.latest(limit)
    if not events:
        console.print("[dim]No recent activity.[/]")
        return
    for event in events:
        console.print(f"  {describe_event(event)} [dim]{time_ago(event.timestamp)}[/]")


# ------------------------------------------------------------------
# Deadlines
# ------------------------------------------------------------------


def _parse_day(value: str | None) -> date | None:
    if value is None:
        return None
    try:
        return parse_iso_date(value)
    except ValueError:
        raise click.BadParameter(f"expected YYYY-MM-DD, got {value!r}")


@main.command()
@click.option("--date", "day", default=None, help="Only events on this date (YYYY-MM-DD).")
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
@click.pass_context
def deadlines(ctx: click.Context, day: str | None, output: str) -> None:
    """Show upcoming deadlines from documents and manual entries."""
    controller = _controller(ctx)
    selection = DeadlineSelection(settings.upcoming_limit)
    selected = _parse_day(day)
    if selected is not None:
        selection.toggle(selected)
    events = selection.visible(controller.upcoming_events())

    if output == "json":
        click.echo(json.dumps([e.to_dict() for e in events], indent=2))
        return

    table = Table(title="Upcoming Deadlines" if selected is None else f"Deadlines on {selected}")
    table.add_column("Date", justify="center")
    table.add_column("Event", style="white")
    table.add_column("Document", style="cyan")
    table.add_column("Source", justify="center")
    table.add_column("ID", style="dim")
    for event in events:
        table.add_row(
            event.date.strftime("%b %d"),
            event.event_name,
            event.doc_name or "",
            "👤 manual" if event.is_manual else "🤖 AI",
            event.id,
        )
    if not events:
        table.add_row("", "[dim]No deadlines on this date[/]" if selected else
                      "[dim]No upcoming deadlines[/]", "", "", "")
    console.print(table)


@main.command(name="calendar")
@click.option("--month", "-m", default=None, help="Month to show (YYYY-MM); defaults to this month.")
@click.pass_context
def calendar_cmd(ctx: click.Context, month: str | None) -> None:
    """Show a month calendar with days that carry deadlines highlighted."""
    controller = _controller(ctx)
    today = controller.today()
    year, month_no = today.year, today.month
    if month:
        try:
            year, month_no = (int(part) for part in month.split("-"))
            date(year, month_no, 1)
        except ValueError:
            raise click.BadParameter(f"expected YYYY-MM, got {month!r}", param_hint="--month")

    marked = calendar_days(controller.calendar_events(), year, month_no)
    table = Table(title=date(year, month_no, 1).strftime("%B %Y"), show_edge=False)
    for label in ("Su", "Mo", "Tu", "We", "Th", "Fr", "Sa"):
        table.add_column(label, justify="right")
    for week in month_grid(year, month_no):
        cells = []
        for day in week:
            if day == 0:
                cells.append("")
            elif day in marked:
                cells.append(f"[bold yellow]{day}•[/]")
            elif date(year, month_no, day) == today:
                cells.append(f"[reverse]{day}[/]")
            else:
                cells.append(str(day))
        table.add_row(*cells)
    console.print(table)


@main.group()
def deadline() -> None:
    """Add, edit or delete manual deadlines."""


@deadline.command("add")
@click.argument("event_name")
@click.argument("day", metavar="DATE")
@click.option("--doc", "doc_id", default=None, help="Link the deadline to a document id.")
@click.pass_context
def deadline_add(ctx: click.Context, event_name: str, day: str, doc_id: str | None) -> None:
    """Add a manual deadline (DATE is YYYY-MM-DD)."""
    try:
        created = _controller(ctx).add_manual_deadline(event_name, day, doc_id)
    except LegalEagleError as e:
        _fail(e)
    console.print(f"Added deadline [bold]{created.event_name}[/] on {created.date} ({created.id})")


@deadline.command("update")
@click.argument("deadline_id")
@click.option("--name", "event_name", default=None, help="New event name.")
@click.option("--date", "day", default=None, help="New date (YYYY-MM-DD).")
@click.option("--doc", "doc_id", default=None, help="Link to a document id.")
@click.option("--unlink", is_flag=True, help="Remove the document link.")
@click.pass_context
def deadline_update(ctx: click.Context, deadline_id: str, event_name: str | None,
                    day: str | None, doc_id: str | None, unlink: bool) -> None:
    """Edit a manual deadline."""
    controller = _controller(ctx)
    current = next((d for d in controller.state.manual_deadlines if d.id == deadline_id), None)
    if current is None:
        _fail(LegalEagleError(f"Deadline {deadline_id!r} not found"))
    updated = ManualDeadline(
        id=current.id,
        event_name=event_name if event_name is not None else current.event_name,
        date=day if day is not None else current.date,
        doc_id=None if unlink else (doc_id or current.doc_id),
    )
    try:
        controller.update_manual_deadline(updated)
    except LegalEagleError as e:
        _fail(e)
    console.print(f"Updated deadline [bold]{updated.event_name}[/] on {updated.date}")


@deadline.command("delete")
@click.argument("deadline_id")
@click.pass_context
def deadline_delete(ctx: click.Context, deadline_id: str) -> None:
    """Delete a manual deadline."""
    try:
        _controller(ctx).delete_manual_deadline(deadline_id)
    except LegalEagleError as e:
        _fail(e)
    console.print(f"Deleted deadline {deadline_id}")


# ------------------------------------------------------------------
# Layout
# ------------------------------------------------------------------


@main.group()
def widgets() -> None:
    """Manage the dashboard's widgets."""


@widgets.command("list")
@click.pass_context
def widgets_list(ctx: click.Context) -> None:
    """Show placed and available widgets."""
    layout = _controller(ctx).state.layout
    table = Table(title="Dashboard Widgets")
    table.add_column("#", justify="right", width=4)
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    for i, widget_id in enumerate(layout, 1):
        table.add_row(str(i), widget_id, WIDGETS.get(widget_id, "[dim]unknown[/]"))
    console.print(table)
    spare = available_widgets(layout)
    if spare:
        console.print("Available: " + ", ".join(f"{wid} ({name})" for wid, name in spare))


@widgets.command("add")
@click.argument("widget_id")
@click.pass_context
def widgets_add(ctx: click.Context, widget_id: str) -> None:
    """Add a widget to the end of the dashboard."""
    try:
        layout = _controller(ctx).add_widget(widget_id)
    except LegalEagleError as e:
        _fail(e)
    console.print("Layout: " + ", ".join(layout))


@widgets.command("remove")
@click.argument("widget_id")
@click.pass_context
def widgets_remove(ctx: click.Context, widget_id: str) -> None:
    """Remove a widget from the dashboard."""
    layout = _controller(ctx).remove_widget(widget_id)
    console.print("Layout: " + (", ".join(layout) or "(empty)"))


# ------------------------------------------------------------------
# Rich rendering helpers
# ------------------------------------------------------------------


def _render_analysis(name: str, analysis: AnalysisResult) -> None:
    """Render an AnalysisResult with rich formatting."""
    console.print()
    console.print(Panel(
        f"[bold]{name}[/]\n"
        f"Clauses: {len(analysis.key_clauses)} | "
        f"Risks: {len(analysis.potential_risks)} | "
        f"Key dates: {len(analysis.key_dates)} | "
        f"Parties: {len(analysis.counterparties)}",
        title="⚖️ Legal Document Analysis",
        border_style="blue",
    ))
    console.print(Panel(analysis.summary, title="Summary", border_style="dim"))

    if analysis.key_clauses:
        table = Table(title="Key Clauses", show_lines=True)
        table.add_column("#", justify="right", width=4)
        table.add_column("Clause", style="cyan", width=24)
        table.add_column("Explanation", style="white", max_width=60)
        for i, clause in enumerate(analysis.key_clauses, 1):
            table.add_row(str(i), clause.title, clause.explanation)
        console.print(table)

    if analysis.potential_risks:
        console.print("[bold]Potential Risks[/]")
        for risk in analysis.potential_risks:
            icon = _get_risk_icon(risk.severity)
            style = _get_risk_style(risk.severity)
            console.print(f"  {icon} [{style}]{risk.severity.value.upper()}[/] {risk.title}: "
                          f"{risk.description}")
        console.print()

    if analysis.key_dates:
        console.print("[bold]Key Dates[/]")
        for key_date in analysis.key_dates:
            console.print(f"  📅 {key_date.date}  {key_date.event_name}")
        console.print()

    if analysis.counterparties:
        console.print("Parties: " + ", ".join(analysis.counterparties))
        console.print()


if __name__ == "__main__":
    main()
