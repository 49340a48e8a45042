"""
cli.py – Terminal entry point for the version compliance check
==============================================================
Reads the ledger + trainer JSON files, runs the ComplianceEngine, prints a
rich terminal summary (plus e-mail previews unless --quiet) and writes the
markdown report.

Usage:
    trainer-compliance
    trainer-compliance --input sample-data/trainer-versions.json
    trainer-compliance --ledger sample-data/version-ledger.json
    trainer-compliance --output output/version-report.md
    trainer-compliance --stale-days 60     (override stale threshold)
    trainer-compliance --quiet             (suppress email previews)
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from trainer_compliance.aggregator import region_label
from trainer_compliance.config import Settings, get_settings
from trainer_compliance.engine import ComplianceEngine, ComplianceRun
from trainer_compliance.loader import load_ledger, load_trainers
from trainer_compliance.models import ComplianceError, Urgency, VersionLedger
from trainer_compliance.report import days_label, sort_by_urgency

console = Console()

# ─── Colour map for urgency tiers ────────────────────────────────────────────
URGENCY_STYLE = {
    Urgency.CRITICAL: "bold red",
    Urgency.HIGH:     "bold yellow",
    Urgency.MEDIUM:   "cyan",
    Urgency.LOW:      "blue",
    Urgency.OK:       "green",
    Urgency.UNKNOWN:  "dim",
}


# ─── Display helpers ─────────────────────────────────────────────────────────

def _bar(pct: int, width: int = 10) -> str:
    filled = round(pct / (100 / width))
    return "█" * filled + "░" * (width - filled)


def _styled(urgency: Urgency) -> str:
    style = URGENCY_STYLE[urgency]
    return f"[{style}]{urgency.value}[/{style}]"


def show_summary(run: ComplianceRun, ledger: VersionLedger, settings: Settings) -> None:
    """Render the trainer table, summary counts, region bars and action list."""
    stats = run.stats

    console.print()
    console.print(Panel(
        f"[bold]VERSION COMPLIANCE REPORT[/bold]\n"
        f"[dim]Latest version: v{ledger.current_version}  |  "
        f"Generated: {run.generated_on.isoformat()}[/dim]",
        border_style="magenta",
        expand=False,
    ))

    # ── Per-trainer status table ─────────────────────────────────────────────
    table = Table(box=box.SIMPLE_HEAD, header_style="bold white", padding=(0, 1))
    table.add_column("Name",        min_width=20)
    table.add_column("Region",      min_width=7)
    table.add_column("Version",     min_width=9)
    table.add_column("Status",      min_width=18)
    table.add_column("Last Active", min_width=12)
    table.add_column("Urgency",     justify="left")

    for s in sort_by_urgency(run.statuses):
        stale = " [yellow]⚠[/yellow]" if s.is_stale else ""
        table.add_row(
            escape(s.record.name),
            escape(region_label(s.record.region)),
            f"v{s.record.current_version}",
            s.status_label,
            days_label(s.days_since_active, capitalise=False) + stale,
            _styled(s.urgency),
        )
    console.print(Panel(table, title="[bold]Trainer Status[/bold]", border_style="blue"))

    # ── Summary counts ───────────────────────────────────────────────────────
    summary = Table(box=box.ROUNDED, show_header=False, padding=(0, 1))
    summary.add_column("Key",   style="bold cyan", no_wrap=True)
    summary.add_column("Value")
    summary.add_row("Total trainers", str(stats.total))
    summary.add_row(f"On latest (v{ledger.current_version})", f"[green]{stats.pct(stats.current)}[/green]")
    summary.add_row("One version behind", stats.pct(stats.one_behind))
    summary.add_row("Two+ versions behind", stats.pct(stats.two_plus_behind))
    summary.add_row(f"Stale (>{run.stale_threshold_days}d inactive)", stats.pct(stats.stale))
    summary.add_row("Unknown version", stats.pct(stats.unknown))
    summary.add_row("Notifications queued", f"[bold]{stats.needs_notification}[/bold]")
    console.print(Panel(summary, title="[bold]Compliance Summary[/bold]", border_style="green"))

    # ── By region ────────────────────────────────────────────────────────────
    regions = Table(box=box.SIMPLE, show_header=False, padding=(0, 1))
    regions.add_column("Region", style="bold")
    regions.add_column("Bar")
    regions.add_column("Detail", style="dim")
    for region, group in stats.by_region.items():
        pct = group.compliance_pct
        colour = "green" if pct == 100 else "yellow" if pct >= 50 else "red"
        plural = "s" if group.total != 1 else ""
        regions.add_row(
            escape(region),
            f"[{colour}]{_bar(pct)}[/{colour}]",
            f"{pct}% current  ({group.total} trainer{plural})",
        )
    console.print(Panel(regions, title="[bold]Compliance by Region[/bold]", border_style="cyan"))

    # ── Action items ─────────────────────────────────────────────────────────
    urgent = [s for s in sort_by_urgency(run.statuses)
              if s.urgency in (Urgency.CRITICAL, Urgency.HIGH)]
    if urgent:
        lines = [
            f"{_styled(s.urgency)}  {escape(s.record.name)} ({escape(region_label(s.record.region))}) - "
            f"v{s.record.current_version}, last active "
            f"{days_label(s.days_since_active, capitalise=False)}"
            for s in urgent
        ]
        console.print(Panel("\n".join(lines), title="[bold]Action Required[/bold]",
                            border_style="red"))

    if run.manual_review:
        names = ", ".join(
            f"{escape(s.record.name)} (v{s.record.current_version})" for s in run.manual_review
        )
        console.print(f"[bold yellow]Manual review needed:[/bold yellow] {names}")

    if not settings.notification.is_configured:
        console.print("[dim]Guide URL or support contact is still a placeholder; "
                      "set GUIDE_URL / SUPPORT_CONTACT before sending.[/dim]")


def show_email_previews(run: ComplianceRun) -> None:
    if not run.notifications:
        console.print("\n  All trainers are on the current version. No notifications needed.")
        return

    console.rule(f"[bold]EMAIL NOTIFICATIONS ({len(run.notifications)} to send)[/bold]")
    for n in run.notifications:
        header = (
            f"[bold]TO:[/bold]      {escape(n.name)} <{n.email}>\n"
            f"[bold]URGENCY:[/bold] {_styled(n.urgency)}\n"
            f"[bold]SUBJECT:[/bold] {escape(n.subject)}\n"
        )
        console.print(Panel(header + "\n" + escape(n.body), border_style=URGENCY_STYLE[n.urgency]))


# ─── Main ────────────────────────────────────────────────────────────────────

def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="trainer-compliance",
        description="Check trainer guide versions and draft update notifications.",
    )
    parser.add_argument("--input", default=settings.paths.trainer_data,
                        help="trainer records JSON (default: %(default)s)")
    parser.add_argument("--ledger", default=settings.paths.ledger,
                        help="version ledger JSON (default: %(default)s)")
    parser.add_argument("--output", default=settings.paths.report,
                        help="markdown report path (default: %(default)s)")
    parser.add_argument("--stale-days", type=int,
                        default=settings.compliance.stale_threshold_days,
                        help="days of inactivity before a trainer is stale (default: %(default)s)")
    parser.add_argument("--quiet", action="store_true", help="suppress email previews")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    try:
        settings = get_settings()
    except ComplianceError as e:
        console.print(f"\n[bold red]Configuration error:[/bold red] {escape(str(e))}")
        return 1

    args = build_parser(settings).parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )

    try:
        ledger  = load_ledger(args.ledger)
        records = load_trainers(args.input)
        run = ComplianceEngine(settings).run(ledger, records, stale_threshold_days=args.stale_days)
    except ComplianceError as e:
        console.print(f"\n[bold red]Error:[/bold red] {escape(str(e))}")
        console.print("[dim]Fix the input above and re-run; no report was written.[/dim]")
        return 1

    show_summary(run, ledger, settings)

    if not args.quiet:
        show_email_previews(run)
    elif run.notifications:
        console.print(f"\n  {len(run.notifications)} email notification(s) ready. "
                      "Run without --quiet to preview.")

    out_path = Path(args.output)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(run.report, encoding="utf-8")

    console.print()
    console.rule(f"[bold green]Report saved: {escape(str(out_path))}[/bold green]")
    return 0


if __name__ == "__main__":
    sys.exit(main())
