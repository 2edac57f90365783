# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Rich terminal report renderer.

Composes Rich tables and panels into the user-facing output of a
monitoring run.
"""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table
from rich.text import Text

from host_overload import __version__
from host_overload.data.models import DecisionRecord, MonitorReport
from host_overload.data.profiles import FleetProfile
from host_overload.reporting.ascii_charts import ratio_bar, sparkline


class TerminalRenderer:
    """Renders monitoring reports to the terminal using Rich."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def render(
        self,
        report: MonitorReport,
        chain: list[str] | None = None,
        top: int = 10,
        show_last_tick: bool = True,
    ) -> None:
        """Render the full monitoring report to the terminal."""
        self._render_header(report, chain)
        self._render_summary(report)
        self._render_flagged_hosts(report, top)
        if show_last_tick:
            self._render_last_tick(report)
        self._render_footer()

    def render_policies(self, descriptions: dict[str, str]) -> None:
        table = Table(show_header=True, header_style="bold", padding=(0, 1))
        table.add_column("Policy", style="bold cyan")
        table.add_column("Description")
        for name in sorted(descriptions):
            table.add_row(name, descriptions[name])
        self.console.print(Panel(table, title="[bold]DETECTION POLICIES[/bold]"))

    def render_profiles(self, profiles: dict[str, FleetProfile]) -> None:
        table = Table(show_header=True, header_style="bold", padding=(0, 1))
        table.add_column("Profile", style="bold cyan")
        table.add_column("Hosts", justify="right")
        table.add_column("VMs/host", justify="center")
        table.add_column("Window", justify="right")
        table.add_column("Description")
        for name, profile in profiles.items():
            table.add_row(
                name,
                str(profile.host_count),
                f"{profile.min_vms_per_host}-{profile.max_vms_per_host}",
                str(profile.history_window),
                profile.description,
            )
        self.console.print(Panel(table, title="[bold]FLEET PROFILES[/bold]"))

    # ------------------------------------------------------------------
    # Private rendering methods
    # ------------------------------------------------------------------

    def _render_header(self, report: MonitorReport, chain: list[str] | None) -> None:
        header_text = Text()
        header_text.append("HOST OVERLOAD", style="bold cyan")
        header_text.append(" | ", style="dim")
        header_text.append(f"policy {report.policy_name}", style="bold")
        if chain and len(chain) > 1:
            header_text.append(f" ({' -> '.join(chain)})", style="dim")
        header_text.append(" | ", style="dim")
        header_text.append(f"profile {report.profile_name}")
        header_text.append(f" | {report.host_count} hosts | {report.ticks} ticks")

        self.console.print()
        self.console.print(Panel(header_text, title="Over-utilization Detection"))

    def _render_summary(self, report: MonitorReport) -> None:
        table = Table(show_header=False, padding=(0, 2), box=None)
        table.add_column("Metric", style="bold")
        table.add_column("Value", justify="right")

        decisions = len(report.records)
        table.add_row("Decisions", f"{decisions:,}")
        table.add_row("OVER-UTILIZED", f"[red]{report.total_flagged:,}[/red]")
        table.add_row("Fallback decisions", f"[yellow]{report.delegated_count:,}[/yellow]")
        table.add_row("Hosts ever flagged", f"{len(report.flagged_hosts())} / {report.host_count}")
        spark = sparkline([float(c) for c in report.flagged_per_tick], width=48)
        table.add_row("Flagged per tick", spark or "N/A")

        self.console.print()
        self.console.print(Panel(table, title="[bold]SUMMARY[/bold]"))

    def _render_flagged_hosts(self, report: MonitorReport, top: int) -> None:
        flagged = report.flagged_hosts()
        self.console.print()
        self.console.print(Rule("[bold]MOST FLAGGED HOSTS[/bold]"))
        if not flagged:
            self.console.print("  [green]No host was flagged over-utilized.[/green]")
            return

        table = Table(show_header=True, header_style="bold", padding=(0, 1))
        table.add_column("Host", style="bold")
        table.add_column("Ticks flagged", justify="right")
        table.add_column("Share", justify="right")
        for host_id, count in list(flagged.items())[:top]:
            share = count / report.ticks if report.ticks else 0.0
            table.add_row(host_id, str(count), f"{share:.0%}")
        self.console.print(table)

    def _render_last_tick(self, report: MonitorReport) -> None:
        if report.ticks == 0:
            return
        last = [r for r in report.records if r.tick == report.ticks - 1]

        self.console.print()
        self.console.print(Rule(f"[bold]TICK {report.ticks - 1}[/bold]"))
        table = Table(show_header=True, header_style="bold", padding=(0, 1))
        table.add_column("Host", style="bold")
        table.add_column("Estimator", justify="center")
        table.add_column("Threshold", justify="right")
        table.add_column("Utilization", min_width=28)
        table.add_column("Status", justify="center")
        for record in last:
            table.add_row(*self._record_row(record))
        self.console.print(table)

    @staticmethod
    def _record_row(record: DecisionRecord) -> tuple[str, str, str, str, str]:
        status = "[red]OVER[/red]" if record.is_over_utilized else "[green]ok[/green]"
        if record.delegated:
            return record.host_id, "[dim]fallback[/dim]", "-", "-", status
        return (
            record.host_id,
            record.estimator or "-",
            f"{record.computed_threshold:.3f}",
            ratio_bar(record.utilization_ratio or 0.0, record.computed_threshold),
            status,
        )

    def _render_footer(self) -> None:
        self.console.print()
        self.console.print(Rule(style="dim"))
        self.console.print(f"  [dim]host-overload v{__version__}[/dim]")
        self.console.print()
