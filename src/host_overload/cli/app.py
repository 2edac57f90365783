# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Main CLI application for host-overload."""

from __future__ import annotations

import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from host_overload import __version__
from host_overload.config import MonitorConfig, PolicyConfig, load_config
from host_overload.data.generator import FleetGenerator
from host_overload.data.models import MonitorReport
from host_overload.data.profiles import PROFILES, get_profile
from host_overload.detection.monitor import OverloadMonitor
from host_overload.detection.random_source import seed_random_source
from host_overload.detection.recorder import ThresholdHistoryRecorder
from host_overload.detection.registry import POLICY_DESCRIPTIONS, available_policies
from host_overload.errors import ConfigurationError
from host_overload.reporting.terminal import TerminalRenderer

PROFILE_CHOICES = list(PROFILES.keys())


def _run_monitor(config: MonitorConfig, console: Console) -> MonitorReport:
    """Simulate the configured fleet and return the monitoring report."""
    profile = get_profile(config.profile)
    rng = seed_random_source(config.seed)
    recorder = ThresholdHistoryRecorder()
    policy = config.policy.build(recorder=recorder, rng=rng)

    generator = FleetGenerator(profile, seed=config.seed)
    monitor = OverloadMonitor(policy, generator, recorder=recorder)
    with console.status("[bold cyan]Monitoring simulated fleet..."):
        return monitor.run(config.ticks)


def _configure_logging(verbose: int, console: Console) -> None:
    level = {0: logging.WARNING, 1: logging.INFO}.get(verbose, logging.DEBUG)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(version=__version__)
@click.option("--no-color", is_flag=True, help="Disable colored output")
@click.option("--verbose", "-v", count=True, help="Log progress (-v) or every decision (-vv)")
@click.pass_context
def cli(ctx: click.Context, no_color: bool, verbose: int) -> None:
    """host-overload: adaptive host over-utilization detection

    Simulates a fleet of hosts and flags the ones whose requested
    capacity exceeds a dynamic, history-based threshold.
    """
    ctx.ensure_object(dict)
    console = Console(no_color=no_color)
    ctx.obj["console"] = console
    _configure_logging(verbose, console)


@cli.command()
@click.option(
    "--profile", "-p",
    type=click.Choice(PROFILE_CHOICES),
    default=None,
    help="Fleet profile to simulate [default: bursty]",
)
@click.option(
    "--policy", "-P",
    type=click.Choice(available_policies()),
    default=None,
    help="Detection policy [default: whale]",
)
@click.option(
    "--parameter", "-k", type=float, default=None,
    help="Sensitivity, or the threshold for the static policy [default: 1.5]",
)
@click.option(
    "--exploration-factor", "-e", type=float, default=None,
    help="Whale search exploration factor in [0, 1] [default: 0.5]",
)
@click.option("--ticks", "-t", type=click.IntRange(min=1), default=None, help="Ticks to simulate")
@click.option("--seed", "-s", type=int, default=None, help="Random seed for reproducibility")
@click.option(
    "--config", "-c", type=click.Path(), default=None,
    help="YAML config file; command-line options override it",
)
@click.option(
    "--export-json", type=click.Path(), default=None,
    help="Export the raw report as JSON at this path",
)
@click.option("--top", type=int, default=10, help="Number of most-flagged hosts to list")
@click.pass_context
def run(
    ctx: click.Context,
    profile: str | None,
    policy: str | None,
    parameter: float | None,
    exploration_factor: float | None,
    ticks: int | None,
    seed: int | None,
    config: str | None,
    export_json: str | None,
    top: int,
) -> None:
    """Run over-utilization detection over a simulated fleet."""
    console: Console = ctx.obj["console"]

    try:
        cfg = load_config(config) if config else MonitorConfig()
        cfg = _apply_overrides(cfg, profile, policy, parameter, exploration_factor, ticks, seed)
        report = _run_monitor(cfg, console)
    except (ConfigurationError, FileNotFoundError, KeyError) as exc:
        console.print(f"[red]{exc}[/]")
        raise SystemExit(1)

    renderer = TerminalRenderer(console)
    renderer.render(report, chain=cfg.policy.chain_names(), top=top)

    if export_json:
        _export_json(report, export_json, console)


@cli.command()
@click.pass_context
def policies(ctx: click.Context) -> None:
    """List the available detection policies."""
    TerminalRenderer(ctx.obj["console"]).render_policies(POLICY_DESCRIPTIONS)


@cli.command()
@click.pass_context
def profiles(ctx: click.Context) -> None:
    """List the available fleet profiles."""
    TerminalRenderer(ctx.obj["console"]).render_profiles(PROFILES)


def _apply_overrides(
    cfg: MonitorConfig,
    profile: str | None,
    policy: str | None,
    parameter: float | None,
    exploration_factor: float | None,
    ticks: int | None,
    seed: int | None,
) -> MonitorConfig:
    """Return *cfg* with every option given on the command line applied."""
    policy_cfg = cfg.policy
    if policy is not None and policy != policy_cfg.name:
        default_parameter = 0.7 if policy == "static" else policy_cfg.parameter
        policy_cfg = PolicyConfig(
            name=policy,
            parameter=default_parameter,
            exploration_factor=policy_cfg.exploration_factor,
            warmup_samples=policy_cfg.warmup_samples,
            fallback=policy_cfg.fallback,
        )
    policy_updates: dict = {}
    if parameter is not None:
        policy_updates["parameter"] = parameter
    if exploration_factor is not None:
        policy_updates["exploration_factor"] = exploration_factor
    if policy_updates:
        policy_cfg = policy_cfg.model_copy(update=policy_updates)

    updates: dict = {"policy": policy_cfg}
    if profile is not None:
        updates["profile"] = profile
    if ticks is not None:
        updates["ticks"] = ticks
    if seed is not None:
        updates["seed"] = seed
    return cfg.model_copy(update=updates)


def _export_json(report: MonitorReport, path: str, console: Console) -> None:
    """Export to JSON."""
    with open(path, "w") as f:
        f.write(report.model_dump_json(indent=2))
    console.print(f"  [green]JSON report exported to:[/green] {path}")
