"""
Reward Ledger CLI

Commands:
- schedule: Preview how much of a drip window is drawn by given times
- simulate: Replay a YAML scenario against in-memory collaborators
"""

import json
import logging
from pathlib import Path

import click
import yaml
from rich import box
from rich.console import Console
from rich.table import Table

from rewardledger import __version__
from rewardledger.accrual.pull import pull_progress
from rewardledger.exceptions import InvalidConfigurationError, RewardLedgerError
from rewardledger.simulation import load_scenario, run_scenario

console = Console()

FORMATS = click.Choice(["table", "json", "yaml"])


def _output_json(data: object) -> None:
    """Print data as JSON to stdout."""
    click.echo(json.dumps(data, indent=2, default=str))


def _output_yaml(data: object) -> None:
    """Print data as YAML to stdout."""
    click.echo(yaml.dump(data, default_flow_style=False, sort_keys=False))


def _emit(data: object, fmt: str) -> bool:
    """Print *data* for machine formats; return False for table output."""
    if fmt == "json":
        _output_json(data)
        return True
    if fmt == "yaml":
        _output_yaml(data)
        return True
    return False


@click.group()
@click.version_option(__version__, prog_name="rewardledger")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    help="Logging level for ledger internals.",
)
def app(log_level: str):
    """Inspect reward drip schedules and replay ledger scenarios."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command()
@click.option("--amount", type=int, required=True, help="Total amount drawn over the window.")
@click.option("--start", "start_at", type=int, required=True, help="Window start timestamp.")
@click.option("--end", "end_at", type=int, required=True, help="Window end timestamp.")
@click.option(
    "--at", "times", type=int, multiple=True, required=True,
    help="Timestamp to evaluate (repeatable).",
)
@click.option("--format", "fmt", type=FORMATS, default="table", help="Output format.")
def schedule(amount: int, start_at: int, end_at: int, times: tuple[int, ...], fmt: str):
    """Show the cumulative amount drawn by each --at timestamp."""
    try:
        rows = [
            {"at": t, "drawn": pull_progress(amount, start_at, end_at, t)}
            for t in times
        ]
    except InvalidConfigurationError as exc:
        raise click.ClickException(str(exc)) from exc

    if _emit({"amount": amount, "start": start_at, "end": end_at, "schedule": rows}, fmt):
        return

    table = Table(title="Pull schedule", box=box.ROUNDED)
    table.add_column("At", justify="right", style="cyan")
    table.add_column("Drawn", justify="right")
    table.add_column("Remaining", justify="right", style="dim")
    for row in rows:
        table.add_row(str(row["at"]), str(row["drawn"]), str(amount - row["drawn"]))
    console.print(table)


@app.command()
@click.argument("scenario_path", type=click.Path(path_type=Path))
@click.option("--format", "fmt", type=FORMATS, default="table", help="Output format.")
def simulate(scenario_path: Path, fmt: str):
    """Replay SCENARIO_PATH and print every participant's position."""
    try:
        result = run_scenario(load_scenario(scenario_path))
    except RewardLedgerError as exc:
        raise click.ClickException(str(exc)) from exc

    if _emit(result.model_dump(mode="json"), fmt):
        return

    console.print(
        f"\n[bold blue]Ledger at t={result.final_time}[/bold blue]  "
        f"multiplier={result.current_multiplier}  balance={result.ledger_balance}\n"
    )
    table = Table(box=box.ROUNDED)
    table.add_column("Participant", style="cyan", no_wrap=True)
    table.add_column("Stake", justify="right")
    table.add_column("Owed", justify="right")
    table.add_column("Claimable", justify="right", style="green")
    table.add_column("Claimed", justify="right")
    for p in result.participants:
        table.add_row(p.user, str(p.stake), str(p.owed), str(p.claimable), str(p.claimed))
    console.print(table)

    for failure in result.failures:
        console.print(f"[red]step {failure.index} ({failure.op.value}): {failure.error}[/red] {failure.message}")


if __name__ == "__main__":
    app()
