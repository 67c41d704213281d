from __future__ import annotations

from functools import partial
import typer
from importlib import metadata
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from contractor.core.audit import append_audit
from contractor.core.config import CONFIG_FILENAME, ContractorConfig, find_config, load_master_config
from contractor.core.logs import setup_logging
from contractor.core.models import RunOutcome, Verdict
from contractor.core.network import find_instances, scan_all
from contractor.core.registry import SolverRegistry, default_registry
from contractor.core.runner import RunMode, RunOptions, format_answer, run
from contractor.core.snapshot import NetworkSnapshot, load_snapshot


app = typer.Typer(add_completion=False, help="Contractor: find and solve coding contracts across a network")
console = Console()

VERDICT_STYLES = {
    Verdict.SKIP: "dim",
    Verdict.DRY: "cyan",
    Verdict.SOLVED: "bold green",
    Verdict.WRONG: "bold red",
    Verdict.FAILED: "red",
    Verdict.NO_ANSWER: "yellow",
}


def _print_version(value: bool) -> None:
    if not value:
        return
    try:
        console.print(metadata.version("contractor"))
    except metadata.PackageNotFoundError:
        console.print("0.0.0+local")
    raise typer.Exit()


@app.callback(invoke_without_command=True, no_args_is_help=True)
def main(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_print_version,
        is_eager=True,
        help="Print the installed version and exit.",
    ),
):
    """Scan hosts for coding contracts; dry run unless --submit is given."""


def _get_config(config_path: str) -> ContractorConfig:
    try:
        cfg = load_master_config(find_config(config_path))
    except (FileNotFoundError, ValueError) as e:
        console.print(f"❌ {e}")
        raise typer.Exit(code=2)
    setup_logging(cfg.log_level)
    return cfg


def _get_registry(cfg: ContractorConfig) -> SolverRegistry:
    try:
        return default_registry(cfg.solver_modules)
    except (ImportError, AttributeError, FileNotFoundError, ValueError) as e:
        console.print(f"❌ Could not load solvers: {e}")
        raise typer.Exit(code=2)


def _get_network(cfg: ContractorConfig, network: str | None) -> NetworkSnapshot:
    path = network or cfg.snapshot_path
    if not path:
        console.print("❌ No network snapshot configured. Pass --network or set network.snapshot.")
        raise typer.Exit(code=2)
    try:
        return load_snapshot(path)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"❌ Invalid network snapshot: {e}")
        raise typer.Exit(code=2)


solvers_app = typer.Typer(help="Solver operations")
app.add_typer(solvers_app, name="solvers")


@solvers_app.command("list")
def solvers_list(
    config: str = typer.Option(CONFIG_FILENAME, "--config", help="Path to master config"),
):
    cfg = _get_config(config)
    registry = _get_registry(cfg)
    table = Table(title="Contract Solvers")
    table.add_column("Contract type", style="bold")
    table.add_column("Payload")
    table.add_column("Answer")
    for entry in sorted(registry, key=lambda e: e.type_name):
        accepts = ", ".join(sorted(k.value for k in entry.accepts))
        table.add_row(entry.type_name, accepts, entry.returns.value)
    console.print(table)


@app.command("hosts")
def hosts(
    network: str = typer.Option(None, "--network", help="Network snapshot YAML (overrides config)"),
    config: str = typer.Option(CONFIG_FILENAME, "--config", help="Path to master config"),
):
    cfg = _get_config(config)
    env = _get_network(cfg, network)
    found = scan_all(env, cfg.home)
    for host in found:
        console.print(escape(host))
    console.print(f"{len(found)} host(s) reachable from {cfg.home}.")


@app.command("find")
def find(
    contract_type: str = typer.Option(None, "--type", help="Only list contracts of this type"),
    target: str = typer.Option(None, "--target", help="Only scan one host"),
    network: str = typer.Option(None, "--network", help="Network snapshot YAML (overrides config)"),
    config: str = typer.Option(CONFIG_FILENAME, "--config", help="Path to master config"),
):
    cfg = _get_config(config)
    env = _get_network(cfg, network)
    servers = [target] if target else scan_all(env, cfg.home)

    table = Table(title="Coding Contracts")
    table.add_column("Host", style="bold")
    table.add_column("File")
    table.add_column("Type")
    count = 0
    for host, filename in find_instances(env, servers, cfg.extension):
        ctype = env.classify(filename, host)
        if contract_type and ctype != contract_type:
            continue
        count += 1
        table.add_row(escape(host), escape(filename), escape(ctype))

    if count == 0:
        console.print("No matching contracts found.")
        return
    console.print(table)


def _print_outcome(outcome: RunOutcome) -> None:
    table = Table(title="Contract Run")
    table.add_column("Verdict")
    table.add_column("Host", style="bold")
    table.add_column("File")
    table.add_column("Type")
    table.add_column("Detail")
    for r in outcome.reports:
        if r.verdict == Verdict.SOLVED:
            detail = str(r.reward)
        elif r.verdict == Verdict.FAILED:
            detail = r.error or "exception"
        elif r.verdict == Verdict.NO_ANSWER:
            detail = "no answer"
        elif r.verdict == Verdict.SKIP:
            detail = "no solver"
        else:
            detail = format_answer(r.answer)
        style = VERDICT_STYLES[r.verdict]
        table.add_row(
            f"[{style}]{r.verdict.value.upper()}[/{style}]",
            escape(r.instance.host),
            escape(r.instance.filename),
            escape(r.instance.type),
            escape(detail),
        )
    console.print(table)


@app.command("solve")
def solve(
    submit: bool = typer.Option(False, "--submit", help="Submit answers (default is a dry run)"),
    target: str = typer.Option(None, "--target", help="Only scan one host"),
    contract_type: str = typer.Option(None, "--type", help="Only solve contracts of this type"),
    network: str = typer.Option(None, "--network", help="Network snapshot YAML (overrides config)"),
    config: str = typer.Option(CONFIG_FILENAME, "--config", help="Path to master config"),
):
    cfg = _get_config(config)
    registry = _get_registry(cfg)
    env = _get_network(cfg, network)

    options = RunOptions(
        mode=RunMode.SUBMIT if submit else RunMode.DRY,
        home=cfg.home,
        target=target,
        type_filter=contract_type,
        extension=cfg.extension,
        submit_delay=cfg.submit_delay,
    )
    audit = partial(append_audit, path=cfg.audit_path) if cfg.audit_path else None
    outcome = run(env, registry, options, audit=audit)

    if outcome.found == 0:
        console.print("No coding contracts found.")
        return

    _print_outcome(outcome)
    console.print(
        f"Done. Mode={options.mode.value.upper()} Attempted={outcome.attempted}, "
        f"Solved={outcome.solved}, Skipped={outcome.skipped}, Found={outcome.found}"
    )
    if outcome.wrong:
        console.print(f"🧱 [bold red]{outcome.wrong} wrong submission(s)[/bold red]")
        raise typer.Exit(code=5)
