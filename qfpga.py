"""
Quantum FPGA Simulator CLI

Subcommands:
  - setup: Create the workspace folders and the run database
  - algorithm: Run a named algorithm profile (grover, shor, ...)
  - custom: Run a custom profile with explicit qubit/gate counts
  - qec: Run the fixed error-correction batch
  - dashboard: Export the snapshot JSON for the dashboard and display it
  - benchmark: Run a randomized benchmark batch

Examples:
  qfpga setup
  qfpga algorithm bell_state
  qfpga custom --qubits 6 --gates 40 --name my_circuit
  qfpga --toolchain yosys qec
  qfpga dashboard --json
  qfpga benchmark --seed 7
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

import config_schema
from config_schema import SimulatorConfig
from qcore import (
    ExperimentRecorder,
    InvalidProfile,
    NAMED_ALGORITHMS,
    RunResult,
    SnapshotExporter,
    SqliteStore,
    StorageError,
    benchmark_profiles,
    custom_profile,
    export_document,
    make_toolchain,
    named_profile,
    qec_profiles,
    run_batch,
    run_profile,
    write_snapshot,
)

logger = logging.getLogger("qfpga")
console = Console()
err_console = Console(stderr=True)

EXIT_OK = 0
EXIT_STORAGE = 1
EXIT_INVALID = 2

WORKSPACE_SUBDIRS = ("build", "verilog", "data", "results")


# =============================================================================
# Setup helpers
# =============================================================================

_installed_handlers: List[logging.Handler] = []


def configure_logging(config: SimulatorConfig) -> None:
    """Console handler plus the workspace log file. Replaces earlier calls' handlers."""
    config.log_path.parent.mkdir(parents=True, exist_ok=True)
    root = logging.getLogger()
    root.setLevel(config.log_level)
    while _installed_handlers:
        handler = _installed_handlers.pop()
        root.removeHandler(handler)
        handler.close()
    stream = logging.StreamHandler(sys.stderr)
    stream.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    file_handler = logging.FileHandler(config.log_path)
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    for handler in (stream, file_handler):
        root.addHandler(handler)
        _installed_handlers.append(handler)


def prepare_workspace(config: SimulatorConfig) -> None:
    for sub in WORKSPACE_SUBDIRS:
        (config.workspace_path / sub).mkdir(parents=True, exist_ok=True)


def _toolchain(config: SimulatorConfig):
    if config.toolchain == "yosys":
        return make_toolchain(
            "yosys",
            yosys_bin=config.yosys_bin,
            nextpnr_bin=config.nextpnr_bin,
            package=config.fpga_package,
        )
    return make_toolchain(config.toolchain)


# =============================================================================
# Output
# =============================================================================

def print_success(message: str) -> None:
    """Print a success message with green checkmark."""
    console.print(f"[green]✓[/green] {escape(message)}")


def print_error(message: str) -> None:
    """Print an error message with red X, on stderr."""
    err_console.print(f"[red]✗[/red] {escape(message)}")


def print_warning(message: str) -> None:
    console.print(f"[yellow]⚠[/yellow] {escape(message)}")


def print_next(command: str) -> None:
    """Print suggested next command."""
    console.print(f"\n[dim]Next:[/dim] [cyan]{command}[/cyan]")


def _result_row(result: RunResult) -> dict:
    return {
        "run_id": result.run_id,
        "algorithm": result.profile.name,
        "qubits": result.profile.qubit_count,
        "gates": result.profile.gate_count,
        "fidelity": result.metrics.fidelity,
        "decoherence_time": result.metrics.decoherence_time,
        "frequency_mhz": result.metrics.frequency_mhz,
        "luts_used": result.metrics.resource_units,
        "measurement": result.bitstring,
        "toolchain": result.toolchain_status,
    }


def print_results(results: List[RunResult], as_json: bool) -> None:
    rows = [_result_row(r) for r in results]
    if as_json:
        print(json.dumps(rows, indent=2))
        return
    table = Table(title="Quantum Runs")
    for column in ("run", "algorithm", "qubits", "gates", "fidelity",
                   "T2 (us)", "MHz", "LUTs", "collapse", "toolchain"):
        table.add_column(column)
    for row in rows:
        table.add_row(
            "-" if row["run_id"] is None else str(row["run_id"]),
            row["algorithm"],
            str(row["qubits"]),
            str(row["gates"]),
            f"{row['fidelity']:.4f}",
            f"{row['decoherence_time']:.2f}",
            f"{row['frequency_mhz']:.2f}",
            str(row["luts_used"]),
            row["measurement"],
            row["toolchain"],
        )
    console.print(table)


def print_snapshot(document: dict, as_json: bool) -> None:
    if as_json:
        print(json.dumps(document, indent=4))
        return
    metrics = document["metrics"]
    console.print(
        f"Average fidelity: {metrics['average_fidelity'] * 100:.2f}%  "
        f"Max qubits: {metrics['max_qubits']}  "
        f"Total gates: {metrics['total_gates_simulated']}  "
        f"Quantum advantage: {metrics['estimated_quantum_advantage']:,}x"
    )
    table = Table(title="Quantum Experiments")
    for column in ("timestamp", "algorithm", "qubits", "gates", "fidelity", "MHz", "LUTs"):
        table.add_column(column)
    for r in document["quantum_results"]:
        table.add_row(
            r["timestamp"], r["algorithm"], str(r["qubits"]), str(r["gates"]),
            f"{r['fidelity'] * 100:.1f}%", f"{r['frequency_mhz']:.1f}", str(r["luts_used"]),
        )
    console.print(table)


# =============================================================================
# Commands
# =============================================================================

def cmd_setup(args: argparse.Namespace, config: SimulatorConfig) -> int:
    prepare_workspace(config)
    with SqliteStore(config.db_path):
        pass
    logger.info("workspace ready at %s", config.workspace_path)
    if not args.json:
        print_success(f"Workspace ready at {config.workspace_path}")
        print_next("qfpga algorithm bell_state")
    return EXIT_OK


def _run_profiles(profiles, args: argparse.Namespace, config: SimulatorConfig) -> int:
    prepare_workspace(config)
    with SqliteStore(config.db_path) as store:
        results = run_batch(
            profiles,
            recorder=ExperimentRecorder(store),
            toolchain=_toolchain(config),
            config=config,
            ledger_path=config.receipts_path,
        )
    print_results(results, args.json)
    unsaved = [r.profile.name for r in results if not r.persisted]
    if unsaved:
        if not args.json:
            print_warning(f"Not persisted: {', '.join(unsaved)}")
        return EXIT_STORAGE
    return EXIT_OK


def cmd_algorithm(args: argparse.Namespace, config: SimulatorConfig) -> int:
    return _run_profiles([named_profile(args.name)], args, config)


def cmd_custom(args: argparse.Namespace, config: SimulatorConfig) -> int:
    profile = custom_profile(
        args.name, args.qubits, args.gates,
        min_qubits=config.custom_min_qubits,
        max_qubits=config.custom_max_qubits,
        min_gates=config.custom_min_gates,
    )
    prepare_workspace(config)
    with SqliteStore(config.db_path) as store:
        result = run_profile(
            profile,
            recorder=ExperimentRecorder(store),
            toolchain=_toolchain(config),
            config=config,
            ledger_path=config.receipts_path,
        )
    print_results([result], args.json)
    return EXIT_OK


def cmd_qec(args: argparse.Namespace, config: SimulatorConfig) -> int:
    return _run_profiles(qec_profiles(), args, config)


def cmd_benchmark(args: argparse.Namespace, config: SimulatorConfig) -> int:
    seed = args.seed if args.seed is not None else config.benchmark_seed
    return _run_profiles(benchmark_profiles(seed), args, config)


def cmd_dashboard(args: argparse.Namespace, config: SimulatorConfig) -> int:
    prepare_workspace(config)
    with SqliteStore(config.db_path) as store:
        snapshot = SnapshotExporter(
            store,
            run_limit=config.snapshot_run_limit,
            sample_limit=config.snapshot_sample_limit,
            advantage_cap=config.advantage_cap,
        ).export()
    output = args.output or config.snapshot_path
    write_snapshot(snapshot, output, ledger_path=config.receipts_path)
    print_snapshot(export_document(snapshot), args.json)
    if not args.json:
        print_success(f"Dashboard data written to {output}")
    return EXIT_OK


# =============================================================================
# CLI Main
# =============================================================================

def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Quantum FPGA simulator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__.split("Examples:", 1)[1],
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help=f"JSON/YAML config file (default: ${config_schema.CONFIG_ENV_VAR} or built-in defaults)",
    )
    parser.add_argument(
        "--toolchain",
        choices=["none", "yosys"],
        default=None,
        help="override the configured synthesis toolchain",
    )
    parser.add_argument(
        "--workspace",
        type=str,
        default=None,
        help="override the configured workspace directory",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="print results as JSON",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    setup = subparsers.add_parser("setup", help="create workspace folders and database")
    setup.set_defaults(func=cmd_setup)

    algorithm = subparsers.add_parser("algorithm", help="run a named algorithm profile")
    algorithm.add_argument("name", choices=sorted(NAMED_ALGORITHMS), help="algorithm name")
    algorithm.set_defaults(func=cmd_algorithm)

    custom = subparsers.add_parser("custom", help="run a custom profile")
    custom.add_argument("--qubits", type=int, required=True, help="number of qubits")
    custom.add_argument("--gates", type=int, required=True, help="number of gates")
    custom.add_argument("--name", type=str, default="custom", help="algorithm name label")
    custom.set_defaults(func=cmd_custom)

    qec = subparsers.add_parser("qec", help="run the error-correction batch")
    qec.set_defaults(func=cmd_qec)

    dashboard = subparsers.add_parser("dashboard", help="export and display the snapshot")
    dashboard.add_argument(
        "--output",
        type=str,
        default=None,
        help="snapshot JSON path (default: workspace results/quantum_data.json)",
    )
    dashboard.set_defaults(func=cmd_dashboard)

    benchmark = subparsers.add_parser("benchmark", help="run a randomized benchmark batch")
    benchmark.add_argument("--seed", type=int, default=None, help="random seed")
    benchmark.set_defaults(func=cmd_benchmark)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = _build_arg_parser()
    args = parser.parse_args(argv)

    try:
        config = config_schema.from_env(args.config)
        overrides = {}
        if args.toolchain is not None:
            overrides["toolchain"] = args.toolchain
        if args.workspace is not None:
            overrides["workspace_dir"] = args.workspace
        if overrides:
            config = replace(config, **overrides)
    except (FileNotFoundError, ValueError) as exc:
        print_error(str(exc))
        return EXIT_INVALID

    configure_logging(config)

    try:
        return args.func(args, config)
    except InvalidProfile as exc:
        logger.error("%s", exc)
        print_error(str(exc))
        return EXIT_INVALID
    except StorageError as exc:
        logger.error("storage unavailable: %s", exc)
        print_error(f"Storage unavailable: {exc}")
        if exc.result is not None:
            print_results([exc.result], args.json)
        return EXIT_STORAGE


if __name__ == "__main__":
    sys.exit(main())
