"""
qcore/runner.py - Run Orchestration

One run: validate -> gate-stage machine -> metrics and samples ->
synthesis documents to the toolchain -> record -> receipt.

Toolchain failures are logged and do not block recording. Storage failures
propagate as StorageError carrying the in-memory RunResult.
"""

import logging
from dataclasses import replace
from pathlib import Path
from typing import Iterable, List, Optional, Union

from receipts import append_receipt, emit_receipt, merkle

from .errors import StorageError, ToolchainFailure
from .metrics import compute_metrics, qubit_samples
from .recorder import ExperimentRecorder, build_record
from .stages import GateStageMachine
from .synthesis import build_design
from .toolchain import NullToolchain, Toolchain
from .types_profile import AlgorithmProfile, validate_profile
from .types_result import RunResult

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def run_profile(
    profile: AlgorithmProfile,
    recorder: Optional[ExperimentRecorder] = None,
    toolchain: Optional[Toolchain] = None,
    config=None,
    ledger_path: Optional[PathLike] = None,
) -> RunResult:
    """
    Simulate one profile end to end.

    Args:
        profile: Profile to run
        recorder: Where to persist the run (None: not persisted)
        toolchain: Synthesis adapter (None: NullToolchain)
        config: SimulatorConfig for caps and workspace (None: defaults)
        ledger_path: Receipts JSONL ledger (None: receipts not written)

    Returns:
        RunResult with run_id set when persisted

    Raises:
        InvalidProfile: Before any simulation state is created
        StorageError: Persistence failed; exc.result holds the RunResult
    """
    from config_schema import SimulatorConfig

    config = config or SimulatorConfig()
    toolchain = toolchain or NullToolchain()
    validate_profile(profile, config.max_qubits, config.max_gates)

    logger.info(
        "simulating %s: %d qubits, %d gates",
        profile.name, profile.qubit_count, profile.gate_count,
    )
    machine = GateStageMachine(profile)
    measurement = machine.run()
    metrics = compute_metrics(profile.qubit_count, profile.gate_count)
    samples = qubit_samples(profile.qubit_count)

    toolchain_status, toolchain_error = _synthesize(profile, toolchain, config, ledger_path)

    result = RunResult(
        profile=profile,
        record=build_record(profile, metrics),
        samples=tuple(samples),
        metrics=metrics,
        measurement=measurement,
        trajectory=tuple(machine.trajectory),
        toolchain_status=toolchain_status,
        toolchain_error=toolchain_error,
    )

    if recorder is not None:
        try:
            run_id, record = recorder.record_result(result.record, result.samples)
        except StorageError as exc:
            logger.error("run %s not persisted: %s", profile.name, exc)
            _emit_run_receipt(result, ledger_path)
            raise StorageError(str(exc), result=result) from exc
        result = replace(
            result,
            run_id=run_id,
            record=record,
            samples=tuple(replace(s, run_id=run_id) for s in result.samples),
        )

    _emit_run_receipt(result, ledger_path)
    logger.info("%s complete: collapse=%s", profile.name, result.bitstring)
    return result


def run_batch(
    profiles: Iterable[AlgorithmProfile],
    recorder: Optional[ExperimentRecorder] = None,
    toolchain: Optional[Toolchain] = None,
    config=None,
    ledger_path: Optional[PathLike] = None,
) -> List[RunResult]:
    """
    Run profiles in order.

    A StorageError on one run is logged and its unpersisted result kept;
    the batch continues.
    """
    results = []
    for profile in profiles:
        try:
            results.append(run_profile(profile, recorder, toolchain, config, ledger_path))
        except StorageError as exc:
            results.append(exc.result)
    return results


def _synthesize(profile, toolchain, config, ledger_path):
    design = build_design(profile)
    status, error, output = "skipped", None, ""
    try:
        report = toolchain.synthesize(design, config.workspace_path)
        status, output = report.status, report.output
    except ToolchainFailure as exc:
        status, error, output = "failed", str(exc), exc.output
        logger.error("toolchain %s failed for %s: %s", toolchain.name, profile.name, exc)
    if output:
        logger.info("toolchain output for %s:\n%s", profile.name, output)

    receipt = emit_receipt("toolchain_receipt", {
        "algorithm": profile.name,
        "toolchain": toolchain.name,
        "top_module": design.top_module,
        "status": status,
        "error": error,
    })
    append_receipt(receipt, ledger_path)
    return status, error


def _emit_run_receipt(result: RunResult, ledger_path) -> dict:
    receipt = emit_receipt("run_receipt", {
        "run_id": result.run_id,
        "persisted": result.persisted,
        "profile": result.profile.to_dict(),
        "metrics": result.metrics.to_dict(),
        "measurement": result.bitstring,
        "toolchain_status": result.toolchain_status,
        "samples_root": merkle([s.to_dict() for s in result.samples]),
    })
    append_receipt(receipt, ledger_path)
    return receipt
