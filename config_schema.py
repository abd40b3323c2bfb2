"""
Simulator Configuration Schema - Validated, Immutable Settings

This module defines SimulatorConfig, the settings object shared by the CLI,
the runner and the snapshot exporter. Configs load from JSON or YAML,
validate against a JSON Schema on load, and are frozen afterwards.

Consumed by:
- qfpga.py (CLI)
- qcore.runner (caps, workspace)
- qcore.export (snapshot limits)

Design Principles:
- Self-validating: Can't create invalid config
- Self-describing: Exports its own schema
- Immutable: Frozen after load, no runtime mutation
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from jsonschema import Draft202012Validator

from qcore.constants import (
    MAX_QUBITS,
    MAX_GATES,
    SNAPSHOT_RUN_LIMIT,
    SNAPSHOT_SAMPLE_LIMIT,
    ADVANTAGE_CAP,
)


__all__ = [
    'SimulatorConfig',
    'CONFIG_ENV_VAR',
    'load',
    'default',
    'from_env',
]

CONFIG_ENV_VAR = "QFPGA_CONFIG"


# =============================================================================
# JSON Schema Definition (Draft 2020-12)
# =============================================================================

_JSON_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "SimulatorConfig",
    "description": "Quantum FPGA simulator configuration",
    "type": "object",
    "properties": {
        "workspace_dir": {"type": "string", "minLength": 1},
        "db_file": {"type": "string", "minLength": 1},
        "log_file": {"type": "string", "minLength": 1},
        "receipts_file": {"type": ["string", "null"]},
        "snapshot_file": {"type": "string", "minLength": 1},
        "toolchain": {"type": "string", "enum": ["none", "yosys"]},
        "yosys_bin": {"type": "string", "minLength": 1},
        "nextpnr_bin": {"type": "string", "minLength": 1},
        "fpga_package": {"type": "string", "minLength": 1},
        "max_qubits": {"type": "integer", "minimum": 1, "maximum": MAX_QUBITS},
        "max_gates": {"type": "integer", "minimum": 1},
        "snapshot_run_limit": {"type": "integer", "minimum": 0, "maximum": SNAPSHOT_RUN_LIMIT},
        "snapshot_sample_limit": {"type": "integer", "minimum": 0, "maximum": SNAPSHOT_SAMPLE_LIMIT},
        "advantage_cap": {"type": "integer", "minimum": 1},
        "custom_min_qubits": {"type": "integer", "minimum": 1},
        "custom_max_qubits": {"type": "integer", "minimum": 1, "maximum": MAX_QUBITS},
        "custom_min_gates": {"type": "integer", "minimum": 1},
        "benchmark_seed": {"type": ["integer", "null"]},
        "log_level": {
            "type": "string",
            "enum": ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        },
    },
    "additionalProperties": False,
}

# Module-level compiled validator
Draft202012Validator.check_schema(_JSON_SCHEMA)
_VALIDATOR = Draft202012Validator(_JSON_SCHEMA)


# =============================================================================
# SimulatorConfig
# =============================================================================

@dataclass(frozen=True)
class SimulatorConfig:
    """
    Simulator settings.

    Attributes:
        workspace_dir: Root folder for database, logs, documents and exports
        db_file: SQLite file, relative to workspace_dir
        log_file: Text log, relative to workspace_dir
        receipts_file: Receipts JSONL ledger (None disables the ledger)
        snapshot_file: Dashboard JSON export, relative to workspace_dir
        toolchain: "none" or "yosys"
        yosys_bin / nextpnr_bin: Toolchain executables
        fpga_package: nextpnr package name
        max_qubits: Qubit cap (at most 100)
        max_gates: Gate cap
        snapshot_run_limit / snapshot_sample_limit: Snapshot bounds
        advantage_cap: Cap on the estimated quantum advantage
        custom_min_qubits / custom_max_qubits / custom_min_gates: Bounds for
            user-entered custom profiles
        benchmark_seed: Seed for the randomized benchmark (None: fresh)
        log_level: Root log level for the CLI
    """
    workspace_dir: str = "quantum_fpga"
    db_file: str = "quantum_data.db"
    log_file: str = "quantum_log.txt"
    receipts_file: Optional[str] = "receipts.jsonl"
    snapshot_file: str = "results/quantum_data.json"
    toolchain: str = "none"
    yosys_bin: str = "yosys"
    nextpnr_bin: str = "nextpnr-ice40"
    fpga_package: str = "tq144"
    max_qubits: int = MAX_QUBITS
    max_gates: int = MAX_GATES
    snapshot_run_limit: int = SNAPSHOT_RUN_LIMIT
    snapshot_sample_limit: int = SNAPSHOT_SAMPLE_LIMIT
    advantage_cap: int = ADVANTAGE_CAP
    custom_min_qubits: int = 2
    custom_max_qubits: int = 10
    custom_min_gates: int = 4
    benchmark_seed: Optional[int] = None
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        errors = _validate(asdict(self))
        if errors:
            raise ValueError("Invalid simulator config:\n  " + "\n  ".join(errors))

    # -------------------------------------------------------------------------
    # Derived paths
    # -------------------------------------------------------------------------

    @property
    def workspace_path(self) -> Path:
        return Path(self.workspace_dir)

    @property
    def db_path(self) -> Path:
        return self.workspace_path / self.db_file

    @property
    def log_path(self) -> Path:
        return self.workspace_path / self.log_file

    @property
    def receipts_path(self) -> Optional[Path]:
        if self.receipts_file is None:
            return None
        return self.workspace_path / self.receipts_file

    @property
    def snapshot_path(self) -> Path:
        return self.workspace_path / self.snapshot_file

    # -------------------------------------------------------------------------
    # Schema / serialization
    # -------------------------------------------------------------------------

    @property
    def schema(self) -> Dict[str, Any]:
        """JSON Schema dict for external validation."""
        return json.loads(json.dumps(_JSON_SCHEMA))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self, pretty: bool = False) -> str:
        if pretty:
            return json.dumps(self.to_dict(), indent=2, sort_keys=True)
        return json.dumps(self.to_dict(), sort_keys=True, separators=(',', ':'))

    def save(self, path: str) -> None:
        """Write config to JSON or YAML, by file suffix."""
        path_obj = Path(path)
        path_obj.parent.mkdir(parents=True, exist_ok=True)
        if path_obj.suffix in ('.yaml', '.yml'):
            path_obj.write_text(yaml.safe_dump(self.to_dict(), sort_keys=True))
        else:
            path_obj.write_text(self.to_json(pretty=True))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> SimulatorConfig:
        """
        Build a config from a mapping, validating every key.

        Raises:
            ValueError: Listing all schema violations
        """
        if not isinstance(data, dict):
            raise ValueError(f"Config must be a mapping, got {type(data).__name__}")
        errors = _validate(data)
        if errors:
            raise ValueError("Invalid simulator config:\n  " + "\n  ".join(errors))
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


# =============================================================================
# Module-Level Functions
# =============================================================================

def load(path: str) -> SimulatorConfig:
    """
    Load config from JSON/YAML file.

    Args:
        path: Path to config file

    Returns:
        Validated, frozen SimulatorConfig

    Raises:
        FileNotFoundError: If path doesn't exist
        ValueError: If validation fails
    """
    path_obj = Path(path)

    if not path_obj.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    content = path_obj.read_text()

    if path_obj.suffix in ('.yaml', '.yml'):
        data = yaml.safe_load(content) or {}
    else:
        data = json.loads(content)

    return SimulatorConfig.from_dict(data)


def default() -> SimulatorConfig:
    """Config with every default."""
    return SimulatorConfig()


def from_env(path: Optional[str] = None) -> SimulatorConfig:
    """Load path, else the file named by $QFPGA_CONFIG, else defaults."""
    path = path or os.environ.get(CONFIG_ENV_VAR)
    if path:
        return load(path)
    return default()


# =============================================================================
# Internal Validation
# =============================================================================

def _validate(data: Dict[str, Any]) -> List[str]:
    """
    Validate config data.

    Rules:
    - JSON Schema (types, enums, ranges, no unknown keys)
    - custom_min_qubits <= custom_max_qubits
    """
    errors = [
        f"{'.'.join(str(p) for p in err.path) or '<root>'}: {err.message}"
        for err in sorted(_VALIDATOR.iter_errors(data), key=lambda e: list(e.path))
    ]

    lo = data.get("custom_min_qubits", 2)
    hi = data.get("custom_max_qubits", 10)
    if isinstance(lo, int) and isinstance(hi, int) and lo > hi:
        errors.append(f"custom_min_qubits ({lo}) exceeds custom_max_qubits ({hi})")

    return errors
