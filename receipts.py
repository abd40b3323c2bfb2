"""
receipts.py - Audit Ledger for Simulator Events

Every run, snapshot export and toolchain attempt leaves one receipt in a
JSON-lines ledger. The runner, the exporter and the toolchain step build
receipts through emit_receipt(); nothing else writes to the ledger.

Digests are always dual: SHA256:BLAKE3.
"""

import hashlib
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import blake3

__all__ = [
    "dual_hash",
    "emit_receipt",
    "append_receipt",
    "merkle",
    "StopRule",
]

# =============================================================================
# CONSTANTS
# =============================================================================

DEFAULT_TENANT = "quantum_fpga"
EMPTY_ROOT_SEED = b"empty"


# =============================================================================
# HASHING
# =============================================================================

def dual_hash(data: Union[bytes, str]) -> str:
    """
    SHA256 and BLAKE3 digests of data, joined as "sha256_hex:blake3_hex".

    Strings are UTF-8 encoded first, so dual_hash("x") == dual_hash(b"x").
    """
    raw = data.encode() if isinstance(data, str) else data
    return f"{hashlib.sha256(raw).hexdigest()}:{blake3.blake3(raw).hexdigest()}"


def _canonical(payload: Any) -> str:
    return json.dumps(payload, sort_keys=True)


def merkle(items: List[Any]) -> str:
    """
    Merkle root over JSON-serialisable items, e.g. a run's qubit samples.

    Leaves are dual_hash of each item's sorted-key JSON. An odd level
    repeats its last node. An empty list hashes to a fixed root.
    """
    if not items:
        return dual_hash(EMPTY_ROOT_SEED)
    level = [dual_hash(_canonical(item)) for item in items]
    while len(level) > 1:
        if len(level) % 2:
            level.append(level[-1])
        level = [dual_hash(left + right) for left, right in zip(level[::2], level[1::2])]
    return level[0]


# =============================================================================
# RECEIPTS
# =============================================================================

def emit_receipt(receipt_type: str, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Build a receipt for one simulator event.

    Args:
        receipt_type: run_receipt, snapshot_receipt or toolchain_receipt
        data: Event fields; tenant_id defaults to 'quantum_fpga'

    Returns:
        dict: receipt_type, ts (ISO-8601 UTC), tenant_id and payload_hash,
            followed by the event fields
    """
    return {
        "receipt_type": receipt_type,
        "ts": datetime.now(timezone.utc).isoformat(),
        "tenant_id": data.get("tenant_id", DEFAULT_TENANT),
        "payload_hash": dual_hash(_canonical(data)),
        **data
    }


def append_receipt(receipt: Dict[str, Any], path: Optional[Union[str, Path]]) -> None:
    """Append receipt as one compact JSON line to the ledger. No-op when path is None."""
    if path is None:
        return
    ledger = Path(path)
    ledger.parent.mkdir(parents=True, exist_ok=True)
    with ledger.open("a") as fh:
        fh.write(json.dumps(receipt, separators=(",", ":")) + "\n")


# =============================================================================
# STOPRULE EXCEPTION
# =============================================================================

class StopRule(Exception):
    """Raised when the simulator must halt an operation. Never catch silently."""
    pass
