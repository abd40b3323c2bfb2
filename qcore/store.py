"""
qcore/store.py - Store Capability

Two logical tables, run history and per-run qubit samples, behind one
interface. The caller opens a store at process start, passes it to the
recorder and exporter, and closes it at shutdown.

Writes are serialized: run ids are assigned inside a single locked
transaction, so they stay strictly increasing under concurrent callers.
"""

import logging
import sqlite3
import threading
from dataclasses import replace
from pathlib import Path
from typing import List, Sequence, Tuple, Union

from .errors import StorageError
from .types_result import QubitSample, RunRecord, StoredSample

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS quantum_results (
    run_id INTEGER PRIMARY KEY AUTOINCREMENT,
    timestamp TEXT NOT NULL,
    qubit_count INTEGER NOT NULL,
    gate_count INTEGER NOT NULL,
    fidelity REAL NOT NULL,
    decoherence_time REAL NOT NULL,
    frequency_mhz REAL NOT NULL,
    resource_units INTEGER NOT NULL,
    algorithm_name TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS quantum_states (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    run_id INTEGER NOT NULL REFERENCES quantum_results(run_id),
    qubit_index INTEGER NOT NULL,
    amplitude_real REAL NOT NULL,
    amplitude_imag REAL NOT NULL,
    probability REAL NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_quantum_states_run
    ON quantum_states (run_id, qubit_index);
"""


class Store:
    """Interface for run persistence."""

    def append_run(self, record: RunRecord, samples: Sequence[QubitSample]) -> int:
        """Persist one run and its samples atomically; return the new run id."""
        raise NotImplementedError

    def recent_runs(self, limit: int) -> List[RunRecord]:
        """Up to limit run records, newest first."""
        raise NotImplementedError

    def recent_samples(self, limit: int) -> List[StoredSample]:
        """Up to limit samples, by descending run id then ascending qubit index."""
        raise NotImplementedError

    def count_runs(self) -> int:
        raise NotImplementedError

    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


# =============================================================================
# SQLITE
# =============================================================================

class SqliteStore(Store):
    """Relational store on a single SQLite file."""

    def __init__(self, path: Union[str, Path]):
        self.path = str(path)
        self._lock = threading.Lock()
        try:
            self._conn = sqlite3.connect(self.path, check_same_thread=False)
            self._conn.executescript(SCHEMA_SQL)
            self._conn.commit()
        except sqlite3.Error as exc:
            raise StorageError(f"cannot open store at {self.path}: {exc}") from exc
        self._closed = False
        logger.debug("opened store %s", self.path)

    def append_run(self, record: RunRecord, samples: Sequence[QubitSample]) -> int:
        with self._lock:
            self._check_open()
            try:
                with self._conn:
                    cursor = self._conn.execute(
                        "INSERT INTO quantum_results (timestamp, qubit_count, gate_count, "
                        "fidelity, decoherence_time, frequency_mhz, resource_units, "
                        "algorithm_name) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                        (
                            record.timestamp, record.qubit_count, record.gate_count,
                            record.fidelity, record.decoherence_time, record.frequency_mhz,
                            record.resource_units, record.algorithm_name,
                        ),
                    )
                    run_id = cursor.lastrowid
                    self._conn.executemany(
                        "INSERT INTO quantum_states (run_id, qubit_index, amplitude_real, "
                        "amplitude_imag, probability) VALUES (?, ?, ?, ?, ?)",
                        [
                            (run_id, s.qubit_index, s.amplitude_real,
                             s.amplitude_imag, s.probability)
                            for s in samples
                        ],
                    )
            except sqlite3.Error as exc:
                raise StorageError(f"append to {self.path} failed: {exc}") from exc
        return run_id

    def recent_runs(self, limit: int) -> List[RunRecord]:
        rows = self._query(
            "SELECT run_id, timestamp, qubit_count, gate_count, fidelity, "
            "decoherence_time, frequency_mhz, resource_units, algorithm_name "
            "FROM quantum_results ORDER BY run_id DESC LIMIT ?",
            (limit,),
        )
        return [RunRecord(*row) for row in rows]

    def recent_samples(self, limit: int) -> List[StoredSample]:
        rows = self._query(
            "SELECT s.run_id, s.qubit_index, s.amplitude_real, s.amplitude_imag, "
            "s.probability, r.algorithm_name "
            "FROM quantum_states s JOIN quantum_results r ON s.run_id = r.run_id "
            "ORDER BY s.run_id DESC, s.qubit_index ASC LIMIT ?",
            (limit,),
        )
        return [StoredSample(QubitSample(*row[:5]), row[5]) for row in rows]

    def count_runs(self) -> int:
        return self._query("SELECT COUNT(*) FROM quantum_results", ())[0][0]

    def close(self) -> None:
        with self._lock:
            if not self._closed:
                self._conn.close()
                self._closed = True

    def _query(self, sql: str, params: Tuple) -> list:
        with self._lock:
            self._check_open()
            try:
                return self._conn.execute(sql, params).fetchall()
            except sqlite3.Error as exc:
                raise StorageError(f"query on {self.path} failed: {exc}") from exc

    def _check_open(self) -> None:
        if self._closed:
            raise StorageError(f"store {self.path} is closed")


# =============================================================================
# IN-MEMORY
# =============================================================================

class MemoryStore(Store):
    """Process-local store, same ordering rules as SqliteStore."""

    def __init__(self):
        self._lock = threading.Lock()
        self._runs: List[RunRecord] = []
        self._samples: List[QubitSample] = []
        self._next_id = 1
        self._closed = False

    def append_run(self, record: RunRecord, samples: Sequence[QubitSample]) -> int:
        with self._lock:
            if self._closed:
                raise StorageError("memory store is closed")
            run_id = self._next_id
            self._next_id += 1
            self._runs.append(replace(record, run_id=run_id))
            self._samples.extend(replace(s, run_id=run_id) for s in samples)
        return run_id

    def recent_runs(self, limit: int) -> List[RunRecord]:
        with self._lock:
            return list(reversed(self._runs))[:limit]

    def recent_samples(self, limit: int) -> List[StoredSample]:
        with self._lock:
            names = {r.run_id: r.algorithm_name for r in self._runs}
            ordered = sorted(self._samples, key=lambda s: (-s.run_id, s.qubit_index))
            return [StoredSample(s, names[s.run_id]) for s in ordered[:limit]]

    def count_runs(self) -> int:
        with self._lock:
            return len(self._runs)

    def close(self) -> None:
        with self._lock:
            self._closed = True
