"""
tests/conftest.py - Shared fixtures for store, recorder and config.
"""

import pytest

from config_schema import SimulatorConfig
from qcore import ExperimentRecorder, MemoryStore, SqliteStore


@pytest.fixture
def memory_store():
    store = MemoryStore()
    yield store
    store.close()


@pytest.fixture
def sqlite_store(tmp_path):
    store = SqliteStore(tmp_path / "quantum_data.db")
    yield store
    store.close()


@pytest.fixture(params=["memory", "sqlite"])
def store(request, tmp_path):
    """Both store implementations, same contract."""
    if request.param == "memory":
        s = MemoryStore()
    else:
        s = SqliteStore(tmp_path / "quantum_data.db")
    yield s
    s.close()


@pytest.fixture
def recorder(store):
    return ExperimentRecorder(store)


@pytest.fixture
def config(tmp_path):
    return SimulatorConfig(workspace_dir=str(tmp_path / "workspace"))
