"""
tests/test_config.py - Simulator Configuration Tests
"""

import json
from pathlib import Path

import pytest
import yaml

import config_schema
from config_schema import SimulatorConfig


class TestDefaults:

    def test_default_values(self):
        cfg = config_schema.default()
        assert cfg.max_qubits == 100
        assert cfg.toolchain == "none"
        assert cfg.snapshot_run_limit == 50
        assert cfg.snapshot_sample_limit == 100
        assert cfg.db_path == Path("quantum_fpga") / "quantum_data.db"
        assert cfg.snapshot_path == Path("quantum_fpga") / "results" / "quantum_data.json"

    def test_frozen(self):
        cfg = SimulatorConfig()
        with pytest.raises(AttributeError):
            cfg.max_qubits = 5

    def test_receipts_disabled(self):
        assert SimulatorConfig(receipts_file=None).receipts_path is None


class TestValidation:

    def test_qubit_cap_cannot_exceed_100(self):
        with pytest.raises(ValueError):
            SimulatorConfig(max_qubits=101)

    def test_unknown_key(self):
        with pytest.raises(ValueError):
            SimulatorConfig.from_dict({"max_qbits": 10})

    def test_bad_enum(self):
        with pytest.raises(ValueError):
            SimulatorConfig(toolchain="vivado")

    def test_custom_bounds_order(self):
        with pytest.raises(ValueError):
            SimulatorConfig(custom_min_qubits=8, custom_max_qubits=4)

    def test_not_a_mapping(self):
        with pytest.raises(ValueError):
            SimulatorConfig.from_dict(["max_qubits", 10])

    def test_schema_exported(self):
        schema = SimulatorConfig().schema
        assert schema["additionalProperties"] is False
        assert "max_qubits" in schema["properties"]


class TestLoad:

    def test_json(self, tmp_path):
        path = tmp_path / "cfg.json"
        path.write_text(json.dumps({"max_qubits": 50, "toolchain": "yosys"}))
        cfg = config_schema.load(str(path))
        assert cfg.max_qubits == 50
        assert cfg.toolchain == "yosys"

    def test_yaml(self, tmp_path):
        path = tmp_path / "cfg.yaml"
        path.write_text(yaml.safe_dump({"workspace_dir": "ws", "benchmark_seed": 7}))
        cfg = config_schema.load(str(path))
        assert cfg.workspace_path == Path("ws")
        assert cfg.benchmark_seed == 7

    def test_empty_yaml_is_defaults(self, tmp_path):
        path = tmp_path / "cfg.yml"
        path.write_text("")
        assert config_schema.load(str(path)) == SimulatorConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            config_schema.load(str(tmp_path / "nope.json"))

    def test_save_round_trip(self, tmp_path):
        cfg = SimulatorConfig(max_qubits=12, log_level="DEBUG")
        path = tmp_path / "saved.yaml"
        cfg.save(str(path))
        assert config_schema.load(str(path)) == cfg


class TestFromEnv:

    def test_env_var(self, tmp_path, monkeypatch):
        path = tmp_path / "cfg.json"
        path.write_text(json.dumps({"max_gates": 500}))
        monkeypatch.setenv(config_schema.CONFIG_ENV_VAR, str(path))
        assert config_schema.from_env().max_gates == 500

    def test_explicit_path_wins(self, tmp_path, monkeypatch):
        env_path = tmp_path / "env.json"
        env_path.write_text(json.dumps({"max_gates": 500}))
        arg_path = tmp_path / "arg.json"
        arg_path.write_text(json.dumps({"max_gates": 900}))
        monkeypatch.setenv(config_schema.CONFIG_ENV_VAR, str(env_path))
        assert config_schema.from_env(str(arg_path)).max_gates == 900

    def test_no_env(self, monkeypatch):
        monkeypatch.delenv(config_schema.CONFIG_ENV_VAR, raising=False)
        assert config_schema.from_env() == SimulatorConfig()
