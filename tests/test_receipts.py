"""
tests/test_receipts.py - Receipt Foundation Tests
"""

import json

from receipts import append_receipt, dual_hash, emit_receipt, merkle


class TestDualHash:

    def test_format(self):
        h = dual_hash("quantum")
        parts = h.split(":")
        assert len(parts) == 2
        for part in parts:
            assert len(part) == 64, f"Hash part should be 64 chars, got {len(part)}"
            assert all(c in "0123456789abcdef" for c in part)

    def test_str_and_bytes_agree(self):
        assert dual_hash("abc") == dual_hash(b"abc")

    def test_known_sha256(self):
        assert dual_hash(b"").startswith(
            "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855:"
        )


class TestEmitReceipt:

    def test_fields(self):
        r = emit_receipt("run_receipt", {"run_id": 3})
        assert r["receipt_type"] == "run_receipt"
        assert r["tenant_id"] == "quantum_fpga"
        assert r["run_id"] == 3
        assert "ts" in r
        assert r["payload_hash"] == dual_hash(json.dumps({"run_id": 3}, sort_keys=True))

    def test_tenant_override(self):
        assert emit_receipt("x", {"tenant_id": "lab"})["tenant_id"] == "lab"


class TestLedger:

    def test_append_lines(self, tmp_path):
        path = tmp_path / "sub" / "receipts.jsonl"
        append_receipt(emit_receipt("a", {}), path)
        append_receipt(emit_receipt("b", {}), path)
        types = [json.loads(line)["receipt_type"] for line in path.read_text().splitlines()]
        assert types == ["a", "b"]

    def test_lines_are_compact(self, tmp_path):
        path = tmp_path / "receipts.jsonl"
        append_receipt(emit_receipt("a", {"run_id": 1}), path)
        assert ", " not in path.read_text()
        assert '"run_id":1' in path.read_text()

    def test_none_path_is_noop(self, tmp_path):
        append_receipt(emit_receipt("a", {}), None)
        assert list(tmp_path.iterdir()) == []


class TestMerkle:

    def test_deterministic(self):
        items = [{"q": i} for i in range(5)]
        assert merkle(items) == merkle(list(items))

    def test_order_sensitive(self):
        assert merkle([{"q": 0}, {"q": 1}]) != merkle([{"q": 1}, {"q": 0}])

    def test_odd_level_repeats_last(self):
        leaves = [dual_hash(json.dumps({"q": i}, sort_keys=True)) for i in range(3)]
        left = dual_hash(leaves[0] + leaves[1])
        right = dual_hash(leaves[2] + leaves[2])
        assert merkle([{"q": i} for i in range(3)]) == dual_hash(left + right)

    def test_single_item(self):
        assert merkle([{"q": 0}]) == dual_hash(json.dumps({"q": 0}, sort_keys=True))

    def test_empty(self):
        assert merkle([]) == dual_hash(b"empty")
