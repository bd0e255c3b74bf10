from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from conftest import BrokenLastByteSHA3, ReferenceSHA3, rsp_block
from hashkat import registry
from hashkat_cli import main as cli_main
from hashkat_cli.runners import common as runners_common


class ConstantTimeDummy(ReferenceSHA3):
    name = "dummy-sha3"


class ReturnsNone(ReferenceSHA3):
    name = "none-sha3"

    def hash(self, data: bytes):
        return None


class RaisesOnHash(ReferenceSHA3):
    name = "raising-sha3"

    def hash(self, data: bytes) -> bytes:
        raise RuntimeError("primitive exploded")


class FailsToConstruct(ReferenceSHA3):
    name = "unbuildable-sha3"

    def __init__(self) -> None:
        raise RuntimeError("library handle unavailable")


@pytest.fixture
def dummy_registry(monkeypatch: pytest.MonkeyPatch):
    original_items = dict(registry._items)  # type: ignore[attr-defined]
    registry._items.clear()  # type: ignore[attr-defined]
    registry._items.update(  # type: ignore[attr-defined]
        {
            "dummy-sha3": ConstantTimeDummy,
            "broken-sha3": BrokenLastByteSHA3,
            "none-sha3": ReturnsNone,
            "raising-sha3": RaisesOnHash,
            "unbuildable-sha3": FailsToConstruct,
        }
    )
    monkeypatch.setattr(cli_main, "_load_adapters", lambda: None)
    monkeypatch.delenv("HASHKAT_ADAPTER", raising=False)
    runners_common.reset_adapter_cache()
    try:
        yield
    finally:
        registry._items.clear()  # type: ignore[attr-defined]
        registry._items.update(original_items)  # type: ignore[attr-defined]
        runners_common.reset_adapter_cache()


@pytest.fixture
def cli_runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def corpus(write_corpus) -> Path:
    return write_corpus(rsp_block(b"") + rsp_block(b"abc") + rsp_block(b"\x01" * 40), name="ShortMsg.rsp")


def test_cli_list_and_demo_commands(dummy_registry, cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli_main.app, ["list-adapters"])
    assert result.exit_code == 0
    assert "- dummy-sha3" in result.output
    assert "- broken-sha3" in result.output

    demo = cli_runner.invoke(cli_main.app, ["demo", "dummy-sha3"])
    assert demo.exit_code == 0
    assert "a7ffc6f8bf1ed76651c14756a061d662f580ff4de43b49fa82d80a4b80f8434a" in demo.output

    missing = cli_runner.invoke(cli_main.app, ["demo", "nope"])
    assert missing.exit_code == 1


def test_validate_success_exit_zero(dummy_registry, cli_runner: CliRunner, corpus: Path) -> None:
    result = cli_runner.invoke(cli_main.app, ["validate", str(corpus), "--adapter", "dummy-sha3"])
    assert result.exit_code == 0, result.output
    assert "ShortMsg: 3 passed, 0 failed" in result.output
    assert "SUCCESS: All 3 test vectors passed" in result.output


def test_validate_failure_exit_one(dummy_registry, cli_runner: CliRunner, corpus: Path) -> None:
    result = cli_runner.invoke(cli_main.app, ["validate", str(corpus), "-a", "broken-sha3"])
    assert result.exit_code == 1
    assert "FAIL: ShortMsg Vector 2 (Len=24)" in result.output
    assert "Input:    616263" in result.output
    assert "FAILURE: 2 test vectors failed" in result.output


def test_validate_corrupt_corpus_exit_one(dummy_registry, cli_runner: CliRunner, write_corpus) -> None:
    bad = write_corpus("Len = 16\nMsg = ab\nMD = " + "00" * 32 + "\n", name="Bad.rsp")
    result = cli_runner.invoke(cli_main.app, ["validate", str(bad), "-a", "dummy-sha3"])
    assert result.exit_code == 1
    assert "ERROR" in result.output
    assert "record 1" in result.output


def test_validate_malformed_adapter_result_exit_one(dummy_registry, cli_runner: CliRunner, corpus: Path) -> None:
    result = cli_runner.invoke(cli_main.app, ["validate", str(corpus), "-a", "none-sha3"])
    assert result.exit_code == 1
    assert not isinstance(result.exception, TypeError)
    assert "ERROR: none-sha3 returned NoneType" in result.output


def test_validate_adapter_construction_failure_exit_one(
    dummy_registry, cli_runner: CliRunner, corpus: Path
) -> None:
    result = cli_runner.invoke(cli_main.app, ["validate", str(corpus), "-a", "unbuildable-sha3"])
    assert result.exit_code == 1
    assert "library handle unavailable" in result.output


def test_demo_adapter_exception_exit_one(dummy_registry, cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli_main.app, ["demo", "raising-sha3"])
    assert result.exit_code == 1
    assert "ERROR: raising-sha3 failed: primitive exploded" in result.output


def test_validate_missing_file_exit_one(dummy_registry, cli_runner: CliRunner, tmp_path: Path) -> None:
    result = cli_runner.invoke(cli_main.app, ["validate", str(tmp_path / "gone.rsp"), "-a", "dummy-sha3"])
    assert result.exit_code == 1
    assert "gone.rsp" in result.output


def test_validate_defaults_to_env_adapter(
    dummy_registry, cli_runner: CliRunner, corpus: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("HASHKAT_ADAPTER", "broken-sha3")
    result = cli_runner.invoke(cli_main.app, ["validate", str(corpus)])
    assert result.exit_code == 1
    assert "(broken-sha3)" in result.output


def test_validate_exports_evidence(dummy_registry, cli_runner: CliRunner, corpus: Path, tmp_path: Path) -> None:
    out_dir = tmp_path / "evidence"
    result = cli_runner.invoke(
        cli_main.app,
        ["validate", str(corpus), "-a", "dummy-sha3", "--export-dir", str(out_dir)],
    )
    assert result.exit_code == 0, result.output
    assert (out_dir / "validation-status.txt").read_text().strip() == "ACHIEVED"
    summary = json.loads((out_dir / "validation-summary.json").read_text())
    assert summary["totals"] == {"passed": 3, "failed": 0, "total": 3}
    assert summary["adapter"] == "dummy-sha3"


def test_timing_command_passes_for_fake_clock(
    dummy_registry, cli_runner: CliRunner, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    ticks = iter(range(0, 10_000_000, 50))
    monkeypatch.setattr("hashkat.timing.time.perf_counter_ns", lambda: next(ticks))
    result = cli_runner.invoke(
        cli_main.app,
        ["timing", "-a", "dummy-sha3", "--samples", "20", "--input-size", "16", "--export-dir", str(tmp_path)],
    )
    assert result.exit_code == 0, result.output
    assert "Samples: 20, Input size: 16 bytes" in result.output
    assert "PASS" in result.output
    assert (tmp_path / "timing-status.txt").read_text().strip() == "ACHIEVED"


def test_timing_insufficient_samples_exit_one(dummy_registry, cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli_main.app, ["timing", "-a", "dummy-sha3", "--samples", "1"])
    assert result.exit_code == 1
    assert "at least 2 samples" in result.output


def test_run_validation_summary_structure(dummy_registry, corpus: Path) -> None:
    reports = runners_common.run_validation("dummy-sha3", [corpus], progress_every=1)
    assert len(reports) == 1
    assert reports[0].name == "ShortMsg"
    assert reports[0].outcome.passed == 3


def test_default_adapter_prefers_native_then_reference(dummy_registry) -> None:
    assert runners_common.default_adapter_name() == "broken-sha3"
    registry._items["cryptography-sha3-256"] = ConstantTimeDummy  # type: ignore[attr-defined]
    assert runners_common.default_adapter_name() == "cryptography-sha3-256"
    registry._items["native-sha3-256"] = ConstantTimeDummy  # type: ignore[attr-defined]
    assert runners_common.default_adapter_name() == "native-sha3-256"
