from __future__ import annotations
"""Evidence artifacts (CSV rows, status file, JSON summary) for CI archiving."""

import csv
import json
import pathlib
from dataclasses import asdict
from typing import Any, Dict, List, Optional, Sequence

from hashkat import CorpusReport, LeakageVerdict, TimingConfig, TimingSamples
from hashkat.validator import RunTotals

from .common import collect_environment_meta

VALIDATION_HEADERS = ["corpus", "source", "total", "passed", "failed", "status"]
TIMING_HEADERS = [
    "adapter", "samples", "input_size", "mean_left_ns", "mean_right_ns",
    "std_left_ns", "std_right_ns", "t_statistic", "threshold", "status",
]


def _status(ok: bool) -> str:
    return "ACHIEVED" if ok else "FAILED"


def _prepare_dir(directory: str | pathlib.Path) -> pathlib.Path:
    path = pathlib.Path(directory)
    path.mkdir(parents=True, exist_ok=True)
    return path


def _write_json(path: pathlib.Path, data: Dict[str, Any]) -> None:
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def build_validation_payload(reports: Sequence[CorpusReport], adapter: str) -> Dict[str, Any]:
    totals = RunTotals.from_reports(reports)
    return {
        "adapter": adapter,
        "status": _status(totals.failed == 0),
        "totals": {"passed": totals.passed, "failed": totals.failed, "total": totals.total},
        "corpora": [
            {
                "name": r.name,
                "source": r.source,
                "total": r.outcome.total,
                "passed": r.outcome.passed,
                "failed": r.outcome.failed,
                "failures": [asdict(f) for f in r.outcome.failures],
            }
            for r in reports
        ],
        "environment": collect_environment_meta(),
    }


def write_validation_evidence(
    reports: Sequence[CorpusReport],
    directory: str | pathlib.Path,
    *,
    adapter: str = "",
) -> List[pathlib.Path]:
    out_dir = _prepare_dir(directory)
    csv_path = out_dir / "validation-results.csv"
    with csv_path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=VALIDATION_HEADERS)
        writer.writeheader()
        for r in reports:
            writer.writerow({
                "corpus": r.name,
                "source": r.source,
                "total": r.outcome.total,
                "passed": r.outcome.passed,
                "failed": r.outcome.failed,
                "status": "PASSED" if r.outcome.ok else "FAILED",
            })
    payload = build_validation_payload(reports, adapter)
    status_path = out_dir / "validation-status.txt"
    status_path.write_text(payload["status"] + "\n", encoding="utf-8")
    json_path = out_dir / "validation-summary.json"
    _write_json(json_path, payload)
    return [csv_path, status_path, json_path]


def build_timing_payload(
    verdict: LeakageVerdict,
    config: TimingConfig,
    adapter: str,
    samples: Optional[TimingSamples] = None,
) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "adapter": adapter,
        "status": _status(verdict.passed),
        "config": asdict(config),
        "verdict": {
            **asdict(verdict),
            "difference_ns": verdict.difference,
            "difference_pct": verdict.difference_pct,
        },
        "environment": collect_environment_meta(),
    }
    if payload["verdict"]["t_statistic"] == float("inf"):
        # JSON has no Infinity literal
        payload["verdict"]["t_statistic"] = "inf"
    if samples is not None:
        payload["samples"] = {"left": list(samples.left), "right": list(samples.right)}
    return payload


def write_timing_evidence(
    verdict: LeakageVerdict,
    config: TimingConfig,
    directory: str | pathlib.Path,
    *,
    adapter: str = "",
    samples: Optional[TimingSamples] = None,
) -> List[pathlib.Path]:
    out_dir = _prepare_dir(directory)
    csv_path = out_dir / "timing-results.csv"
    with csv_path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=TIMING_HEADERS)
        writer.writeheader()
        writer.writerow({
            "adapter": adapter,
            "samples": verdict.samples,
            "input_size": config.input_size,
            "mean_left_ns": f"{verdict.mean_left:.2f}",
            "mean_right_ns": f"{verdict.mean_right:.2f}",
            "std_left_ns": f"{verdict.std_left:.2f}",
            "std_right_ns": f"{verdict.std_right:.2f}",
            "t_statistic": f"{verdict.t_statistic:.5f}",
            "threshold": verdict.threshold,
            "status": "PASSED" if verdict.passed else "FAILED",
        })
    payload = build_timing_payload(verdict, config, adapter, samples)
    status_path = out_dir / "timing-status.txt"
    status_path.write_text(payload["status"] + "\n", encoding="utf-8")
    json_path = out_dir / "timing-summary.json"
    _write_json(json_path, payload)
    return [csv_path, status_path, json_path]
