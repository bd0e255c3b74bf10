from __future__ import annotations
"""Human-readable report lines for validation and timing runs."""

from typing import List, Sequence

from .leakage import LeakageVerdict
from .timing import TimingConfig
from .validator import CorpusReport, RunTotals, ValidationOutcome


def render_failures(name: str, outcome: ValidationOutcome) -> List[str]:
    lines: List[str] = []
    for failure in outcome.failures:
        lines.append(f"FAIL: {name} Vector {failure.index} (Len={failure.length_bits})")
        lines.append(f"  Expected: {failure.expected_digest}")
        lines.append(f"  Got:      {failure.computed_digest}")
        if failure.message:
            lines.append(f"  Input:    {failure.message}")
    return lines


def render_validation_report(reports: Sequence[CorpusReport], adapter: str = "") -> List[str]:
    lines: List[str] = []
    title = "SHA3-256 Known-Answer Validation"
    if adapter:
        title += f" ({adapter})"
    lines.append(title)
    lines.append("=" * len(title))
    for report in reports:
        lines.append(f"Running {report.name} validation: {report.outcome.total} vectors")
        lines.extend(render_failures(report.name, report.outcome))
        lines.append(f"  {report.name}: {report.outcome.passed} passed, {report.outcome.failed} failed")
    totals = RunTotals.from_reports(reports)
    lines.append("")
    lines.append("Overall Validation Results:")
    lines.append(f"  Total Passed: {totals.passed}")
    lines.append(f"  Total Failed: {totals.failed}")
    lines.append(f"  Total Tests:  {totals.total}")
    lines.append("")
    if totals.failed:
        lines.append(f"FAILURE: {totals.failed} test vectors failed")
    else:
        lines.append(f"SUCCESS: All {totals.passed} test vectors passed")
    lines.append(
        "Note: state-reuse (Monte Carlo) vectors are not run; the one-shot API is "
        "assumed to use fresh state per call, which this run does not verify."
    )
    return lines


def render_timing_report(verdict: LeakageVerdict, config: TimingConfig) -> List[str]:
    lines = [
        "dudect-style timing analysis",
        f"Samples: {verdict.samples}, Input size: {config.input_size} bytes",
        "",
        "Timing Analysis Results:",
        f"Left class (0x{config.left_fill:02x}):  mean={verdict.mean_left:.2f} ns, std={verdict.std_left:.2f} ns",
        f"Right class (0x{config.right_fill:02x}): mean={verdict.mean_right:.2f} ns, std={verdict.std_right:.2f} ns",
        f"Difference: {verdict.difference:.2f} ns ({verdict.difference_pct:.2f}%)",
        f"T-statistic: {verdict.t_statistic:.5f}",
        "",
        f"max t = {verdict.t_statistic:.5f}, n == {verdict.samples // 1000}K",
    ]
    if verdict.passed:
        lines.append(f"PASS: no timing difference detected (|t| = {verdict.t_statistic:.5f} < {verdict.threshold})")
    else:
        lines.append(f"FAIL: timing variation detected (|t| = {verdict.t_statistic:.5f} >= {verdict.threshold})")
    return lines
