from __future__ import annotations
import logging
from pathlib import Path
from typing import List, Optional

import typer

from hashkat import DEFAULT_THRESHOLD, HashKatError, TimingConfig, registry
from hashkat.report import render_timing_report, render_validation_report
from .runners.common import (
    _load_adapters,
    default_adapter_name,
    get_adapter_instance,
    run_timing,
    run_validation,
)
from .runners.evidence import write_timing_evidence, write_validation_evidence

app = typer.Typer(add_completion=False, help="SHA3-256 known-answer and timing validation CLI")


@app.callback()
def _configure(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log progress and diagnostics to stderr."),
) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _resolve_adapter(name: Optional[str]) -> str:
    _load_adapters()
    return name or default_adapter_name()


@app.command("list-adapters")
def list_adapters():
    """List registered hash adapters."""
    _load_adapters()
    for name in registry.list().keys():
        typer.echo(f"- {name}")


@app.command()
def demo(name: str):
    """Hash the empty message and "abc" with the selected adapter."""
    _load_adapters()
    try:
        adapter = get_adapter_instance(name)
        digests = [adapter.hash(b"").hex(), adapter.hash(b"abc").hex()]
    except HashKatError as exc:
        typer.echo(f"ERROR: {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"ERROR: {name} failed: {exc}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"{name}('')    = {digests[0]}")
    typer.echo(f"{name}('abc') = {digests[1]}")


@app.command()
def validate(
    corpora: List[Path] = typer.Argument(..., metavar="CORPUS...", help="NIST-style .rsp vector files."),
    adapter: Optional[str] = typer.Option(None, "--adapter", "-a", help="Registered adapter name."),
    export_dir: Optional[Path] = typer.Option(None, "--export-dir", help="Write CSV/JSON/status evidence here."),
    progress_every: int = typer.Option(25, "--progress-every", min=0, help="Log progress every N vectors (0 disables)."),
) -> None:
    """Run every corpus through the adapter; exit 1 on any failure or corpus error."""
    name = _resolve_adapter(adapter)
    try:
        reports = run_validation(name, corpora, progress_every=progress_every)
    except HashKatError as exc:
        typer.echo(f"ERROR: {exc}", err=True)
        raise typer.Exit(code=1)
    for line in render_validation_report(reports, adapter=name):
        typer.echo(line)
    if export_dir is not None:
        for path in write_validation_evidence(reports, export_dir, adapter=name):
            typer.echo(f"  - {path}")
    if any(not r.outcome.ok for r in reports):
        raise typer.Exit(code=1)


@app.command()
def timing(
    adapter: Optional[str] = typer.Option(None, "--adapter", "-a", help="Registered adapter name."),
    samples: Optional[int] = typer.Option(None, "--samples", "-n", help="Calls per input class [default: 1000]."),
    input_size: Optional[int] = typer.Option(None, "--input-size", help="Input length in bytes [default: 64]."),
    threshold: float = typer.Option(DEFAULT_THRESHOLD, "--threshold", help="Fail when |t| reaches this value."),
    export_dir: Optional[Path] = typer.Option(None, "--export-dir", help="Write CSV/JSON/status evidence here."),
    export_samples: bool = typer.Option(False, "--export-samples", help="Include raw samples in the JSON evidence."),
) -> None:
    """dudect-style two-class timing screen; exit code mirrors the verdict."""
    name = _resolve_adapter(adapter)
    try:
        config = TimingConfig.from_env(samples=samples, input_size=input_size)
        raw, verdict = run_timing(name, config, threshold)
    except (HashKatError, ValueError) as exc:
        typer.echo(f"ERROR: {exc}", err=True)
        raise typer.Exit(code=1)
    for line in render_timing_report(verdict, config):
        typer.echo(line)
    if export_dir is not None:
        written = write_timing_evidence(
            verdict,
            config,
            export_dir,
            adapter=name,
            samples=raw if export_samples else None,
        )
        for path in written:
            typer.echo(f"  - {path}")
    if not verdict.passed:
        raise typer.Exit(code=1)


def app_main():
    app()

if __name__ == "__main__":
    app_main()
