from __future__ import annotations
"""Shared helpers for CLI commands.

Includes adapter bootstrap, adapter selection, host environment metadata and
the validation/timing orchestration used by `hashkat validate` and
`hashkat timing`.
"""

import copy
import datetime
import os
import pathlib
import platform
import subprocess
import sys
from typing import Any, Dict, List, Optional, Sequence

from hashkat import (
    AdapterError,
    BatchValidator,
    CorpusReport,
    LeakageVerdict,
    TimingConfig,
    TimingSampler,
    TimingSamples,
    analyze,
    registry,
    validate_corpora,
)

_HERE = pathlib.Path(__file__).resolve()
_NATIVE_WARNED = False

try:
    _PROJECT_ROOT = next(p for p in _HERE.parents if (p / "libs").exists())
except StopIteration:
    _PROJECT_ROOT = _HERE.parents[0]

_ADAPTER_PATHS = {
    "hashkat_reference": _PROJECT_ROOT / "libs" / "adapters" / "reference" / "src",
    "hashkat_native": _PROJECT_ROOT / "libs" / "adapters" / "native" / "src",
}

PREFERRED_ADAPTERS = ("native-sha3-256", "cryptography-sha3-256")

_ENVIRONMENT_CACHE: Dict[str, Any] | None = None
_ADAPTER_INSTANCE_CACHE: Dict[str, Any] = {}


def _detect_cpu_model() -> str | None:
    system = platform.system()
    try:
        if system == "Darwin":
            out = subprocess.check_output(
                ["sysctl", "-n", "machdep.cpu.brand_string"],
                stderr=subprocess.DEVNULL,
                text=True,
            ).strip()
            if out:
                return out
        elif system == "Linux":
            cpuinfo = pathlib.Path("/proc/cpuinfo")
            if cpuinfo.exists():
                for line in cpuinfo.read_text(encoding="utf-8", errors="ignore").splitlines():
                    if line.lower().startswith("model name"):
                        return line.split(":", 1)[1].strip()
        elif system == "Windows":
            val = os.environ.get("PROCESSOR_IDENTIFIER")
            if val:
                return val
    except (OSError, subprocess.SubprocessError):
        pass
    uname = platform.uname()
    for val in (getattr(uname, "processor", ""), getattr(uname, "machine", "")):
        if val:
            return val
    return None


def collect_environment_meta() -> Dict[str, Any]:
    global _ENVIRONMENT_CACHE
    if _ENVIRONMENT_CACHE is None:
        info: Dict[str, Any] = {}
        cpu_model = _detect_cpu_model()
        if cpu_model:
            info["cpu_model"] = cpu_model
        info["os"] = platform.platform(aliased=True)
        info["machine"] = platform.machine()
        info["python"] = platform.python_version()
        native_lib = os.getenv("HASHKAT_NATIVE_LIB")
        if native_lib:
            info["native_lib"] = native_lib
        _ENVIRONMENT_CACHE = info
    meta = copy.deepcopy(_ENVIRONMENT_CACHE)
    meta["timestamp"] = datetime.datetime.now(datetime.timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    return meta


def _load_adapters() -> None:
    import importlib, importlib.util, traceback
    global _NATIVE_WARNED
    for mod in ("hashkat_reference", "hashkat_native"):
        spec = importlib.util.find_spec(mod)
        if spec is None:
            candidate = _ADAPTER_PATHS.get(mod)
            if candidate and candidate.exists():
                if str(candidate) not in sys.path:
                    sys.path.append(str(candidate))
                spec = importlib.util.find_spec(mod)
        if spec is None:
            continue
        try:
            module = importlib.import_module(mod)
        except Exception as e:
            print(f"[adapter import error] {mod}: {e}", file=sys.stderr)
            traceback.print_exc()
        else:
            if mod == "hashkat_native" and not getattr(module, "_available", False):
                if not _NATIVE_WARNED:
                    print(
                        "[adapter optional] nano_sha3_256 shared library not found. Build native/ "
                        "or set HASHKAT_NATIVE_LIB to the compiled library path.",
                        file=sys.stderr,
                    )
                    _NATIVE_WARNED = True


def default_adapter_name() -> str:
    env_value = os.getenv("HASHKAT_ADAPTER")
    if env_value:
        return env_value
    available = registry.list()
    for name in PREFERRED_ADAPTERS:
        if name in available:
            return name
    if available:
        return sorted(available)[0]
    return PREFERRED_ADAPTERS[-1]


def get_adapter_instance(name: str):
    adapter = _ADAPTER_INSTANCE_CACHE.get(name)
    if adapter is not None:
        return adapter
    cls = registry.get(name)
    try:
        adapter = cls()
    except Exception as exc:
        raise AdapterError(f"{name}: adapter construction failed: {exc}") from exc
    _ADAPTER_INSTANCE_CACHE[name] = adapter
    return adapter


def reset_adapter_cache(name: Optional[str] = None) -> None:
    """Drop cached adapter instances so env-driven overrides take effect."""
    if name is None:
        _ADAPTER_INSTANCE_CACHE.clear()
        return
    _ADAPTER_INSTANCE_CACHE.pop(name, None)


def run_validation(
    adapter_name: str,
    corpora: Sequence[str | pathlib.Path],
    *,
    progress_every: int = 25,
) -> List[CorpusReport]:
    adapter = get_adapter_instance(adapter_name)
    validator = BatchValidator(adapter, progress_every=progress_every)
    return validate_corpora(list(corpora), validator)


def run_timing(
    adapter_name: str,
    config: TimingConfig,
    threshold: float,
) -> tuple[TimingSamples, LeakageVerdict]:
    adapter = get_adapter_instance(adapter_name)
    samples = TimingSampler(adapter, config).collect()
    return samples, analyze(samples, threshold)
