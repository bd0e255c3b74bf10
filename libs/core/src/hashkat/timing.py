from __future__ import annotations
"""dudect-style latency sampling for two fixed input classes.

Class A (left) is measured N times, then class B (right) N times. The passes
are not interleaved, so slow drift in the machine state (frequency scaling,
thermal throttling) lands on one class only. That is a known simplification of
the full dudect protocol, not a guarantee.
"""

import logging
import os
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from .interfaces import HashFunction

log = logging.getLogger(__name__)

DEFAULT_SAMPLES = 1000
DEFAULT_INPUT_SIZE = 64


def _env_int(name: str, default: int) -> int:
    override = os.getenv(name)
    if override:
        try:
            value = int(override)
        except ValueError as exc:
            raise ValueError(f"{name} must be an integer") from exc
        if value < 0:
            raise ValueError(f"{name} must be non-negative")
        return value
    return default


@dataclass(frozen=True)
class TimingConfig:
    samples: int = DEFAULT_SAMPLES
    input_size: int = DEFAULT_INPUT_SIZE
    left_fill: int = 0x00
    right_fill: int = 0xFF

    @classmethod
    def from_env(cls, samples: Optional[int] = None, input_size: Optional[int] = None) -> "TimingConfig":
        """Explicit arguments win over HASHKAT_TIMING_* variables."""
        return cls(
            samples=samples if samples is not None else _env_int("HASHKAT_TIMING_SAMPLES", DEFAULT_SAMPLES),
            input_size=input_size if input_size is not None else _env_int("HASHKAT_TIMING_INPUT_SIZE", DEFAULT_INPUT_SIZE),
        )

    def inputs(self) -> Tuple[bytes, bytes]:
        return bytes([self.left_fill]) * self.input_size, bytes([self.right_fill]) * self.input_size


@dataclass(frozen=True)
class TimingSamples:
    """Raw per-call latencies in nanoseconds, one tuple per input class."""
    left: Tuple[int, ...]
    right: Tuple[int, ...]

    def __post_init__(self) -> None:
        if len(self.left) != len(self.right):
            raise ValueError(f"sample sets differ in size: {len(self.left)} vs {len(self.right)}")

    @classmethod
    def of(cls, left: Sequence[int], right: Sequence[int]) -> "TimingSamples":
        return cls(tuple(int(x) for x in left), tuple(int(x) for x in right))

    @property
    def count(self) -> int:
        return len(self.left)


class TimingSampler:
    def __init__(
        self,
        hash_fn: HashFunction,
        config: Optional[TimingConfig] = None,
        *,
        clock: Optional[Callable[[], int]] = None,
    ) -> None:
        self.hash_fn = hash_fn
        self.config = config or TimingConfig()
        if self.config.samples < 0 or self.config.input_size < 0:
            raise ValueError("samples and input_size must be non-negative")
        self.clock = clock or time.perf_counter_ns

    def _measure(self, data: bytes) -> List[int]:
        fn = self.hash_fn.hash
        clock = self.clock
        times: List[int] = []
        for _ in range(self.config.samples):
            start = clock()
            fn(data)
            end = clock()
            times.append(end - start)
        return times

    def collect(self) -> TimingSamples:
        left_input, right_input = self.config.inputs()
        log.info(
            "Sampling %s: %d samples per class, %d-byte inputs",
            getattr(self.hash_fn, "name", "hash"),
            self.config.samples,
            self.config.input_size,
        )
        left = self._measure(left_input)
        right = self._measure(right_input)
        return TimingSamples(tuple(left), tuple(right))
