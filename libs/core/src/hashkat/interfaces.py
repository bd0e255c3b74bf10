from __future__ import annotations
from typing import Protocol

"""Primitive-under-test contract used by adapters.

Adapters implement this Protocol and register themselves into the global
registry. The validator, sampler and CLI only ever call `hash`, never the
underlying library directly.
"""

DIGEST_SIZE = 32


class HashFunction(Protocol):
    """One-shot hash with fresh state per call.

    `hash(b"")` must be a valid call. Implementations never keep state between
    calls; the harness relies on that instead of running a state-reuse test.
    """
    name: str
    digest_size: int
    def hash(self, data: bytes) -> bytes: ...
