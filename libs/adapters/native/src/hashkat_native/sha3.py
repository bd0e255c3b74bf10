from __future__ import annotations

from hashkat import DIGEST_SIZE, registry

from . import _core


@registry.register("native-sha3-256")
class NativeSHA3_256:
    """SHA3-256 from the compiled one-shot C library under test."""
    name = "native-sha3-256"
    digest_size = DIGEST_SIZE

    def __init__(self) -> None:
        self.algorithm = _core.SYMBOL

    def hash(self, data: bytes) -> bytes:
        return _core.digest(data)
