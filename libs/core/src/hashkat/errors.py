from __future__ import annotations
from typing import Optional

"""Exception hierarchy shared by the parser, validator and timing analysis.

Structural corpus problems are fatal for the file being read. Digest
mismatches are never raised; they are recorded in ValidationOutcome.
"""


class HashKatError(Exception):
    """Base class for every error raised by the harness."""


class CorpusError(HashKatError):
    """A corpus file could not be turned into trustworthy records."""

    def __init__(
        self,
        message: str,
        *,
        source: Optional[str] = None,
        record_index: Optional[int] = None,
        field: Optional[str] = None,
        line_no: Optional[int] = None,
    ) -> None:
        self.reason = message
        self.source = source
        self.record_index = record_index
        self.field = field
        self.line_no = line_no
        super().__init__(self._render())

    def _render(self) -> str:
        parts: list[str] = []
        if self.source:
            parts.append(self.source if self.line_no is None else f"{self.source}:{self.line_no}")
        elif self.line_no is not None:
            parts.append(f"line {self.line_no}")
        if self.record_index is not None:
            parts.append(f"record {self.record_index}")
        if self.field:
            parts.append(self.field)
        parts.append(self.reason)
        return ": ".join(parts)


class CorpusIOError(CorpusError, OSError):
    pass


class FormatError(CorpusError, ValueError):
    """Malformed hex payload or unrecognised corpus structure."""


class LengthMismatchError(CorpusError):
    """Decoded message size disagrees with the record's Len field."""


class DigestLengthError(CorpusError):
    """MD field does not decode to exactly one digest."""


class InsufficientSamplesError(HashKatError, ValueError):
    pass


class AdapterError(HashKatError):
    """The hash primitive under test misbehaved (not a digest mismatch)."""


class UnknownAdapterError(AdapterError, KeyError):
    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message
        return str(self.args[0]) if self.args else ""
