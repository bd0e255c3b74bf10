from __future__ import annotations
"""Parser for NIST CAVS style hash response files (``*.rsp``).

A vector spans up to three lines, always in this order::

    Len = 16
    Msg = 0c8a
    MD = <64 hex chars>

Blank lines, ``#`` comments and ``[L = 256]`` style section headers are skipped.
Any structural problem aborts the whole file; a corpus that is partly corrupt
cannot be trusted for the records that did parse.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Iterable, Iterator, List, Optional, Union

from . import hexcodec
from .errors import (
    CorpusIOError,
    DigestLengthError,
    FormatError,
    LengthMismatchError,
)
from .interfaces import DIGEST_SIZE

log = logging.getLogger(__name__)

LEN_MARKER = "Len = "
MSG_MARKER = "Msg = "
MD_MARKER = "MD = "


@dataclass(frozen=True)
class TestRecord:
    """One known-answer vector. ``message`` is b"" when ``length_bits == 0``."""
    __test__ = False  # not a pytest class

    length_bits: int
    message: bytes
    expected_digest: bytes

    @property
    def byte_length(self) -> int:
        return self.length_bits // 8


class _PendingRecord:
    __slots__ = ("index", "line_no", "length_bits", "message", "digest")

    def __init__(self, index: int, line_no: int, length_bits: int) -> None:
        self.index = index
        self.line_no = line_no
        self.length_bits = length_bits
        self.message: Optional[bytes] = None
        self.digest: Optional[bytes] = None


class VectorCorpusParser:
    """Streams a corpus into TestRecords.

    The in-progress record is parser-local state: it is created by a ``Len``
    line, filled by ``Msg``/``MD`` and finalized by the next ``Len`` line or by
    end of input.
    """

    def __init__(self, source: Optional[str] = None) -> None:
        self.source = source
        self._current: Optional[_PendingRecord] = None
        self._count = 0
        self._line_no = 0

    def parse(self, stream: Iterable[Union[str, bytes]]) -> List[TestRecord]:
        return list(self.iter_records(stream))

    def iter_records(self, stream: Iterable[Union[str, bytes]]) -> Iterator[TestRecord]:
        """Yield records in file order. Byte lines are decoded as UTF-8 one at a time."""
        self._current = None
        self._count = 0
        self._line_no = 0
        try:
            for raw in stream:
                self._line_no += 1
                if isinstance(raw, bytes):
                    raw = raw.decode("utf-8")
                line = raw.rstrip("\n").rstrip("\r")
                if not line or line[0] in "#[":
                    continue
                if line.startswith(LEN_MARKER):
                    if self._current is not None:
                        yield self._finalize()
                    self._start(line[len(LEN_MARKER):])
                elif line.startswith(MSG_MARKER):
                    self._on_message(line[len(MSG_MARKER):])
                elif line.startswith(MD_MARKER):
                    self._on_digest(line[len(MD_MARKER):])
                else:
                    log.debug("%s:%d: skipping unrecognised line %r", self.source or "<stream>", self._line_no, line[:40])
        except UnicodeDecodeError as exc:
            raise self._error(FormatError, f"undecodable text ({exc.reason})", field=None) from exc
        if self._current is not None:
            yield self._finalize()

    def _error(self, kind, message: str, *, field: Optional[str]):
        return kind(
            message,
            source=self.source,
            record_index=self._current.index if self._current is not None else None,
            field=field,
            line_no=self._line_no,
        )

    def _start(self, value: str) -> None:
        self._count += 1
        self._current = _PendingRecord(self._count, self._line_no, 0)
        text = value.strip()
        if not (text.isascii() and text.isdigit()):
            raise self._error(FormatError, f"Len must be a non-negative decimal integer, got {text!r}", field="Len")
        self._current.length_bits = int(text)

    def _require_current(self, field: str) -> _PendingRecord:
        if self._current is None:
            raise self._error(FormatError, f"{field} line before any Len line", field=field)
        return self._current

    def _decode(self, text: str, field: str) -> bytes:
        try:
            return hexcodec.decode(text.strip())
        except FormatError as exc:
            raise self._error(FormatError, exc.reason, field=field) from exc

    def _on_message(self, value: str) -> None:
        current = self._require_current("Msg")
        if current.message is not None:
            raise self._error(FormatError, "duplicate Msg line", field="Msg")
        if current.length_bits == 0:
            # Len = 0 vectors carry a placeholder payload (usually "00")
            current.message = b""
            return
        message = self._decode(value, "Msg")
        if len(message) * 8 != current.length_bits:
            raise self._error(
                LengthMismatchError,
                f"expected {current.length_bits} bits ({current.length_bits // 8} bytes), got {len(message)} bytes",
                field="Msg",
            )
        current.message = message

    def _on_digest(self, value: str) -> None:
        current = self._require_current("MD")
        if current.digest is not None:
            raise self._error(FormatError, "duplicate MD line", field="MD")
        digest = self._decode(value, "MD")
        if len(digest) != DIGEST_SIZE:
            raise self._error(
                DigestLengthError,
                f"expected {DIGEST_SIZE} bytes, got {len(digest)}",
                field="MD",
            )
        current.digest = digest

    def _finalize(self) -> TestRecord:
        current = self._current
        assert current is not None
        if current.digest is None:
            raise self._error(FormatError, f"record starting at line {current.line_no} has no MD line", field="MD")
        message = current.message
        if message is None:
            if current.length_bits != 0:
                raise self._error(
                    LengthMismatchError,
                    f"Len = {current.length_bits} but no Msg line",
                    field="Msg",
                )
            message = b""
        self._current = None
        return TestRecord(current.length_bits, message, current.digest)


def parse_stream(
    stream: Union[IO[str], IO[bytes], Iterable[Union[str, bytes]]],
    source: Optional[str] = None,
) -> List[TestRecord]:
    return VectorCorpusParser(source).parse(stream)


def parse_file(path: Union[str, Path]) -> List[TestRecord]:
    """Read every record from ``path``; unreadable files raise CorpusIOError."""
    p = Path(path)
    try:
        handle = p.open("rb")
    except OSError as exc:
        raise CorpusIOError(f"cannot open test vector file ({exc.strerror or exc})", source=str(p)) from exc
    with handle:
        try:
            records = VectorCorpusParser(str(p)).parse(handle)
        except OSError as exc:
            raise CorpusIOError(f"read failed ({exc.strerror or exc})", source=str(p)) from exc
    log.info("%s: parsed %d vectors", p.name, len(records))
    return records
