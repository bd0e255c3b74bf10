from __future__ import annotations
"""Batch known-answer validation of a HashFunction against parsed records.

A digest mismatch is data: it is counted and kept for the report, and the
batch keeps going so one run surfaces every failing vector. Only a broken
adapter (exception, wrong digest size) stops the batch.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple, Union

from . import hexcodec
from .errors import AdapterError
from .interfaces import DIGEST_SIZE, HashFunction
from .vectors import TestRecord, parse_file

log = logging.getLogger(__name__)

DEFAULT_PROGRESS_EVERY = 25


@dataclass(frozen=True)
class FailureEntry:
    index: int  # 1-based position in the corpus
    length_bits: int
    expected_digest: str
    computed_digest: str
    message: Optional[str] = None


@dataclass(frozen=True)
class ValidationOutcome:
    total: int
    passed: int
    failed: int
    failures: Tuple[FailureEntry, ...] = ()

    @property
    def ok(self) -> bool:
        return self.failed == 0


@dataclass(frozen=True)
class CorpusReport:
    name: str
    source: str
    outcome: ValidationOutcome


class BatchValidator:
    def __init__(
        self,
        hash_fn: HashFunction,
        *,
        label: str = "",
        progress_every: int = DEFAULT_PROGRESS_EVERY,
        progress_cb: Optional[Callable[[int, int], None]] = None,
    ) -> None:
        self.hash_fn = hash_fn
        self.label = label
        self.progress_every = progress_every
        self.progress_cb = progress_cb

    def _digest(self, record: TestRecord) -> bytes:
        data = record.message if record.byte_length else b""
        adapter = getattr(self.hash_fn, "name", self.hash_fn)
        try:
            digest = self.hash_fn.hash(data)
        except Exception as exc:
            raise AdapterError(f"{adapter!s} failed on Len={record.length_bits}: {exc}") from exc
        if not isinstance(digest, (bytes, bytearray)):
            raise AdapterError(f"{adapter!s} returned {type(digest).__name__}, expected {DIGEST_SIZE} bytes")
        if len(digest) != DIGEST_SIZE:
            raise AdapterError(f"{adapter!s} returned {len(digest)} bytes, expected {DIGEST_SIZE}")
        return bytes(digest)

    def validate(self, records: Sequence[TestRecord], label: Optional[str] = None) -> ValidationOutcome:
        """Hash every record in order and compare all 32 digest bytes."""
        name = label if label is not None else self.label
        total = len(records)
        passed = 0
        failures: List[FailureEntry] = []
        for i, record in enumerate(records, start=1):
            computed = self._digest(record)
            if computed == record.expected_digest:
                passed += 1
            else:
                failures.append(FailureEntry(
                    index=i,
                    length_bits=record.length_bits,
                    expected_digest=hexcodec.encode(record.expected_digest),
                    computed_digest=hexcodec.encode(computed),
                    message=hexcodec.encode(record.message) if record.message else None,
                ))
                log.debug("%s vector %d (Len=%d) mismatch", name or "corpus", i, record.length_bits)
            if self.progress_every and i % self.progress_every == 0:
                log.info("  %s processed %d vectors...", name or "corpus", i)
                if self.progress_cb is not None:
                    self.progress_cb(i, total)
        outcome = ValidationOutcome(
            total=total,
            passed=passed,
            failed=len(failures),
            failures=tuple(failures),
        )
        log.info("%s: %d passed, %d failed", name or "corpus", outcome.passed, outcome.failed)
        return outcome


def validate_corpus(
    path: Union[str, Path],
    validator: BatchValidator,
    name: Optional[str] = None,
) -> CorpusReport:
    p = Path(path)
    label = name or p.stem
    records = parse_file(p)
    log.info("Running %s validation: %d vectors", label, len(records))
    return CorpusReport(name=label, source=str(p), outcome=validator.validate(records, label=label))


def validate_corpora(
    paths: Sequence[Union[str, Path]],
    validator: BatchValidator,
) -> List[CorpusReport]:
    """Validate each corpus file in order.

    Any CorpusError (unreadable file, bad hex, inconsistent lengths) aborts the
    whole run instead of skipping the file.
    """
    return [validate_corpus(p, validator) for p in paths]


@dataclass
class RunTotals:
    passed: int = 0
    failed: int = 0
    corpora: List[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.passed + self.failed

    @classmethod
    def from_reports(cls, reports: Sequence[CorpusReport]) -> "RunTotals":
        totals = cls()
        for report in reports:
            totals.passed += report.outcome.passed
            totals.failed += report.outcome.failed
            totals.corpora.append(report.name)
        return totals
