from .interfaces import DIGEST_SIZE, HashFunction
from .registry import registry
from .errors import (
    AdapterError,
    CorpusError,
    CorpusIOError,
    DigestLengthError,
    FormatError,
    HashKatError,
    InsufficientSamplesError,
    LengthMismatchError,
    UnknownAdapterError,
)
from .vectors import TestRecord, VectorCorpusParser, parse_file, parse_stream
from .validator import (
    BatchValidator,
    CorpusReport,
    FailureEntry,
    ValidationOutcome,
    validate_corpora,
    validate_corpus,
)
from .timing import TimingConfig, TimingSampler, TimingSamples
from .leakage import DEFAULT_THRESHOLD, LeakageVerdict, analyze

__all__ = [
    "DIGEST_SIZE",
    "HashFunction",
    "registry",
    "AdapterError",
    "CorpusError",
    "CorpusIOError",
    "DigestLengthError",
    "FormatError",
    "HashKatError",
    "InsufficientSamplesError",
    "LengthMismatchError",
    "UnknownAdapterError",
    "TestRecord",
    "VectorCorpusParser",
    "parse_file",
    "parse_stream",
    "BatchValidator",
    "CorpusReport",
    "FailureEntry",
    "ValidationOutcome",
    "validate_corpora",
    "validate_corpus",
    "TimingConfig",
    "TimingSampler",
    "TimingSamples",
    "DEFAULT_THRESHOLD",
    "LeakageVerdict",
    "analyze",
]
