from __future__ import annotations

import warnings

_available = False

try:
    from . import _core  # noqa: F401
except Exception as exc:  # pragma: no cover - best effort message
    warnings.warn(f"hashkat_native disabled: {exc}")
else:
    from . import sha3 as _sha3  # noqa: F401
    _available = True

__all__ = ["_available"]
