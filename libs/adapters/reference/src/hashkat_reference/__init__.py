"""Reference SHA3-256 adapters.

Importing this package registers them; class names are not re-exported.
"""

# Trigger registration side-effects
from . import sha3_adapter as _sha3_adapter  # noqa: F401

__all__: list[str] = []
