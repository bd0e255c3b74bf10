from __future__ import annotations

from ._ffi import NativeHashError, bind, call_digest, load_library, symbol_name

_lib = load_library()
SYMBOL = symbol_name()
_hash_fn = bind(_lib, SYMBOL)


def digest(data: bytes) -> bytes:
    return call_digest(_hash_fn, data)


__all__ = ["NativeHashError", "SYMBOL", "digest"]
