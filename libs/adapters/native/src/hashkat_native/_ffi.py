from __future__ import annotations

import ctypes
import os
from pathlib import Path
from typing import Callable, Iterator, Tuple

from hashkat import DIGEST_SIZE

_c_size_t = ctypes.c_size_t
_c_uint8_p = ctypes.POINTER(ctypes.c_uint8)


class NativeHashError(RuntimeError):
    pass


LIBRARY_NAMES = (
    "nano_sha3_256.dll",
    "libnano_sha3_256.dll",
    "libnano_sha3_256.so",
    "libnano_sha3_256.dylib",
)


def _default_candidates() -> Iterator[Path]:
    env = os.getenv("HASHKAT_NATIVE_LIB")
    if env:
        yield Path(env)
    here = Path(__file__).resolve()
    visited: set[Path] = set()
    # Prefer Release over Debug if multiple configs exist
    subdirs = [Path("Release"), Path("RelWithDebInfo"), Path("Debug"), Path(".")]

    for parent in here.parents:
        candidates: list[Path] = []
        if parent.name == "native":
            candidates.append(parent)
        native_dir = parent / "native"
        if native_dir.exists():
            candidates.append(native_dir)
        for native_home in candidates:
            if native_home in visited:
                continue
            visited.add(native_home)
            build_dir = native_home / "build"
            if not build_dir.exists():
                continue
            for sub in subdirs:
                for name in LIBRARY_NAMES:
                    yield build_dir / sub / name


def load_library() -> ctypes.CDLL:
    for path in _default_candidates():
        if path.is_file():
            return ctypes.CDLL(str(path))
    raise NativeHashError(
        "Unable to locate the nano_sha3_256 shared library. "
        "Build native/ (cmake --build) or point HASHKAT_NATIVE_LIB to the compiled binary."
    )


def symbol_name() -> str:
    return os.getenv("HASHKAT_NATIVE_SYMBOL") or "nano_sha3_256"


def bind(lib: ctypes.CDLL, name: str) -> Callable[..., None]:
    """Resolve `void name(uint8_t *out, const uint8_t *in, size_t len)`."""
    try:
        fn = getattr(lib, name)
    except AttributeError as exc:
        raise NativeHashError(f"Symbol {name!r} not exported by native library") from exc
    fn.argtypes = [_c_uint8_p, _c_uint8_p, _c_size_t]
    fn.restype = None
    return fn


def _to_uint8_ptr(data: bytes) -> Tuple[ctypes.Array, _c_uint8_p]:
    if not data:
        # len = 0 calls still get a real pointer; the callee never reads it
        arr = (ctypes.c_uint8 * 1)()
    else:
        arr = (ctypes.c_uint8 * len(data)).from_buffer_copy(data)
    return arr, ctypes.cast(arr, _c_uint8_p)


def call_digest(fn: Callable[..., None], data: bytes) -> bytes:
    out = (ctypes.c_uint8 * DIGEST_SIZE)()
    in_arr, in_ptr = _to_uint8_ptr(data)
    fn(ctypes.cast(out, _c_uint8_p), in_ptr, len(data))
    _ = in_arr
    return bytes(out)
