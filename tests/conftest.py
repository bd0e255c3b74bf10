from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Callable

import pytest

EMPTY_MD = "a7ffc6f8bf1ed76651c14756a061d662f580ff4de43b49fa82d80a4b80f8434a"
ABC_MD = "3a985da74fe225b2045c172d6bd390bd855f086e3e9d525b46bfe24511431532"


class ReferenceSHA3:
    name = "test-sha3-256"
    digest_size = 32

    def __init__(self) -> None:
        self.calls: list[bytes] = []

    def hash(self, data: bytes) -> bytes:
        self.calls.append(bytes(data))
        return hashlib.sha3_256(data).digest()


class BrokenLastByteSHA3(ReferenceSHA3):
    """Flips the last digest byte for inputs longer than two bytes."""
    name = "broken-sha3-256"

    def hash(self, data: bytes) -> bytes:
        digest = bytearray(super().hash(data))
        if len(data) > 2:
            digest[-1] ^= 0x01
        return bytes(digest)


def rsp_block(message: bytes, *, md: str | None = None) -> str:
    msg_hex = message.hex() if message else "00"
    digest = md if md is not None else hashlib.sha3_256(message).hexdigest()
    return f"Len = {len(message) * 8}\nMsg = {msg_hex}\nMD = {digest}\n\n"


@pytest.fixture
def reference_hash() -> ReferenceSHA3:
    return ReferenceSHA3()


@pytest.fixture
def broken_hash() -> BrokenLastByteSHA3:
    return BrokenLastByteSHA3()


@pytest.fixture
def write_corpus(tmp_path: Path) -> Callable[..., Path]:
    def _write(text: str, name: str = "SHA3_256ShortMsg.rsp") -> Path:
        path = tmp_path / name
        path.write_bytes(text.encode("utf-8"))
        return path
    return _write


@pytest.fixture
def short_corpus_text() -> str:
    header = (
        "#  CAVS 19.0\n"
        "#  \"SHA3-256 ShortMsg\" information for \"SHA3AllBytes1-28-2016\"\n"
        "#  Length values represented in bits\n"
        "\n"
        "[L = 256]\n"
        "\n"
    )
    messages = [b"", b"abc", bytes(range(5)), b"\xff" * 17]
    return header + "".join(rsp_block(m) for m in messages)
