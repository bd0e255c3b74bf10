from __future__ import annotations
import hashlib

from cryptography.hazmat.primitives import hashes

from hashkat import DIGEST_SIZE, registry


@registry.register("cryptography-sha3-256")
class CryptographySHA3_256:
    """SHA3-256 via cryptography (OpenSSL backend).

    Used as the known-good reference when no native library is built.
    """
    name = "cryptography-sha3-256"
    digest_size = DIGEST_SIZE

    def __init__(self) -> None:
        self.algorithm = "SHA3-256"

    def hash(self, data: bytes) -> bytes:
        h = hashes.Hash(hashes.SHA3_256())
        h.update(data)
        return h.finalize()


@registry.register("hashlib-sha3-256")
class HashlibSHA3_256:
    name = "hashlib-sha3-256"
    digest_size = DIGEST_SIZE

    def __init__(self) -> None:
        self.algorithm = "SHA3-256"

    def hash(self, data: bytes) -> bytes:
        return hashlib.sha3_256(data).digest()
