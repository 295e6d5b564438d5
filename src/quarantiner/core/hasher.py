"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

hasher.py
Implements full-content file hashing with pluggable hash algorithms.

Every algorithm exposes new() returning an incremental hash object, so files
of any size are read in fixed chunks instead of being loaded into memory.
"""

import hashlib
import logging
from typing import Dict

import xxhash

from quarantiner.core.errors import HashFailure
from quarantiner.core.interfaces import Hasher, HashAlgorithm
from quarantiner.core.models import DigestAlgorithm

logger = logging.getLogger(__name__)


# Use the same way to implement and use any other hashing algorithm
class HashlibAlgorithmImpl(HashAlgorithm):
    def __init__(self, name: str):
        hashlib.new(name)  # fail fast on names this interpreter does not provide
        self.name = name

    def new(self):
        return hashlib.new(self.name)


class XXHashAlgorithmImpl(HashAlgorithm):
    name = "xxh64"

    @staticmethod
    def new():
        return xxhash.xxh64()


ALGORITHMS: Dict[DigestAlgorithm, HashAlgorithm] = {
    DigestAlgorithm.MD5: HashlibAlgorithmImpl("md5"),
    DigestAlgorithm.SHA1: HashlibAlgorithmImpl("sha1"),
    DigestAlgorithm.SHA256: HashlibAlgorithmImpl("sha256"),
    DigestAlgorithm.XXH64: XXHashAlgorithmImpl(),
}


class HasherImpl(Hasher):
    """
    A hasher implementation that supports any algorithm via the HashAlgorithm interface.
    Reads the whole file and returns its hex digest.
    """
    CHUNK_SIZE = 1024 * 1024

    def __init__(self, algorithm: HashAlgorithm):
        self.algorithm = algorithm

    @classmethod
    def for_algorithm(cls, algorithm: DigestAlgorithm) -> "HasherImpl":
        return cls(ALGORITHMS[algorithm])

    def compute_digest(self, path: str) -> str:
        """
        Hash the full content of `path`.
        Raises HashFailure if the file cannot be opened or read.
        """
        digest = self.algorithm.new()
        try:
            with open(path, 'rb') as f:
                for chunk in iter(lambda: f.read(self.CHUNK_SIZE), b''):
                    digest.update(chunk)
        except OSError as e:
            raise HashFailure(path, e) from e
        result = digest.hexdigest()
        logger.debug(f"{self.algorithm.name} {result} {path}")
        return result


def hash_file(path: str, algorithm: DigestAlgorithm = DigestAlgorithm.SHA256) -> str:
    """Shortcut for one-off hashing."""
    return HasherImpl.for_algorithm(algorithm).compute_digest(path)
