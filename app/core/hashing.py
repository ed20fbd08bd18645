"""Content hashing utilities for content-addressed storage naming."""

import hashlib
from pathlib import Path

CHUNK_SIZE = 8192


def sha256_file(path: str | Path) -> str:
    """
    Generate the SHA-256 hash of a file's full byte stream.

    The file is read sequentially in fixed-size chunks so arbitrarily large
    files never have to fit in memory.

    Args:
        path: File to hash

    Returns:
        Hexadecimal string representation of SHA-256 hash

    Raises:
        OSError: If the file cannot be opened or read
    """
    hash_obj = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
            hash_obj.update(chunk)

    return hash_obj.hexdigest()
