"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

hasher.py
Fingerprinting and byte comparison of comparator streams.

Fingerprints are cheap, lossy filters: two streams with different fingerprints
are certainly different, equal fingerprints prove nothing. Only
`streams_equal` decides whether two files are identical.
"""

from typing import BinaryIO, Tuple, Optional

import xxhash

from dupescan.core.interfaces import HashAlgorithm, HashState

BLOCK_SIZE = 1024           # bytes covered by the partial fingerprint
READ_CHUNK_SIZE = 64 * 1024  # chunk size for full fingerprint and byte comparison

# Distinct seeds so that partial and full fingerprints do not collide together
PARTIAL_SEED = 0x5F3759DF
FULL_SEED = 0x1B873593


# Use the same way to implement and use any other hashing algorithm
class XXHashAlgorithmImpl(HashAlgorithm):
    def new(self, seed: int = 0) -> HashState:
        return xxhash.xxh64(seed=seed)


class Fingerprinter:
    """
    Computes partial and full fingerprints of a comparator stream
    with any algorithm implementing HashAlgorithm.
    """

    def __init__(self, algorithm: Optional[HashAlgorithm] = None):
        self.algorithm = algorithm or XXHashAlgorithmImpl()

    def partial(self, stream: BinaryIO) -> Tuple[bytes, Optional[bytes]]:
        """
        Hash at most the first BLOCK_SIZE bytes of the stream.

        Returns (partial, full). When the stream ends inside the first block,
        the partial fingerprint is also the full one and `full` is returned
        from the same read pass; otherwise `full` is None.
        """
        block = stream.read(BLOCK_SIZE)
        state = self.algorithm.new(PARTIAL_SEED)
        state.update(block)
        digest = state.digest()

        if len(block) < BLOCK_SIZE or not stream.read(1):
            return digest, digest
        return digest, None

    def full(self, stream: BinaryIO) -> bytes:
        """Hash the whole stream."""
        state = self.algorithm.new(FULL_SEED)
        while True:
            chunk = stream.read(READ_CHUNK_SIZE)
            if not chunk:
                break
            state.update(chunk)
        return state.digest()


def streams_equal(stream_a: BinaryIO, stream_b: BinaryIO, chunk_size: int = READ_CHUNK_SIZE) -> bool:
    """
    Authoritative comparison: read both streams in matched-size chunks.
    Any difference in chunk length or content means the streams differ.
    """
    while True:
        chunk_a = _read_exactly(stream_a, chunk_size)
        chunk_b = _read_exactly(stream_b, chunk_size)

        if len(chunk_a) != len(chunk_b):
            return False
        if not chunk_a:
            return True
        if chunk_a != chunk_b:
            return False


def _read_exactly(stream: BinaryIO, size: int) -> bytes:
    """Read `size` bytes unless the stream ends first (short reads are retried)."""
    data = stream.read(size)
    if not data or len(data) == size:
        return data
    parts = [data]
    remaining = size - len(data)
    while remaining > 0:
        more = stream.read(remaining)
        if not more:
            break
        parts.append(more)
        remaining -= len(more)
    return b"".join(parts)
