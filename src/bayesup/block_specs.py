"""
Block Specification System

A "block" is a contiguous slice of the flat (packed) parameter vector that
one proposal distribution updates in one sampler iteration. The chunking
mode on the MCMC settings decides how the vector is cut into blocks:

    ALL    one block spanning every parameter
    ITEM   one block per scalar parameter
    BLOCK  one block per named parameter page (declared, not implemented)

Block boundaries are stored as `block_starts`, an increasing list of offsets
with block i covering block_starts[i]:block_starts[i+1].
"""

from enum import Enum
from typing import List


class GibbsChunks(str, Enum):
    """
    How the parameter vector is partitioned into blocks.

    Values are the single-letter codes accepted in plain-dict configuration.
    """
    ALL = 'a'
    ITEM = 'i'
    BLOCK = 'b'

    def __str__(self):
        return self.name.replace('_', ' ').title()

    @classmethod
    def parse(cls, value) -> 'GibbsChunks':
        """Accept an enum member, its code ('a'), or its name ('all', 'item')."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            lowered = value.lower()
            for member in cls:
                if lowered in (member.value, member.name.lower()):
                    return member
        raise ValueError(f"Unknown gibbs_chunks mode: {value!r}")


def compute_block_starts(chunks: GibbsChunks, total_len: int) -> List[int]:
    """
    Partition a packed parameter vector of length total_len into blocks.

    Args:
        chunks: Chunking mode
        total_len: Length of the packed parameter vector

    Returns:
        block_starts list of length block_count + 1

    Raises:
        NotImplementedError: For GibbsChunks.BLOCK
        ValueError: If total_len < 1
    """
    if total_len < 1:
        raise ValueError(f"Cannot build blocks for an empty parameter vector (length {total_len})")
    chunks = GibbsChunks.parse(chunks)
    if chunks == GibbsChunks.ALL:
        return [0, total_len]
    if chunks == GibbsChunks.BLOCK:
        raise NotImplementedError("gibbs_chunks='b' (one block per named page) is not implemented")
    return list(range(total_len + 1))


def block_sizes(block_starts: List[int]) -> List[int]:
    """Length of each block."""
    return [hi - lo for lo, hi in zip(block_starts[:-1], block_starts[1:])]
