"""Chunking utilities for paced batch loading."""

from __future__ import annotations

from typing import Sequence, TypeVar

T = TypeVar("T")


def chunk_list(items: Sequence[T], chunk_size: int = 5) -> list[list[T]]:
    """Split a sequence into order-preserving chunks of the given size.

    Args:
        items: The sequence to split.
        chunk_size: Maximum items per chunk. The last chunk may be shorter.

    Returns:
        A list of sub-lists, each with at most chunk_size items.
    """
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be at least 1, got {chunk_size}")
    return [list(items[i : i + chunk_size]) for i in range(0, len(items), chunk_size)]
