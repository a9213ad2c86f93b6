"""XOR passes shared by WU8 encoding and decoding.

Every pass is its own inverse, so the same functions serve both
directions; only the order in which the codec runs them differs.
"""

import logging
import typing

import numpy as np

from .errors import InvalidReferenceError, TruncatedReadError
from .parser import U8Node

logger = logging.getLogger(__name__)


def derive_starting_key(size: int) -> int:
    p0, p1, p2, p3 = size.to_bytes(4, "little")
    starting_key = p0 ^ p1 ^ p2 ^ p3
    logger.info("Derived starting key: %d", starting_key)
    return starting_key


def sample_reference(original_data: bytes) -> int:
    """XOR of the reference bytes at len/2, len/3 and len/4."""
    size = len(original_data)
    if size == 0:
        raise InvalidReferenceError("Reference file is empty; cannot derive a key from it")
    return original_data[size // 2] ^ original_data[size // 3] ^ original_data[size // 4]


def _region(buf: bytearray, start: int, size: int) -> "typing.Optional[np.ndarray]":
    if size == 0:
        return None
    available = max(len(buf) - start, 0)
    if size > available:
        raise TruncatedReadError(start, size, available)
    return np.frombuffer(memoryview(buf)[start:start + size], dtype=np.uint8)


def perform_header_pass(buf: bytearray, key: int, start_pos: int, meta_size: int) -> None:
    logger.debug("Performing node header data pass")
    arr = _region(buf, start_pos, meta_size)
    if arr is not None:
        np.bitwise_xor(arr, key, out=arr)


def perform_pass_one(buf: bytearray, original_data: bytes, node: U8Node, starting_key: int) -> None:
    if not original_data:
        raise InvalidReferenceError("Reference file is empty; cannot key a payload with it")
    arr = _region(buf, node.data_offset, node.size)
    if arr is None:
        return
    ref = np.frombuffer(original_data, dtype=np.uint8) ^ np.uint8(starting_key)
    # The reference content repeats when the payload is longer than it.
    np.bitwise_xor(arr, np.resize(ref, node.size), out=arr)


def perform_pass_two(buf: bytearray, node: U8Node, derived_key: int) -> None:
    arr = _region(buf, node.data_offset, node.size)
    if arr is not None:
        np.bitwise_xor(arr, derived_key, out=arr)


__all__ = [
    "derive_starting_key",
    "perform_header_pass",
    "perform_pass_one",
    "perform_pass_two",
    "sample_reference",
]
