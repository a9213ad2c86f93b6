"""WU8 <-> U8 conversion and the bzip2 WBZ wrapper around WU8."""

import bz2
import logging
import struct
import typing
from dataclasses import dataclass, field

from .autoadd import as_library
from .errors import CompressionError, InvalidHeaderError, InvalidMagicError
from .iterator import FileItem, U8Iterator
from .parser import (
    HEADER_SIZE,
    NODE_SIZE,
    U8_MAGIC,
    WU8_MAGIC,
    Parser,
    check_buffer_size,
)
from .passes import (
    derive_starting_key,
    perform_header_pass,
    perform_pass_one,
    perform_pass_two,
    sample_reference,
)

logger = logging.getLogger(__name__)

WBZ_MAGIC = b"WBZa"
WBZ_SIGNATURE = WBZ_MAGIC + WU8_MAGIC
WBZ_HEADER_SIZE = 16


@dataclass
class ConversionReport:
    starting_key: int
    derived_key: int
    node_count: int = 0
    directories: int = 0
    matched_files: "list[str]" = field(default_factory=list)
    unmatched_files: "list[str]" = field(default_factory=list)


def _require_mutable(buffer) -> None:
    if not isinstance(buffer, bytearray):
        raise TypeError(f"Expected a bytearray to convert in place, got {type(buffer).__name__}")


def decode_wu8(wu8_file: bytearray, library, *, max_depth: typing.Optional[int] = None) -> ConversionReport:
    """Decodes a WU8 file into the equivalent U8 file **in place**."""
    return _iterate_wu8(wu8_file, library, encode=False, max_depth=max_depth)


def encode_wu8(u8_file: bytearray, library, *, max_depth: typing.Optional[int] = None) -> ConversionReport:
    """Encodes a U8 file into the equivalent WU8 file **in place**."""
    return _iterate_wu8(u8_file, library, encode=True, max_depth=max_depth)


def _iterate_wu8(buf: bytearray, library, encode: bool, max_depth=None) -> ConversionReport:
    _require_mutable(buf)
    library = as_library(library)
    size = check_buffer_size(buf)
    starting_key = derive_starting_key(size)

    reader = Parser(buf)
    logger.debug("Parsing header")
    header = reader.read_u8_header(U8_MAGIC if encode else WU8_MAGIC)

    start_pos = reader.position()
    if start_pos != header.node_offset:
        raise InvalidHeaderError(
            f"Node table expected at {start_pos:#x}, header says {header.node_offset:#x}"
        )

    if not encode:
        # The node and string tables are themselves obfuscated.
        perform_header_pass(buf, starting_key, start_pos, header.meta_size)

    logger.debug("Calculating offsets for header data")
    root_node = reader.read_node()
    reader.set_position(start_pos)

    node_count = root_node.size
    string_table_start = header.node_offset + node_count * NODE_SIZE
    report = ConversionReport(starting_key, starting_key, node_count=node_count)

    logger.info("Starting pass 1 (XOR all object files with auto-add library)")
    derived_key = starting_key
    for item in U8Iterator(reader, node_count, string_table_start, library, max_depth):
        if not isinstance(item, FileItem):
            report.directories += 1
            continue
        if item.original_data is None:
            continue

        derived_key ^= sample_reference(item.original_data)
        logger.debug("Starting %s auto-add XOR", item.name)
        perform_pass_one(buf, item.original_data, item.node, starting_key)
        report.matched_files.append("/".join(item.path))

    # derived_key is settled only once every matched file has been seen.
    report.derived_key = derived_key
    reader.set_position(header.node_offset)

    logger.info("Starting pass 2 (XOR all non-object files with derived key %d)", derived_key)
    for item in U8Iterator(reader, node_count, string_table_start, library, max_depth):
        if not isinstance(item, FileItem) or item.original_data is not None:
            continue
        logger.debug("Starting %s XOR", item.name)
        perform_pass_two(buf, item.node, derived_key)
        report.unmatched_files.append("/".join(item.path))

    if encode:
        perform_header_pass(buf, starting_key, header.node_offset, header.meta_size)
        buf[0:4] = WU8_MAGIC
    else:
        buf[0:4] = U8_MAGIC
    return report


def unwrap_wbz(wbz_file: bytes) -> bytearray:
    """Returns the still obfuscated WU8 image inside a WBZ file."""
    logger.debug("Checking signature of WBZ")
    signature = bytes(wbz_file[:len(WBZ_SIGNATURE)])
    if signature != WBZ_SIGNATURE:
        raise InvalidMagicError(WBZ_SIGNATURE, signature)
    if len(wbz_file) < WBZ_HEADER_SIZE:
        raise CompressionError("WBZ file ends before the compressed payload")
    expected_len = struct.unpack_from(">I", wbz_file, 12)[0]

    logger.debug("Decompressing WU8 file")
    try:
        wu8_file = bytearray(bz2.decompress(wbz_file[WBZ_HEADER_SIZE:]))
    except (OSError, ValueError, EOFError) as exc:
        raise CompressionError(f"BZip decompression failed: {exc}") from exc
    if len(wu8_file) != expected_len:
        logger.warning(
            "WBZ header announces %d bytes, decompressed %d", expected_len, len(wu8_file)
        )
    return wu8_file


def decode_wbz(wbz_file: bytes, library, *, max_depth: typing.Optional[int] = None) -> bytearray:
    """Decompresses a WBZ file into the equivalent U8 file."""
    wu8_file = unwrap_wbz(wbz_file)
    decode_wu8(wu8_file, library, max_depth=max_depth)
    return wu8_file


def encode_wbz(u8_file: bytearray, library, *, max_depth: typing.Optional[int] = None) -> bytes:
    """Compresses a U8 file into the equivalent WBZ file.

    ``u8_file`` is left holding the uncompressed WU8 image.
    """
    _require_mutable(u8_file)
    logger.debug("Checking signature of U8 file")
    magic = bytes(u8_file[:4])
    if magic != U8_MAGIC:
        raise InvalidMagicError(U8_MAGIC, magic)

    encode_wu8(u8_file, library, max_depth=max_depth)
    wu8_len = check_buffer_size(u8_file)
    header = WBZ_MAGIC + bytes(u8_file[0:8]) + wu8_len.to_bytes(4, "big")
    try:
        payload = bz2.compress(bytes(u8_file), 9)
    except (OSError, ValueError) as exc:
        raise CompressionError(f"BZip compression failed: {exc}") from exc
    return header + payload


def detect_format(data: bytes) -> str:
    head = bytes(data[:HEADER_SIZE])
    if head.startswith(WBZ_SIGNATURE):
        return "wbz"
    if head.startswith(WU8_MAGIC):
        return "wu8"
    if head.startswith(U8_MAGIC):
        return "u8"
    raise InvalidMagicError(U8_MAGIC, head[:4])


def decode_any(data: bytes, library, *, max_depth: typing.Optional[int] = None) -> bytearray:
    """Returns the U8 image of a WBZ, WU8 or U8 buffer."""
    fmt = detect_format(data)
    if fmt == "wbz":
        return decode_wbz(data, library, max_depth=max_depth)
    out = bytearray(data)
    if fmt == "wu8":
        decode_wu8(out, library, max_depth=max_depth)
    return out


__all__ = [
    "ConversionReport",
    "WBZ_MAGIC",
    "WBZ_SIGNATURE",
    "decode_any",
    "decode_wbz",
    "decode_wu8",
    "detect_format",
    "encode_wbz",
    "encode_wu8",
    "unwrap_wbz",
]
