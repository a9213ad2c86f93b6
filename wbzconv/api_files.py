"""File-oriented convenience wrappers."""

import logging
import pathlib

from . import config
from .autoadd import as_library
from .codec import decode_any, detect_format, encode_wbz, encode_wu8, unwrap_wbz
from .iterator import DirectoryItem, U8Iterator
from .parser import NODE_SIZE, U8_MAGIC, WU8_MAGIC, Parser, check_buffer_size
from .passes import derive_starting_key, perform_header_pass

logger = logging.getLogger(__name__)

_EXTENSIONS = {"u8": ".u8", "wu8": ".wu8", "wbz": ".wbz"}


def output_path(path: "str | pathlib.Path", fmt: str) -> pathlib.Path:
    """``track.wbz`` -> ``track.u8`` next to the input."""
    src = pathlib.Path(path)
    return src.with_name(src.stem + _EXTENSIONS[fmt])


def _library(autoadd):
    if autoadd is None:
        return as_library(config.autoadd_path())
    return as_library(autoadd)


def decode_file(
    file: "str | pathlib.Path",
    autoadd=None,
    output: "str | pathlib.Path | None" = None,
    max_depth: "int | None" = None,
) -> pathlib.Path:
    src = pathlib.Path(file)
    data = src.read_bytes()
    fmt = detect_format(data)
    if fmt == "u8":
        raise ValueError(f"{src} is already a U8 archive")
    u8_file = decode_any(data, _library(autoadd), max_depth=max_depth)
    out = pathlib.Path(output) if output else output_path(src, "u8")
    out.write_bytes(u8_file)
    logger.info("Decoded %s file to U8 file %s", fmt.upper(), out)
    return out


def encode_file(
    file: "str | pathlib.Path",
    autoadd=None,
    output: "str | pathlib.Path | None" = None,
    wu8: bool = False,
    max_depth: "int | None" = None,
) -> pathlib.Path:
    src = pathlib.Path(file)
    buf = bytearray(src.read_bytes())
    library = _library(autoadd)
    if wu8:
        encode_wu8(buf, library, max_depth=max_depth)
        blob, fmt = buf, "wu8"
    else:
        blob, fmt = encode_wbz(buf, library, max_depth=max_depth), "wbz"
    out = pathlib.Path(output) if output else output_path(src, fmt)
    out.write_bytes(blob)
    logger.info("Encoded U8 file to %s file %s", fmt.upper(), out)
    return out


def describe(data: bytes) -> dict:
    """Header fields of a WBZ, WU8 or U8 buffer without converting payloads."""
    fmt = detect_format(data)
    if fmt == "wbz":
        data = unwrap_wbz(data)
    size = check_buffer_size(data)
    starting_key = derive_starting_key(size)
    reader = Parser(data)
    header = reader.read_u8_header(WU8_MAGIC if fmt != "u8" else U8_MAGIC)
    root = bytearray(data[header.node_offset:header.node_offset + NODE_SIZE])
    if fmt != "u8":
        perform_header_pass(root, starting_key, 0, len(root))
    root_node = Parser(root).read_node()
    return {
        "format": fmt,
        "size": size,
        "node_offset": header.node_offset,
        "meta_size": header.meta_size,
        "data_offset": header.data_offset,
        "node_count": root_node.size,
        "starting_key": starting_key,
    }


def list_entries(data: bytes, autoadd=None, max_depth: "int | None" = None) -> "list[dict]":
    library = _library(autoadd)
    u8_file = decode_any(data, library, max_depth=max_depth)
    reader = Parser(u8_file)
    header = reader.read_u8_header(U8_MAGIC)
    root_node = reader.read_node()
    reader.set_position(header.node_offset)
    table_start = header.node_offset + root_node.size * NODE_SIZE

    entries = []
    walker = U8Iterator(reader, root_node.size, table_start, library, max_depth)
    for item in walker:
        if isinstance(item, DirectoryItem):
            if item.name is None:
                continue
            parents = [name for _, name in walker.dir_stack[:-1]]
            entries.append({"path": "/".join(parents + [item.name]) + "/", "dir": True})
        else:
            entries.append({
                "path": "/".join(item.path),
                "dir": False,
                "size": item.node.size,
                "matched": item.matched,
            })
    return entries


__all__ = [
    "decode_file",
    "describe",
    "encode_file",
    "list_entries",
    "output_path",
]
