"""Convert Mario Kart Wii WBZ and WU8 archives into U8 archives, and back.

WU8 is a U8 archive whose node table, string table and file payloads are
XOR obfuscated with keys derived from the archive size and from an
"auto-add" library of known files. WBZ is a bzip2 compressed WU8 file.
"""

from .api_files import decode_file, describe, encode_file, list_entries, output_path
from .autoadd import AutoAddLibrary, EmptyLibrary, MappingLibrary
from .codec import (
    ConversionReport,
    decode_any,
    decode_wbz,
    decode_wu8,
    detect_format,
    encode_wbz,
    encode_wu8,
)
from . import errors
from .errors import *  # noqa: F401,F403
from .version import __version__

__all__ = [
    "AutoAddLibrary",
    "ConversionReport",
    "EmptyLibrary",
    "MappingLibrary",
    "__version__",
    "decode_any",
    "decode_file",
    "decode_wbz",
    "decode_wu8",
    "describe",
    "detect_format",
    "encode_file",
    "encode_wbz",
    "encode_wu8",
    "list_entries",
    "output_path",
] + errors.__all__
