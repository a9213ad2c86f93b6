"""Exception types raised while converting U8/WU8/WBZ archives."""


class WBZError(ValueError):
    """Base class for every conversion failure."""


class TruncatedReadError(WBZError):
    def __init__(self, offset: int, wanted: int, available: int):
        self.offset = offset
        self.wanted = wanted
        self.available = available
        super().__init__(
            f"Truncated read at offset {offset:#x}: wanted {wanted} bytes, {available} available"
        )


class InvalidMagicError(WBZError):
    def __init__(self, expected: bytes, found: bytes):
        self.expected = bytes(expected)
        self.found = bytes(found)
        super().__init__(f"Invalid magic: expected {self.expected!r}, found {self.found!r}")


class InvalidBooleanError(WBZError):
    def __init__(self, value: int):
        self.value = value
        super().__init__(f"Archive contained an invalid boolean ({value:#04x})")


class InvalidStringError(WBZError):
    def __init__(self, offset: int, cause: UnicodeDecodeError):
        self.offset = offset
        self.cause = cause
        super().__init__(f"Archive contained an invalid string at offset {offset:#x}: {cause}")


class BufferTooLargeError(WBZError):
    def __init__(self, size: int):
        self.size = size
        super().__init__(f"Buffer of {size} bytes is above the 4GB offset space")


class InvalidHeaderError(WBZError):
    pass


class InvalidReferenceError(WBZError):
    pass


class DirectoryDepthError(WBZError):
    def __init__(self, limit: int, name: str):
        self.limit = limit
        self.name = name
        super().__init__(
            f"Directory '{name}' exceeds the nesting limit of {limit} (raise WBZCONV_MAX_DEPTH)"
        )


class CompressionError(WBZError):
    pass


class ReferenceLibraryIOError(WBZError):
    """An auto-add lookup failed for a reason other than the file being absent."""

    def __init__(self, path, cause: OSError):
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to read reference file {path}: {cause}")


__all__ = [
    "BufferTooLargeError",
    "CompressionError",
    "DirectoryDepthError",
    "InvalidBooleanError",
    "InvalidHeaderError",
    "InvalidMagicError",
    "InvalidReferenceError",
    "InvalidStringError",
    "ReferenceLibraryIOError",
    "TruncatedReadError",
    "WBZError",
]
