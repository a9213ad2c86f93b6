"""Reference ("auto-add") library providers used to key pass one."""

import logging
import os
import pathlib
import typing

from .errors import ReferenceLibraryIOError

logger = logging.getLogger(__name__)


class PathLookup(typing.Protocol):
    def lookup(self, segments: typing.Sequence[str]) -> typing.Optional[bytes]:
        ...


def _is_safe_segment(segment: str) -> bool:
    if segment in ("", ".", ".."):
        return False
    separators = {"/", "\\", os.sep}
    if os.altsep:
        separators.add(os.altsep)
    return not any(sep in segment for sep in separators)


class AutoAddLibrary:
    """Filesystem library rooted at ``root``.

    Every lookup hits the disk; results are not cached.
    """

    def __init__(self, root: "str | os.PathLike[str]"):
        self.root = pathlib.Path(root)

    def __repr__(self) -> str:
        return f"AutoAddLibrary({str(self.root)!r})"

    def lookup(self, segments: typing.Sequence[str]) -> typing.Optional[bytes]:
        if not all(_is_safe_segment(seg) for seg in segments):
            logger.warning("Ignoring unsafe archive path %s", "/".join(segments))
            return None
        path = self.root.joinpath(*segments)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise ReferenceLibraryIOError(path, exc) from exc


class MappingLibrary:
    """In-memory library keyed by ``/`` joined relative paths."""

    def __init__(self, files: "typing.Mapping[str, bytes] | None" = None):
        self.files = dict(files or {})

    def lookup(self, segments: typing.Sequence[str]) -> typing.Optional[bytes]:
        data = self.files.get("/".join(segments))
        return bytes(data) if data is not None else None


class EmptyLibrary:
    def lookup(self, segments: typing.Sequence[str]) -> typing.Optional[bytes]:
        return None


def as_library(library) -> PathLookup:
    if library is None:
        return EmptyLibrary()
    if isinstance(library, (str, os.PathLike)):
        return AutoAddLibrary(library)
    if not callable(getattr(library, "lookup", None)):
        raise TypeError(f"Expected a path or an object with lookup(), got {type(library).__name__}")
    return library


__all__ = [
    "AutoAddLibrary",
    "EmptyLibrary",
    "MappingLibrary",
    "PathLookup",
    "as_library",
]
