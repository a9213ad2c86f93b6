"""Depth-first walk over a U8 node table, resolving names and library matches."""

import logging
import typing
from dataclasses import dataclass

from . import config
from .autoadd import PathLookup
from .errors import DirectoryDepthError
from .parser import Parser, U8Node

logger = logging.getLogger(__name__)

# Name offsets 0 and 1 belong to the root (and its "." child); they carry no name.
_ROOT_NAME_OFFSETS = (0, 1)


@dataclass
class DirectoryItem:
    node: U8Node
    name: typing.Optional[str] = None


@dataclass
class FileItem:
    node: U8Node
    name: str
    path: typing.Tuple[str, ...]
    original_data: typing.Optional[bytes]

    @property
    def matched(self) -> bool:
        return self.original_data is not None


class U8Iterator:
    """Single forward walk over the node table.

    Yields one item per node. The walk reads nodes straight from the
    parser's cursor, so it cannot be restarted; reset the cursor to the
    node table and build a new iterator for another pass. Decode errors
    are raised from ``__next__`` and end the consuming loop.
    """

    def __init__(
        self,
        parser: Parser,
        nodes: int,
        string_table_start: int,
        library: PathLookup,
        max_depth: typing.Optional[int] = None,
    ):
        self.parser = parser
        self.node_count = nodes
        self.string_table_start = string_table_start
        self.library = library
        self.max_depth = config.max_depth() if max_depth is None else max_depth
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be a positive integer, got {self.max_depth}")
        self.iteration = 0
        self.dir_stack: "list[tuple[U8Node, str]]" = []

    def __iter__(self):
        return self

    def __next__(self) -> "DirectoryItem | FileItem":
        if self.iteration == self.node_count:
            raise StopIteration

        self.iteration += 1
        node = self.parser.read_node()

        if node.name_offset in _ROOT_NAME_OFFSETS:
            return DirectoryItem(node)

        name = self.parser.read_string(self.string_table_start, node.name_offset)

        # Several directories can end on the same index.
        while self.dir_stack and self.dir_stack[-1][0].size == self.iteration - 1:
            _, dir_name = self.dir_stack.pop()
            logger.debug("Found the end of %s", dir_name)

        if node.is_dir:
            if len(self.dir_stack) >= self.max_depth:
                raise DirectoryDepthError(self.max_depth, name)
            logger.debug("Entering directory %s", name)
            self.dir_stack.append((node, name))
            return DirectoryItem(node, name)

        path = tuple(dir_name for _, dir_name in self.dir_stack) + (name,)
        original_data = self.library.lookup(path)
        return FileItem(node=node, name=name, path=path, original_data=original_data)


__all__ = ["DirectoryItem", "FileItem", "U8Iterator"]
