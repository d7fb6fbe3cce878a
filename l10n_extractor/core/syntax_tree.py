"""Arena-backed syntax tree shared by source parsers and the extraction pipeline.

Nodes live in a flat list and refer to each other by integer id. Every node
stores the id of its parent, so upward walks are plain index lookups.
Offsets are UTF-8 byte offsets into the encoded source.
"""

from bisect import bisect_right
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple

NO_PARENT = -1


class NodeKind(str, Enum):
    """Kinds of nodes a parser may place in the arena."""

    UNIT = 'unit'
    DIRECTIVE = 'directive'
    CLASS = 'class'
    BLOCK = 'block'
    GROUP = 'group'
    LIST = 'list'
    CALL = 'call'
    ARGUMENT = 'argument'
    STRING = 'string'
    ADJACENT_STRINGS = 'adjacent_strings'


LITERAL_KINDS = (NodeKind.STRING, NodeKind.ADJACENT_STRINGS)


@dataclass
class SyntaxNode:
    """A single node in the arena."""
    id: int
    kind: NodeKind
    start: int
    end: int
    parent: int = NO_PARENT
    name: Optional[str] = None
    attrs: Dict[str, Any] = field(default_factory=dict)
    children: List[int] = field(default_factory=list)

    @property
    def length(self) -> int:
        return self.end - self.start


@dataclass
class ParseError:
    """A recoverable syntax problem reported by a parser."""
    offset: int
    message: str
    line: int = 0

    def __str__(self) -> str:
        return f"line {self.line}: {self.message}"


class LineIndex:
    """
    Maps byte offsets to 1-based (line, column) positions.

    Newline positions are collected in a single forward scan when the index
    is built; every lookup afterwards is a binary search.
    """

    def __init__(self, source: bytes):
        self._source = source
        self._line_starts = [0]
        position = source.find(b'\n')
        while position != -1:
            self._line_starts.append(position + 1)
            position = source.find(b'\n', position + 1)

    @property
    def line_count(self) -> int:
        return len(self._line_starts)

    def line_of(self, offset: int) -> int:
        """Return the 1-based line containing a byte offset."""
        return bisect_right(self._line_starts, offset)

    def position(self, offset: int) -> Tuple[int, int]:
        """
        Return the 1-based (line, column) for a byte offset.

        Columns count characters, not bytes, so multi-byte text before the
        offset on the same line advances the column by one per character.
        """
        line = self.line_of(offset)
        line_start = self._line_starts[line - 1]
        prefix = self._source[line_start:offset].decode('utf-8', errors='replace')
        return line, len(prefix) + 1


class SyntaxTree:
    """
    Flat node arena produced by a parser for one source file.

    Node 0 is always the compilation unit covering the whole file.
    """

    def __init__(self, source: bytes, path: str = ''):
        self.source = source
        self.path = path
        self.nodes: List[SyntaxNode] = []
        self.errors: List[ParseError] = []
        self._line_index: Optional[LineIndex] = None
        self.add_node(NodeKind.UNIT, 0, len(source))

    @property
    def root(self) -> int:
        return 0

    @property
    def line_index(self) -> LineIndex:
        if self._line_index is None:
            self._line_index = LineIndex(self.source)
        return self._line_index

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def add_node(
        self,
        kind: NodeKind,
        start: int,
        end: int,
        parent: int = NO_PARENT,
        name: Optional[str] = None,
        **attrs: Any
    ) -> int:
        """
        Append a node to the arena and link it under its parent.

        Args:
            kind: Node kind
            start: Start byte offset (inclusive)
            end: End byte offset (exclusive)
            parent: Parent node id, or NO_PARENT for the root
            name: Optional name (call name, argument label, class name)
            **attrs: Kind-specific attributes

        Returns:
            Id of the new node
        """
        node_id = len(self.nodes)
        self.nodes.append(SyntaxNode(node_id, kind, start, end, parent, name, dict(attrs)))
        if parent != NO_PARENT:
            self.nodes[parent].children.append(node_id)
        return node_id

    def add_error(self, offset: int, message: str) -> None:
        line = self.line_index.line_of(offset)
        self.errors.append(ParseError(offset=offset, message=message, line=line))

    def node(self, node_id: int) -> SyntaxNode:
        return self.nodes[node_id]

    def kind(self, node_id: int) -> NodeKind:
        return self.nodes[node_id].kind

    def parent(self, node_id: int) -> int:
        return self.nodes[node_id].parent

    def children(self, node_id: int) -> List[int]:
        return self.nodes[node_id].children

    def ancestors(self, node_id: int) -> Iterator[int]:
        """Yield ancestor ids from the parent up to the root."""
        current = self.nodes[node_id].parent
        while current != NO_PARENT:
            yield current
            current = self.nodes[current].parent

    def span(self, node_id: int) -> Tuple[int, int]:
        """Return (byte_offset, byte_length) of a node."""
        node = self.nodes[node_id]
        return node.start, node.length

    def slice(self, start: int, end: int) -> str:
        """Decode a byte range of the source."""
        return self.source[start:end].decode('utf-8', errors='replace')

    def text(self, node_id: int) -> str:
        node = self.nodes[node_id]
        return self.slice(node.start, node.end)

    def position(self, offset: int) -> Tuple[int, int]:
        return self.line_index.position(offset)

    def iter_nodes(self, kind: Optional[NodeKind] = None) -> Iterator[SyntaxNode]:
        for node in self.nodes:
            if kind is None or node.kind == kind:
                yield node

    def literals(self) -> List[int]:
        """
        Return literal node ids in document order.

        Strings that belong to an adjacent-strings sequence are represented
        by the sequence node only.
        """
        found = []
        for node in self.nodes:
            if node.kind == NodeKind.ADJACENT_STRINGS:
                found.append(node)
            elif node.kind == NodeKind.STRING:
                if node.parent == NO_PARENT or self.nodes[node.parent].kind != NodeKind.ADJACENT_STRINGS:
                    found.append(node)
        found.sort(key=lambda n: n.start)
        return [n.id for n in found]

    def literal_value(self, node_id: int) -> Optional[str]:
        """Decoded value of a literal node, or None for interpolated literals."""
        node = self.nodes[node_id]
        if node.attrs.get('interpolated'):
            return None
        return node.attrs.get('value')

    def is_interpolated(self, node_id: int) -> bool:
        return bool(self.nodes[node_id].attrs.get('interpolated'))

    def arguments(self, call_id: int) -> List[Tuple[Optional[str], Optional[int]]]:
        """
        Return the argument bindings of a call node.

        Each binding is (label, value node id); the label is None for
        positional arguments and the value id is None when the argument
        holds no structural node (a bare identifier or number).
        """
        bindings = []
        for child_id in self.nodes[call_id].children:
            child = self.nodes[child_id]
            if child.kind != NodeKind.ARGUMENT:
                continue
            value_id = child.children[0] if child.children else None
            bindings.append((child.name, value_id))
        return bindings
