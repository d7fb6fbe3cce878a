"""Build the extraction syntax tree from a tree-sitter parse of Dart source.

The Dart grammar comes from ``tree-sitter-language-pack``. Only the
structure the pipeline needs is copied into the ``SyntaxTree`` arena:
calls with their callee chain and arguments, named-argument labels,
string literals, collection literals, class declarations, blocks and
directives. Every other grammar node is transparent; its children are
attached to the nearest kept ancestor.
"""

import re
from typing import Dict, List, NamedTuple, Optional, Tuple

from tree_sitter import Node
from tree_sitter_language_pack import get_parser

from ..core.syntax_tree import NodeKind, SyntaxTree

LANGUAGE = 'dart'

IDENTIFIER_TYPES = frozenset({'identifier', 'type_identifier'})
COMMENT_TYPES = frozenset({'comment', 'documentation_comment'})
CONST_TYPES = frozenset({'const_builtin', 'const'})
CLASS_TYPES = frozenset({'class_definition', 'mixin_declaration', 'enum_declaration', 'extension_declaration'})
DIRECTIVE_TYPES = frozenset({'import_or_export', 'part_directive', 'part_of_directive', 'library_name'})
COLLECTION_TYPES = frozenset({'list_literal', 'set_or_map_literal'})
ASSIGNABLE_SELECTOR_TYPES = frozenset({'unconditional_assignable_selector', 'conditional_assignable_selector'})
# Anonymous tokens allowed between the parts of a constructor or cascade callee
CALLEE_PUNCTUATION = frozenset({'.', '?.', '..', '?..', '@', '!'})

_DIRECTIVE_KEYWORD = re.compile(r'\b(import|export|part|library)\b')

_WHITESPACE = frozenset(b' \t\r\n\f\v')
_HEX_DIGITS = frozenset(b'0123456789abcdefABCDEF')
_SIMPLE_ESCAPES = {
    ord('n'): '\n', ord('r'): '\r', ord('f'): '\f', ord('b'): '\b',
    ord('t'): '\t', ord('v'): '\v',
}


class StringPiece(NamedTuple):
    """One quoted part of a string literal."""
    start: int
    end: int
    value: Optional[str]
    interpolated: bool
    raw: bool


def decode_escape(source: bytes, index: int) -> Tuple[str, int]:
    """
    Decode the escape sequence whose backslash is at ``index``.

    Returns the decoded text and the offset just past the sequence. Unknown
    escapes stand for the escaped character itself, as in Dart.
    """
    n = len(source)
    if index + 1 >= n:
        return '', n
    c = source[index + 1]
    if c in _SIMPLE_ESCAPES:
        return _SIMPLE_ESCAPES[c], index + 2
    if c == ord('x'):
        digits = source[index + 2:index + 4]
        if len(digits) == 2 and all(d in _HEX_DIGITS for d in digits):
            return chr(int(digits, 16)), index + 4
    elif c == ord('u'):
        if source[index + 2:index + 3] == b'{':
            close = source.find(b'}', index + 3)
            digits = source[index + 3:close] if close != -1 else b''
            if 1 <= len(digits) <= 6 and all(d in _HEX_DIGITS for d in digits):
                code_point = int(digits, 16)
                if code_point <= 0x10FFFF:
                    return chr(code_point), close + 1
        else:
            digits = source[index + 2:index + 6]
            if len(digits) == 4 and all(d in _HEX_DIGITS for d in digits):
                return chr(int(digits, 16)), index + 6
    if c >= 0x80:
        # Escaped non-ASCII character: keep the whole UTF-8 sequence
        k = index + 2
        while k < n and 0x80 <= source[k] < 0xC0:
            k += 1
        return source[index + 1:k].decode('utf-8', errors='replace'), k
    return chr(c), index + 2


class DartSyntaxBuilder:
    """
    Copy a tree-sitter Dart tree into a ``SyntaxTree``.

    ERROR and MISSING grammar nodes become parse errors on the tree;
    building never raises for malformed source.

    Usage:
        tree = DartSyntaxBuilder(source_text, 'lib/login_screen.dart').build()
    """

    def __init__(self, source_text: str, path: str = ''):
        self.source = source_text.encode('utf-8')
        self.tree = SyntaxTree(self.source, path)

    def build(self) -> SyntaxTree:
        parser = get_parser(LANGUAGE)
        root = parser.parse(self.source).root_node

        # Explicit stack: widget trees nest deeper than the recursion limit allows
        stack: List[Tuple[Node, int]] = [(root, self.tree.root)]
        while stack:
            node, parent = stack.pop()
            stack.extend(reversed(self._visit(node, parent)))
        return self.tree

    def _visit(self, node: Node, parent: int) -> List[Tuple[Node, int]]:
        """Add the arena node for ``node`` (if any) and return the children still to visit."""
        kind = node.type
        if node.is_missing:
            self.tree.add_error(node.start_byte, f"missing '{kind}'")
            return []
        if kind in COMMENT_TYPES:
            return []
        if kind == 'string_literal':
            self._add_string_literal(node, parent)
            return []
        if kind == 'arguments':
            return self._add_call(node, parent)

        if kind == 'ERROR':
            self.tree.add_error(node.start_byte, f"unexpected {self._snippet(node)!r}")
        elif kind in CLASS_TYPES:
            parent = self._add(NodeKind.CLASS, node, parent, name=self._declared_name(node))
        elif kind in DIRECTIVE_TYPES:
            match = _DIRECTIVE_KEYWORD.search(self._text(node))
            parent = self._add(NodeKind.DIRECTIVE, node, parent, name=match.group(1) if match else None)
        elif kind in COLLECTION_TYPES:
            parent = self._add_collection(node, parent)
        elif kind == 'block':
            parent = self._add(NodeKind.BLOCK, node, parent)
        elif kind == 'parenthesized_expression':
            parent = self._add(NodeKind.GROUP, node, parent)
        return [(child, parent) for child in node.children]

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _text(self, node: Node) -> str:
        return self.source[node.start_byte:node.end_byte].decode('utf-8', errors='replace')

    def _snippet(self, node: Node, limit: int = 30) -> str:
        text = ' '.join(self._text(node).split())
        return text if len(text) <= limit else text[:limit] + '...'

    def _add(self, kind: NodeKind, node: Node, parent: int, name: Optional[str] = None, **attrs) -> int:
        return self.tree.add_node(kind, node.start_byte, node.end_byte, parent, name=name, **attrs)

    def _declared_name(self, node: Node) -> Optional[str]:
        name_node = node.child_by_field_name('name')
        if name_node is None:
            name_node = next((c for c in node.named_children if c.type in IDENTIFIER_TYPES), None)
        return self._text(name_node) if name_node is not None else None

    def _identifiers(self, node: Node) -> List[str]:
        """Identifier texts inside ``node`` in source order, ignoring type arguments."""
        if node.type in IDENTIFIER_TYPES:
            return [self._text(node)]
        if node.type == 'type_arguments':
            return []
        names: List[str] = []
        for child in node.named_children:
            names.extend(self._identifiers(child))
        return names

    def _add_collection(self, node: Node, parent: int) -> int:
        attrs = {}
        first = node.children[0] if node.children else None
        if first is not None and first.type in CONST_TYPES and first.next_sibling is not None:
            attrs['const_span'] = (first.start_byte, first.next_sibling.start_byte)
        return self._add(NodeKind.LIST, node, parent, **attrs)

    # ------------------------------------------------------------------
    # Calls
    # ------------------------------------------------------------------

    def _add_call(self, arguments: Node, parent: int) -> List[Tuple[Node, int]]:
        callee = self._callee(arguments)
        if callee is None:
            group = self._add(NodeKind.GROUP, arguments, parent)
            return [(child, group) for child in arguments.children]

        name, qualifier, chain_start, const_node = callee
        attrs = {'callee_span': (chain_start.start_byte, arguments.start_byte)}
        if qualifier:
            attrs['qualifier'] = qualifier
        if const_node is not None:
            attrs['const_span'] = (const_node.start_byte, chain_start.start_byte)
        call = self.tree.add_node(
            NodeKind.CALL, chain_start.start_byte, arguments.end_byte, parent, name=name, **attrs
        )

        pending: List[Tuple[Node, int]] = []
        for child in arguments.children:
            if child.type == 'named_argument':
                label = next((c for c in child.named_children if c.type == 'label'), None)
                label_names = self._identifiers(label) if label is not None else []
                argument = self._add(NodeKind.ARGUMENT, child, call, name=label_names[0] if label_names else None)
                pending.extend((c, argument) for c in child.children if c.type != 'label')
            elif child.type == 'argument':
                argument = self._add(NodeKind.ARGUMENT, child, call)
                pending.extend((c, argument) for c in child.children)
            else:
                pending.append((child, call))
        return pending

    def _callee(self, arguments: Node) -> Optional[Tuple[str, Optional[str], Node, Optional[Node]]]:
        """
        Identify what an argument list invokes.

        Returns (name, qualifier, first node of the callee chain, const
        keyword node), or None when the arguments do not follow a name.
        """
        holder = arguments
        if holder.parent is not None and holder.parent.type == 'argument_part':
            holder = holder.parent
        if holder.parent is not None and holder.parent.type == 'selector':
            return self._chain_callee(holder.parent)
        return self._constructor_callee(holder)

    def _chain_callee(self, selector: Node) -> Optional[Tuple[str, Optional[str], Node, Optional[Node]]]:
        """Callee of ``a.b?.c!.d(...)``: the selectors are siblings after the primary."""
        previous = selector.prev_sibling
        if previous is None:
            return None
        if previous.type == 'selector':
            name_node = self._selector_name(previous)
        elif previous.type in IDENTIFIER_TYPES:
            name_node = previous
        else:
            name_node = None
        if name_node is None:
            return None

        first = selector
        while first.prev_sibling is not None and first.prev_sibling.type == 'selector':
            first = first.prev_sibling
        head = first.prev_sibling
        chain_start = head if head is not None and head.is_named and head.type not in COMMENT_TYPES else first

        qualifier = None
        if previous == first and chain_start == head and head.type in IDENTIFIER_TYPES:
            candidate = self._text(head)
            if candidate[:1].isupper():
                qualifier = candidate
        return self._text(name_node), qualifier, chain_start, None

    @staticmethod
    def _selector_name(selector: Node) -> Optional[Node]:
        for child in selector.named_children:
            if child.type in ASSIGNABLE_SELECTOR_TYPES:
                names = [c for c in child.named_children if c.type in IDENTIFIER_TYPES]
                return names[-1] if names else None
        return None

    def _constructor_callee(self, holder: Node) -> Optional[Tuple[str, Optional[str], Node, Optional[Node]]]:
        """Callee of ``const T.named(...)``, ``new T(...)``, ``@Meta(...)``, cascades and initializers."""
        parts: List[Node] = []
        const_node = None
        keyword = None
        sibling = holder.prev_sibling
        while sibling is not None:
            if sibling.type in CONST_TYPES:
                const_node = sibling
                break
            if sibling.type in COMMENT_TYPES or sibling.type in CALLEE_PUNCTUATION:
                sibling = sibling.prev_sibling
                continue
            if not sibling.is_named:
                # ``super(...)`` and ``this(...)`` in initializer lists
                if not parts and sibling.type in ('super', 'this'):
                    keyword = sibling
                break
            if sibling.type in ('new_builtin', 'argument_part', 'arguments', 'selector'):
                break
            parts.append(sibling)
            sibling = sibling.prev_sibling

        if keyword is not None:
            return keyword.type, None, keyword, None
        parts.reverse()
        names: List[str] = []
        for part in parts:
            names.extend(self._identifiers(part))
        if not names:
            return None

        qualifier = None
        if len(names) >= 2 and names[-2][:1].isupper():
            qualifier = names[-2]
        return names[-1], qualifier, parts[0], const_node

    # ------------------------------------------------------------------
    # String literals
    # ------------------------------------------------------------------

    def _add_string_literal(self, node: Node, parent: int) -> None:
        """
        Add one string node, or an adjacent-strings node over its pieces.

        The grammar reports adjacent literals (``'Hello ' 'World'``) as one
        node and marks ``$name``/``${expr}`` as template substitutions;
        quoting, escapes and the piece boundaries are read from the bytes.
        """
        substitutions = {c.start_byte: c.end_byte for c in node.children if c.type == 'template_substitution'}
        comments = {c.start_byte: c.end_byte for c in node.children if c.type in COMMENT_TYPES}

        pieces: List[StringPiece] = []
        i = node.start_byte
        while i < node.end_byte:
            if i in comments:
                i = comments[i]
            elif self.source[i] in _WHITESPACE:
                i += 1
            else:
                piece = self._scan_piece(i, node.end_byte, substitutions)
                if piece is None:
                    break
                pieces.append(piece)
                i = piece.end

        if not pieces:
            return
        if len(pieces) == 1:
            piece = pieces[0]
            self.tree.add_node(
                NodeKind.STRING, piece.start, piece.end, parent,
                value=piece.value, interpolated=piece.interpolated, raw=piece.raw,
            )
            return

        interpolated = any(p.interpolated for p in pieces)
        value = None if interpolated else ''.join(p.value for p in pieces)
        sequence = self.tree.add_node(
            NodeKind.ADJACENT_STRINGS, pieces[0].start, pieces[-1].end, parent,
            value=value, interpolated=interpolated,
        )
        for piece in pieces:
            self.tree.add_node(
                NodeKind.STRING, piece.start, piece.end, sequence,
                value=piece.value, interpolated=piece.interpolated, raw=piece.raw,
            )

    def _scan_piece(self, start: int, limit: int, substitutions: Dict[int, int]) -> Optional[StringPiece]:
        src = self.source
        i = start
        raw = src[i] in b'rR'
        if raw:
            i += 1
        quote = src[i:i + 1]
        if quote not in (b"'", b'"'):
            return None
        delimiter = quote * 3 if src.startswith(quote * 3, i) else quote
        i += len(delimiter)

        if len(delimiter) == 3:
            # A line break right after the opening quotes is not part of the value
            k = i
            while k < limit and src[k] in b' \t':
                k += 1
            if src.startswith(b'\r\n', k):
                i = k + 2
            elif src.startswith(b'\n', k):
                i = k + 1

        parts: List[str] = []
        interpolated = False
        segment = i
        while i < limit:
            if src.startswith(delimiter, i):
                parts.append(src[segment:i].decode('utf-8', errors='replace'))
                value = None if interpolated else ''.join(parts)
                return StringPiece(start, i + len(delimiter), value, interpolated, raw)
            if i in substitutions:
                parts.append(src[segment:i].decode('utf-8', errors='replace'))
                interpolated = True
                i = substitutions[i]
                segment = i
                continue
            if src[i] == 0x5C and not raw:  # backslash
                parts.append(src[segment:i].decode('utf-8', errors='replace'))
                text, i = decode_escape(src, i)
                parts.append(text)
                segment = i
                continue
            i += 1

        self.tree.add_error(start, 'unterminated string literal')
        parts.append(src[segment:limit].decode('utf-8', errors='replace'))
        value = None if interpolated else ''.join(parts)
        return StringPiece(start, limit, value, interpolated, raw)
