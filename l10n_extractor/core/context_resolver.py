"""Resolve the structural context of a literal from its ancestors."""

from dataclasses import dataclass
from typing import Optional

from .syntax_tree import NodeKind, SyntaxTree

DEFAULT_WINDOW = 50


@dataclass(frozen=True)
class StructuralContext:
    """Where a literal sits in the widget tree."""
    structural_type: Optional[str]
    parameter_name: Optional[str]
    surrounding_text: str
    enclosing_type: Optional[str] = None
    enclosing_parameter: Optional[str] = None
    enclosing_class: Optional[str] = None


def call_type_name(tree: SyntaxTree, call_id: int) -> Optional[str]:
    """
    Name a call node the way the role tables expect.

    Named constructors (``ElevatedButton.icon(...)``) are reported by
    their type name; everything else by the invoked name.
    """
    node = tree.node(call_id)
    return node.attrs.get('qualifier') or node.name


def surrounding_text(tree: SyntaxTree, node_id: int, window: int = DEFAULT_WINDOW) -> str:
    """Flatten a byte window around a node into single-spaced text."""
    node = tree.node(node_id)
    start = max(0, node.start - window)
    end = min(len(tree.source), node.end + window)
    # A window edge may split a multi-byte character
    text = tree.source[start:end].decode('utf-8', errors='ignore')
    return ' '.join(text.split())


def resolve(tree: SyntaxTree, node_id: int, window: int = DEFAULT_WINDOW) -> StructuralContext:
    """
    Walk up from a literal to the nearest call and the label that binds it.

    The nearest call is authoritative: a literal nested two calls deep is
    attributed to the inner call. The next call outward and the nearest
    class declaration are recorded as well.

    Args:
        tree: Parsed file
        node_id: Literal node id
        window: Bytes of context on each side for ``surrounding_text``

    Returns:
        StructuralContext for the literal
    """
    structural_type = None
    parameter_name = None
    enclosing_type = None
    enclosing_parameter = None
    enclosing_class = None
    label = None

    for ancestor_id in tree.ancestors(node_id):
        ancestor = tree.node(ancestor_id)
        if ancestor.kind == NodeKind.ARGUMENT:
            if label is None and ancestor.name:
                label = ancestor.name
        elif ancestor.kind == NodeKind.CALL:
            if structural_type is None:
                structural_type = call_type_name(tree, ancestor_id)
                parameter_name = label
            elif enclosing_type is None:
                enclosing_type = call_type_name(tree, ancestor_id)
                enclosing_parameter = label
            label = None
        elif ancestor.kind == NodeKind.CLASS:
            enclosing_class = ancestor.name
            break

    return StructuralContext(
        structural_type=structural_type,
        parameter_name=parameter_name,
        surrounding_text=surrounding_text(tree, node_id, window),
        enclosing_type=enclosing_type,
        enclosing_parameter=enclosing_parameter,
        enclosing_class=enclosing_class,
    )
