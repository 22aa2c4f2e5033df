"""
Helpers for reading tree-sitter nodes.

Lines are reported 1-based and columns 0-based. tree-sitter reports columns
as byte offsets; ``SourceText`` converts them to character offsets so
positions match what an editor shows for non-ASCII source.
"""

from tree_sitter import Node, Tree

from ..errors import SourceSyntaxError


class SourceText:
    """UTF-8 encoded source plus position conversion helpers."""

    def __init__(self, text: str):
        self.text = text
        self.data: bytes = text.encode("utf-8", errors="surrogatepass")

    def column(self, byte_offset: int) -> int:
        line_start = self.data.rfind(b"\n", 0, byte_offset) + 1
        return len(self.data[line_start:byte_offset].decode("utf-8", errors="replace"))

    def span(self, node: Node) -> tuple[int, int, int, int]:
        """(start_line, end_line, start_column, end_column) of a node."""
        return (
            node.start_point[0] + 1,
            node.end_point[0] + 1,
            self.column(node.start_byte),
            self.column(node.end_byte),
        )


def node_text(node: Node | None) -> str | None:
    """Decoded text of a node, or None."""
    if node is None or node.text is None:
        return None
    return node.text.decode("utf-8", errors="replace")


def field_text(node: Node, field_name: str) -> str | None:
    return node_text(node.child_by_field_name(field_name))


def first_child_of_type(node: Node, *types: str) -> Node | None:
    for child in node.children:
        if child.type in types:
            return child
    return None


def has_token(node: Node, token: str) -> bool:
    """True if one of the node's direct (anonymous) children is ``token``."""
    return any(not child.is_named and child.type == token for child in node.children)


def string_value(node: Node) -> str:
    """Contents of a string literal node without its quotes."""
    fragments = [c for c in node.named_children if c.type == "string_fragment"]
    if fragments:
        return "".join(node_text(c) or "" for c in fragments)
    text = node_text(node) or ""
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "'\"`":
        return text[1:-1]
    return text


def find_first_error(node: Node) -> Node | None:
    """Depth-first search for the first ERROR or MISSING node."""
    stack = [node]
    while stack:
        current = stack.pop()
        if current.is_error or current.is_missing:
            return current
        stack.extend(
            child
            for child in reversed(current.children)
            if child.has_error or child.is_missing
        )
    return None


def raise_on_syntax_error(tree: Tree, source: SourceText) -> None:
    """Raise ``SourceSyntaxError`` if the tree contains any error node."""
    root = tree.root_node
    if not root.has_error:
        return

    error_node = find_first_error(root) or root
    line = error_node.start_point[0] + 1
    column = source.column(error_node.start_byte)

    if error_node.is_missing:
        message = f"Missing {error_node.type!r} ({line}:{column})"
    else:
        token = (node_text(error_node) or "").strip().splitlines()
        snippet = token[0][:40] if token else ""
        message = (
            f"Unexpected token {snippet!r} ({line}:{column})"
            if snippet
            else f"Unexpected end of input ({line}:{column})"
        )
    raise SourceSyntaxError(message, line=line, column=column)
