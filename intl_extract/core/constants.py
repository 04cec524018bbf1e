"""
Constant evaluation of literal-like expressions.

Named arguments of Intl calls (desc, name, meaning, examples, skip) are
evaluated to plain Python values when they are compile-time constants.
Anything else evaluates to NOT_A_CONSTANT and callers fall back to the
expression's source text.
"""

from typing import Any

from .nodes import NodeKind, SyntaxNode


class _NotAConstant:
    """Sentinel for expressions with no constant value."""

    def __repr__(self) -> str:
        return "NOT_A_CONSTANT"

    def __bool__(self) -> bool:
        return False


NOT_A_CONSTANT = _NotAConstant()


def evaluate(node: SyntaxNode) -> Any:
    """
    Evaluate a literal-like expression.

    Args:
        node: Expression node

    Returns:
        The Python value, or NOT_A_CONSTANT
    """
    kind = node.kind

    if kind == NodeKind.STRING_LITERAL:
        return node.value
    if kind == NodeKind.ADJACENT_STRINGS:
        parts = [evaluate(child) for child in node.children]
        if any(not isinstance(part, str) for part in parts):
            return NOT_A_CONSTANT
        return "".join(parts)
    if kind == NodeKind.INTEGER_LITERAL:
        return _parse_int(node.text)
    if kind == NodeKind.DOUBLE_LITERAL:
        try:
            return float(node.text)
        except ValueError:
            return NOT_A_CONSTANT
    if kind == NodeKind.BOOLEAN_LITERAL:
        return node.text.strip() == "true"
    if kind == NodeKind.NULL_LITERAL:
        return None
    if kind == NodeKind.LIST_LITERAL:
        items = [evaluate(child) for child in node.children]
        if any(item is NOT_A_CONSTANT for item in items):
            return NOT_A_CONSTANT
        return items
    if kind == NodeKind.MAP_LITERAL:
        return _evaluate_map(node)

    return NOT_A_CONSTANT


def evaluate_as_string(node: SyntaxNode):
    """Evaluate to a str, or None when the node is not a string constant."""
    value = evaluate(node)
    return value if isinstance(value, str) else None


def evaluate_as_map(node: SyntaxNode):
    """Evaluate to a dict, or None when the node is not a map constant."""
    value = evaluate(node)
    return value if isinstance(value, dict) else None


def _evaluate_map(node: SyntaxNode) -> Any:
    result = {}
    for entry in node.children:
        if entry.kind != NodeKind.MAP_ENTRY or len(entry.children) != 2:
            return NOT_A_CONSTANT
        key = evaluate(entry.children[0])
        value = evaluate(entry.children[1])
        if key is NOT_A_CONSTANT or value is NOT_A_CONSTANT:
            return NOT_A_CONSTANT
        try:
            result[key] = value
        except TypeError:
            # Unhashable key, e.g. a list literal
            return NOT_A_CONSTANT
    return result


def _parse_int(text: str) -> Any:
    text = text.strip()
    try:
        if text.lower().startswith('0x'):
            return int(text, 16)
        return int(text)
    except ValueError:
        return NOT_A_CONSTANT
