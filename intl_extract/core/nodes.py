"""
Syntax nodes — The minimal tree the message extractor walks.

Parsers fold their native trees into SyntaxNode instances over a closed
set of node kinds. The extraction engine only ever dispatches on
NodeKind, so any source of SyntaxNodes (tree-sitter, hand-built test
trees) drives the same traversal.

Usage:
    from intl_extract.core.nodes import NodeKind, SyntaxNode

    if node.kind == NodeKind.CALL and node.name == "message":
        ...
"""

from bisect import bisect_right
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Tuple


class NodeKind(Enum):
    """Closed set of node categories the extractor understands."""
    UNIT = "unit"

    # Declarations
    CLASS_DECLARATION = "class_declaration"
    FUNCTION_DECLARATION = "function_declaration"
    METHOD_DECLARATION = "method_declaration"
    FIELD_DECLARATION = "field_declaration"
    TOP_LEVEL_VARIABLE_DECLARATION = "top_level_variable_declaration"
    FUNCTION_LITERAL = "function_literal"

    # Invocations and references
    CALL = "call"
    NAMED_ARGUMENT = "named_argument"
    IDENTIFIER = "identifier"
    PREFIXED_IDENTIFIER = "prefixed_identifier"
    PROPERTY_ACCESS = "property_access"

    # Strings
    STRING_LITERAL = "string_literal"
    ADJACENT_STRINGS = "adjacent_strings"
    STRING_INTERPOLATION = "string_interpolation"
    INTERPOLATION_STRING = "interpolation_string"
    INTERPOLATION_EXPRESSION = "interpolation_expression"

    # Other literals
    INTEGER_LITERAL = "integer_literal"
    DOUBLE_LITERAL = "double_literal"
    BOOLEAN_LITERAL = "boolean_literal"
    NULL_LITERAL = "null_literal"
    LIST_LITERAL = "list_literal"
    MAP_LITERAL = "map_literal"
    MAP_ENTRY = "map_entry"

    OTHER = "other"


@dataclass(frozen=True)
class Parameter:
    """A formal parameter of a function or method declaration."""
    name: str
    is_named: bool = False


class LineInfo:
    """Maps byte offsets in a source buffer to one-based line/column."""

    def __init__(self, source: bytes):
        self._source = source
        self._line_starts = [0]
        for index, byte in enumerate(source):
            if byte == 0x0A:
                self._line_starts.append(index + 1)

    def location(self, offset: int) -> Tuple[int, int]:
        """Return (line, column) for a byte offset, both one-based."""
        line_index = bisect_right(self._line_starts, offset) - 1
        line_start = self._line_starts[line_index]
        prefix = self._source[line_start:offset].decode('utf-8', errors='replace')
        return line_index + 1, len(prefix) + 1

    @classmethod
    def from_text(cls, text: str) -> 'LineInfo':
        return cls(text.encode('utf-8'))


@dataclass
class SyntaxNode:
    """
    One node of the extractor's syntax tree.

    Kind-specific attributes are left at their defaults where they do
    not apply:

    Attributes:
        kind: Node category
        text: Source text covered by the node
        offset: Start byte offset in the unit
        end: End byte offset in the unit
        children: Child nodes in source order
        name: Declared name, identifier name, invoked method name or
            named-argument label
        prefix: Qualifier of a PREFIXED_IDENTIFIER (``prefix.name``)
        value: Decoded value of a string chunk
        target: Receiver of a CALL or PROPERTY_ACCESS
        arguments: Arguments of a CALL, positional and NAMED_ARGUMENT
        parameters: Formal parameters of a declaration or function
            literal, None for declarations that have none
        variables: Names bound by a variable declaration
        is_const: Whether a list/map literal is marked const
        line_info: Offset to line/column table, set on the UNIT
    """
    kind: NodeKind
    text: str = ""
    offset: int = 0
    end: int = 0
    children: List['SyntaxNode'] = field(default_factory=list)
    name: Optional[str] = None
    prefix: Optional[str] = None
    value: Any = None
    target: Optional['SyntaxNode'] = None
    arguments: List['SyntaxNode'] = field(default_factory=list)
    parameters: Optional[List[Parameter]] = None
    variables: List[str] = field(default_factory=list)
    is_const: bool = False
    line_info: Optional[LineInfo] = field(default=None, repr=False, compare=False)

    def __str__(self) -> str:
        return self.text

    @property
    def expression(self) -> Optional['SyntaxNode']:
        """The wrapped expression of a NAMED_ARGUMENT or INTERPOLATION_EXPRESSION."""
        return self.children[0] if self.children else None

    @property
    def positional_arguments(self) -> List['SyntaxNode']:
        return [arg for arg in self.arguments if arg.kind != NodeKind.NAMED_ARGUMENT]

    @property
    def named_arguments(self) -> List['SyntaxNode']:
        return [arg for arg in self.arguments if arg.kind == NodeKind.NAMED_ARGUMENT]


def call_children(target: Optional[SyntaxNode], arguments: List[SyntaxNode]) -> List[SyntaxNode]:
    """Children of a CALL node: receiver first, then arguments."""
    return ([target] if target is not None else []) + list(arguments)

