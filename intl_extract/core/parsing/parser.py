"""
Dart parsing via tree-sitter-language-pack.

parse_dart() turns source text into a SyntaxNode UNIT plus a list of
syntax diagnostics. Callers treat a non-empty diagnostic list as fatal
for that unit.

Usage:
    from intl_extract.core.parsing import parse_dart

    result = parse_dart(source_text)
    if result.errors:
        ...
    unit = result.unit
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, TYPE_CHECKING

from ..nodes import SyntaxNode
from .dart import DartTreeBuilder

if TYPE_CHECKING:
    from tree_sitter import Node, Parser


DART_GRAMMAR = "dart"
MAX_REPORTED_ERRORS = 10

# Lazy import for tree-sitter-language-pack
_language_pack_available = None
_parsers: Dict[str, 'Parser'] = {}


def _check_language_pack() -> bool:
    """Check if tree-sitter-language-pack is available."""
    global _language_pack_available
    if _language_pack_available is None:
        try:
            import tree_sitter_language_pack  # noqa: F401
            _language_pack_available = True
        except ImportError:
            _language_pack_available = False
    return _language_pack_available


def is_available() -> bool:
    """Check if Dart parsing is available."""
    return _check_language_pack()


def _get_parser(grammar: str) -> 'Parser':
    """
    Get tree-sitter parser for a grammar (lazy-loaded).

    Raises:
        RuntimeError: If tree-sitter-language-pack is not installed
    """
    if grammar in _parsers:
        return _parsers[grammar]

    if not _check_language_pack():
        raise RuntimeError(
            "tree-sitter-language-pack is not installed; "
            "install it to extract messages from Dart source"
        )

    from tree_sitter_language_pack import get_parser
    parser = get_parser(grammar)
    _parsers[grammar] = parser
    return parser


@dataclass
class ParseResult:
    """Outcome of parsing one unit."""
    unit: Optional[SyntaxNode]
    errors: List[str] = field(default_factory=list)


def parse_dart(content: str) -> ParseResult:
    """
    Parse Dart source text.

    Args:
        content: Source text

    Returns:
        ParseResult with the UNIT node, or syntax errors and no unit
    """
    source = content.encode('utf-8')
    tree = _get_parser(DART_GRAMMAR).parse(source)
    root = tree.root_node

    if root.has_error:
        return ParseResult(unit=None, errors=_collect_errors(root))

    return ParseResult(unit=DartTreeBuilder(source).build(root))


def _collect_errors(root: 'Node') -> List[str]:
    """Describe ERROR and MISSING nodes, outermost first."""
    errors: List[str] = []
    stack = [root]
    while stack and len(errors) < MAX_REPORTED_ERRORS:
        node = stack.pop()
        line, column = node.start_point[0] + 1, node.start_point[1] + 1
        if node.is_missing:
            errors.append(f"line {line}, column {column}: missing {node.type}")
        elif node.type == 'ERROR':
            errors.append(f"line {line}, column {column}: unexpected syntax")
        elif node.has_error:
            stack.extend(reversed(node.children))
    return errors or ["unknown syntax error"]
