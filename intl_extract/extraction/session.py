"""
Extraction session — One extraction run over one source unit.

Holds the configuration, the origin label used in diagnostics, the
accumulated warnings and the parsed unit (for line/column lookup).

Usage:
    from intl_extract.extraction import ExtractionSession

    session = ExtractionSession()
    messages = session.parse_file("lib/messages.dart")
    for warning in session.warnings:
        ...
"""

from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple, Union

from ..config import ExtractionConfig
from ..core.nodes import SyntaxNode
from ..core.parsing import parse_dart
from ..messages import MainMessage
from .visitor import MessageFindingVisitor


OnMessage = Callable[[str], None]

# Files without this marker cannot contain messages and are not parsed
INTL_MARKER = "Intl."


class SourceParseError(ValueError):
    """A unit failed to parse; nothing was extracted from it."""

    def __init__(self, origin: Optional[str], errors: List[str]):
        self.origin = origin
        self.errors = list(errors)
        super().__init__(f"Parsing errors in {origin}")


class ExtractionSession:
    """
    State for extracting messages from one unit.

    Warnings are always recorded in ``warnings``; ``on_message`` is only
    called for them when warnings are not suppressed.
    """

    def __init__(self, config: Optional[ExtractionConfig] = None, on_message: OnMessage = print):
        self.config = config or ExtractionConfig()
        self.on_message = on_message
        self.warnings: List[str] = []
        self.origin: Optional[str] = None
        self.root: Optional[SyntaxNode] = None

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    @property
    def failed(self) -> bool:
        """True when warnings count as errors and there were warnings."""
        return self.config.warnings_are_errors and self.has_warnings

    # =========================================================================
    # Entry points
    # =========================================================================

    def parse_file(self, path: Union[str, Path], generate_names: bool = False) -> Dict[str, MainMessage]:
        """Extract messages from a UTF-8 Dart file."""
        path = Path(path)
        content = path.read_text(encoding='utf-8')
        return self.parse_content(content, str(path), generate_names)

    def parse_content(self, content: str, origin: Optional[str],
                      generate_names: bool = False) -> Dict[str, MainMessage]:
        """
        Extract messages from Dart source text.

        Args:
            content: Source text
            origin: Label used in diagnostics, usually the file path
            generate_names: Take names and args from the enclosing
                declaration instead of requiring them in source

        Returns:
            Messages keyed by name

        Raises:
            SourceParseError: If the source does not parse
        """
        self.origin = origin
        if INTL_MARKER not in content:
            return {}

        result = parse_dart(content)
        if result.errors:
            print(f"Error in parsing {origin}, no messages extracted.")
            raise SourceParseError(origin, result.errors)

        return self.extract_unit(result.unit, generate_names)

    def extract_unit(self, unit: SyntaxNode, generate_names: bool = False) -> Dict[str, MainMessage]:
        """Extract messages from an already parsed unit."""
        self.root = unit
        visitor = MessageFindingVisitor(self, generate_names)
        visitor.visit(unit)
        return visitor.messages

    # =========================================================================
    # Diagnostics
    # =========================================================================

    def report_location(self, node: SyntaxNode) -> str:
        """'    from <origin>    line: L, column: C' for a node."""
        parts = []
        if self.origin is not None:
            parts.append(f"    from {self.origin}")
        line_info = self.root.line_info if self.root is not None else None
        if line_info is not None:
            line, column = line_info.location(node.offset)
            parts.append(f"    line: {line}, column: {column}")
        return "".join(parts)

    def report_skipped(self, node: SyntaxNode, reason: str) -> None:
        """Record a candidate call that yielded no message."""
        self.warn(
            "Skipping invalid Intl.message invocation\n"
            f"    <{node.text}>\n"
            f"    reason: {reason}\n"
            f"{self.report_location(node)}"
        )

    def warn(self, text: str) -> None:
        self.warnings.append(text)
        if not self.config.suppress_warnings:
            self.on_message(text)


def extract(
    source: Union[str, SyntaxNode],
    origin: Optional[str] = None,
    generate_names: bool = False,
    config: Optional[ExtractionConfig] = None,
    on_message: OnMessage = print,
) -> Tuple[Dict[str, MainMessage], List[str]]:
    """
    Extract messages from Dart source text or a parsed unit.

    Returns:
        (messages keyed by name, warnings)

    Raises:
        SourceParseError: If the source text does not parse
    """
    session = ExtractionSession(config, on_message)
    if isinstance(source, SyntaxNode):
        session.origin = origin
        messages = session.extract_unit(source, generate_names)
    else:
        messages = session.parse_content(source, origin, generate_names)
    return messages, session.warnings
