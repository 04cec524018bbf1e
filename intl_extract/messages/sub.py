"""
Select-family messages — Intl.plural, Intl.gender and Intl.select.

Each switches on a main argument and holds one piece list per case.
"""

from typing import Dict, List, Optional, Tuple

from ..core.constants import evaluate_as_string
from ..core.nodes import NodeKind, SyntaxNode
from .base import Message, MessagePiece, escape_string, pieces_to_code, pieces_to_icu


class SubMessage(Message):
    """Base of the case-keyed message kinds."""

    kind = ""
    icu_message_name = ""

    # Case names as written in Dart, in canonical order
    case_names: Tuple[str, ...] = ()

    def __init__(self, parent: Optional[Message] = None, main_argument: Optional[str] = None):
        super().__init__(parent)
        self.main_argument = main_argument
        self.cases: Dict[str, List[MessagePiece]] = {}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(main_argument={self.main_argument!r}, cases={self.cases!r})"

    def __eq__(self, other) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.main_argument == other.main_argument and self.cases == other.cases

    __hash__ = None

    @property
    def attribute_names(self) -> List[str]:
        return list(self.case_names)

    def case_name(self, key: str) -> Optional[str]:
        """Canonical case name for a Dart argument label, or None."""
        return key if key in self.case_names else None

    def __setitem__(self, key: str, pieces: List[MessagePiece]) -> None:
        name = self.case_name(key)
        if name is None:
            return
        for piece in pieces:
            if isinstance(piece, SubMessage):
                piece.parent = self
        self.cases[name] = list(pieces)

    def __getitem__(self, key: str) -> Optional[List[MessagePiece]]:
        name = self.case_name(key)
        return self.cases.get(name) if name is not None else None

    def arguments_of_interest(self, node: SyntaxNode) -> Dict[str, SyntaxNode]:
        """The case bodies of a call, keyed by case label."""
        result: Dict[str, SyntaxNode] = {}
        for argument in node.arguments:
            if (argument.kind == NodeKind.NAMED_ARGUMENT
                    and argument.expression is not None
                    and self.case_name(argument.name) is not None):
                result[argument.name] = argument.expression
        return result

    def ordered_cases(self) -> List[Tuple[str, List[MessagePiece]]]:
        known = [(name, self.cases[name]) for name in self.case_names if name in self.cases]
        extra = [(name, pieces) for name, pieces in self.cases.items() if name not in self.case_names]
        return known + extra

    def validate(self, argument_count: int) -> List[str]:
        """Reasons this message is malformed; empty when valid."""
        errors = []
        if self.main_argument is None:
            errors.append(f"{self.dart_message_name} has no main argument")
        if "other" not in self.cases:
            errors.append(f"{self.dart_message_name} requires an 'other' case")
        return errors

    def icu_case_name(self, name: str) -> str:
        return name

    def to_code(self) -> str:
        arguments = self.arguments
        cases = ", ".join(
            f"{name}: '{pieces_to_code(pieces, arguments)}'"
            for name, pieces in self.ordered_cases()
        )
        return f"{self.dart_message_name}({self.main_argument}, {cases})"

    def expanded(self) -> str:
        """ICU form: {arg,plural, =0{...} other{...}}"""
        arguments = self.arguments
        cases = " ".join(
            f"{self.icu_case_name(name)}{{{pieces_to_icu(pieces, arguments)}}}"
            for name, pieces in self.ordered_cases()
        )
        selector = (self.main_argument or "").strip("'\"")
        return f"{{{selector},{self.icu_message_name}, {cases}}}"


class Plural(SubMessage):
    """Intl.plural(howMany, zero: ..., one: ..., other: ...)"""

    kind = "plural"
    dart_message_name = "Intl.plural"
    icu_message_name = "plural"
    case_names = ("zero", "one", "two", "few", "many", "other")

    _ALIASES = {"=0": "zero", "=1": "one", "=2": "two"}
    _ICU_NAMES = {"zero": "=0", "one": "=1", "two": "=2"}

    def case_name(self, key: str) -> Optional[str]:
        key = self._ALIASES.get(key, key)
        return key if key in self.case_names else None

    def icu_case_name(self, name: str) -> str:
        return self._ICU_NAMES.get(name, name)


class Gender(SubMessage):
    """Intl.gender(gender, female: ..., male: ..., other: ...)"""

    kind = "gender"
    dart_message_name = "Intl.gender"
    icu_message_name = "select"
    case_names = ("female", "male", "other")


class Select(SubMessage):
    """Intl.select(choice, {'a': ..., 'other': ...})"""

    kind = "select"
    dart_message_name = "Intl.select"
    icu_message_name = "select"

    @property
    def attribute_names(self) -> List[str]:
        return list(self.cases.keys())

    def case_name(self, key: str) -> Optional[str]:
        return key if key else None

    def arguments_of_interest(self, node: SyntaxNode) -> Dict[str, SyntaxNode]:
        """Entries of the cases map, the second positional argument."""
        result: Dict[str, SyntaxNode] = {}
        positional = node.positional_arguments
        if len(positional) < 2 or positional[1].kind != NodeKind.MAP_LITERAL:
            return result
        for entry in positional[1].children:
            if entry.kind != NodeKind.MAP_ENTRY or len(entry.children) != 2:
                continue
            key_node, value_node = entry.children
            key = evaluate_as_string(key_node)
            if key is None and key_node.kind == NodeKind.IDENTIFIER:
                key = key_node.name
            if key is not None:
                result[key] = value_node
        return result

    def to_code(self) -> str:
        arguments = self.arguments
        cases = ", ".join(
            f"'{escape_string(name)}': '{pieces_to_code(pieces, arguments)}'"
            for name, pieces in self.ordered_cases()
        )
        return f"{self.dart_message_name}({self.main_argument}, {{{cases}}})"


SUB_MESSAGE_KINDS = {
    "plural": Plural,
    "gender": Gender,
    "select": Select,
}
