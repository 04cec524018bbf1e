"""
Message base — Behaviour shared by all message kinds.

A message body is a list of pieces:
- str: literal text
- int: zero-based index into the message's arguments
- SubMessage: a nested Intl.plural / Intl.gender / Intl.select

Sub-messages point back at the message that contains them. The link is
a weak reference: the containing message owns its pieces, the back
reference is only used to find the argument names.
"""

import weakref
from typing import List, Optional, Sequence, Union, TYPE_CHECKING

from ..core.constants import evaluate_as_map, evaluate_as_string
from ..core.nodes import NodeKind, Parameter, SyntaxNode
from .naming import class_plus_method_name

if TYPE_CHECKING:
    from .sub import SubMessage


MessagePiece = Union[str, int, 'SubMessage']

STRING_KINDS = frozenset({
    NodeKind.STRING_LITERAL,
    NodeKind.ADJACENT_STRINGS,
    NodeKind.STRING_INTERPOLATION,
})

_CODE_ESCAPES = {
    '\\': '\\\\',
    '"': '\\"',
    '\b': '\\b',
    '\f': '\\f',
    '\n': '\\n',
    '\r': '\\r',
    '\t': '\\t',
    '\v': '\\v',
    "'": "\\'",
    '$': '\\$',
}


class MessageExtractionError(Exception):
    """
    Raised when a message call cannot be turned into a message.

    Carries one reason per failure so that a select-family call with
    several broken cases reports each of them.
    """

    def __init__(self, reasons: Union[str, Sequence[str]]):
        self.reasons: List[str] = [reasons] if isinstance(reasons, str) else list(reasons)
        super().__init__("\n".join(self.reasons))


def escape_string(value: str) -> str:
    """Escape text for a single-quoted Dart string literal."""
    return "".join(_CODE_ESCAPES.get(char, char) for char in value)


def pieces_to_code(pieces: Sequence[MessagePiece], arguments: Sequence[str]) -> str:
    """Turn pieces back into the body of a Dart interpolated string."""
    out = []
    for piece in pieces:
        if isinstance(piece, str):
            out.append(escape_string(piece))
        elif isinstance(piece, int):
            out.append("${" + _argument_name(piece, arguments) + "}")
        else:
            out.append("${" + piece.to_code() + "}")
    return "".join(out)


def pieces_to_icu(pieces: Sequence[MessagePiece], arguments: Sequence[str]) -> str:
    """Turn pieces into ICU MessageFormat text."""
    out = []
    for piece in pieces:
        if isinstance(piece, str):
            out.append(piece)
        elif isinstance(piece, int):
            out.append("{" + _argument_name(piece, arguments) + "}")
        else:
            out.append(piece.expanded())
    return "".join(out)


def _argument_name(index: int, arguments: Sequence[str]) -> str:
    if 0 <= index < len(arguments):
        return arguments[index]
    return f"<{index}>"


class Message:
    """Common base of MainMessage and the select-family sub-messages."""

    # Human name of the Dart call, for diagnostics
    dart_message_name = "Intl.message"

    def __init__(self, parent: Optional['Message'] = None):
        self._parent_ref = None
        self.parent = parent

    @property
    def parent(self) -> Optional['Message']:
        return self._parent_ref() if self._parent_ref is not None else None

    @parent.setter
    def parent(self, value: Optional['Message']) -> None:
        self._parent_ref = weakref.ref(value) if value is not None else None

    @property
    def arguments(self) -> List[str]:
        """Argument names, inherited from the enclosing message."""
        parent = self.parent
        return parent.arguments if parent is not None else []

    def check_validity(
        self,
        node: SyntaxNode,
        arguments: List[SyntaxNode],
        outer_name: Optional[str],
        outer_parameters: List[Parameter],
        class_name: Optional[str] = None,
        name_and_args_generated: bool = False,
        examples_required: bool = False,
    ) -> Optional[str]:
        """
        Check the shape of an Intl call before extracting it.

        Args:
            node: The CALL node
            arguments: The call's arguments
            outer_name: Name of the enclosing declaration
            outer_parameters: Parameters of the enclosing declaration
            class_name: Name of the enclosing class, if any
            name_and_args_generated: Names/args are generated from the
                declaration rather than required in source
            examples_required: Messages with parameters need examples

        Returns:
            Reason the call is invalid, or None if it looks valid
        """
        args_node = _named(arguments, 'args')
        parameter_names = [parameter.name for parameter in outer_parameters]
        has_parameters = bool(outer_parameters)

        if not name_and_args_generated and args_node is None and has_parameters:
            return ("The 'args' argument for Intl.message must be specified for "
                    "messages with parameters.")
        if not self._check_args(args_node, parameter_names):
            return ("The 'args' argument must match the message arguments,"
                    f" e.g. args: [{', '.join(parameter_names)}]")

        name_node = _named(arguments, 'name')
        given_name: Optional[str] = None
        if name_node is None:
            if not has_parameters:
                # No name and no parameters: the text is the name
                positional = [arg for arg in arguments if arg.kind != NodeKind.NAMED_ARGUMENT]
                message_name = evaluate_as_string(positional[0]) if positional else None
                outer_name = message_name
            elif name_and_args_generated:
                given_name = outer_name
                message_name = given_name
            else:
                return ("The 'name' argument for Intl.message must be supplied for "
                        "messages with parameters.")
        else:
            given_name = evaluate_as_string(name_node.expression) if name_node.expression else None
            message_name = given_name

        if message_name is None:
            return "The 'name' argument for Intl.message must be a string literal"

        simple_match = outer_name == given_name or given_name is None
        class_plus_method = class_plus_method_name(class_name, outer_name)
        class_match = class_plus_method is not None and given_name == class_plus_method
        if not (outer_name is not None and (simple_match or class_match)):
            return ("The 'name' argument for Intl.message must match either "
                    "the name of the containing function or <ClassName>_<methodName> "
                    f"('{given_name}' vs. '{outer_name}')")

        for label in ('desc', 'name'):
            named = _named(arguments, label)
            if named is not None and (named.expression is None
                                      or evaluate_as_string(named.expression) is None):
                return f"Intl.message arguments must be string literals: {named.text}"

        if has_parameters:
            examples = _named(arguments, 'examples')
            if examples is None:
                if examples_required:
                    return "Examples must be provided for messages with parameters"
            else:
                example = examples.expression
                if example is None or evaluate_as_map(example) is None:
                    return "Examples must be a const Map literal."
                if not example.is_const:
                    return "Examples must be const."
        return None

    @staticmethod
    def _check_args(args_node: Optional[SyntaxNode], parameter_names: List[str]) -> bool:
        """args: must list the declaration's parameters, in order."""
        if args_node is None:
            return True
        expression = args_node.expression
        if expression is None or expression.kind != NodeKind.LIST_LITERAL:
            return False
        names = []
        for element in expression.children:
            if element.kind != NodeKind.IDENTIFIER:
                return False
            names.append(element.name)
        return names == parameter_names


def _named(arguments: List[SyntaxNode], label: str) -> Optional[SyntaxNode]:
    for argument in arguments:
        if argument.kind == NodeKind.NAMED_ARGUMENT and argument.name == label:
            return argument
    return None
