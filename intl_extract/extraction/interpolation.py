"""
Interpolation decomposition — String expressions to message pieces.

InterpolationDecomposer handles one string-valued expression and only
looks at its direct structure: literal chunks become text pieces,
``$param`` becomes the parameter's index, and anything else inside
``${...}`` must be a nested Intl.plural/gender/select call, which is
handed to PluralGenderSelectResolver. The resolver in turn decomposes
each case body with a fresh InterpolationDecomposer, so nesting can go
arbitrarily deep.
"""

from typing import List, Optional

from ..core.nodes import NodeKind, SyntaxNode
from ..messages import Message, MessageExtractionError, MessagePiece, SUB_MESSAGE_KINDS, SubMessage
from .recognizer import looks_like_plural_gender_or_select


class InterpolationDecomposer:
    """
    Walks one string expression into an ordered list of pieces.

    Identifiers are resolved against the arguments of the message being
    built, which come from the enclosing declaration.
    """

    def __init__(self, message: Message):
        self.message = message
        self.pieces: List[MessagePiece] = []
        self._handlers = {
            NodeKind.STRING_LITERAL: self._visit_string_chunk,
            NodeKind.INTERPOLATION_STRING: self._visit_string_chunk,
            NodeKind.ADJACENT_STRINGS: self._visit_parts,
            NodeKind.STRING_INTERPOLATION: self._visit_parts,
            NodeKind.INTERPOLATION_EXPRESSION: self._visit_interpolation_expression,
        }

    @property
    def extracted_message(self) -> str:
        return "".join(piece for piece in self.pieces if isinstance(piece, str))

    def decompose(self, node: SyntaxNode) -> List[MessagePiece]:
        """
        Decompose a string expression.

        Raises:
            MessageExtractionError: On an unknown argument or an
                unsupported interpolated expression
        """
        self._visit(node)
        return self.pieces

    def _visit(self, node: SyntaxNode) -> None:
        handler = self._handlers.get(node.kind)
        if handler is not None:
            handler(node)

    def _visit_parts(self, node: SyntaxNode) -> None:
        for child in node.children:
            self._visit(child)

    def _visit_string_chunk(self, node: SyntaxNode) -> None:
        self.pieces.append(node.value if node.value is not None else "")

    def _visit_interpolation_expression(self, node: SyntaxNode) -> None:
        expression = node.expression
        if expression is not None and expression.kind == NodeKind.IDENTIFIER:
            self._handle_simple_interpolation(expression)
        else:
            self._look_for_plural_or_gender(node)

    def _handle_simple_interpolation(self, expression: SyntaxNode) -> None:
        arguments = self.message.arguments
        if expression.text not in arguments:
            raise MessageExtractionError(f"Cannot find argument {expression.text}")
        self.pieces.append(arguments.index(expression.text))

    def _look_for_plural_or_gender(self, node: SyntaxNode) -> None:
        resolver = PluralGenderSelectResolver(self.pieces, self.message)
        resolver.visit_interpolation_expression(node)
        if not resolver.found:
            raise MessageExtractionError(
                "Only simple identifiers and Intl.plural/gender/select expressions "
                "are allowed in message interpolation expressions.\n"
                f"Error at {node.text}"
            )


class PluralGenderSelectResolver:
    """
    Builds Plural/Gender/Select messages from Intl calls.

    New messages are appended to the given piece list. ``found`` tells
    the caller whether a select-family call was recognized at all, as
    opposed to recognized but invalid (which raises).
    """

    def __init__(self, pieces: List[MessagePiece], parent: Optional[Message]):
        self.pieces = pieces
        self.parent = parent
        self.found = False

    def visit_interpolation_expression(self, node: SyntaxNode) -> None:
        expression = node.expression
        if expression is None or not looks_like_plural_gender_or_select(expression):
            return
        self.found = True
        self.pieces.append(self.message_from_call(expression))

    def visit_call(self, node: SyntaxNode) -> None:
        self.found = True
        self.pieces.append(self.message_from_call(node))

    def message_from_call(self, node: SyntaxNode) -> SubMessage:
        """
        Build the sub-message for one Intl.plural/gender/select call.

        Every case is decomposed even after one fails, so all broken
        cases are reported together.

        Raises:
            MessageExtractionError: With one reason per failed case, plus
                one for an unusable main argument
        """
        factory = SUB_MESSAGE_KINDS.get(node.name)
        if factory is None:
            raise MessageExtractionError(f"Invalid plural/gender/select message {node.name} in {node.text}")
        message = factory(parent=self.parent)

        errors: List[str] = []
        for key, value in message.arguments_of_interest(node).items():
            try:
                message[key] = InterpolationDecomposer(message).decompose(value)
            except MessageExtractionError as e:
                errors.extend(f"{reason}\nProcessing <{node.text}>" for reason in e.reasons)

        positional = node.positional_arguments
        main_argument = positional[0] if positional else None
        if main_argument is not None and main_argument.kind == NodeKind.STRING_LITERAL:
            message.main_argument = main_argument.text
        elif main_argument is not None and main_argument.kind == NodeKind.IDENTIFIER:
            message.main_argument = main_argument.name
        else:
            errors.append("Invalid argument to plural/gender/select, "
                          f"must be simple variable reference\nProcessing <{node.text}>")

        if errors:
            raise MessageExtractionError(errors)
        return message


def decompose_message_text(
    message: Message,
    node: SyntaxNode,
    allow_embedded_plurals_and_genders: bool = True,
) -> List[MessagePiece]:
    """
    Decompose the text argument of an Intl.message call.

    When embedding is not allowed, a plural/gender/select may only be
    the whole string, not part of a larger literal.
    """
    pieces = InterpolationDecomposer(message).decompose(node)
    if not allow_embedded_plurals_and_genders:
        has_sub_message = any(isinstance(piece, SubMessage) for piece in pieces)
        has_text = any(isinstance(piece, str) and piece for piece in pieces)
        if has_sub_message and has_text:
            raise MessageExtractionError(
                "Plural and gender expressions must be at the top level, "
                "they cannot be embedded in larger string literals."
            )
    return pieces
