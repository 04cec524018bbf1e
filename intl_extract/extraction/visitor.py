"""
Message finding — The declaration-aware traversal over one unit.

MessageFindingVisitor walks a UNIT depth-first. Declarations update the
TraversalContext on the way down; on the way out the context is cleared
and the cleared value flows on to the following siblings. Every CALL is
offered to the recognizer; a recognized Intl call is extracted (or
reported) and its subtree is not searched again, so a plural nested in
an Intl.message never shows up as a message of its own.
"""

from typing import Callable, Dict, List, Optional, TYPE_CHECKING

from ..core.constants import NOT_A_CONSTANT, evaluate, evaluate_as_string
from ..core.nodes import NodeKind, SyntaxNode
from ..messages import (
    MainMessage,
    MessageExtractionError,
    class_plus_method_name,
    compute_message_name,
    message_for_kind,
)
from .context import TraversalContext
from .interpolation import PluralGenderSelectResolver, decompose_message_text
from .recognizer import looks_like_intl_message

if TYPE_CHECKING:
    from .session import ExtractionSession


Handler = Callable[[SyntaxNode, TraversalContext], TraversalContext]


class MessageFindingVisitor:
    """
    Finds Intl calls and turns them into MainMessages.

    Attributes:
        session: The running ExtractionSession (configuration, warnings)
        generate_names: Take names and args from the enclosing declaration
            instead of requiring them in source
        messages: Extracted messages keyed by name
    """

    def __init__(self, session: 'ExtractionSession', generate_names: bool = False):
        self.session = session
        self.generate_names = generate_names
        self.messages: Dict[str, MainMessage] = {}
        self._handlers: Dict[NodeKind, Handler] = {
            NodeKind.FUNCTION_DECLARATION: self._visit_declaration,
            NodeKind.METHOD_DECLARATION: self._visit_declaration,
            NodeKind.FIELD_DECLARATION: self._visit_declaration,
            NodeKind.TOP_LEVEL_VARIABLE_DECLARATION: self._visit_declaration,
            NodeKind.CLASS_DECLARATION: self._visit_class,
            NodeKind.CALL: self._visit_call,
        }

    @property
    def config(self):
        return self.session.config

    # =========================================================================
    # Traversal
    # =========================================================================

    def visit(self, node: SyntaxNode, context: Optional[TraversalContext] = None) -> TraversalContext:
        """
        Visit a node and return the context that holds after it.

        Declarations hand back a cleared context, which is what any
        following sibling sees.
        """
        if context is None:
            context = TraversalContext()
        handler = self._handlers.get(node.kind, self._visit_children)
        return handler(node, context)

    def _visit_children(self, node: SyntaxNode, context: TraversalContext) -> TraversalContext:
        for child in node.children:
            context = self.visit(child, context)
        return context

    def _visit_declaration(self, node: SyntaxNode, context: TraversalContext) -> TraversalContext:
        inner = context.entering_declaration(node.name, node.parameters)
        after = self._visit_children(node, inner)
        return after.leaving_declaration()

    def _visit_class(self, node: SyntaxNode, context: TraversalContext) -> TraversalContext:
        after = self._visit_children(node, context.entering_class(node.name))
        return after.leaving_class(context)

    def _visit_call(self, node: SyntaxNode, context: TraversalContext) -> TraversalContext:
        if looks_like_intl_message(node):
            # Valid or not, this call is handled; do not look inside it
            self._add_intl_message(node, context)
            return context
        return self._visit_children(node, context)

    # =========================================================================
    # Extraction
    # =========================================================================

    def _add_intl_message(self, node: SyntaxNode, context: TraversalContext) -> None:
        reason = self._check_validity(node, context)
        reasons = [reason] if reason is not None else self._extract_message(node, context)
        for each in reasons:
            self.session.report_skipped(node, each)

    def _check_validity(self, node: SyntaxNode, context: TraversalContext) -> Optional[str]:
        """Reason the call cannot be extracted here, or None."""
        if not context.in_declaration:
            return ("Calls to Intl must be inside a method, field declaration or "
                    "top level declaration.")
        if context.has_named_parameters:
            return "Named parameters on message functions are not supported."
        instance = message_for_kind(node.name)
        return instance.check_validity(
            node, node.arguments, context.name, list(context.parameters),
            class_name=context.class_name,
            name_and_args_generated=self.generate_names,
            examples_required=self.config.examples_required,
        )

    def _extract_message(self, node: SyntaxNode, context: TraversalContext) -> List[str]:
        """Build, validate and store the message; return the failure reasons."""
        try:
            message = self._message_from_node(node, context)
        except MessageExtractionError as e:
            return e.reasons
        except Exception as e:
            return [f"Unexpected exception: {type(e).__name__}: {e}"]
        reason = self._validate_message(message)
        return [reason] if reason is not None else []

    def _message_from_node(self, node: SyntaxNode, context: TraversalContext) -> MainMessage:
        message = MainMessage()
        message.source_position = node.offset
        message.end_position = node.end
        if self.config.include_source_text:
            message.source_text = node.text
        message.arguments = context.parameter_names

        direct_call = node.name != "message"
        if direct_call:
            PluralGenderSelectResolver(message.pieces, message).visit_call(node)
        else:
            text = node.positional_arguments[0]
            message.add_pieces(decompose_message_text(
                message, text, self.config.allow_embedded_plurals_and_genders))

        for argument in node.named_arguments:
            if direct_call and argument.name not in message.attribute_names:
                continue
            message[argument.name] = _attribute_value(argument)

        if not message.has_name:
            first = node.arguments[0] if node.arguments else None
            if self.generate_names and message.arguments:
                message.name = class_plus_method_name(context.class_name, context.name) or context.name
            elif first is not None and first.kind in (NodeKind.STRING_LITERAL, NodeKind.ADJACENT_STRINGS):
                message.name = compute_message_name(
                    message.name, evaluate_as_string(first), message.meaning)
        return message

    def _validate_message(self, message: MainMessage) -> Optional[str]:
        """Post-construction checks, then store unless it duplicates."""
        try:
            message.validate()
            if self.config.description_required:
                message.validate_description()
        except MessageExtractionError as e:
            return "\n".join(e.reasons)

        existing = self.messages.get(message.name)
        if existing is None:
            if not message.skip:
                self.messages[message.name] = message
            return None

        # Description and examples may differ between copies of a message
        existing_code = existing.to_original_code(include_desc=False, include_examples=False)
        message_code = message.to_original_code(include_desc=False, include_examples=False)
        if existing_code != message_code:
            return ("WARNING: Duplicate message name:\n"
                    f"'{message.name}' occurs more than once in {self.session.origin}")
        return None


def _attribute_value(argument: SyntaxNode):
    """Constant value of a named argument, else its source text."""
    expression = argument.expression
    if expression is None:
        return None
    value = evaluate(expression)
    return expression.text if value is NOT_A_CONSTANT else value
