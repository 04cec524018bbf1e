"""
Recognition of Intl message calls.

A call is a candidate when its method is one of the message kinds and
its receiver is the identifier ``Intl``, bare or library-prefixed
(``intl.Intl.message(...)``).
"""

from ..core.nodes import NodeKind, SyntaxNode
from ..messages import MESSAGE_KINDS, SUB_MESSAGE_KINDS

INTL_CLASS_NAME = "Intl"


def is_intl_target(target) -> bool:
    """True if the receiver of a call is literally Intl."""
    if target is None:
        return False
    # For intl.Intl the name is the part after the prefix
    if target.kind in (NodeKind.IDENTIFIER, NodeKind.PREFIXED_IDENTIFIER):
        return target.name == INTL_CLASS_NAME
    return False


def looks_like_intl_message(node: SyntaxNode) -> bool:
    """Intl.message / Intl.plural / Intl.gender / Intl.select call."""
    return (node.kind == NodeKind.CALL
            and node.name in MESSAGE_KINDS
            and is_intl_target(node.target))


def looks_like_plural_gender_or_select(node: SyntaxNode) -> bool:
    """Intl.plural / Intl.gender / Intl.select call."""
    return (node.kind == NodeKind.CALL
            and node.name in SUB_MESSAGE_KINDS
            and is_intl_target(node.target))
