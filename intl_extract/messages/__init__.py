"""
Messages module — The records produced by message extraction.

- MainMessage: one extracted Intl.message / Intl.plural / ... call
- Plural, Gender, Select: case-keyed sub-messages
- MessageExtractionError: structural failure of a single call

Usage:
    from intl_extract.messages import message_for_kind

    message = message_for_kind("plural")   # -> Plural()
"""

from typing import Optional

from .base import Message, MessageExtractionError, MessagePiece, escape_string
from .main import MainMessage
from .naming import class_plus_method_name, compute_message_name
from .sub import SUB_MESSAGE_KINDS, Gender, Plural, Select, SubMessage

MESSAGE_KINDS = frozenset({"message"}) | frozenset(SUB_MESSAGE_KINDS)


def message_for_kind(kind: str) -> Optional[Message]:
    """Empty message instance for an Intl method name, or None."""
    if kind == "message":
        return MainMessage()
    factory = SUB_MESSAGE_KINDS.get(kind)
    return factory() if factory else None


__all__ = [
    'Message',
    'MessageExtractionError',
    'MessagePiece',
    'MainMessage',
    'SubMessage',
    'Plural',
    'Gender',
    'Select',
    'SUB_MESSAGE_KINDS',
    'MESSAGE_KINDS',
    'message_for_kind',
    'compute_message_name',
    'class_plus_method_name',
    'escape_string',
]
