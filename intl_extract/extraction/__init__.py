"""
Extraction module — Finding Intl calls and assembling messages.

This module provides:
- ExtractionSession: One run over one unit (config, warnings, origin)
- extract: Convenience wrapper returning (messages, warnings)
- MessageFindingVisitor: Declaration-aware traversal
- InterpolationDecomposer / PluralGenderSelectResolver: String bodies
  to message pieces

Usage:
    from intl_extract.extraction import extract

    messages, warnings = extract(source_text, "lib/messages.dart")
"""

from .context import TraversalContext
from .interpolation import InterpolationDecomposer, PluralGenderSelectResolver, decompose_message_text
from .recognizer import looks_like_intl_message, looks_like_plural_gender_or_select
from .session import ExtractionSession, SourceParseError, extract
from .visitor import MessageFindingVisitor

__all__ = [
    'TraversalContext',
    'InterpolationDecomposer',
    'PluralGenderSelectResolver',
    'decompose_message_text',
    'looks_like_intl_message',
    'looks_like_plural_gender_or_select',
    'ExtractionSession',
    'SourceParseError',
    'extract',
    'MessageFindingVisitor',
]
