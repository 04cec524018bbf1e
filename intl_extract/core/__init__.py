"""
Core layer — Syntax tree model, constant evaluation and parsing.
"""

from .nodes import NodeKind, SyntaxNode, Parameter, LineInfo
from .constants import NOT_A_CONSTANT, evaluate

__all__ = [
    'NodeKind',
    'SyntaxNode',
    'Parameter',
    'LineInfo',
    'NOT_A_CONSTANT',
    'evaluate',
]
