"""
Parsing module — Dart source to SyntaxNode trees via tree-sitter.

This module provides:
- parse_dart: Parse source text into a UNIT node plus diagnostics
- DartTreeBuilder: Fold a tree-sitter Dart CST into SyntaxNodes
- decode_string_literal: Decode Dart string literal syntax

Usage:
    from intl_extract.core.parsing import parse_dart

    result = parse_dart("greet(name) => Intl.message('Hi $name');")
    unit = result.unit
"""

from .dart import DartTreeBuilder
from .parser import ParseResult, parse_dart, is_available
from .strings import decode_string_literal

__all__ = [
    'DartTreeBuilder',
    'ParseResult',
    'parse_dart',
    'is_available',
    'decode_string_literal',
]
