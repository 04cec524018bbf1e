"""
Dart string literal decoding.

tree-sitter keeps the literal characters of a Dart string in hidden
tokens, so the text chunks are decoded here directly from the source
bytes. Only ``${...}`` substitutions are taken from the parse tree,
through the ``substitution_at`` callback, so nested expressions such as
``${Intl.plural(...)}`` keep their full structure.

Handles:
- single, double and triple quotes, raw strings (r'...')
- escapes: \\n \\r \\t \\b \\f \\v \\xHH \\uHHHH \\u{H...} and \\<char>
- $identifier and ${expression} interpolation
- adjacent literals ('a' "b"), with comments between them

Chunks of literal text are only emitted when non-empty, so
"Hello $name" decodes to ["Hello ", $name] with no trailing empty chunk.
"""

from typing import Callable, List, Optional, Tuple

from ..nodes import NodeKind, SyntaxNode


# Returns (expression node, end byte of the substitution) or None
SubstitutionLookup = Callable[[int], Optional[Tuple[SyntaxNode, int]]]

_QUOTES = (b'"""', b"'''", b'"', b"'")

_SIMPLE_ESCAPES = {
    ord('n'): '\n',
    ord('r'): '\r',
    ord('t'): '\t',
    ord('b'): '\b',
    ord('f'): '\f',
    ord('v'): '\v',
}

_BACKSLASH = ord('\\')
_DOLLAR = ord('$')
_OPEN_BRACE = ord('{')
_CLOSE_BRACE = ord('}')


def decode_string_literal(
    source: bytes,
    start: int,
    end: int,
    substitution_at: SubstitutionLookup,
) -> SyntaxNode:
    """
    Decode the string literal spanning source[start:end].

    Args:
        source: Whole unit source, UTF-8 encoded
        start: Start byte of the literal
        end: End byte of the literal
        substitution_at: Lookup for parsed ${...} expressions by offset

    Returns:
        STRING_LITERAL, STRING_INTERPOLATION, or ADJACENT_STRINGS node
    """
    parts: List[SyntaxNode] = []
    pos = start
    while True:
        pos = _skip_trivia(source, pos, end)
        if pos >= end:
            break
        part, pos = _scan_part(source, pos, end, substitution_at)
        parts.append(part)

    if len(parts) == 1:
        return parts[0]
    if not parts:
        return _node(NodeKind.STRING_LITERAL, source, start, end, value="")
    return _node(NodeKind.ADJACENT_STRINGS, source, start, end, children=parts)


def _node(kind: NodeKind, source: bytes, start: int, end: int, **kwargs) -> SyntaxNode:
    text = source[start:end].decode('utf-8', errors='replace')
    return SyntaxNode(kind=kind, text=text, offset=start, end=end, **kwargs)


def _skip_trivia(source: bytes, pos: int, end: int) -> int:
    """Skip whitespace and comments between adjacent literals."""
    while pos < end:
        if source[pos:pos + 1].isspace():
            pos += 1
        elif source.startswith(b'//', pos):
            newline = source.find(b'\n', pos, end)
            pos = end if newline == -1 else newline + 1
        elif source.startswith(b'/*', pos):
            close = source.find(b'*/', pos + 2, end)
            pos = end if close == -1 else close + 2
        else:
            break
    return pos


def _scan_part(
    source: bytes,
    pos: int,
    end: int,
    substitution_at: SubstitutionLookup,
) -> Tuple[SyntaxNode, int]:
    """Decode one quoted literal starting at pos."""
    part_start = pos
    raw = source[pos:pos + 1] in (b'r', b'R')
    if raw:
        pos += 1

    quote = next((q for q in _QUOTES if source.startswith(q, pos)), None)
    if quote is None:
        # Not a literal we understand; keep the text as-is
        return _node(NodeKind.STRING_LITERAL, source, part_start, end,
                     value=source[part_start:end].decode('utf-8', errors='replace')), end

    pos += len(quote)
    if len(quote) == 3:
        pos = _skip_leading_newline(source, pos, end)

    elements: List[SyntaxNode] = []
    buffer = bytearray()
    chunk_start = pos
    interpolated = False

    while pos < end and not source.startswith(quote, pos):
        byte = source[pos]
        if byte == _BACKSLASH and not raw:
            decoded, pos = _decode_escape(source, pos, end)
            buffer += decoded
            continue
        if byte == _DOLLAR and not raw:
            substitution = _scan_substitution(source, pos, end, substitution_at)
            if substitution is not None:
                _flush(elements, buffer, source, chunk_start, pos)
                elements.append(substitution)
                interpolated = True
                pos = substitution.end
                chunk_start = pos
                continue
        buffer.append(byte)
        pos += 1

    body_end = pos
    pos = min(pos + len(quote), end)

    if not interpolated:
        return _node(NodeKind.STRING_LITERAL, source, part_start, pos,
                     value=buffer.decode('utf-8', errors='replace')), pos

    _flush(elements, buffer, source, chunk_start, body_end)
    return _node(NodeKind.STRING_INTERPOLATION, source, part_start, pos,
                 children=elements), pos


def _flush(elements: List[SyntaxNode], buffer: bytearray, source: bytes, start: int, end: int) -> None:
    if buffer:
        elements.append(_node(NodeKind.INTERPOLATION_STRING, source, start, end,
                              value=buffer.decode('utf-8', errors='replace')))
        buffer.clear()


def _skip_leading_newline(source: bytes, pos: int, end: int) -> int:
    """A multi-line string drops its first line when that line is blank."""
    probe = pos
    while probe < end and source[probe:probe + 1] in (b' ', b'\t'):
        probe += 1
    if source.startswith(b'\r\n', probe):
        return probe + 2
    if source.startswith(b'\n', probe):
        return probe + 1
    return pos


def _decode_escape(source: bytes, pos: int, end: int) -> Tuple[bytes, int]:
    """Decode the escape sequence at pos (which holds the backslash)."""
    if pos + 1 >= end:
        return b'\\', pos + 1
    marker = source[pos + 1]

    if marker in _SIMPLE_ESCAPES:
        return _SIMPLE_ESCAPES[marker].encode('utf-8'), pos + 2

    if marker == ord('x'):
        digits = source[pos + 2:pos + 4]
        if _is_hex(digits, 2):
            return chr(int(digits, 16)).encode('utf-8'), pos + 4

    if marker == ord('u'):
        if source[pos + 2:pos + 3] == b'{':
            close = source.find(b'}', pos + 3, end)
            digits = source[pos + 3:close] if close != -1 else b''
            if close != -1 and 1 <= len(digits) <= 6 and _is_hex(digits, len(digits)):
                return chr(int(digits, 16)).encode('utf-8'), close + 1
        else:
            digits = source[pos + 2:pos + 6]
            if _is_hex(digits, 4):
                return chr(int(digits, 16)).encode('utf-8'), pos + 6

    # Any other escaped character stands for itself
    length = _utf8_length(marker)
    return source[pos + 1:pos + 1 + length], pos + 1 + length


def _scan_substitution(
    source: bytes,
    pos: int,
    end: int,
    substitution_at: SubstitutionLookup,
) -> Optional[SyntaxNode]:
    """Scan $name or ${expression} at pos; None if it is a plain '$'."""
    following = source[pos + 1:pos + 2]

    if following == b'{':
        found = substitution_at(pos)
        if found is not None:
            expression, sub_end = found
        else:
            sub_end = _matching_brace(source, pos + 1, end)
            expression = _node(NodeKind.OTHER, source, pos + 2, sub_end - 1)
        return _node(NodeKind.INTERPOLATION_EXPRESSION, source, pos, sub_end,
                     children=[expression])

    if following and (following.isalpha() or following == b'_'):
        ident_end = pos + 1
        while ident_end < end and (source[ident_end:ident_end + 1].isalnum()
                                   or source[ident_end:ident_end + 1] == b'_'):
            ident_end += 1
        name = source[pos + 1:ident_end].decode('ascii')
        identifier = _node(NodeKind.IDENTIFIER, source, pos + 1, ident_end, name=name)
        return _node(NodeKind.INTERPOLATION_EXPRESSION, source, pos, ident_end,
                     children=[identifier])

    return None


def _matching_brace(source: bytes, open_pos: int, end: int) -> int:
    """End offset just past the brace closing the one at open_pos."""
    depth = 0
    pos = open_pos
    while pos < end:
        byte = source[pos]
        if byte == _OPEN_BRACE:
            depth += 1
        elif byte == _CLOSE_BRACE:
            depth -= 1
            if depth == 0:
                return pos + 1
        pos += 1
    return end


def _is_hex(digits: bytes, length: int) -> bool:
    return len(digits) == length and all(chr(b) in '0123456789abcdefABCDEF' for b in digits)


def _utf8_length(lead: int) -> int:
    if lead >= 0xF0:
        return 4
    if lead >= 0xE0:
        return 3
    if lead >= 0xC0:
        return 2
    return 1
