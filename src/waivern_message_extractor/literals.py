"""Literal string resolution for translator call arguments."""

import re
from collections.abc import Sequence

from waivern_message_extractor.tokens import (
    Token,
    TokenLike,
    is_number_literal,
    is_string_literal,
    significant,
)

_CONCAT_OPERATOR = "."

_ESCAPE_PATTERN = re.compile(r"\\(x[0-9A-Fa-f]{1,2}|[0-7]{1,3}|.)", re.DOTALL)

_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "a": "\a",
    "v": "\v",
    "b": "\b",
    "f": "\f",
}


def unescape(text: str) -> str:
    """Unescape backslash sequences the way PHP's stripcslashes() does.

    Recognises C-style escapes (``\\n``, ``\\t``, ...), hexadecimal ``\\xHH``
    and octal ``\\ooo`` sequences; any other escaped character stands for
    itself. Hexadecimal and octal escapes denote bytes, so a run of them is
    decoded as UTF-8, falling back to Latin-1 when the run is not valid UTF-8.

    Example:
        >>> unescape(r"It\\'s\\x41\\101\\n")
        "It'sAA\\n"
        >>> unescape(r"caf\\xC3\\xA9")
        'café'

    """
    parts: list[str] = []
    pending = bytearray()
    position = 0

    for match in _ESCAPE_PATTERN.finditer(text):
        if match.start() > position:
            parts.append(_decode_bytes(pending))
            parts.append(text[position : match.start()])
        value = _escape_value(match.group(1))
        if isinstance(value, int):
            pending.append(value)
        else:
            parts.append(_decode_bytes(pending))
            parts.append(value)
        position = match.end()

    parts.append(_decode_bytes(pending))
    parts.append(text[position:])
    return "".join(parts)


def _escape_value(sequence: str) -> str | int:
    """Return the character an escape stands for, or the byte for \\x and \\ooo."""
    if sequence in _SIMPLE_ESCAPES:
        return _SIMPLE_ESCAPES[sequence]
    if len(sequence) > 1 and sequence[0] == "x":
        return int(sequence[1:], 16)
    if sequence[0] in "01234567":
        return int(sequence, 8) & 0xFF
    return sequence


def _decode_bytes(pending: bytearray) -> str:
    """Decode and clear a run of escaped bytes."""
    if not pending:
        return ""
    try:
        text = pending.decode("utf-8")
    except UnicodeDecodeError:
        text = pending.decode("latin-1")
    pending.clear()
    return text


def strip_quotes(text: str) -> str:
    """Strip the quotes (and optional binary prefix) from a string literal."""
    if text[:1] in ("b", "B"):
        text = text[1:]
    return text[1:-1]


def resolve_literal(tokens: Sequence[TokenLike]) -> str | None:
    """Resolve a token group to a literal string.

    The group must start with a string literal. Further string or numeric
    literals may be appended with the concatenation operator; the first token
    that is not an operator ends the literal.

    Args:
        tokens: Tokens of one parameter group, trivia included

    Returns:
        The resolved string, or None if the group is not a literal

    """
    tokens = significant(tokens)
    if not tokens or not is_string_literal(tokens[0]):
        return None

    message = _string_value(tokens[0])
    index = 1
    while index < len(tokens) and tokens[index] == _CONCAT_OPERATOR:
        if index + 1 >= len(tokens):
            return None
        operand = tokens[index + 1]
        if is_string_literal(operand):
            message += _string_value(operand)
        elif is_number_literal(operand):
            message += operand.text
        else:
            return None
        index += 2

    return message


def _string_value(token: Token) -> str:
    return unescape(strip_quotes(token.text))
