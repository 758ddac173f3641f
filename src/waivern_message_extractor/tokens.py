"""Token types shared by the tokeniser and the extraction engine.

A token is either a significant ``Token`` carrying a kind, its text and the
line it starts on, or a single punctuation character represented by a plain
``str``.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import TypeAlias, TypeGuard


class TokenKind(str, Enum):
    """Token kinds the extraction engine gives meaning to.

    Any other kind string produced by a tokeniser is inert data.
    """

    OPEN_TAG = "open_tag"
    WHITESPACE = "whitespace"
    COMMENT = "comment"
    STRING = "string"
    INTERPOLATED_STRING = "interpolated_string"
    INTEGER = "integer"
    FLOAT = "float"
    VARIABLE = "variable"
    KEYWORD = "keyword"
    OPERATOR = "operator"
    INLINE_HTML = "inline_html"


@dataclass(frozen=True, slots=True)
class Token:
    """A significant lexical token."""

    kind: str
    text: str
    line: int


TokenLike: TypeAlias = Token | str

_TRIVIA_KINDS = frozenset({TokenKind.WHITESPACE.value, TokenKind.COMMENT.value})
_NUMBER_KINDS = frozenset({TokenKind.INTEGER.value, TokenKind.FLOAT.value})


def tokens_equal(a: TokenLike, b: TokenLike) -> bool:
    """Check whether two tokens are equal.

    Punctuation tokens are equal when their characters match; significant
    tokens when both kind and text match. A punctuation token never equals a
    significant token.
    """
    if isinstance(a, str) or isinstance(b, str):
        return isinstance(a, str) and isinstance(b, str) and a == b
    return a.kind == b.kind and a.text == b.text


def is_trivia(token: TokenLike) -> bool:
    """Check if a token is whitespace or a comment."""
    return isinstance(token, Token) and token.kind in _TRIVIA_KINDS


def is_string_literal(token: TokenLike) -> TypeGuard[Token]:
    """Check if a token is a constant (non-interpolated) string literal."""
    return isinstance(token, Token) and token.kind == TokenKind.STRING.value


def is_number_literal(token: TokenLike) -> TypeGuard[Token]:
    """Check if a token is an integer or float literal."""
    return isinstance(token, Token) and token.kind in _NUMBER_KINDS


def significant(tokens: Sequence[TokenLike]) -> list[TokenLike]:
    """Return the tokens with whitespace and comments removed."""
    return [token for token in tokens if not is_trivia(token)]


def render_tokens(tokens: Sequence[TokenLike]) -> tuple[int | None, str]:
    """Rebuild source text from tokens.

    Args:
        tokens: Tokens in source order, trivia included

    Returns:
        Tuple of (line of the first significant token or None, source text)

    """
    start_line: int | None = None
    parts: list[str] = []
    for token in tokens:
        if isinstance(token, Token):
            if start_line is None:
                start_line = token.line
            parts.append(token.text)
        else:
            parts.append(token)
    return start_line, "".join(parts)
