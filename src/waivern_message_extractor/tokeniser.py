"""PHP tokeniser using tree-sitter.

tree-sitter produces a concrete syntax tree rather than a token stream, so the
tree is flattened back into tokens: string, number and variable nodes are kept
whole, anonymous one-character leaves become punctuation and the gaps between
nodes become whitespace tokens.
"""

import logging

import tree_sitter_php
from tree_sitter import Language, Node, Parser

from waivern_message_extractor.errors import TokeniserError
from waivern_message_extractor.tokens import Token, TokenKind, TokenLike

logger = logging.getLogger(__name__)

_DEFAULT_ENCODING = "utf-8"

# Line index offset (tree-sitter uses 0-based, we want 1-based)
_LINE_INDEX_OFFSET = 1

_PHP_LANGUAGE = Language(tree_sitter_php.language_php())

# Nodes emitted as a single token whatever their children
_ATOMIC_NODE_KINDS: dict[str, str] = {
    "string": TokenKind.STRING.value,
    "encapsed_string": TokenKind.STRING.value,
    "integer": TokenKind.INTEGER.value,
    "float": TokenKind.FLOAT.value,
    "variable_name": TokenKind.VARIABLE.value,
    "comment": TokenKind.COMMENT.value,
    "php_tag": TokenKind.OPEN_TAG.value,
    "text": TokenKind.INLINE_HTML.value,
    "heredoc": "heredoc",
    "nowdoc": "nowdoc",
}

# Children that keep a double-quoted string constant
_CONSTANT_STRING_PARTS = frozenset(
    {"string_content", "string_value", "escape_sequence"}
)


class PHPTokeniser:
    """Tokeniser for PHP source backed by tree-sitter-php."""

    def __init__(self) -> None:
        """Initialise the tree-sitter parser."""
        self._parser = Parser()
        self._parser.language = _PHP_LANGUAGE

    def tokenise(self, source: str) -> list[TokenLike]:
        """Tokenise PHP source text.

        Args:
            source: PHP source code

        Returns:
            Tokens in source order; concatenating their text yields the source

        Raises:
            TokeniserError: If the source cannot be encoded for parsing

        """
        try:
            source_bytes = source.encode(_DEFAULT_ENCODING)
        except UnicodeEncodeError as e:
            raise TokeniserError(f"Cannot encode source for tokenising: {e}") from e

        tree = self._parser.parse(source_bytes)
        if tree.root_node.has_error:
            logger.debug("Source contains syntax errors, tokens may be approximate")

        tokens: list[TokenLike] = []
        offset = 0
        line = 1
        for node in _iter_token_nodes(tree.root_node):
            if node.start_byte > offset:
                gap = source_bytes[offset : node.start_byte].decode(_DEFAULT_ENCODING)
                tokens.append(_gap_token(gap, line))
            tokens.append(_node_token(node, source_bytes))
            offset = node.end_byte
            line = node.end_point[0] + _LINE_INDEX_OFFSET

        if offset < len(source_bytes):
            gap = source_bytes[offset:].decode(_DEFAULT_ENCODING)
            tokens.append(_gap_token(gap, line))

        return tokens


def _iter_token_nodes(root: Node) -> list[Node]:
    """Collect the nodes that become tokens, in source order.

    Args:
        root: Root node of the parsed tree

    Returns:
        Atomic nodes and leaves, zero-width (missing) nodes excluded

    """
    results: list[Node] = []
    stack = [root]
    while stack:
        node = stack.pop()
        if node.start_byte == node.end_byte:
            continue
        if _is_atomic(node) or node.child_count == 0:
            results.append(node)
            continue
        stack.extend(reversed(node.children))
    return results


def _node_token(node: Node, source_bytes: bytes) -> TokenLike:
    """Convert a tree-sitter node into a token.

    Args:
        node: Atomic node or leaf
        source_bytes: Encoded source the tree was parsed from

    Returns:
        Punctuation string or significant Token

    """
    text = source_bytes[node.start_byte : node.end_byte].decode(_DEFAULT_ENCODING)
    line = node.start_point[0] + _LINE_INDEX_OFFSET

    if not node.is_named:
        if len(text) == 1:
            return text
        # The type of an anonymous node is its own text
        if node.type.isidentifier():
            return Token(TokenKind.KEYWORD.value, text, line)
        return Token(TokenKind.OPERATOR.value, text, line)

    if not _is_atomic(node):
        return Token(node.type, text, line)

    kind = _ATOMIC_NODE_KINDS[node.type]
    if node.type == "encapsed_string" and _is_interpolated(node):
        kind = TokenKind.INTERPOLATED_STRING.value
    return Token(kind, text, line)


def _is_interpolated(node: Node) -> bool:
    """Check if a double-quoted string embeds variables or expressions."""
    return any(
        child.is_named and child.type not in _CONSTANT_STRING_PARTS
        for child in node.children
    )


def _gap_token(text: str, line: int) -> Token:
    """Wrap text between nodes; tree-sitter only leaves whitespace there."""
    return Token(TokenKind.WHITESPACE.value, text, line)


def _is_atomic(node: Node) -> bool:
    # Keywords such as the 'string' in a type hint are anonymous nodes
    return node.is_named and node.type in _ATOMIC_NODE_KINDS
