"""Translator call pattern and the matcher that finds it in a token stream."""

from collections.abc import Sequence

from waivern_message_extractor.errors import ExtractorConfigError
from waivern_message_extractor.protocols import Tokeniser
from waivern_message_extractor.tokens import TokenLike, significant, tokens_equal

# The fragment is tokenised inside a complete call, since tree-sitter only
# lexes tokens that are valid where they appear. Fragments such as '->t' or
# '::t' need a placeholder receiver; 'Yii::t' or '$this->t' stand alone.
_OPEN_TAG = "<?php "
_PLACEHOLDER_RECEIVER = "$_"
_FRAGMENT_SUFFIX = "();"
_MIN_PATTERN_TOKENS = 2


class TranslatorPattern:
    """Token sequence that precedes the '(' of a translator call."""

    def __init__(self, tokens: Sequence[TokenLike]) -> None:
        """Initialise the pattern from already tokenised input.

        Args:
            tokens: Significant tokens of the call prefix

        Raises:
            ExtractorConfigError: If fewer than two tokens are given

        """
        if len(tokens) < _MIN_PATTERN_TOKENS:
            raise ExtractorConfigError(
                f"Translator pattern must contain at least {_MIN_PATTERN_TOKENS} "
                f"tokens, got {len(tokens)}"
            )
        self.tokens: tuple[TokenLike, ...] = tuple(tokens)

    @classmethod
    def compile(cls, translator: str, tokeniser: Tokeniser) -> "TranslatorPattern":
        """Tokenise a call prefix such as ``->translate`` into a pattern.

        The tokeniser must be lossless: concatenating the text of its tokens
        reproduces the source. Only tokens lying entirely within the fragment
        are kept.

        Args:
            translator: Source fragment preceding the call's '('
            tokeniser: Tokeniser used for the scanned source as well

        Returns:
            Compiled pattern

        Raises:
            ExtractorConfigError: If the fragment does not tokenise on its own
                token boundaries or yields fewer than two tokens

        """
        prefix = _OPEN_TAG
        if not _stands_alone(translator):
            prefix += _PLACEHOLDER_RECEIVER

        tokens = _tokens_between(
            tokeniser.tokenise(prefix + translator + _FRAGMENT_SUFFIX),
            len(prefix),
            len(prefix) + len(translator),
        )
        if tokens is None:
            raise ExtractorConfigError(
                f"Translator {translator!r} does not split into whole tokens"
            )
        return cls(significant(tokens))

    def __len__(self) -> int:
        """Return the number of tokens in the pattern."""
        return len(self.tokens)

    def __repr__(self) -> str:
        """Return a debug representation."""
        return f"TranslatorPattern({list(self.tokens)!r})"


class PatternMatcher:
    """Counts consecutive pattern tokens seen while searching for a call.

    A token that does not continue the match resets the count to zero; no
    shorter suffix of the pattern is retried against it, so for a pattern
    ``A B`` the stream ``A A B`` does not match.
    """

    def __init__(self, pattern: TranslatorPattern) -> None:
        """Initialise the matcher with nothing matched."""
        self._pattern = pattern
        self._matched = 0
        self._start_index = 0

    @property
    def is_complete(self) -> bool:
        """Whether the whole pattern has just been matched."""
        return self._matched == len(self._pattern)

    @property
    def start_index(self) -> int:
        """Stream index of the first token of the current match."""
        return self._start_index

    def reset(self) -> None:
        """Forget any partial or complete match."""
        self._matched = 0

    def feed(self, token: TokenLike, index: int) -> None:
        """Test one significant token against the next pattern position.

        Args:
            token: Token from the stream
            index: Position of the token in the stream

        """
        if self.is_complete:
            self.reset()
        if tokens_equal(token, self._pattern.tokens[self._matched]):
            if self._matched == 0:
                self._start_index = index
            self._matched += 1
        else:
            self._matched = 0


def _stands_alone(translator: str) -> bool:
    """Check if a fragment starts an expression without a receiver."""
    first = translator[0]
    return first.isalpha() or first in "$_\\"


def _tokens_between(
    tokens: Sequence[TokenLike], start: int, end: int
) -> list[TokenLike] | None:
    """Select the tokens covering exactly the source range [start, end).

    Args:
        tokens: Tokens of the whole source
        start: Offset of the first character of the range
        end: Offset just past the last character of the range

    Returns:
        Tokens inside the range, or None if a token straddles either end

    """
    selected: list[TokenLike] = []
    offset = 0
    for token in tokens:
        text = token if isinstance(token, str) else token.text
        token_end = offset + len(text)
        if offset < start < token_end or offset < end < token_end:
            return None
        if start <= offset and token_end <= end:
            selected.append(token)
        offset = token_end
    if offset < end:
        return None
    return selected
