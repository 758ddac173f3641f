"""Protocols for pluggable tokenisers."""

from typing import Protocol, runtime_checkable

from waivern_message_extractor.tokens import TokenLike


@runtime_checkable
class Tokeniser(Protocol):
    """Protocol for tokenisers feeding the extraction engine.

    A tokeniser turns source text into an ordered token list. Concatenating
    the text of every token should reproduce the source, since skipped call
    sites are reported by rebuilding their text from tokens.
    """

    def tokenise(self, source: str) -> list[TokenLike]:
        """Tokenise source text.

        Args:
            source: Complete source text, including its open tag

        Returns:
            Tokens in source order, whitespace and comments included

        """
        ...
