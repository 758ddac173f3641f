"""Single-pass scanner locating translator calls in a token stream.

The scanner is either searching for the translator pattern or capturing the
arguments of a matched call. When a call's closing parenthesis arrives, its
arguments are resolved and the parameter group is scanned again by a fresh
scanner, so nested translator calls are found too.
"""

import logging
from collections.abc import Sequence

from waivern_message_extractor.models import (
    CallOutcome,
    ExtractedCall,
    ExtractedMessage,
    ExtractionResult,
    SkippedCall,
)
from waivern_message_extractor.parameters import extract_call_parameters
from waivern_message_extractor.pattern import PatternMatcher, TranslatorPattern
from waivern_message_extractor.tokens import TokenLike, is_trivia, render_tokens

logger = logging.getLogger(__name__)

_OPEN_PAREN = "("
_CLOSE_PAREN = ")"


class CallCapture:
    """Collects the argument tokens of a matched call up to its closing ')'."""

    def __init__(self, start_index: int) -> None:
        """Initialise an empty capture.

        Args:
            start_index: Stream index of the first token of the matched prefix

        """
        self.start_index = start_index
        self.buffer: list[TokenLike] = []
        self._depth = 0

    @property
    def depth(self) -> int:
        """Number of nested parentheses currently open inside the call."""
        return self._depth

    def feed(self, token: TokenLike) -> bool:
        """Account for one token.

        Args:
            token: Next token after the call's '('

        Returns:
            True if the token closed the call; it is then not buffered

        """
        if token == _CLOSE_PAREN:
            if self._depth == 0:
                return True
            self._depth -= 1
        elif token == _OPEN_PAREN:
            self._depth += 1
        self.buffer.append(token)
        return False


class Scanner:
    """Scanner for one token stream.

    Matching state lives in local variables of scan(); a scanner holds only
    its configuration, so every nested parameter list gets its own scan.
    """

    def __init__(self, pattern: TranslatorPattern, default_category: str) -> None:
        """Initialise the scanner.

        Args:
            pattern: Compiled translator pattern
            default_category: Category for calls that do not name one

        """
        self._pattern = pattern
        self._default_category = default_category

    def scan(self, tokens: Sequence[TokenLike]) -> ExtractionResult:
        """Find and resolve every translator call in the tokens.

        Args:
            tokens: Token stream, trivia included

        Returns:
            Messages by category and the calls that had to be skipped

        """
        result = ExtractionResult()
        matcher = PatternMatcher(self._pattern)
        capture: CallCapture | None = None

        for index, token in enumerate(tokens):
            if capture is not None:
                if capture.feed(token):
                    call_tokens = tokens[capture.start_index : index + 1]
                    result.add_outcome(self._resolve_call(capture.buffer, call_tokens))
                    capture = None
                continue

            if is_trivia(token):
                continue

            if matcher.is_complete and token == _OPEN_PAREN:
                capture = CallCapture(matcher.start_index)
                matcher.reset()
                continue
            matcher.feed(token, index)

        if capture is not None:
            # Stream ended inside the call
            result.add_outcome(_skip(tokens[capture.start_index :]))

        return result

    def _resolve_call(
        self, arguments: list[TokenLike], call_tokens: Sequence[TokenLike]
    ) -> CallOutcome:
        """Resolve a captured call into messages or a skipped entry.

        Args:
            arguments: Tokens between the call's parentheses
            call_tokens: Tokens from the matched prefix through the closing ')'

        Returns:
            ExtractedCall, or SkippedCall if the message id is not a literal
            or the brackets inside the call are unbalanced

        """
        parameters = extract_call_parameters(arguments)
        if parameters is None or parameters.message_id is None:
            return _skip(call_tokens)

        outcome = ExtractedCall(
            messages=[
                ExtractedMessage(
                    category=parameters.category
                    if parameters.category is not None
                    else self._default_category,
                    id=parameters.message_id,
                )
            ]
        )
        if parameters.parameters is not None:
            nested = Scanner(self._pattern, self._default_category).scan(
                parameters.parameters
            )
            for category, ids in nested.messages.items():
                outcome.messages.extend(
                    ExtractedMessage(category=category, id=message_id)
                    for message_id in ids
                )
            outcome.skipped.extend(nested.skipped)
        return outcome


def _skip(call_tokens: Sequence[TokenLike]) -> SkippedCall:
    line, source = render_tokens(call_tokens)
    logger.debug(f"Skipping translator call at line {line}: {source}")
    return SkippedCall(line=line, source=source)
