"""Extracts translation message ids from source code."""

import logging
from collections.abc import Sequence

from waivern_message_extractor.config import MessageExtractorConfig
from waivern_message_extractor.models import ExtractionResult, SkippedCall
from waivern_message_extractor.pattern import TranslatorPattern
from waivern_message_extractor.protocols import Tokeniser
from waivern_message_extractor.scanner import Scanner
from waivern_message_extractor.tokeniser import PHPTokeniser
from waivern_message_extractor.tokens import TokenLike

logger = logging.getLogger(__name__)


class ContentParser:
    """Finds translator calls in source code and collects their message ids.

    Calls are recognised by a translator pattern (``->translate`` by default)
    directly followed by ``(``. The first argument must be a literal string,
    the optional third argument names the category, and the second argument is
    searched for nested translator calls. Calls whose message id cannot be
    determined are reported through get_skipped_lines() instead.

    Example:
        ```python
        parser = ContentParser(default_category="app")
        messages = parser.extract_source('<?php $t->translate("Hello");')
        # {"app": ["Hello"]}
        ```

    """

    def __init__(
        self,
        default_category: str | None = None,
        translator: str | None = None,
        *,
        config: MessageExtractorConfig | None = None,
        tokeniser: Tokeniser | None = None,
    ) -> None:
        """Initialise the parser and compile the translator pattern.

        Args:
            default_category: Category for calls that omit one (overrides config)
            translator: Translator call prefix (overrides config)
            config: Validated configuration; defaults apply when omitted
            tokeniser: Tokeniser for source text and the pattern (default: PHP)

        Raises:
            ExtractorConfigError: If the configuration or pattern is invalid

        """
        config = config or MessageExtractorConfig()
        overrides: dict[str, str] = {}
        if default_category is not None:
            overrides["default_category"] = default_category
        if translator is not None:
            overrides["translator"] = translator
        if overrides:
            config = MessageExtractorConfig.from_properties(
                {**config.model_dump(), **overrides}
            )

        self._config = config
        self._tokeniser = tokeniser or PHPTokeniser()
        self._pattern = TranslatorPattern.compile(config.translator, self._tokeniser)
        self._skipped: list[SkippedCall] = []

    @property
    def config(self) -> MessageExtractorConfig:
        """Return the active configuration."""
        return self._config

    @property
    def pattern(self) -> TranslatorPattern:
        """Return the compiled translator pattern."""
        return self._pattern

    def set_default_category(self, default_category: str) -> None:
        """Replace the category used for calls that do not name one.

        Raises:
            ExtractorConfigError: If the category fails validation

        """
        self._config = MessageExtractorConfig.from_properties(
            {**self._config.model_dump(), "default_category": default_category}
        )

    def extract(self, tokens: Sequence[TokenLike]) -> dict[str, list[str]]:
        """Extract message ids from a token stream.

        Args:
            tokens: Tokens of one source unit, trivia included

        Returns:
            Message ids by category, one entry per call site

        """
        return self.extract_result(tokens).messages

    def extract_result(self, tokens: Sequence[TokenLike]) -> ExtractionResult:
        """Extract message ids and skipped calls from a token stream.

        Args:
            tokens: Tokens of one source unit, trivia included

        Returns:
            ExtractionResult for this stream

        """
        self._skipped = []
        result = Scanner(self._pattern, self._config.default_category).scan(tokens)
        self._skipped = list(result.skipped)

        logger.debug(
            f"Extracted {result.message_count} messages in "
            f"{len(result.messages)} categories, skipped {len(result.skipped)} calls"
        )
        return result

    def extract_source(self, content: str) -> dict[str, list[str]]:
        """Tokenise source text and extract message ids from it.

        Args:
            content: Complete source text

        Returns:
            Message ids by category, one entry per call site

        Raises:
            TokeniserError: If the source cannot be tokenised

        """
        self._skipped = []
        return self.extract(self._tokeniser.tokenise(content))

    def has_skipped_lines(self) -> bool:
        """Whether the most recent extraction skipped any call."""
        return bool(self._skipped)

    def get_skipped_lines(self) -> list[SkippedCall]:
        """Return the calls skipped by the most recent extraction."""
        return list(self._skipped)
