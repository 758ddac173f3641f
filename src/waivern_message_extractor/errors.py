"""Error classes for the message extractor.

This module provides:
- MessageExtractorError: Base exception class for all extractor errors
- ExtractorConfigError: Invalid configuration (including translator patterns)
- TokeniserError: Source text could not be tokenised
"""


class MessageExtractorError(Exception):
    """Base exception for all message extractor errors."""

    pass


class ExtractorConfigError(MessageExtractorError):
    """Raised when extractor configuration is invalid."""

    pass


class TokeniserError(MessageExtractorError):
    """Raised when source text cannot be tokenised."""

    pass
