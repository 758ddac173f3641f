"""Translation message extraction for PHP source code.

This package provides ContentParser, which scans a token stream for calls to a
translator (``$this->translate(...)`` by default) and collects the literal
message ids by category, reporting calls it cannot resolve for manual review.
"""

__version__ = "0.1.0"

from .config import DEFAULT_TRANSLATOR, MessageExtractorConfig
from .content_parser import ContentParser
from .errors import ExtractorConfigError, MessageExtractorError, TokeniserError
from .models import ExtractedCall, ExtractedMessage, ExtractionResult, SkippedCall
from .pattern import TranslatorPattern
from .protocols import Tokeniser
from .tokeniser import PHPTokeniser
from .tokens import Token, TokenKind, TokenLike

__all__ = [
    # Version
    "__version__",
    # Extraction
    "ContentParser",
    "TranslatorPattern",
    # Configuration
    "DEFAULT_TRANSLATOR",
    "MessageExtractorConfig",
    # Models
    "ExtractedCall",
    "ExtractedMessage",
    "ExtractionResult",
    "SkippedCall",
    # Tokens
    "PHPTokeniser",
    "Token",
    "TokenKind",
    "TokenLike",
    "Tokeniser",
    # Errors
    "ExtractorConfigError",
    "MessageExtractorError",
    "TokeniserError",
]
