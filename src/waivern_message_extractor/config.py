"""Configuration for ContentParser."""

from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from waivern_message_extractor.errors import ExtractorConfigError

DEFAULT_TRANSLATOR = "->translate"


class MessageExtractorConfig(BaseModel):
    """Configuration for ContentParser with Pydantic validation.

    Features:
        - Immutable (frozen) so a configured parser cannot drift
        - Strict validation (no extra fields allowed)
        - from_properties() factory method for dictionary-based creation

    Example:
        ```python
        config = MessageExtractorConfig.from_properties({
            "default_category": "app",
            "translator": "::t",
        })
        ```

    """

    model_config = ConfigDict(
        # Immutable - configuration cannot be modified after creation
        frozen=True,
        # Strict - extra fields not in the model are rejected
        extra="forbid",
    )

    default_category: str = Field(
        default="",
        description="Category used when a translator call omits one",
    )
    translator: str = Field(
        default=DEFAULT_TRANSLATOR,
        description="Source fragment that precedes the '(' of a translator call",
    )

    @field_validator("translator")
    @classmethod
    def validate_translator(cls, v: str) -> str:
        """Reject blank translator fragments and strip surrounding whitespace."""
        if not v.strip():
            raise ValueError("Translator must be a non-empty source fragment")
        return v.strip()

    @classmethod
    def from_properties(cls, properties: dict[str, Any]) -> Self:
        """Create configuration from a properties dictionary.

        Args:
            properties: Raw properties containing:
                - default_category (str, optional): Fallback category.
                - translator (str, optional): Translator call prefix.

        Returns:
            Validated configuration object

        Raises:
            ExtractorConfigError: If validation fails

        """
        try:
            return cls.model_validate(properties)
        except ValidationError as e:
            raise ExtractorConfigError(
                f"Invalid message extractor configuration: {e}"
            ) from e