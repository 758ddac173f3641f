"""Data models for extraction results."""

from typing import NamedTuple, TypeAlias

from pydantic import BaseModel, ConfigDict


class ExtractedMessage(BaseModel):
    """A message id found in a translator call."""

    model_config = ConfigDict(frozen=True)

    category: str
    id: str


class SkippedCall(NamedTuple):
    """A translator call that could not be resolved to a message id.

    Unpacks as ``(line, source)``; line is None only when the call's text
    holds no significant token to take a line from.
    """

    line: int | None
    source: str


class ExtractedCall(BaseModel):
    """Outcome of a resolved translator call.

    Holds the call's own message first, followed by messages and skipped
    calls found in its parameters.
    """

    messages: list[ExtractedMessage] = []
    skipped: list[SkippedCall] = []


CallOutcome: TypeAlias = ExtractedCall | SkippedCall


class ExtractionResult(BaseModel):
    """Result of scanning one token stream."""

    messages: dict[str, list[str]] = {}
    skipped: list[SkippedCall] = []

    @property
    def message_count(self) -> int:
        """Total number of message ids across all categories."""
        return sum(len(ids) for ids in self.messages.values())

    @property
    def has_skipped(self) -> bool:
        """Whether any call was skipped."""
        return bool(self.skipped)

    def add_message(self, message: ExtractedMessage) -> None:
        """Append a message id under its category."""
        self.messages.setdefault(message.category, []).append(message.id)

    def add_outcome(self, outcome: CallOutcome) -> None:
        """Merge the outcome of one translator call."""
        if isinstance(outcome, SkippedCall):
            self.skipped.append(outcome)
            return
        for message in outcome.messages:
            self.add_message(message)
        self.skipped.extend(outcome.skipped)
