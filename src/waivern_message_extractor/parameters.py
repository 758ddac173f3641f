"""Splitting of captured call arguments into parameter groups."""

from collections.abc import Sequence
from dataclasses import dataclass

from waivern_message_extractor.literals import resolve_literal
from waivern_message_extractor.tokens import TokenLike

_BRACKETS = {
    ")": "(",
    "]": "[",
    "}": "{",
}
_OPENERS = frozenset(_BRACKETS.values())
_SEPARATOR = ","

# Positional meaning of parameter groups
_ID_GROUP = 0
_PARAMETERS_GROUP = 1
_CATEGORY_GROUP = 2


class BracketStack:
    """Tracks bracket nesting inside a call's arguments.

    The stack becomes invalid on the first closer that does not match the
    most recent opener (or arrives with nothing open) and stays invalid.
    """

    def __init__(self) -> None:
        """Initialise an empty, valid stack."""
        self._openers: list[str] = []
        self._valid = True

    @property
    def is_valid(self) -> bool:
        """Whether no mismatched closer has been seen."""
        return self._valid

    @property
    def is_empty(self) -> bool:
        """Whether every opener seen so far has been closed."""
        return not self._openers

    @property
    def is_balanced(self) -> bool:
        """Whether the stack is valid with nothing left open."""
        return self._valid and not self._openers

    def feed(self, token: TokenLike) -> bool:
        """Account for one token.

        Args:
            token: Next token of the argument list

        Returns:
            False if the token is a mismatched closer, True otherwise

        """
        if not isinstance(token, str):
            return self._valid
        if token in _OPENERS:
            self._openers.append(token)
        elif token in _BRACKETS:
            expected = _BRACKETS[token]
            if not self._openers or self._openers.pop() != expected:
                self._valid = False
        return self._valid


@dataclass(frozen=True, slots=True)
class CallParameters:
    """Resolved arguments of a translator call."""

    message_id: str | None
    category: str | None
    parameters: list[TokenLike] | None


def split_parameters(tokens: Sequence[TokenLike]) -> list[list[TokenLike]] | None:
    """Split call arguments on commas outside any brackets.

    Args:
        tokens: Tokens between the call's parentheses

    Returns:
        Parameter groups in order, or None if brackets are unbalanced

    """
    groups: list[list[TokenLike]] = [[]]
    brackets = BracketStack()

    for token in tokens:
        if brackets.is_empty and token == _SEPARATOR:
            groups.append([])
            continue
        if not brackets.feed(token):
            return None
        groups[-1].append(token)

    if not brackets.is_balanced:
        return None
    return groups


def extract_call_parameters(tokens: Sequence[TokenLike]) -> CallParameters | None:
    """Resolve message id, category and parameters from call arguments.

    Args:
        tokens: Tokens between the call's parentheses

    Returns:
        CallParameters, or None if the brackets inside the call are unbalanced

    """
    groups = split_parameters(tokens)
    if groups is None:
        return None

    category_group = groups[_CATEGORY_GROUP] if len(groups) > _CATEGORY_GROUP else []
    return CallParameters(
        message_id=resolve_literal(groups[_ID_GROUP]),
        category=resolve_literal(category_group),
        parameters=groups[_PARAMETERS_GROUP]
        if len(groups) > _PARAMETERS_GROUP
        else None,
    )
