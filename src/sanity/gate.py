"""Turn failed-check messages into a pipeline-stopping error."""

from __future__ import annotations

from typing import Sequence

VALIDATION_FAILURE_HEADER = "Data Validation failed:"


class ValidationFailure(ValueError):
    """Raised when one or more sanity checks failed."""

    def __init__(self, messages: Sequence[str]) -> None:
        self.messages: tuple[str, ...] = tuple(messages)
        super().__init__("\n".join([VALIDATION_FAILURE_HEADER, *self.messages]))


def gate(messages: Sequence[str]) -> None:
    """Raise ValidationFailure when any message is present."""

    if messages:
        raise ValidationFailure(messages)
