from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal


class CaptchaOutcome(str, Enum):
    """Terminal classification of one verification attempt."""

    PASSED = "passed"
    SKIPPED = "skipped"
    TOKEN_NOT_FOUND = "token_not_found"
    ANSWER_NOT_FOUND = "answer_not_found"
    WRONG_TOKEN = "wrong_token"
    WRONG_ANSWER = "wrong_answer"
    STORAGE_ERROR = "storage_error"


@dataclass(frozen=True)
class Extraction:
    """
    What a finder pulled out of a request for a single field.

    - absent: the field is not in the request at all
    - malformed: the field is there but its value can't be used
    - present: the field is there, `value` holds it
    """

    status: Literal["absent", "malformed", "present"]
    value: str | None = None

    def __post_init__(self):
        if self.status == "present" and self.value is None:
            raise ValueError("a present extraction needs a value")

    @classmethod
    def absent(cls) -> Extraction:
        return cls("absent")

    @classmethod
    def malformed(cls) -> Extraction:
        return cls("malformed")

    @classmethod
    def present(cls, value: str) -> Extraction:
        return cls("present", value)

    @classmethod
    def coerce(cls, value: Extraction | str | None) -> Extraction:
        """None -> absent, str -> present, Extraction -> as is."""
        if value is None:
            return cls.absent()
        if isinstance(value, Extraction):
            return value
        return cls.present(value)


@dataclass(frozen=True)
class AnswerRecord:
    token: str
    answer: str
    created_at: float  # epoch seconds

    def age(self, now: float) -> float:
        return now - self.created_at
