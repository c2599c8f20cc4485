"""Value types exchanged between the survey flow and the presentation layer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class SurveyState(str, Enum):
    """Steps of the micro-survey."""

    RATING = "rating"  # How hard was it to find
    FREETEXT = "freetext"  # What are you looking for
    DONE = "done"


@dataclass(frozen=True)
class RatingPrompt:
    """Request to show a bounded rating control."""

    title: str
    message: str
    minimum: float = 1.0
    maximum: float = 5.0
    default: float = 3.0


@dataclass(frozen=True)
class FreeTextPrompt:
    """Request to show an open text field."""

    title: str
    message: str = ""


@dataclass(frozen=True)
class RatingResult:
    value: float


@dataclass(frozen=True)
class FreeTextResult:
    text: str


SurveyResult = Union[RatingResult, FreeTextResult]
