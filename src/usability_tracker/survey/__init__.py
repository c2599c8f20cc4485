"""Micro-survey shown on detected discoverability issues."""

from usability_tracker.survey.flow import (
    SurveyFlow,
    SurveyPresenter,
    SurveyStateError,
    format_history,
)
from usability_tracker.survey.schemas import (
    FreeTextPrompt,
    FreeTextResult,
    RatingPrompt,
    RatingResult,
    SurveyResult,
    SurveyState,
)

__all__ = [
    "FreeTextPrompt",
    "FreeTextResult",
    "RatingPrompt",
    "RatingResult",
    "SurveyFlow",
    "SurveyPresenter",
    "SurveyResult",
    "SurveyState",
    "SurveyStateError",
    "format_history",
]
