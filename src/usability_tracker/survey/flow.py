"""Two-step micro-survey shown when low discoverability is detected.

The flow first asks for a rating of how hard it was to find something.
High ratings are followed by a free-text question. Answers are written to
the audit log; the navigation history is cleared after the rating so the
same pattern is not flagged again right away.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable

from usability_tracker.core.config import SurveyConfig
from usability_tracker.storage.audit_log import (
    QUESTIONNAIRE1_MARKER,
    QUESTIONNAIRE2_MARKER,
    AuditLog,
)
from usability_tracker.survey.schemas import (
    FreeTextPrompt,
    FreeTextResult,
    RatingPrompt,
    RatingResult,
    SurveyResult,
    SurveyState,
)
from usability_tracker.trackers.history import NavigationEvent, NavigationHistory

logger = logging.getLogger(__name__)

SubmitCallback = Callable[[SurveyResult], None]


class SurveyStateError(RuntimeError):
    """A survey result arrived that does not match the current step."""


class SurveyPresenter(ABC):
    """Presentation layer interface for displaying survey steps.

    Implementations render the prompt and call ``on_submit`` once the user
    answers. Display is fire-and-forget; ``on_submit`` may be called later
    or synchronously from within the ``show_*`` call.
    """

    @abstractmethod
    def show_rating(self, prompt: RatingPrompt, on_submit: SubmitCallback) -> None:
        """Display a rating control and report a RatingResult."""
        pass

    @abstractmethod
    def show_freetext(self, prompt: FreeTextPrompt, on_submit: SubmitCallback) -> None:
        """Display a text field and report a FreeTextResult."""
        pass


def format_history(events: Iterable[NavigationEvent]) -> str:
    """Serialize events as ``<retention>:<screen>`` pairs joined by commas."""
    return ",".join(f"{event.retention_time}:{event.screen_id}" for event in events)


class SurveyFlow:
    """State machine for a single survey: RATING -> (FREETEXT) -> DONE."""

    def __init__(
        self,
        history: NavigationHistory,
        audit_log: AuditLog,
        presenter: SurveyPresenter,
        config: SurveyConfig | None = None,
        lock: threading.RLock | None = None,
    ):
        self._history = history
        self._audit_log = audit_log
        self._presenter = presenter
        self.config = config or SurveyConfig()
        self._lock = lock or threading.RLock()

        self._state = SurveyState.RATING
        self._rating: float | None = None

    @property
    def state(self) -> SurveyState:
        return self._state

    @property
    def rating(self) -> float | None:
        """Rating submitted in the first step, if any."""
        return self._rating

    @property
    def is_finished(self) -> bool:
        return self._state == SurveyState.DONE

    def start(self) -> None:
        """Show the rating step."""
        prompt = RatingPrompt(
            title=self.config.rating_title,
            message=self.config.rating_message,
            minimum=self.config.rating_min,
            maximum=self.config.rating_max,
            default=self.config.rating_default,
        )
        logger.info("Showing discoverability questionnaire")
        self._presenter.show_rating(prompt, self.submit)

    def submit(self, result: SurveyResult) -> None:
        """Deliver the answer for the current step."""
        with self._lock:
            if self._state == SurveyState.RATING and isinstance(result, RatingResult):
                self._complete_rating(result.value)
            elif self._state == SurveyState.FREETEXT and isinstance(result, FreeTextResult):
                self._complete_freetext(result.text)
            else:
                raise SurveyStateError(
                    f"Unexpected {type(result).__name__} in state {self._state.value}"
                )

    def _clamp_rating(self, value: float) -> float:
        low, high = self.config.rating_min, self.config.rating_max
        if value < low or value > high:
            logger.warning(f"Rating {value} outside [{low}, {high}], clamping")
            return min(max(value, low), high)
        return value

    def _complete_rating(self, value: float) -> None:
        value = self._clamp_rating(value)
        self._rating = value

        history = format_history(self._history.items())
        self._history.clear()

        self._audit_log.log(f"{QUESTIONNAIRE1_MARKER},{value:.2f},{history}")

        if value >= self.config.followup_threshold:
            self._state = SurveyState.FREETEXT
            prompt = FreeTextPrompt(
                title=self.config.freetext_title,
                message=self.config.freetext_message,
            )
            try:
                self._presenter.show_freetext(prompt, self.submit)
            except Exception as e:
                logger.error(f"Failed to show free-text question: {e}")
                self._finish()
        else:
            self._finish()

    def _complete_freetext(self, text: str) -> None:
        self._audit_log.log(f"{QUESTIONNAIRE2_MARKER},'{text}'")
        self._finish()

    def _finish(self) -> None:
        self._state = SurveyState.DONE
        logger.debug("Questionnaire finished")
