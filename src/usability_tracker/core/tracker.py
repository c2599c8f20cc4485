"""Tracker facade coordinating history, detection, surveys and the audit log."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable

from usability_tracker.core.config import Config, get_config
from usability_tracker.detection.detector import (
    DetectionResult,
    DetectionThresholds,
    DiscoverabilityDetector,
)
from usability_tracker.storage.audit_log import ACTIVATE_MARKER, DEACTIVATE_MARKER, AuditLog
from usability_tracker.survey.flow import SurveyFlow, SurveyPresenter
from usability_tracker.trackers.history import NavigationEvent, NavigationHistory

logger = logging.getLogger(__name__)


class UsabilityTracker:
    """Tracks screen transitions and asks for feedback on discoverability issues.

    The presentation layer reports navigation through :meth:`enter_view`
    and app lifecycle changes through :meth:`app_activate` and
    :meth:`app_deactivate`. Surveys are rendered by the attached
    :class:`SurveyPresenter`.

    All entry points, including survey answers, are serialized by one
    re-entrant lock.
    """

    def __init__(
        self,
        config: Config | None = None,
        presenter: SurveyPresenter | None = None,
        clock: Callable[[], float] = time.time,
        audit_log: AuditLog | None = None,
    ):
        self.config = config or get_config()
        self._clock = clock
        self._lock = threading.RLock()
        self._presenter = presenter

        tracking = self.config.tracking
        self.history = NavigationHistory(capacity=tracking.history_size)
        self.detector = DiscoverabilityDetector(
            DetectionThresholds(
                history_size=tracking.history_size,
                low_retention_seconds=tracking.low_retention_threshold_seconds,
            )
        )

        self.base_time = self._now()
        self.audit_log = audit_log or AuditLog.for_launch(
            self.config.data_dir,
            self.config.get_device_id(),
            self.base_time,
            clock=clock,
            sync_writes=tracking.sync_writes,
        )

        self._current_view: NavigationEvent | None = None
        self._view_base_time: int | None = None
        self._survey: SurveyFlow | None = None

    def _now(self) -> int:
        return int(self._clock())

    @property
    def current_view(self) -> NavigationEvent | None:
        """The screen the user is on, not yet finalized."""
        return self._current_view

    @property
    def survey(self) -> SurveyFlow | None:
        """The most recent survey flow, if one was started."""
        return self._survey

    @property
    def survey_pending(self) -> bool:
        return self._survey is not None and not self._survey.is_finished

    def set_presenter(self, presenter: SurveyPresenter | None) -> None:
        """Set the presentation layer used to display surveys."""
        with self._lock:
            self._presenter = presenter

    def enter_view(self, screen_id: str) -> DetectionResult:
        """Record a transition to ``screen_id``.

        Finalizes the previous screen, logs the new one and runs detection.
        Starts a survey when low discoverability is detected.
        """
        logger.debug(f'Transition to view "{screen_id}"')

        with self._lock:
            now = self._now()

            if self._current_view is not None and self._view_base_time is not None:
                retention = max(0, now - self._view_base_time)
                self.history.push(self._current_view.finalize(retention))

            self._current_view = NavigationEvent(screen_id=screen_id)
            self._view_base_time = now

            self.audit_log.log(screen_id)

            result = self.detector.evaluate(self.history.items())
            if result.low_discoverability:
                self._start_survey()

            return result

    def app_activate(self) -> None:
        """Record the app moving to the foreground."""
        with self._lock:
            self.audit_log.log(ACTIVATE_MARKER)

    def app_deactivate(self) -> None:
        """Record the app moving to the background."""
        with self._lock:
            self.audit_log.log(DEACTIVATE_MARKER)

    def _start_survey(self) -> None:
        if not self.config.survey.enabled:
            logger.debug("Surveys disabled, not showing questionnaire")
            return

        if self.survey_pending:
            logger.info("Questionnaire already pending, ignoring new detection")
            return

        if self._presenter is None:
            logger.warning("Low discoverability detected but no survey presenter is set")
            return

        self._survey = SurveyFlow(
            history=self.history,
            audit_log=self.audit_log,
            presenter=self._presenter,
            config=self.config.survey,
            lock=self._lock,
        )
        try:
            self._survey.start()
        except Exception as e:
            logger.error(f"Failed to show questionnaire: {e}")
            self._survey = None

    def close(self) -> None:
        """Release the audit log file."""
        with self._lock:
            self.audit_log.close()


_tracker: UsabilityTracker | None = None
_tracker_lock = threading.Lock()


def get_tracker() -> UsabilityTracker:
    """Get the process-wide tracker, creating it on first use."""
    global _tracker
    if _tracker is None:
        with _tracker_lock:
            if _tracker is None:
                _tracker = UsabilityTracker()
    return _tracker
