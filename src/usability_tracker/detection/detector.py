"""Low discoverability detection.

A user is considered to have trouble finding something when, within the
history window:
1. every screen was left again quickly (low retention), and
2. at least one screen was visited more than once (navigational loop).

Both predicates are computed from the same snapshot and must both hold.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from usability_tracker.trackers.history import NavigationEvent

logger = logging.getLogger(__name__)


@dataclass
class DetectionThresholds:
    """Thresholds for the detection heuristics."""

    # Number of events that make up a full window
    history_size: int = 6

    # Dwell time (seconds) below which a visit counts as low retention
    low_retention_seconds: float = 6.0


@dataclass(frozen=True)
class DetectionResult:
    """Outcome of a single evaluation."""

    low_retention: bool
    has_loop: bool

    @property
    def low_discoverability(self) -> bool:
        return self.low_retention and self.has_loop


def has_low_retention(
    events: Sequence[NavigationEvent],
    history_size: int,
    threshold_seconds: float,
) -> bool:
    """True when the window is full and every event is below the threshold."""
    num_samples = 0
    num_below_threshold = 0

    for event in events:
        num_samples += 1
        if event.retention_time is not None and event.retention_time < threshold_seconds:
            num_below_threshold += 1

    return num_samples >= history_size and num_samples == num_below_threshold


def has_loops(events: Sequence[NavigationEvent]) -> bool:
    """True when two positions in the window share a screen id."""
    seen: set[str] = set()
    for event in events:
        if event.screen_id in seen:
            return True
        seen.add(event.screen_id)
    return False


class DiscoverabilityDetector:
    """Evaluates both heuristics against a history snapshot."""

    def __init__(self, thresholds: DetectionThresholds | None = None):
        self.thresholds = thresholds or DetectionThresholds()

    def evaluate(self, events: Sequence[NavigationEvent]) -> DetectionResult:
        result = DetectionResult(
            low_retention=has_low_retention(
                events,
                self.thresholds.history_size,
                self.thresholds.low_retention_seconds,
            ),
            has_loop=has_loops(events),
        )

        if result.low_retention:
            logger.info("Low retention times detected")
        if result.has_loop:
            logger.info("Navigational loop(s) detected")
        if result.low_discoverability:
            logger.info("Low discoverability detected")

        return result
