"""Tests for detection/detector.py: low retention and loop heuristics."""
from __future__ import annotations

import logging

from usability_tracker.detection.detector import (
    DetectionResult,
    DetectionThresholds,
    DiscoverabilityDetector,
    has_loops,
    has_low_retention,
)
from usability_tracker.trackers.history import NavigationEvent


def _events(names, retentions=None):
    retentions = retentions or [5] * len(names)
    return [NavigationEvent(screen_id=n, retention_time=r) for n, r in zip(names, retentions)]


class TestLowRetention:
    def test_full_window_all_below_threshold(self):
        events = _events("ABCDEF", [5, 5, 5, 5, 5, 5])
        assert has_low_retention(events, 6, 6.0) is True

    def test_single_long_dwell_breaks_signal(self):
        events = _events("ABCDEF", [5, 5, 5, 5, 5, 7])
        assert has_low_retention(events, 6, 6.0) is False

    def test_threshold_is_strict(self):
        events = _events("ABCDEF", [5, 5, 5, 5, 5, 6])
        assert has_low_retention(events, 6, 6.0) is False

    def test_partial_window_is_false(self):
        events = _events("ABCDE", [0, 0, 0, 0, 0])
        assert has_low_retention(events, 6, 6.0) is False

    def test_empty_is_false(self):
        assert has_low_retention([], 6, 6.0) is False


class TestLoops:
    def test_repeated_screen(self):
        assert has_loops(_events(["A", "B", "A", "C", "D", "E"])) is True

    def test_all_unique(self):
        assert has_loops(_events(["A", "B", "C", "D", "E", "F"])) is False

    def test_adjacent_repeat(self):
        assert has_loops(_events(["A", "A"])) is True

    def test_case_sensitive(self):
        assert has_loops(_events(["Home", "home"])) is False

    def test_single_event(self):
        assert has_loops(_events(["A"])) is False


class TestDiscoverabilityDetector:
    def test_both_predicates_trigger(self):
        detector = DiscoverabilityDetector()
        result = detector.evaluate(_events(["A", "B", "A", "C", "D", "E"]))
        assert result == DetectionResult(low_retention=True, has_loop=True)
        assert result.low_discoverability

    def test_low_retention_without_loop_does_not_trigger(self):
        detector = DiscoverabilityDetector()
        result = detector.evaluate(_events("ABCDEF"))
        assert result.low_retention
        assert not result.has_loop
        assert not result.low_discoverability

    def test_loop_without_low_retention_does_not_trigger(self):
        detector = DiscoverabilityDetector()
        result = detector.evaluate(_events(["A", "B", "A", "C", "D", "E"], [5, 5, 5, 5, 5, 30]))
        assert result.has_loop
        assert not result.low_discoverability

    def test_custom_thresholds(self):
        detector = DiscoverabilityDetector(DetectionThresholds(history_size=3, low_retention_seconds=2.0))
        assert detector.evaluate(_events(["A", "B", "A"], [1, 1, 1])).low_discoverability
        assert not detector.evaluate(_events(["A", "B", "A"], [1, 2, 1])).low_discoverability

    def test_logs_detection(self, caplog):
        detector = DiscoverabilityDetector()
        with caplog.at_level(logging.INFO, logger="usability_tracker.detection.detector"):
            detector.evaluate(_events(["A", "B", "A", "C", "D", "E"]))
        assert "Low discoverability detected" in caplog.text
