"""Low discoverability detection heuristics."""

from usability_tracker.detection.detector import (
    DetectionResult,
    DetectionThresholds,
    DiscoverabilityDetector,
    has_loops,
    has_low_retention,
)

__all__ = [
    "DetectionResult",
    "DetectionThresholds",
    "DiscoverabilityDetector",
    "has_loops",
    "has_low_retention",
]
