"""Navigation tracking components."""

from usability_tracker.trackers.history import NavigationEvent, NavigationHistory

__all__ = [
    "NavigationEvent",
    "NavigationHistory",
]
