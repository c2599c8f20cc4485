"""Core tracker components."""

from usability_tracker.core.config import Config, get_config

__all__ = ["Config", "get_config"]
