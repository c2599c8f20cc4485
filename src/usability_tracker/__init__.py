"""Usability Tracker - detects low discoverability from navigation patterns."""

__version__ = "0.1.0"
