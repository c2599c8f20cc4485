"""Shared fixtures for tracker tests."""
from __future__ import annotations

from pathlib import Path

import pytest

from usability_tracker.core.config import Config
from usability_tracker.survey.flow import SubmitCallback, SurveyPresenter
from usability_tracker.survey.schemas import FreeTextPrompt, RatingPrompt


class FakeClock:
    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingPresenter(SurveyPresenter):
    """Keeps every prompt and its callback so tests can answer later."""

    def __init__(self):
        self.rating_prompts: list[RatingPrompt] = []
        self.freetext_prompts: list[FreeTextPrompt] = []
        self.callbacks: list[SubmitCallback] = []

    def show_rating(self, prompt, on_submit):
        self.rating_prompts.append(prompt)
        self.callbacks.append(on_submit)

    def show_freetext(self, prompt, on_submit):
        self.freetext_prompts.append(prompt)
        self.callbacks.append(on_submit)

    @property
    def last_callback(self) -> SubmitCallback:
        return self.callbacks[-1]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def presenter() -> RecordingPresenter:
    return RecordingPresenter()


@pytest.fixture
def config(tmp_path: Path) -> Config:
    return Config(
        data_dir=tmp_path / "data",
        log_dir=tmp_path / "logs",
        config_dir=tmp_path / "config",
        device_id="test-device",
    )
