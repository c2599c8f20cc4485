"""Terminal survey presenter used by the ``simulate`` command."""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.prompt import FloatPrompt, Prompt

from usability_tracker.survey.flow import SubmitCallback, SurveyPresenter
from usability_tracker.survey.schemas import (
    FreeTextPrompt,
    FreeTextResult,
    RatingPrompt,
    RatingResult,
)


class ConsoleSurveyPresenter(SurveyPresenter):
    """Asks the survey questions on the console and answers synchronously."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def show_rating(self, prompt: RatingPrompt, on_submit: SubmitCallback) -> None:
        scale = f"{prompt.minimum:g} (easy) .. {prompt.maximum:g} (hard)"
        self.console.print(Panel(f"{prompt.message}\n\n{scale}", title=prompt.title))

        while True:
            value = FloatPrompt.ask("Rating", default=prompt.default, console=self.console)
            if prompt.minimum <= value <= prompt.maximum:
                break
            self.console.print(
                f"[red]Please enter a value between {prompt.minimum:g} and {prompt.maximum:g}[/red]"
            )

        on_submit(RatingResult(value=value))

    def show_freetext(self, prompt: FreeTextPrompt, on_submit: SubmitCallback) -> None:
        if prompt.message:
            self.console.print(prompt.message)
        text = Prompt.ask(prompt.title, default="", console=self.console)
        on_submit(FreeTextResult(text=text))
