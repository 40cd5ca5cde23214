"""Tests for the init command prompts."""

from __future__ import annotations

from typing import Any

from mr.cli.commands.init import collect_settings
from mr.core.settings import Settings
from mr.output.console import MockConsole


class ScriptedAnswers:
    """Answers prompts by title; a list of answers is consumed in order."""

    def __init__(self, answers: dict[str, list[Any]]) -> None:
        self.answers = answers
        self.prompts: list[tuple[str, dict[str, Any]]] = []

    def __call__(self, text: str, **kwargs: Any) -> Any:
        self.prompts.append((text, kwargs))
        return self.answers[text].pop(0)


class TestCollectSettings:
    def test_new_settings(self) -> None:
        ask = ScriptedAnswers(
            {
                "Azure DevOps URL": ["https://dev.azure.com/Contoso/"],
                "Project name": [" Fabrikam "],
                "Personal access token": ["secret"],
                "Refresh seconds": [15],
            }
        )

        settings = collect_settings({}, ask=ask, console=MockConsole())

        assert settings == Settings(
            collection="https://dev.azure.com/Contoso",
            project="Fabrikam",
            personal_access_token="secret",
            refresh_seconds=15,
        )

    def test_invalid_answers_are_asked_again(self) -> None:
        console = MockConsole()
        ask = ScriptedAnswers(
            {
                "Azure DevOps URL": ["dev.azure.com", "https://dev.azure.com/Contoso"],
                "Project name": ["Fabrikam"],
                "Personal access token": ["secret"],
                "Refresh seconds": [0, 5],
            }
        )

        settings = collect_settings({}, ask=ask, console=console)

        assert settings.refresh_seconds == 5
        assert console.find("Invalid URL.")
        assert console.find("positive number of seconds")

    def test_current_values_are_defaults_and_token_is_hidden(self) -> None:
        current: dict[str, object] = {
            "collection": "https://tfs.contoso.local/tfs/Default",
            "project": "Fabrikam",
            "personal_access_token": "old",
            "refresh_seconds": 30,
            "release_url": "https://rm.contoso.local",
        }
        ask = ScriptedAnswers(
            {
                "Azure DevOps URL": [current["collection"]],
                "Project name": ["Fabrikam"],
                "Personal access token": ["new"],
                "Refresh seconds": [30],
            }
        )

        settings = collect_settings(current, ask=ask, console=MockConsole())

        defaults = {text: kwargs.get("default") for text, kwargs in ask.prompts}
        assert defaults == {
            "Azure DevOps URL": "https://tfs.contoso.local/tfs/Default",
            "Project name": "Fabrikam",
            "Personal access token": "old",
            "Refresh seconds": 30,
        }
        token_kwargs = dict(ask.prompts)["Personal access token"]
        assert token_kwargs["hide_input"] is True
        assert token_kwargs["show_default"] is False
        assert settings.personal_access_token == "new"
        assert settings.release_url == "https://rm.contoso.local"
