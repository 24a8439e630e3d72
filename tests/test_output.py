"""Tests for the output system: stream discipline, quiet/verbose, formats."""

from __future__ import annotations

import json

import pytest

from apicaller import output as output_module
from apicaller.output import (
    OutputFormat,
    OutputManager,
    _should_disable_color,
    get_output,
    reset_output,
    set_output,
)


@pytest.fixture(autouse=True)
def _reset_global_output():
    reset_output()
    yield
    reset_output()


@pytest.fixture()
def non_tty(monkeypatch):
    monkeypatch.setattr("apicaller.output._is_tty", lambda: False)


class TestFormatResolution:
    def test_auto_resolves_to_plain_when_not_tty(self, non_tty) -> None:
        assert OutputManager(format=OutputFormat.AUTO).format == OutputFormat.PLAIN

    def test_auto_resolves_to_rich_on_colour_tty(self, monkeypatch) -> None:
        monkeypatch.setattr("apicaller.output._is_tty", lambda: True)
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "xterm-256color")
        assert OutputManager().format == OutputFormat.RICH

    def test_no_color_env(self, monkeypatch) -> None:
        monkeypatch.setenv("NO_COLOR", "")
        assert _should_disable_color() is True

    def test_term_dumb(self, monkeypatch) -> None:
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "dumb")
        assert _should_disable_color() is True


class TestStreams:
    def test_json_response_goes_to_stdout(self, capsys) -> None:
        OutputManager(format=OutputFormat.JSON, no_color=True).format_response({"id": 1})
        captured = capsys.readouterr()
        assert json.loads(captured.out) == {"id": 1}
        assert captured.err == ""

    def test_plain_dict(self, capsys) -> None:
        OutputManager(format=OutputFormat.PLAIN, no_color=True).format_response({"a": 1})
        assert capsys.readouterr().out == "a\t1\n"

    def test_info_goes_to_stderr(self, capsys) -> None:
        OutputManager(format=OutputFormat.PLAIN, no_color=True).info("hello")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == "hello\n"

    def test_quiet_suppresses_info_not_errors(self, capsys) -> None:
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
        mgr.info("hidden")
        mgr.error("boom")
        assert capsys.readouterr().err == "Error: boom\n"

    def test_debug_only_when_verbose(self, capsys) -> None:
        OutputManager(format=OutputFormat.PLAIN, no_color=True).debug("hidden")
        OutputManager(format=OutputFormat.PLAIN, no_color=True, verbose=True).debug("shown")
        assert capsys.readouterr().err == "[debug] shown\n"

    def test_table_plain(self, capsys) -> None:
        OutputManager(format=OutputFormat.PLAIN, no_color=True).print_table(
            ["endpoint", "url"], [["one", "u1"]]
        )
        assert capsys.readouterr().out == "endpoint\turl\none\tu1\n"


class TestGlobalInstance:
    def test_lazy_default(self) -> None:
        assert isinstance(get_output(), OutputManager)

    def test_set_output_used_by_helpers(self, capsys) -> None:
        set_output(OutputManager(format=OutputFormat.PLAIN, no_color=True, verbose=True))
        output_module.debug("trace")
        assert capsys.readouterr().err == "[debug] trace\n"


class TestModels:
    def test_pydantic_model_rendered_as_json(self, capsys) -> None:
        from pydantic import BaseModel

        class Character(BaseModel):
            id: int
            name: str

        OutputManager(format=OutputFormat.JSON, no_color=True).format_response(
            [Character(id=1, name="Rick")]
        )
        assert json.loads(capsys.readouterr().out) == [{"id": 1, "name": "Rick"}]
