"""Tests for the script helpers."""

import argparse
import io
import json
import sys

from graph_commands import cli
from graph_commands.batch import BatchReport
from graph_commands.cli import (
    add_common_args,
    emit_report,
    owner_context,
    parse_piped,
    prompt_confirm,
    read_targets,
    to_jsonable,
)
from graph_commands.handles import ME, OwnerContext
from graph_commands.models import Page, Section


def _parse(argv):
    parser = argparse.ArgumentParser()
    add_common_args(parser, targets="sections")
    return parser.parse_args(argv)


class TestParsePiped:
    def test_json_list(self):
        assert parse_piped('[{"self": "a"}, {"self": "b"}]') == [{"self": "a"}, {"self": "b"}]

    def test_json_object(self):
        assert parse_piped('{"self": "a"}') == [{"self": "a"}]

    def test_lines(self):
        assert parse_piped("https://x/1\n\n  General  \n") == ["https://x/1", "General"]

    def test_empty(self):
        assert parse_piped("  \n") == []


class TestReadTargets:
    def test_arguments_then_stdin(self):
        args = _parse(["General", "--stdin"])
        targets = read_targets(args, stdin=io.StringIO('[{"self": "https://x/s"}]'))
        assert targets == ["General", {"self": "https://x/s"}]

    def test_stdin_not_read_without_flag(self):
        args = _parse(["General"])
        assert read_targets(args, stdin=io.StringIO("ignored")) == ["General"]


class TestOwnerContext:
    def test_default_is_me(self):
        assert owner_context(_parse([])) == ME

    def test_group(self):
        assert owner_context(_parse(["--group", "g1"])) == OwnerContext.group("g1")


class TestOutput:
    def test_records_become_dicts(self):
        page = Page(id="p", title="T", parent_section=Section(id="s", display_name="General", self_url="u"))
        result = to_jsonable([page])
        assert result[0]["parentSection"] == {"id": "s", "displayName": "General", "self": "u"}

    def test_emit_report_exit_status(self, capsys):
        assert emit_report(BatchReport(results=[{"status": "deleted"}])) == 0
        assert json.loads(capsys.readouterr().out) == [{"status": "deleted"}]

        failed = BatchReport(errors=[Exception("boom")])
        assert emit_report(failed) == 1

    def test_force_skips_prompt(self):
        assert prompt_confirm(True) is None
        assert callable(prompt_confirm(False))


class TestPromptConfirm:
    def test_reads_answer_from_terminal_when_stdin_is_piped(self, monkeypatch, tmp_path):
        tty = tmp_path / "tty"
        tty.write_text("yes\n")
        monkeypatch.setattr(sys, "stdin", io.StringIO("[]"))
        monkeypatch.setattr(cli, "TTY", str(tty))
        assert prompt_confirm(False)("Delete page 'x'") is True

    def test_no_terminal_means_not_confirmed(self, monkeypatch, tmp_path):
        monkeypatch.setattr(sys, "stdin", io.StringIO("[]"))
        monkeypatch.setattr(cli, "TTY", str(tmp_path / "missing"))
        assert prompt_confirm(False)("Delete page 'x'") is False
