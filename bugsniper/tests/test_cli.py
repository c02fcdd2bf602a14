"""
Tests for the command-line interface.
"""

import builtins

from ..cli import main


RUBY_PROBLEM = """
id: rb-tiny
codeLanguage: ruby
level: 1
code:
  - "total = nil"
  - "total += 1"
issues:
  - id: nil-add
    lines: [2]
    type: bug
    score: 2
    description:
      en: "nil has no +"
"""


def _feed_input(monkeypatch, lines):
    answers = iter(lines)

    def fake_input(prompt=""):
        try:
            return next(answers)
        except StopIteration:
            raise EOFError

    monkeypatch.setattr(builtins, "input", fake_input)


class TestValidateCommand:
    """Tests for `bugsniper validate`."""

    def test_bundled_problems_valid(self, capsys):
        assert main(["validate"]) == 0
        out = capsys.readouterr().out
        assert "Problems:" in out

    def test_reports_errors(self, tmp_path, capsys):
        (tmp_path / "bad.yaml").write_text("id: x\ncodeLanguage: cobol\nlevel: 1\ncode: ['a']\n")
        assert main(["validate", str(tmp_path)]) == 1
        assert "bad.yaml" in capsys.readouterr().out

    def test_warns_about_problems_without_issues(self, tmp_path, capsys):
        (tmp_path / "empty.yaml").write_text("id: e\ncodeLanguage: java\nlevel: 2\ncode: ['int x;']\n")
        assert main(["validate", str(tmp_path)]) == 0
        assert "e has no issues" in capsys.readouterr().out


class TestPlayCommand:
    """Tests for `bugsniper play`."""

    def test_perfect_game(self, tmp_path, monkeypatch, capsys):
        (tmp_path / "ruby.yaml").write_text(RUBY_PROBLEM)
        _feed_input(monkeypatch, ["2", "s"])

        assert main(["play", "--problems-dir", str(tmp_path)]) == 0
        out = capsys.readouterr().out
        assert "nil has no +" in out
        assert "All issues found - 's' to collect the bonus." in out
        assert "All issues found! +3" in out
        assert "Score: 5" in out
        assert "Issues found: 1/1 (100%)" in out

    def test_quit_abandons_game(self, tmp_path, monkeypatch, capsys):
        (tmp_path / "ruby.yaml").write_text(RUBY_PROBLEM)
        _feed_input(monkeypatch, ["q"])

        assert main(["play", "--problems-dir", str(tmp_path)]) == 0
        assert "Game abandoned." in capsys.readouterr().out

    def test_unknown_language(self, capsys):
        assert main(["play", "--code-language", "cobol"]) == 1
        assert "Unknown code language" in capsys.readouterr().out

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 1
