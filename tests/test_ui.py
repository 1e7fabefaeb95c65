import pytest

from trainer.ui import bold, success, warn


@pytest.fixture(autouse=True)
def plain_output(monkeypatch):
    monkeypatch.setenv("ANSI_COLORS_DISABLED", "1")


def test_warn_without_emoji(monkeypatch, capsys):
    monkeypatch.setenv("NO_EMOJI", "1")
    line = warn("Ran example with errors")
    assert line == "! Ran example with errors"
    assert capsys.readouterr().out == "! Ran example with errors\n"


def test_warn_with_emoji(monkeypatch, capsys):
    monkeypatch.delenv("NO_EMOJI", raising=False)
    line = warn("Ran example with errors")
    assert line == "⚠️  Ran example with errors"
    assert capsys.readouterr().out == line + "\n"


def test_success_without_emoji(monkeypatch, capsys):
    monkeypatch.setenv("NO_EMOJI", "1")
    line = success("Successfully ran example")
    assert line == "✓ Successfully ran example"
    assert capsys.readouterr().out == line + "\n"


def test_success_with_emoji(monkeypatch):
    monkeypatch.delenv("NO_EMOJI", raising=False)
    assert success("done") == "✅ done"


def test_bold_plain_when_colours_disabled():
    assert bold("`I AM NOT DONE`") == "`I AM NOT DONE`"


def test_bold_accepts_numbers():
    assert bold(12) == "12"