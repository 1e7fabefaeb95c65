import io
from pathlib import Path

from trainer.exercise import Exercise, Mode
from trainer.watch import WatchShell, WatchStatus, _pending_exercises, watch

PENDING = "// I AM NOT DONE\n\nfn main() {}\n"
FINISHED = "fn main() {}\n"


def test_hint_prints_current_hint(capsys):
    shell = WatchShell(hint="Hello!")
    shell.execute("hint\n")
    assert capsys.readouterr().out == "Hello!\n"


def test_hint_without_hint_prints_nothing(capsys):
    WatchShell().execute("hint")
    assert capsys.readouterr().out == ""


def test_quit_sets_flag(capsys):
    shell = WatchShell()
    shell.execute("  quit  ")
    assert shell.should_quit.is_set()
    assert "Bye!" in capsys.readouterr().out


def test_help_lists_commands(capsys):
    WatchShell().execute("help")
    out = capsys.readouterr().out
    assert "Commands available to you in watch mode:" in out
    assert "quit   - quits watch mode" in out


def test_empty_bang_command(capsys):
    WatchShell().execute("!")
    assert "no command provided" in capsys.readouterr().out


def test_missing_program_is_reported(capsys):
    WatchShell().execute("!no-such-program-anywhere --flag")
    assert "failed to execute command `no-such-program-anywhere --flag`" in capsys.readouterr().out


def test_unknown_command(capsys):
    WatchShell().execute("dance")
    assert "unknown command: dance" in capsys.readouterr().out


def test_run_stops_at_quit(capsys):
    shell = WatchShell(hint="Hello!", stream=io.StringIO("hint\nquit\nhint\n"))
    shell.run()
    assert shell.should_quit.is_set()
    assert capsys.readouterr().out.count("Hello!") == 1


def test_run_stops_at_end_of_input(capsys):
    shell = WatchShell(hint="Hello!", stream=io.StringIO("hint\n"))
    shell.run()
    assert not shell.should_quit.is_set()
    assert "Hello!" in capsys.readouterr().out


def test_pending_order_puts_changed_first(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "exercises").mkdir()
    texts = {"a": PENDING, "b": FINISHED, "c": PENDING}
    exercises = []
    for name, text in texts.items():
        (tmp_path / "exercises" / f"{name}.rs").write_text(text, encoding="utf-8")
        exercises.append(Exercise(name=name, path=Path(f"exercises/{name}.rs"), mode=Mode.COMPILE, hint=""))
    changed = (tmp_path / "exercises" / "c.rs").resolve()
    assert [e.name for e in _pending_exercises(changed, exercises)] == ["c", "a"]


def test_pending_order_includes_changed_even_if_done(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "exercises").mkdir()
    (tmp_path / "exercises" / "b.rs").write_text(FINISHED, encoding="utf-8")
    exercise = Exercise(name="b", path=Path("exercises/b.rs"), mode=Mode.COMPILE, hint="")
    changed = (tmp_path / "exercises" / "b.rs").resolve()
    assert list(_pending_exercises(changed, [exercise])) == [exercise]


def test_watch_with_nothing_to_do_finishes(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "exercises").mkdir()
    assert watch([], False, False) is WatchStatus.FINISHED