"""Watch mode: re-verify exercises whenever a file changes."""

from __future__ import annotations

import enum
import os
import queue
import subprocess
import sys
import threading
from pathlib import Path

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from trainer.verify import VerificationFailed, verify

_HELP = """Commands available to you in watch mode:
  hint   - prints the current exercise's hint
  clear  - clears the screen
  quit   - quits watch mode
  !<cmd> - executes a command, like `!rustc --explain E0381`
  help   - displays this help message

Watch mode automatically re-evaluates the current exercise
when you edit a file's contents."""

_RESET_TERMINAL = "\x1bc"


class WatchStatus(enum.Enum):
    """How watch mode ended."""

    FINISHED = "finished"
    UNFINISHED = "unfinished"


class WatchShell:
    """Reads commands typed while watch mode runs."""

    def __init__(self, hint=None, stream=None):
        self.hint = hint
        self.should_quit = threading.Event()
        self._stream = stream if stream is not None else sys.stdin

    def execute(self, line):
        """Carry out one command line."""
        command = line.strip()
        if command == "hint":
            if self.hint is not None:
                print(self.hint)
        elif command == "clear":
            print("\x1b[2J\x1b[1;1H")
        elif command == "quit":
            self.should_quit.set()
            print("Bye!")
        elif command == "help":
            print(_HELP)
        elif command.startswith("!"):
            cmd = command[1:]
            parts = cmd.split()
            if not parts:
                print("no command provided")
            else:
                try:
                    subprocess.run(parts, check=False)
                except OSError as exc:
                    print(f"failed to execute command `{cmd}`: {exc}")
        else:
            print(f"unknown command: {command}")

    def run(self):
        """Read and execute commands until quit or end of input."""
        while not self.should_quit.is_set():
            try:
                line = self._stream.readline()
            except (OSError, ValueError) as exc:
                print(f"error reading command: {exc}")
                return
            if not line:
                return
            self.execute(line)


class _ChangeHandler(FileSystemEventHandler):
    def __init__(self, events):
        super().__init__()
        self._events = events

    def _push(self, event):
        if not event.is_directory:
            self._events.put(Path(os.fsdecode(event.src_path)))

    def on_created(self, event):
        self._push(event)

    def on_modified(self, event):
        self._push(event)


def _clear_screen(stream=None):
    """Reset the terminal with an ANSI escape and flush it out at once."""
    out = stream if stream is not None else sys.stdout
    out.write(_RESET_TERMINAL + "\n")
    out.flush()


def _ends_with(filepath, exercise_path):
    tail = Path(exercise_path).parts
    return len(tail) <= len(filepath.parts) and filepath.parts[len(filepath.parts) - len(tail):] == tail


def _pending_exercises(filepath, exercises):
    """The exercise for the changed file first, then every other unfinished one."""
    changed = next((e for e in exercises if _ends_with(filepath, e.path)), None)
    if changed is not None:
        yield changed
    for exercise in exercises:
        if not _ends_with(filepath, exercise.path) and not exercise.looks_done():
            yield exercise


def _drain(events, first):
    paths = {first: None}
    while True:
        try:
            paths[events.get_nowait()] = None
        except queue.Empty:
            return list(paths)


def watch(exercises, verbose, success_hints):
    """Verify exercises, then re-verify on every change below ./exercises."""
    events = queue.Queue()
    observer = Observer()
    observer.schedule(_ChangeHandler(events), "./exercises", recursive=True)
    observer.start()
    try:
        _clear_screen()
        try:
            verify(exercises, (0, len(exercises)), verbose, success_hints)
            return WatchStatus.FINISHED
        except VerificationFailed as failure:
            shell = WatchShell(failure.exercise.hint)

        print(
            "Welcome to watch mode! You can type 'help' to get an overview "
            "of the commands you can use here."
        )
        threading.Thread(target=shell.run, daemon=True).start()

        while True:
            try:
                changed = _drain(events, events.get(timeout=1))
            except queue.Empty:
                changed = []
            for path in changed:
                if path.suffix != ".rs" or not path.exists():
                    continue
                filepath = path.resolve()
                pending = _pending_exercises(filepath, exercises)
                num_done = sum(1 for e in exercises if e.looks_done())
                _clear_screen()
                try:
                    verify(pending, (num_done, len(exercises)), verbose, success_hints)
                    return WatchStatus.FINISHED
                except VerificationFailed as failure:
                    shell.hint = failure.exercise.hint
            if shell.should_quit.is_set():
                return WatchStatus.UNFINISHED
    finally:
        observer.stop()
        observer.join()