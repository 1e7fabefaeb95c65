"""Exercises: loading the list, compiling, running and checking progress."""

from __future__ import annotations

import enum
import os
import re
import subprocess
import threading
import tomllib
from dataclasses import dataclass
from pathlib import Path

RUSTC_COLOR_ARGS = ("--color", "always")
RUSTC_EDITION_ARGS = ("--edition", "2021")
I_AM_DONE_REGEX = re.compile(r"^\s*///?\s*I\s+AM\s+NOT\s+DONE", re.MULTILINE)
CONTEXT = 2
CLIPPY_CARGO_TOML_PATH = Path("./exercises/clippy/Cargo.toml")
BUILD_SCRIPT_CARGO_TOML_PATH = Path("./exercises/tests/Cargo.toml")


def temp_file():
    """Return a temporary binary name unique to this process and thread."""
    return f"./temp_{os.getpid()}_{threading.get_ident()}"


def clean():
    """Remove the temporary binary, ignoring any error."""
    try:
        os.remove(temp_file())
    except OSError:
        pass


class Mode(enum.Enum):
    """How an exercise is checked."""

    COMPILE = "compile"
    TEST = "test"
    CLIPPY = "clippy"
    BUILD_SCRIPT = "buildscript"


@dataclass
class ContextLine:
    """A source line shown around the pending marker."""

    line: str
    number: int
    important: bool


@dataclass
class ExerciseOutput:
    """Captured output of a finished command."""

    stdout: str
    stderr: str


class ExerciseFailed(Exception):
    """A compile or run step ended unsuccessfully."""

    def __init__(self, output):
        super().__init__(output.stderr or output.stdout)
        self.output = output


def _run_command(args):
    return subprocess.run([str(arg) for arg in args], capture_output=True, check=False)


def _output(proc):
    return ExerciseOutput(
        stdout=(proc.stdout or b"").decode("utf-8", errors="replace"),
        stderr=(proc.stderr or b"").decode("utf-8", errors="replace"),
    )


def _lines(text):
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line.removesuffix("\r") for line in lines]


@dataclass
class Exercise:
    """One exercise as described in the exercise list."""

    name: str
    path: Path
    mode: Mode
    hint: str

    def __post_init__(self):
        self.path = Path(self.path)
        self.mode = Mode(self.mode)

    def __str__(self):
        return str(self.path)

    def _manifest(self):
        return (
            "[package]\n"
            f'name = "{self.name}"\n'
            'version = "0.0.1"\n'
            'edition = "2021"\n'
            "[[bin]]\n"
            f'name = "{self.name}"\n'
            f'path = "{self.name}.rs"'
        )

    def _write_manifest(self, target):
        try:
            Path(target).write_text(self._manifest(), encoding="utf-8")
        except OSError as exc:
            label = "Clippy" if "NO_EMOJI" in os.environ else "📎 Clippy 📎"
            raise OSError(f"Failed to write {label} Cargo.toml file.") from exc

    def _rustc(self, *extra):
        return ["rustc", *extra, self.path, "-o", temp_file(), *RUSTC_COLOR_ARGS, *RUSTC_EDITION_ARGS]

    def compile(self):
        """Build the exercise; raise ExerciseFailed with the build output on failure."""
        match self.mode:
            case Mode.COMPILE:
                proc = _run_command(self._rustc())
            case Mode.TEST:
                proc = _run_command(self._rustc("--test"))
            case Mode.CLIPPY:
                self._write_manifest(CLIPPY_CARGO_TOML_PATH)
                # Build a runnable binary too; clippy reports any build failure below.
                _run_command(self._rustc())
                _run_command(["cargo", "clean", "--manifest-path", CLIPPY_CARGO_TOML_PATH, *RUSTC_COLOR_ARGS])
                proc = _run_command(
                    [
                        "cargo", "clippy", "--manifest-path", CLIPPY_CARGO_TOML_PATH,
                        *RUSTC_COLOR_ARGS, "--", "-D", "warnings", "-D", "clippy::float_cmp",
                    ]
                )
            case Mode.BUILD_SCRIPT:
                self._write_manifest(BUILD_SCRIPT_CARGO_TOML_PATH)
                proc = _run_command(["cargo", "test", "--manifest-path", BUILD_SCRIPT_CARGO_TOML_PATH])
        if proc.returncode == 0:
            return CompiledExercise(self)
        clean()
        raise ExerciseFailed(_output(proc))

    def _run(self):
        if self.mode is Mode.BUILD_SCRIPT:
            return ExerciseOutput(stdout="", stderr="")
        args = [temp_file()]
        if self.mode is Mode.TEST:
            args.append("--show-output")
        proc = _run_command(args)
        output = _output(proc)
        if proc.returncode != 0:
            raise ExerciseFailed(output)
        return output

    def state(self):
        """Return the context around the pending marker, or an empty list when done."""
        source = self.path.read_text(encoding="utf-8")
        if not I_AM_DONE_REGEX.search(source):
            return []
        lines = _lines(source)
        matched = next((i for i, line in enumerate(lines) if I_AM_DONE_REGEX.search(line)), None)
        if matched is None:
            raise RuntimeError(f"pending marker in {self.path} does not sit on a single line")
        first = max(0, matched - CONTEXT)
        return [
            ContextLine(line=line, number=i + 1, important=i == matched)
            for i, line in enumerate(lines[first : matched + CONTEXT + 1], start=first)
        ]

    def looks_done(self):
        """True when the file no longer carries the pending marker."""
        return not self.state()


class CompiledExercise:
    """A built exercise; closing it removes the temporary binary."""

    def __init__(self, exercise):
        self.exercise = exercise
        self._closed = False

    def run(self):
        """Run the built exercise; raise ExerciseFailed on a non-zero exit."""
        return self.exercise._run()

    def close(self):
        if not self._closed:
            clean()
            self._closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


def load_exercises(path="info.toml"):
    """Read the exercise list from a TOML file."""
    with open(path, "rb") as fh:
        data = tomllib.load(fh)
    try:
        return [
            Exercise(name=item["name"], path=Path(item["path"]), mode=Mode(item["mode"]), hint=item["hint"])
            for item in data["exercises"]
        ]
    except (KeyError, ValueError, TypeError) as exc:
        raise ValueError(f"invalid exercise list in {path}: {exc}") from exc