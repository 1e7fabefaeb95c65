"""Checking exercises one after another and reporting progress."""

from __future__ import annotations

import os

from termcolor import colored

from trainer.exercise import ExerciseFailed, Mode
from trainer.ui import bold, success, warn

_BAR_WIDTH = 60

_SUCCESS_TITLES = {
    Mode.COMPILE: "Successfully ran {}!",
    Mode.TEST: "Successfully tested {}!",
    Mode.CLIPPY: "Successfully compiled {}!",
    Mode.BUILD_SCRIPT: "Successfully compiled {}!",
}


class VerificationFailed(Exception):
    """An exercise failed to build, failed to run, or is still marked as pending."""

    def __init__(self, exercise):
        super().__init__(f"{exercise} is not finished")
        self.exercise = exercise


class _ProgressBar:
    def __init__(self, position, total):
        self.position = position
        self.total = total

    def show(self):
        if self.total:
            filled = min(self.position, self.total) * _BAR_WIDTH // self.total
            percentage = self.position / self.total * 100.0
        else:
            filled = _BAR_WIDTH
            percentage = 0.0
        if filled < _BAR_WIDTH:
            bar = "#" * filled + ">" + "-" * (_BAR_WIDTH - filled - 1)
        else:
            bar = "#" * _BAR_WIDTH
        print(f"Progress: [{bar}] {self.position}/{self.total} ({percentage:.1f} %)")

    def advance(self):
        self.position += 1
        self.show()


def verify(exercises, progress, verbose, success_hints):
    """Check each exercise in turn; raise VerificationFailed at the first unfinished one."""
    num_done, total = progress
    bar = _ProgressBar(num_done, total)
    bar.show()
    for exercise in exercises:
        if exercise.mode in (Mode.TEST, Mode.BUILD_SCRIPT):
            finished = _compile_and_test(exercise, True, verbose, success_hints)
        elif exercise.mode is Mode.COMPILE:
            finished = _compile_and_run_interactively(exercise, success_hints)
        else:
            finished = _compile_only(exercise, success_hints)
        if not finished:
            raise VerificationFailed(exercise)
        bar.advance()


def test(exercise, verbose):
    """Build and run the exercise's tests without prompting."""
    _compile_and_test(exercise, False, verbose, False)


def _compile(exercise):
    try:
        return exercise.compile()
    except ExerciseFailed as exc:
        warn(f"Compiling of {exercise} failed! Please try again. Here's the output:")
        print(exc.output.stderr)
        raise VerificationFailed(exercise) from exc


def _compile_only(exercise, success_hints):
    with _compile(exercise):
        pass
    return prompt_for_completion(exercise, None, success_hints)


def _compile_and_run_interactively(exercise, success_hints):
    with _compile(exercise) as compiled:
        try:
            output = compiled.run()
        except ExerciseFailed as exc:
            warn(f"Ran {exercise} with errors")
            print(exc.output.stdout)
            print(exc.output.stderr)
            raise VerificationFailed(exercise) from exc
        return prompt_for_completion(exercise, output.stdout, success_hints)


def _compile_and_test(exercise, interactive, verbose, success_hints):
    with _compile(exercise) as compiled:
        try:
            output = compiled.run()
        except ExerciseFailed as exc:
            warn(f"Testing of {exercise} failed! Please try again. Here's the output:")
            print(exc.output.stdout)
            raise VerificationFailed(exercise) from exc
    if verbose:
        print(output.stdout)
    if interactive:
        return prompt_for_completion(exercise, None, success_hints)
    return True


def _separator():
    return bold("====================")


def prompt_for_completion(exercise, prompt_output, success_hints):
    """Return True when the exercise is done; otherwise show where its marker sits."""
    context = exercise.state()
    if not context:
        return True
    success(_SUCCESS_TITLES[exercise.mode].format(exercise))

    no_emoji = "NO_EMOJI" in os.environ
    clippy_message = (
        "The code is compiling, and Clippy is happy!"
        if no_emoji
        else "The code is compiling, and 📎 Clippy 📎 is happy!"
    )
    message = {
        Mode.COMPILE: "The code is compiling!",
        Mode.TEST: "The code is compiling, and the tests pass!",
        Mode.CLIPPY: clippy_message,
        Mode.BUILD_SCRIPT: "Build script works!",
    }[exercise.mode]
    print()
    print(f"~*~ {message} ~*~" if no_emoji else f"🎉 🎉  {message} 🎉 🎉")
    print()

    if prompt_output is not None:
        print("Output:")
        print(_separator())
        print(prompt_output)
        print(_separator())
        print()
    if success_hints:
        print("Hints:")
        print(_separator())
        print(exercise.hint)
        print(_separator())
        print()

    print("You can keep working on this exercise,")
    print(f"or jump into the next one by removing the {bold('`I AM NOT DONE`')} comment:")
    print()
    for context_line in context:
        text = bold(context_line.line) if context_line.important else context_line.line
        number = colored(f"{context_line.number:>2}", "blue", attrs=["bold"])
        print(f"{number} {colored('|', 'blue')}  {text}")
    return False