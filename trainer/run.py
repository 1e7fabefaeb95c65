"""Running a single exercise and resetting it."""

from __future__ import annotations

import subprocess

from trainer.exercise import ExerciseFailed, Mode
from trainer.ui import success, warn
from trainer.verify import VerificationFailed, test


def run(exercise, verbose):
    """Build and run one exercise; raise VerificationFailed if it fails."""
    if exercise.mode in (Mode.TEST, Mode.BUILD_SCRIPT):
        test(exercise, verbose)
    else:
        _compile_and_run(exercise)


def reset(exercise):
    """Start "git stash -- <path>" for the exercise and return the process."""
    return subprocess.Popen(["git", "stash", "--", str(exercise.path)])


def _compile_and_run(exercise):
    try:
        compiled = exercise.compile()
    except ExerciseFailed as exc:
        warn(f"Compilation of {exercise} failed!, Compiler error message:\n")
        print(exc.output.stderr)
        raise VerificationFailed(exercise) from exc

    with compiled:
        try:
            output = compiled.run()
        except ExerciseFailed as exc:
            print(exc.output.stdout)
            print(exc.output.stderr)
            warn(f"Ran {exercise} with errors")
            raise VerificationFailed(exercise) from exc
    print(output.stdout)
    success(f"Successfully ran {exercise}")