"""Command line entry point: listing, running, verifying and watching exercises."""

from __future__ import annotations

import argparse
import json
import os
import subprocess
import sys
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict, dataclass, field
from pathlib import Path

from trainer.exercise import load_exercises
from trainer.project import RustAnalyzerProject
from trainer.run import reset, run
from trainer.verify import VerificationFailed, verify
from trainer.watch import WatchStatus, watch

VERSION = "5.5.1"
INFO_FILE = "info.toml"
RESULT_PATH = Path(".github/result/check_result.json")

WELCOME = """       welcome to...
   the exercise trainer"""

DEFAULT_OUT = """Thanks for installing the trainer!

Is this your first time? Don't worry, the trainer was made for beginners! We are
going to teach you a lot of things about Rust, but before we can get
started, here's a couple of notes about how it operates:

1. The central concept is that you solve exercises. These exercises usually
   have some sort of syntax error in them, which will cause them to fail
   compilation or testing. Sometimes there's a logic error instead of a syntax
   error. No matter what error, it's your job to find it and fix it!
   You'll know when you fixed it because then, the exercise will compile and
   the trainer will be able to move on to the next exercise.
2. If you run the trainer in watch mode (which we recommend), it'll automatically
   start with the first exercise. Don't get confused by an error message popping
   up as soon as you start! This is part of the exercise that you're supposed
   to solve, so open the exercise file in an editor and start your detective work!
3. If you're stuck on an exercise, there is a helpful hint you can view by typing
   'hint' (in watch mode), or running `trainer hint exercise_name`.
4. If you want to use `rust-analyzer` with exercises, which provides features like
   autocompletion, run the command `trainer lsp`.

Got all that? Great! To get started, run `trainer watch` in order to get the first
exercise. Make sure to have your editor open!"""

FINISH_LINE = """+----------------------------------------------------+
|          You made it to the finish line!           |
+----------------------------------------------------+

We hope you enjoyed learning about the various aspects of Rust!
You can also contribute your own exercises to help the greater community!"""


@dataclass
class ExerciseResult:
    """Whether one exercise passed the batch check."""

    name: str
    result: bool


@dataclass
class ExerciseStatistics:
    """Totals of a batch check."""

    total_exercations: int = 0
    total_succeeds: int = 0
    total_failures: int = 0
    total_time: int = 0


@dataclass
class ExerciseCheckList:
    """The report written by a batch check."""

    exercises: list[ExerciseResult] = field(default_factory=list)
    user_name: str | None = None
    statistics: ExerciseStatistics = field(default_factory=ExerciseStatistics)


def find_exercise(name, exercises):
    """Return the named exercise, or the first unfinished one for "next"; raise LookupError otherwise."""
    if name == "next":
        found = next((e for e in exercises if not e.looks_done()), None)
        if found is None:
            raise LookupError(
                "🎉 Congratulations! You have done all the exercises!\n"
                "🔚 There are no more exercises to do next!"
            )
        return found
    found = next((e for e in exercises if e.name == name), None)
    if found is None:
        raise LookupError(f"No exercise found for '{name}'!")
    return found


def list_exercises(exercises, paths=False, names=False, pattern=None, unsolved=False, solved=False):
    """Print the exercises that match the selection and return how many are done."""
    if not paths and not names:
        print(f"{'Name':<17}\t{'Path':<46}\t{'Status':<7}")
    filters = [f for f in (pattern or "").lower().split(",") if f.strip()]
    done = 0
    for exercise in exercises:
        fname = str(exercise.path)
        matches = any(f in exercise.name or f in fname for f in filters)
        finished = exercise.looks_done()
        if finished:
            done += 1
        status = "Done" if finished else "Pending"
        wanted = (finished and solved) or (not finished and unsolved) or (not solved and not unsolved)
        if wanted and (matches or pattern is None):
            if paths:
                line = fname
            elif names:
                line = exercise.name
            else:
                line = f"{exercise.name:<17}\t{fname:<46}\t{status:<7}"
            print(line)
    percentage = done / len(exercises) * 100.0 if exercises else float("nan")
    print(f"Progress: You completed {done} / {len(exercises)} exercises ({percentage:.1f} %).")
    return done


def cicv_verify(exercises, verbose, result_path=RESULT_PATH):
    """Run every exercise concurrently, write a JSON report and return it."""
    # Test output is always shown here, whatever verbose says.
    started = int(time.time())
    total = len(exercises)
    check_list = ExerciseCheckList(statistics=ExerciseStatistics(total_exercations=total))
    lock = threading.Lock()
    succeeded = 0

    def check(exercise, task_start):
        nonlocal succeeded
        try:
            run(exercise, True)
            passed = True
        except VerificationFailed:
            passed = False
        with lock:
            if passed:
                succeeded += 1
            print(f"{exercise.name}{'执行成功' if passed else '执行失败'}")
            print(f"总的题目数: {total}")
            print(f"当前做正确的题目数: {succeeded}")
            print(f"当前修改试卷耗时: {int(time.time()) - task_start} s")
            check_list.exercises.append(ExerciseResult(name=exercise.name, result=passed))
            if passed:
                check_list.statistics.total_succeeds += 1
            else:
                check_list.statistics.total_failures += 1

    with ThreadPoolExecutor() as pool:
        futures = [pool.submit(check, exercise, int(time.time())) for exercise in exercises]
        for future in futures:
            future.result()

    total_time = int(time.time()) - started
    print(f"===============================试卷批改完成,总耗时: {total_time} s; ==================================")
    check_list.statistics.total_time = total_time
    Path(result_path).write_text(
        json.dumps(asdict(check_list), indent=2, ensure_ascii=False), encoding="utf-8"
    )
    return check_list


def rustc_exists():
    """True when "rustc --version" can be run successfully."""
    try:
        proc = subprocess.run(["rustc", "--version"], stdout=subprocess.DEVNULL, check=False)
    except OSError:
        return False
    return proc.returncode == 0


class _Parser(argparse.ArgumentParser):
    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def _build_parser():
    parser = _Parser(
        prog="trainer",
        description="A collection of small exercises to get you used to writing and reading Rust code",
    )
    parser.add_argument("--nocapture", action="store_true", help="show outputs from the test exercises")
    parser.add_argument("-v", "--version", action="store_true", help="show the executable version")
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("verify", help="verifies all exercises according to the recommended order")
    watch_parser = sub.add_parser("watch", help="reruns `verify` when files were edited")
    watch_parser.add_argument("--success-hints", action="store_true", help="show hints on success")
    for name, text in (
        ("run", "runs/tests a single exercise"),
        ("reset", 'resets a single exercise using "git stash -- <filename>"'),
        ("hint", "returns a hint for the given exercise"),
    ):
        command = sub.add_parser(name, help=text)
        command.add_argument("name", help="the name of the exercise")
    list_parser = sub.add_parser("list", help="lists the exercises available")
    list_parser.add_argument("-p", "--paths", action="store_true", help="show only the paths of the exercises")
    list_parser.add_argument("-n", "--names", action="store_true", help="show only the names of the exercises")
    list_parser.add_argument(
        "-f", "--filter", default=None,
        help="provide a string to match exercise names; comma separated patterns are acceptable",
    )
    list_parser.add_argument("-u", "--unsolved", action="store_true", help="display only exercises not yet solved")
    list_parser.add_argument("-s", "--solved", action="store_true", help="display only exercises that have been solved")
    sub.add_parser("lsp", help="enable rust-analyzer for exercises")
    sub.add_parser("cicvverify", help="check all exercises and write a result report")
    return parser


def _lsp():
    project = RustAnalyzerProject()
    try:
        project.get_sysroot_src()
    except OSError:
        print("Couldn't find toolchain path, do you have `rustc` installed?")
        return 1
    project.exercises_to_json()
    if not project.crates:
        print("Failed find any exercises, make sure you're in the exercises folder")
        return 0
    try:
        project.write_to_disk()
    except OSError:
        print("Failed to write rust-project.json to disk for rust-analyzer")
        return 0
    print("Successfully generated rust-project.json")
    print("rust-analyzer will now parse exercises, restart your language server or editor")
    return 0


def _watch(exercises, verbose, success_hints):
    try:
        status = watch(exercises, verbose, success_hints)
    except OSError as exc:
        print(f"Error: Could not watch your progress. Error message was {exc!r}.")
        print("Most likely you've run out of disk space or your 'inotify limit' has been reached.")
        return 1
    if status is WatchStatus.FINISHED:
        emoji = "★" if "NO_EMOJI" in os.environ else "🎉"
        print(f"{emoji} All exercises completed! {emoji}")
        print(f"\n{FINISH_LINE}\n")
    else:
        print("We hope you're enjoying learning about Rust!")
        print(
            "If you want to continue working on the exercises at a later point, "
            "you can simply run `trainer watch` again"
        )
    return 0


def main(argv=None):
    """Run the command line and return the exit status."""
    args = _build_parser().parse_args(argv)

    if args.version:
        print(f"v{VERSION}")
        return 0
    if args.command is None:
        print(f"\n{WELCOME}\n")
    if not Path(INFO_FILE).exists():
        print(f"{sys.argv[0]} must be run from the exercises directory")
        print("Try `cd` into the directory that holds info.toml!")
        return 1
    if not rustc_exists():
        print("We cannot find `rustc`.")
        print("Try running `rustc --version` to diagnose your problem.")
        print("For instructions on how to install Rust, check the README.")
        return 1

    exercises = load_exercises(INFO_FILE)
    verbose = args.nocapture

    if args.command is None:
        print(f"{DEFAULT_OUT}\n")
        return 0

    if args.command == "list":
        try:
            list_exercises(exercises, args.paths, args.names, args.filter, args.unsolved, args.solved)
        except BrokenPipeError:
            return 0
        except OSError:
            return 1
        return 0

    if args.command in ("run", "reset", "hint"):
        try:
            exercise = find_exercise(args.name, exercises)
        except LookupError as exc:
            print(exc)
            return 1
        if args.command == "hint":
            print(exercise.hint)
            return 0
        if args.command == "reset":
            try:
                reset(exercise)
            except OSError:
                return 1
            return 0
        try:
            run(exercise, verbose)
        except VerificationFailed:
            return 1
        return 0

    if args.command == "verify":
        try:
            verify(exercises, (0, len(exercises)), verbose, False)
        except VerificationFailed:
            return 1
        return 0

    if args.command == "cicvverify":
        cicv_verify(exercises, verbose, RESULT_PATH)
        return 0

    if args.command == "lsp":
        return _lsp()

    return _watch(exercises, verbose, args.success_hints)