# trainer

`trainer` drives a course of small exercises. Each exercise is a source file
with a deliberate mistake in it; your job is to fix it. `trainer` compiles and
runs the exercises in the order they are listed and shows you what went wrong.
It moves on once an exercise works and you have removed its `I AM NOT DONE`
marker.

## Requirements

- Python 3.11 or later
- `rustc` on your `PATH`, because the exercises are compiled with it, and
  `cargo` for the `clippy` and `buildscript` exercises
- an `info.toml` in the current directory that lists the exercises

Each `[[exercises]]` entry in `info.toml` has a `name`, a `path`, a `mode`
(`compile`, `test`, `clippy` or `buildscript`) and a `hint`.

## Installing

```
pip install .
```

## Usage

Run every command except `--version` from the directory that holds
`info.toml`. If that file is missing, or `rustc --version` does not succeed,
`trainer` exits with status 1.

```
trainer                 # welcome text and a short introduction
trainer watch           # verify, then verify again whenever an exercise file changes
trainer verify          # verify all exercises in order and stop at the first failure
trainer run NAME        # compile and run (or test) one exercise
trainer run next        # the first exercise that is not done yet
trainer hint NAME       # print the hint for an exercise
trainer reset NAME      # start "git stash -- <path>" for an exercise
trainer list            # table of exercises with their status
trainer lsp             # write rust-project.json for rust-analyzer
trainer cicvverify      # check every exercise and write a JSON report
trainer --version       # print the version (also -v)
```

`--nocapture`, given before the command, shows the output of test exercises:

```
trainer --nocapture run NAME
```

`run`, `verify` and `hint` exit with status 1 when the exercise is not found
or fails to build or run.

### Listing

```
trainer list --paths          # only paths (-p)
trainer list --names          # only names (-n)
trainer list --filter a,b     # names or paths containing any of the patterns (-f)
trainer list --solved         # only finished exercises (-s)
trainer list --unsolved       # only pending exercises (-u)
```

The filter patterns are lower-cased before they are compared. The listing ends
with a progress line, for example
`Progress: You completed 3 / 10 exercises (30.0 %).`

An exercise counts as done when its file no longer contains an
`I AM NOT DONE` comment line.

### Watch mode

`trainer watch` verifies the exercises first. If one is unfinished, it watches
`./exercises` and verifies again when a `.rs` file is created or changed. The
changed exercise is checked first, then every other unfinished one. With
`--success-hints`, an exercise's hint is shown once it compiles but still has
its marker.

While watch mode is running you can type:

- `hint` – the hint for the exercise that last failed
- `clear` – clear the screen
- `quit` – leave watch mode
- `!<cmd>` – run a command, e.g. `!rustc --explain E0381`
- `help` – list these commands

Set `NO_EMOJI` in the environment for plain-text markers.

### Editor support

`trainer lsp` writes `rust-project.json` with one crate for every `.rs` file
below `exercises/`. It takes the standard-library source path from
`RUST_SRC_PATH` if that is set, and otherwise from `rustc --print sysroot`.

### Batch checking

`trainer cicvverify` runs every exercise at the same time in a thread pool
and prints progress as each one finishes. It then writes a summary to
`.github/result/check_result.json`, with a result for each exercise and the
totals of exercises, successes, failures and the time taken in seconds. The
`.github/result` directory must already exist. The test output of each
exercise is always shown, whether or not `--nocapture` is given.

## What it does not do

- Progress is printed as a plain text line after each exercise. There is no
  live progress bar or spinner.
- `trainer reset` only starts `git stash`. It does not wait for it to finish
  or report whether the stash worked.

## Tests

```
pip install .[test]
pytest
```