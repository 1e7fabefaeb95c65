"""Coloured status lines printed to the console."""

import os

from termcolor import colored


def _emoji_disabled():
    return "NO_EMOJI" in os.environ


def _status(mark, fallback, color, message):
    symbol = fallback if _emoji_disabled() else mark
    line = f"{colored(symbol, color)} {colored(message, color)}"
    print(line)
    return line


def warn(message):
    """Print a red warning line and return it."""
    return _status("⚠️ ", "!", "red", message)


def success(message):
    """Print a green success line and return it."""
    return _status("✅", "✓", "green", message)


def bold(text):
    """Return the text styled in bold."""
    return colored(str(text), attrs=["bold"])