"""Run, verify and watch a course of small compiled programming exercises."""

__version__ = "5.5.1"