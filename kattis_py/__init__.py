"""kattis_py - test and submit solutions to a Kattis judge."""

__version__ = "1.0.0"
