"""Judge-style comparison of a solution's output with the expected answer."""

import re
from dataclasses import dataclass
from typing import List, Optional

from .models import Verdict


@dataclass(frozen=True)
class ComparisonRules:
    """
    Leniency rules for output comparison.

    Whitespace at the ends of lines, runs of internal whitespace and
    trailing blank lines never matter. On top of that:

    case_sensitive: compare letters exactly.
    line_sensitive: tokens must sit on the same lines; when False the whole
        output is one stream of tokens.
    float_tolerance: if set, numeric tokens are equal when within this
        absolute or relative distance.
    """

    case_sensitive: bool = True
    line_sensitive: bool = True
    float_tolerance: Optional[float] = None

    def __post_init__(self):
        if self.float_tolerance is None:
            return
        # YAML reads values such as 1e-6 as strings.
        tolerance = float(self.float_tolerance)
        if tolerance < 0:
            raise ValueError("float_tolerance must not be negative")
        object.__setattr__(self, "float_tolerance", tolerance)


DEFAULT_RULES = ComparisonRules()

# Decimal and exponent notation only: no "inf", "nan" or digit separators.
NUMBER_RE = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


@dataclass(frozen=True)
class Comparison:
    """Result of comparing one output; `exact` is True for identical text."""

    verdict: Verdict
    exact: bool


def compare(actual: str, expected: str, rules: ComparisonRules = DEFAULT_RULES) -> Comparison:
    exact = actual == expected
    if exact or _tokens_match(actual, expected, rules):
        return Comparison(Verdict.CORRECT, exact)
    return Comparison(Verdict.WRONG_ANSWER, exact)


def tokenize(text: str, rules: ComparisonRules = DEFAULT_RULES) -> List[List[str]]:
    """Split text into lines of tokens, dropping trailing blank lines."""
    if not rules.case_sensitive:
        text = text.lower()
    lines = [line.split() for line in text.splitlines()]
    while lines and not lines[-1]:
        lines.pop()
    if not rules.line_sensitive:
        return [[token for line in lines for token in line]]
    return lines


def _tokens_match(actual: str, expected: str, rules: ComparisonRules) -> bool:
    actual_lines = tokenize(actual, rules)
    expected_lines = tokenize(expected, rules)
    if len(actual_lines) != len(expected_lines):
        return False
    for found, wanted in zip(actual_lines, expected_lines):
        if len(found) != len(wanted):
            return False
        if not all(_token_eq(a, b, rules) for a, b in zip(found, wanted)):
            return False
    return True


def _token_eq(found: str, wanted: str, rules: ComparisonRules) -> bool:
    if found == wanted:
        return True
    if rules.float_tolerance is None:
        return False
    if not (NUMBER_RE.fullmatch(found) and NUMBER_RE.fullmatch(wanted)):
        return False
    a, b = float(found), float(wanted)
    tol = rules.float_tolerance
    return abs(a - b) <= tol or abs(a - b) <= tol * abs(b)
