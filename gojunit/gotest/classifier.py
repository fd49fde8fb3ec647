"""Line classifier for ``go test -v`` output.

Recognizes the handful of line shapes the Go toolchain prints across its
versions and test modes.  The shapes are close to each other (``FAIL`` alone
is a status banner, ``FAIL<tab>pkg 0.1s`` is a package summary), so the
rules live in one explicitly ordered table and the first match wins.

The classifier is pure: it looks at a single line and knows nothing about
the lines around it.  Bookkeeping across lines is the parser's job.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal
from typing import Callable

from gojunit.events import (
    BENCHMARK,
    CONT_TEST,
    COVERAGE,
    END_TEST,
    PAUSE_TEST,
    RUN_TEST,
    STATUS,
    SUMMARY,
    Event,
)

# Pseudo-kind for "# pkg" compiler error headers; never becomes an event.
BUILD_HEADER = "build_header"

# Spaces per nesting level in Go >= 1.7 subtest output
DEFAULT_INDENT_WIDTH = 4

_NUMBER = r"\d+(?:\.\d+)?"

_COVERAGE_TAIL = (
    rf"coverage:\s+(?:(?P<cov>{_NUMBER})%\s+of\s+statements"
    r"(?:\s+in\s+(?P<covpkgs>.+?))?|\[no statements\])"
)


@dataclass(frozen=True)
class LineMatch:
    """Structured result of classifying one line.

    ``event`` is ``None`` only for build headers, which carry the package
    name in ``package``.  ``indent`` is the nesting depth measured from the
    line's literal indentation (only meaningful for ``end_test``).
    """

    kind: str
    event: Event | None = None
    package: str = ""
    indent: int = 0


@dataclass(frozen=True)
class LineRule:
    """One entry of the classification table."""

    kind: str
    pattern: re.Pattern[str]
    build: Callable[[re.Match[str], int], LineMatch]


def parse_duration(value: str | None) -> timedelta:
    """Convert a printed number of seconds (``"0.160"``) to a timedelta.

    Decimal arithmetic keeps the printed precision exact, so ``"0.16"``
    is exactly 160 milliseconds.  ``None`` (duration not printed) is zero.
    """
    if not value:
        return timedelta(0)
    microseconds = int(Decimal(value) * 1_000_000)
    return timedelta(microseconds=microseconds)


def parse_packages(value: str | None) -> tuple[str, ...]:
    """Split a ``-coverpkg`` list (``"fmt, encoding/xml"``) in printed order."""
    if not value:
        return ()
    return tuple(p.strip() for p in value.split(",") if p.strip())


def indent_level(whitespace: str, indent_width: int = DEFAULT_INDENT_WIDTH) -> int:
    """Nesting depth implied by the leading whitespace of an end line.

    Modern output indents subtests by *indent_width* spaces per level.
    Go 1.4/1.5 used tabs and had no subtests, so tabs count for nothing.
    """
    return whitespace.count(" ") // indent_width


def _build_lifecycle(kind: str) -> Callable[[re.Match[str], int], LineMatch]:
    def build(m: re.Match[str], indent_width: int) -> LineMatch:
        return LineMatch(kind=kind, event=Event(type=kind, name=m.group("name")))
    return build


def _build_end_test(m: re.Match[str], indent_width: int) -> LineMatch:
    indent = indent_level(m.group("indent"), indent_width)
    event = Event(
        type=END_TEST,
        name=m.group("name"),
        result=m.group("result"),
        duration=parse_duration(m.group("duration")),
        indent=indent,
    )
    return LineMatch(kind=END_TEST, event=event, indent=indent)


def _build_benchmark(m: re.Match[str], indent_width: int) -> LineMatch:
    event = Event(
        type=BENCHMARK,
        name=m.group("name"),
        iterations=int(m.group("iterations")),
        ns_per_op=float(m.group("nsop")),
        mb_per_sec=float(m.group("mbs") or 0),
        bytes_per_op=int(m.group("bop") or 0),
        allocs_per_op=int(m.group("allocs") or 0),
    )
    return LineMatch(kind=BENCHMARK, event=event)


def _build_status(m: re.Match[str], indent_width: int) -> LineMatch:
    return LineMatch(kind=STATUS, event=Event(type=STATUS, result=m.group("result")))


def _build_coverage(m: re.Match[str], indent_width: int) -> LineMatch:
    event = Event(
        type=COVERAGE,
        cov_pct=float(m.group("cov")),
        cov_packages=parse_packages(m.group("covpkgs")),
    )
    return LineMatch(kind=COVERAGE, event=event)


def _build_summary(m: re.Match[str], indent_width: int) -> LineMatch:
    cov = m.group("cov")
    event = Event(
        type=SUMMARY,
        result=m.group("result"),
        name=m.group("name"),
        duration=parse_duration(m.group("duration")),
        data=m.group("data") or m.group("note") or m.group("late_note") or "",
        cov_pct=float(cov) if cov else 0.0,
        cov_packages=parse_packages(m.group("covpkgs")),
    )
    return LineMatch(kind=SUMMARY, event=event)


def _build_header(m: re.Match[str], indent_width: int) -> LineMatch:
    return LineMatch(kind=BUILD_HEADER, package=m.group("name"))


# Order matters: first match wins.
RULES: tuple[LineRule, ...] = (
    LineRule(
        RUN_TEST,
        re.compile(r"^=== RUN\s+(?P<name>\S+)\s*$"),
        _build_lifecycle(RUN_TEST),
    ),
    LineRule(
        PAUSE_TEST,
        re.compile(r"^=== PAUSE\s+(?P<name>\S+)\s*$"),
        _build_lifecycle(PAUSE_TEST),
    ),
    LineRule(
        CONT_TEST,
        re.compile(r"^=== CONT\s+(?P<name>\S+)\s*$"),
        _build_lifecycle(CONT_TEST),
    ),
    LineRule(
        END_TEST,
        re.compile(
            r"^(?P<indent>\s*)--- (?P<result>PASS|FAIL|SKIP): (?P<name>\S+)"
            rf"(?: \((?P<duration>{_NUMBER})(?:s| seconds)\))?\s*$"
        ),
        _build_end_test,
    ),
    LineRule(
        BENCHMARK,
        re.compile(
            r"^(?P<name>Benchmark\S*?)(?:-\d+)?\s+(?P<iterations>\d+)"
            rf"\s+(?P<nsop>{_NUMBER})\s+ns/op"
            rf"(?:\s+(?P<mbs>{_NUMBER})\s+MB/s)?"
            r"(?:\s+(?P<bop>\d+)\s+B/op)?"
            r"(?:\s+(?P<allocs>\d+)\s+allocs/op)?\s*$"
        ),
        _build_benchmark,
    ),
    LineRule(
        STATUS,
        re.compile(r"^(?P<result>PASS|FAIL)$"),
        _build_status,
    ),
    LineRule(
        COVERAGE,
        re.compile(
            rf"^coverage:\s+(?P<cov>{_NUMBER})%\s+of\s+statements"
            r"(?:\s+in\s+(?P<covpkgs>.+?))?\s*$"
        ),
        _build_coverage,
    ),
    LineRule(
        SUMMARY,
        re.compile(
            r"^(?P<result>ok|FAIL)\s+(?P<name>\S+)\s+"
            rf"(?:(?P<duration>{_NUMBER})s?|(?P<data>\(cached\)|\[\w+ failed\]))"
            r"(?:\s+(?P<note>\[no tests to run\]))?"
            rf"(?:\s+{_COVERAGE_TAIL})?"
            r"(?:\s+(?P<late_note>\[no tests to run\]))?\s*$"
        ),
        _build_summary,
    ),
    LineRule(
        BUILD_HEADER,
        re.compile(r"^# (?P<name>\S+)"),
        _build_header,
    ),
)


def classify(
    line: str,
    indent_width: int = DEFAULT_INDENT_WIDTH,
    benchmarks: bool = False,
) -> LineMatch | None:
    """Return the first rule's match for *line*, or ``None`` for raw output.

    Args:
        line: One line of ``go test`` output without its line terminator.
        indent_width: Spaces per subtest nesting level.
        benchmarks: Recognize benchmark result lines.  When false they are
            left to the remaining rules and end up as raw output.

    Returns:
        A :class:`LineMatch`, or ``None`` if no rule recognizes the line.
    """
    for rule in RULES:
        if rule.kind == BENCHMARK and not benchmarks:
            continue
        m = rule.pattern.match(line)
        if m is not None:
            return rule.build(m, indent_width)
    return None
