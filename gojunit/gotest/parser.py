"""State machine turning classified ``go test`` lines into events.

The parser consumes one line at a time and appends events in arrival
order.  It keeps two pieces of private state for the duration of a parse:

* the open tests, keyed by exact name, each remembering the nesting
  depth it was opened at;
* the package context, i.e. the package named by the last ``# pkg``
  compiler error header, cleared by the next package summary.

Malformed input never raises.  Anything the classifier does not recognize
is passed through as an ``output`` event, byte for byte, and anomalies
such as an end line for a test that was never started are recorded in
:attr:`GoTestParser.warnings`.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Iterable

from gojunit.config import ParserConfig
from gojunit.events import (
    CONT_TEST,
    END_TEST,
    RUN_TEST,
    SUMMARY,
    Event,
    output,
)
from gojunit.gotest.classifier import BUILD_HEADER, classify

logger = logging.getLogger(__name__)

# Separator between a parent test and its subtest in a test name
SUBTEST_SEPARATOR = "/"


@dataclass
class OpenTest:
    """A test between its run (or cont) line and its end line."""

    name: str
    indent: int


def nesting_depth(name: str) -> int:
    """Number of subtest levels below the top-level test in *name*."""
    return name.count(SUBTEST_SEPARATOR)


class GoTestParser:
    """Line-at-a-time parser for ``go test -v`` output.

    One instance parses one stream; create a new instance per stream.
    """

    def __init__(self, config: ParserConfig | None = None) -> None:
        self.config = config if config is not None else ParserConfig()
        self.events: list[Event] = []
        self.warnings: list[str] = []
        self.package = ""
        self.lines_read = 0
        self._open: dict[str, OpenTest] = {}
        self._indent_width = self.config.indent_width
        self._benchmarks = self.config.benchmarks

    @property
    def open_tests(self) -> list[str]:
        """Names of tests started but not yet ended, in start order."""
        return list(self._open)

    def feed(self, line: str) -> None:
        """Process one line (without its line terminator)."""
        self.lines_read += 1
        match = classify(line, self._indent_width, self._benchmarks)

        if match is None:
            self.events.append(output(line))
            return

        if match.kind == BUILD_HEADER:
            self.package = match.package
            self.events.append(output(line))
            return

        event = match.event
        assert event is not None

        if event.type in (RUN_TEST, CONT_TEST):
            self._open_test(event)
        elif event.type == END_TEST:
            event = self._end_test(event, match.indent)
        elif event.type == SUMMARY:
            if self.package and event.name != self.package:
                logger.debug(
                    "summary for '%s' while build errors of '%s' are pending",
                    event.name, self.package,
                )
            self.package = ""

        self.events.append(event)

    def feed_lines(self, lines: Iterable[str]) -> list[Event]:
        """Process every line of *lines* and return the events so far."""
        for line in lines:
            self.feed(line)
        return self.events

    def finish(self) -> list[Event]:
        """End the stream and return the finished event list.

        Tests still open at this point simply never get an ``end_test``.
        """
        if self._open:
            logger.debug(
                "%d test(s) still running at end of output: %s",
                len(self._open), ", ".join(self._open),
            )
        self._open.clear()
        self.package = ""
        logger.debug(
            "parsed %d line(s) into %d event(s)",
            self.lines_read, len(self.events),
        )
        return self.events

    def _open_test(self, event: Event) -> None:
        if event.name in self._open:
            if event.type == RUN_TEST:
                self._warn(f"test '{event.name}' started again while still running")
            return
        self._open[event.name] = OpenTest(
            name=event.name, indent=nesting_depth(event.name),
        )

    def _end_test(self, event: Event, literal_indent: int) -> Event:
        record = self._open.pop(event.name, None)
        if record is None:
            self._warn(f"end of test '{event.name}' without matching start")
            return dataclasses.replace(event, indent=0)
        if record.indent != literal_indent:
            logger.debug(
                "test '%s' ended at indent %d but was opened at depth %d",
                event.name, literal_indent, record.indent,
            )
        return dataclasses.replace(event, indent=record.indent)

    def _warn(self, message: str) -> None:
        logger.debug(message)
        self.warnings.append(message)


def parse_lines(
    lines: Iterable[str],
    config: ParserConfig | None = None,
) -> list[Event]:
    """Parse already-split lines of ``go test`` output into events.

    Args:
        lines: Output lines without line terminators.
        config: Parser configuration, defaults when ``None``.

    Returns:
        The ordered list of events.
    """
    parser = GoTestParser(config)
    parser.feed_lines(lines)
    return parser.finish()
