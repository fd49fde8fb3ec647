"""``go test -v`` output parsing: line classifier, state machine, stream driver."""

from gojunit.gotest.classifier import BUILD_HEADER, RULES, LineMatch, LineRule, classify
from gojunit.gotest.parser import GoTestParser, OpenTest, parse_lines
from gojunit.gotest.reader import ReadError, iter_lines, parse

__all__ = [
    "BUILD_HEADER",
    "GoTestParser",
    "LineMatch",
    "LineRule",
    "OpenTest",
    "RULES",
    "ReadError",
    "classify",
    "iter_lines",
    "parse",
    "parse_lines",
]
