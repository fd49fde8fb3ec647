"""Convert ``go test -v`` output into an ordered stream of structured events."""

import logging

from gojunit.config import ParserConfig
from gojunit.events import Event
from gojunit.gotest import GoTestParser, ReadError, parse

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Event",
    "GoTestParser",
    "ParserConfig",
    "ReadError",
    "parse",
]
