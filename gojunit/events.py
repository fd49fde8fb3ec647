"""Event vocabulary produced by the ``go test`` output parser.

Every line of test output is turned into zero or more :class:`Event`
records.  Events are a flat, ordered sequence: an ``output`` event carries
no test name and belongs, by position, to the structured event before it.
Consumers (e.g. a JUnit-XML writer) are written against that positional
association, so the parser never builds a tree.

The string values of ``type``, ``result`` and ``data`` are part of the
output contract and must not change.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

# Event types
RUN_TEST = "run_test"
PAUSE_TEST = "pause_test"
CONT_TEST = "cont_test"
END_TEST = "end_test"
OUTPUT = "output"
STATUS = "status"
COVERAGE = "coverage"
SUMMARY = "summary"
BENCHMARK = "benchmark"

EVENT_TYPES = frozenset({
    RUN_TEST,
    PAUSE_TEST,
    CONT_TEST,
    END_TEST,
    OUTPUT,
    STATUS,
    COVERAGE,
    SUMMARY,
    BENCHMARK,
})

# Test results (end_test, status)
PASS = "PASS"
FAIL = "FAIL"
SKIP = "SKIP"

# Package results (summary)
OK = "ok"

# Sentinel summary data
CACHED = "(cached)"
BUILD_FAILED = "[build failed]"
SETUP_FAILED = "[setup failed]"
NO_TESTS_TO_RUN = "[no tests to run]"


@dataclass(frozen=True)
class Event:
    """A single parsed event.

    Only the fields meaningful for ``type`` are populated; all others keep
    their zero value so that events compare equal field by field.
    """

    type: str
    name: str = ""
    result: str = ""
    duration: timedelta = timedelta(0)
    indent: int = 0
    data: str = ""
    cov_pct: float = 0.0
    cov_packages: tuple[str, ...] = ()
    iterations: int = 0
    ns_per_op: float = 0.0
    mb_per_sec: float = 0.0
    bytes_per_op: int = 0
    allocs_per_op: int = 0

    def __post_init__(self) -> None:
        if self.type not in EVENT_TYPES:
            raise ValueError(f"Unknown event type: {self.type}")
        if not isinstance(self.cov_packages, tuple):
            # Lists are accepted for convenience; stored frozen.
            object.__setattr__(self, "cov_packages", tuple(self.cov_packages))

    @property
    def is_structured(self) -> bool:
        """True for every event type except raw ``output``."""
        return self.type != OUTPUT


def output(data: str) -> Event:
    """Build an ``output`` event carrying *data* verbatim."""
    return Event(type=OUTPUT, data=data)
