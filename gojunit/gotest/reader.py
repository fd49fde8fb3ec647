"""Stream driver: read ``go test`` output and parse it into events.

Accepts whole strings, bytes, text or binary file objects, or any
iterable of lines.  Lines are split on ``\\n`` only and lose a single
trailing ``\\r``; everything else, leading tabs included, is kept.

Parsing is all-or-nothing with respect to the input source: a read
failure raises :class:`ReadError` and no partial result is returned.
"""

from __future__ import annotations

import logging
from typing import IO, Iterable, Iterator, Union

from gojunit.config import ParserConfig
from gojunit.events import Event
from gojunit.gotest.parser import GoTestParser

logger = logging.getLogger(__name__)

Source = Union[str, bytes, IO[str], IO[bytes], Iterable[str], Iterable[bytes]]


class ReadError(Exception):
    """Raised when the underlying input cannot be read or decoded."""


def _strip_terminator(line: str) -> str:
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    return line


def iter_lines(source: Source, config: ParserConfig | None = None) -> Iterator[str]:
    """Yield the lines of *source* without line terminators.

    A trailing newline at the very end does not produce an extra empty
    line, so ``"a\\n"`` and ``"a"`` both yield just ``"a"``.
    """
    cfg = config if config is not None else ParserConfig()

    if isinstance(source, bytes):
        source = source.decode(cfg.encoding, cfg.encoding_errors)

    if isinstance(source, str):
        if not source:
            return
        if source.endswith("\n"):
            source = source[:-1]
        for line in source.split("\n"):
            yield _strip_terminator(line)
        return

    for raw in source:
        if isinstance(raw, bytes):
            raw = raw.decode(cfg.encoding, cfg.encoding_errors)
        # File iteration keeps the terminator
        yield _strip_terminator(raw)


def parse(source: Source, config: ParserConfig | None = None) -> list[Event]:
    """Parse ``go test -v`` output into an ordered list of events.

    Args:
        source: The test output as text, bytes, a file object, or an
            iterable of lines.
        config: Parser configuration, defaults when ``None``.

    Returns:
        The events in arrival order.  Empty input gives an empty list.

    Raises:
        ReadError: If reading or decoding the source fails.
    """
    cfg = config if config is not None else ParserConfig()
    parser = GoTestParser(cfg)
    lines = iter_lines(source, cfg)
    while True:
        # Only the read is guarded; parser errors propagate unchanged.
        # ValueError covers decoding faults and I/O on a closed file.
        try:
            line = next(lines)
        except StopIteration:
            break
        except (OSError, ValueError) as exc:
            logger.debug(
                "read failed after %d line(s): %s", parser.lines_read, exc,
            )
            raise ReadError(f"failed to read test output: {exc}") from exc
        parser.feed(line)
    return parser.finish()
