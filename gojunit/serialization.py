"""YAML serialization of event streams.

Gives report generators (and humans debugging a parse) a plain-data view
of the event list.  Each event becomes a mapping with ``type`` first and
only its non-zero fields after it, so a dumped stream reads like the
table of event kinds rather than a wall of empty values.
"""

from __future__ import annotations

from datetime import timedelta
from typing import IO, Any

import yaml

from gojunit.events import Event

# Serialized field order after "type"
_FIELDS = (
    "name",
    "result",
    "duration_seconds",
    "indent",
    "data",
    "cov_pct",
    "cov_packages",
    "iterations",
    "ns_per_op",
    "mb_per_sec",
    "bytes_per_op",
    "allocs_per_op",
)


def event_to_dict(event: Event) -> dict[str, Any]:
    """Convert an event to a dict, omitting zero-valued fields.

    ``output`` events always keep ``data``, since an empty line is
    meaningful output.
    """
    d: dict[str, Any] = {"type": event.type}
    for key in _FIELDS:
        if key == "duration_seconds":
            value: Any = round(event.duration.total_seconds(), 3)
        elif key == "cov_packages":
            value = list(event.cov_packages)
        else:
            value = getattr(event, key)
        if value or (key == "data" and not event.is_structured):
            d[key] = value
    return d


def event_from_dict(data: dict[str, Any]) -> Event:
    """Rebuild an event from :func:`event_to_dict` output.

    Raises:
        ValueError: If *data* is not a mapping or has no valid ``type``.
    """
    if not isinstance(data, dict) or "type" not in data:
        raise ValueError(f"Not a serialized event: {data!r}")
    kwargs: dict[str, Any] = {}
    for key, value in data.items():
        if key == "type":
            continue
        if key == "duration_seconds":
            kwargs["duration"] = timedelta(milliseconds=round(float(value) * 1000))
        elif key == "cov_packages":
            kwargs["cov_packages"] = tuple(value)
        elif key in _FIELDS:
            kwargs[key] = value
        else:
            raise ValueError(f"Unknown event field: {key}")
    return Event(type=data["type"], **kwargs)


def dump_events(events: list[Event], stream: IO[str] | None = None) -> str | None:
    """Dump *events* as a YAML list.

    Args:
        events: Events to serialize, in order.
        stream: Optional text stream to write to.

    Returns:
        The YAML document when *stream* is ``None``, otherwise ``None``.
    """
    return yaml.dump(
        [event_to_dict(e) for e in events],
        stream,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    )


def load_events(text: str | IO[str]) -> list[Event]:
    """Load events from a YAML document produced by :func:`dump_events`.

    Raises:
        ValueError: If the document is not valid YAML or not a list of
            serialized events.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid event document: {exc}") from exc
    if data is None:
        return []
    if not isinstance(data, list):
        raise ValueError("Event document must be a list")
    return [event_from_dict(item) for item in data]
