"""In-memory event sink."""

from __future__ import annotations

from collections.abc import Iterator

import structlog

from cpamm.models.events import EventRecord

logger = structlog.get_logger()


class ListEventSink:
    """Keeps every emitted event in order and logs it."""

    def __init__(self) -> None:
        self._events: list[EventRecord] = []

    def emit(self, event: EventRecord) -> None:
        self._events.append(event)
        logger.debug("pool_event", record=event.model_dump(mode="json"))

    @property
    def events(self) -> list[EventRecord]:
        """Copy of all events emitted so far."""
        return list(self._events)

    def of_type(self, event_type: type[EventRecord]) -> list[EventRecord]:
        """Events of one record type, in emission order."""
        return [e for e in self._events if isinstance(e, event_type)]

    def __iter__(self) -> Iterator[EventRecord]:
        return iter(list(self._events))

    def __len__(self) -> int:
        return len(self._events)

    def snapshot(self) -> int:
        return len(self._events)

    def restore(self, state: int) -> None:
        del self._events[state:]
