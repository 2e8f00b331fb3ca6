"""
recorder.py
Event sinks for the match engine. InMemoryRecorder keeps the stream for the lifetime of the
recorder; it is the default sink and what tests inspect.
"""

from typing import List, Optional

from .events import GameEvent


class InMemoryRecorder:
    """
    Records GameEvent objects in memory for later retrieval.
    Methods:
        record(event): Add a new event.
        events(event_type=None): Get recorded events, optionally of one type.
        pop_events(): Return and clear recorded events.
    """
    def __init__(self):
        self._events: List[GameEvent] = []

    def record(self, event: GameEvent) -> None:
        self._events.append(event)

    def events(self, event_type: Optional[str] = None) -> List[GameEvent]:
        if event_type is None:
            return list(self._events)
        return [e for e in self._events if e.event_type == event_type]

    def pop_events(self) -> List[GameEvent]:
        ev = list(self._events)
        self._events.clear()
        return ev
