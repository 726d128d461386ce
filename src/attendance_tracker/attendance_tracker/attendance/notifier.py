from __future__ import annotations

import logging
import threading
from collections import defaultdict
from typing import Callable

from .model import AttendanceUpdate

logger = logging.getLogger(__name__)

Subscriber = Callable[[AttendanceUpdate], None]


class AttendanceNotifier:
    """In-process fan-out of attendance changes keyed by student id.

    Note: This is the hand-off point for a push transport (for example an
    event stream per student); delivery over the wire is not handled here.
    """

    def __init__(self):
        self._subscribers: dict[int, list[Subscriber]] = defaultdict(list)
        self._lock = threading.Lock()

    def subscribe(self, student_id: int, callback: Subscriber) -> Callable[[], None]:
        with self._lock:
            self._subscribers[int(student_id)].append(callback)

        def unsubscribe() -> None:
            with self._lock:
                callbacks = self._subscribers.get(int(student_id), [])
                if callback in callbacks:
                    callbacks.remove(callback)
                if not callbacks:
                    self._subscribers.pop(int(student_id), None)

        return unsubscribe

    def publish(self, student_id: int, update: AttendanceUpdate) -> int:
        with self._lock:
            callbacks = list(self._subscribers.get(int(student_id), ()))

        delivered = 0
        for callback in callbacks:
            try:
                callback(update)
                delivered += 1
            except Exception:
                # A broken subscriber must not fail the faculty's mark request.
                logger.exception("Attendance subscriber failed for student %s", student_id)
        return delivered
