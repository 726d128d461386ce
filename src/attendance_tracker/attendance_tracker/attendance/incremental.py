from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Optional, Sequence, Union

from .aggregator import summarize
from .model import AttendanceRecord, AttendanceSummary, AttendanceUpdate, WorkingDayTally

logger = logging.getLogger(__name__)

History = tuple[AttendanceRecord, ...]
UpdateLike = Union[AttendanceUpdate, AttendanceRecord]


def merge_record(history: Sequence[AttendanceRecord], update: UpdateLike) -> History:
    """Return a new history with `update` applied (last write wins per date).

    An existing record for the date keeps its other fields (reason, marked_by)
    and only takes the new status; otherwise the update is prepended.
    """
    for idx, record in enumerate(history):
        if record.date == update.date:
            merged = list(history)
            merged[idx] = record.with_status(update.status)
            return tuple(merged)

    new_record = update if isinstance(update, AttendanceRecord) else update.as_record()
    return (new_record, *history)


def apply_update(
    history: Sequence[AttendanceRecord],
    new_record: UpdateLike,
    tally: Optional[WorkingDayTally],
) -> tuple[History, AttendanceSummary]:
    """Merge one pushed change and recompute the summary with the same tally.

    A single day's status change never alters the working-day count, so the
    tally computed for the session is reused as is.
    """
    new_history = merge_record(history, new_record)
    return new_history, summarize(new_history, tally)


@dataclass(frozen=True)
class AttendanceSession:
    """Owned view state for one student's attendance screen.

    Every operation returns a new session. Updates that arrive before the
    initial history is loaded are buffered and replayed in arrival order.
    """

    history: History = ()
    tally: Optional[WorkingDayTally] = None
    summary: Optional[AttendanceSummary] = None
    is_loaded: bool = False
    pending: tuple[UpdateLike, ...] = ()

    @classmethod
    def empty(cls) -> "AttendanceSession":
        return cls()

    def loaded(self, history: Sequence[AttendanceRecord], tally: Optional[WorkingDayTally]) -> "AttendanceSession":
        session = AttendanceSession(
            history=tuple(history),
            tally=tally,
            summary=summarize(history, tally),
            is_loaded=True,
        )
        for update in self.pending:
            session = session.apply(update)
        return session

    def apply(self, update: Union[UpdateLike, dict, None]) -> "AttendanceSession":
        if isinstance(update, dict):
            update = AttendanceUpdate.from_payload(update)
        if update is None:
            return self

        if not self.is_loaded:
            logger.debug("Buffering attendance update for %s until history loads", update.date)
            return replace(self, pending=(*self.pending, update))

        history, summary = apply_update(self.history, update, self.tally)
        return replace(self, history=history, summary=summary)

    def record_for(self, day: str) -> Optional[AttendanceRecord]:
        for record in self.history:
            if record.date == day:
                return record
        return None
