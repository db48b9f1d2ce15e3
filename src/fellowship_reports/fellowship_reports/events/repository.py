from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Optional, Protocol, Sequence

from .model import AttendanceRecord, DecisionRecord, Event, GuestAttendance

if TYPE_CHECKING:
    from ..scope.filters import MemberFilter


class EventRepository(Protocol):
    """Read side of the event/attendance store.

    Every attendance-bearing query takes the caller's ``MemberFilter`` so the
    restriction happens in the store, before anything is counted.
    """

    def get_by_id(self, event_id: str) -> Optional[Event]:
        raise NotImplementedError

    def list_between(
        self,
        *,
        start_date: date,
        end_date: date,
        event_type: Optional[str] = None,
    ) -> Sequence[Event]:
        """Events in ``[start_date, end_date]``, oldest first."""

        raise NotImplementedError

    def list_previous_of_type(self, event: Event, *, limit: int) -> Sequence[Event]:
        """Events of the same type strictly before ``event``, newest first."""

        raise NotImplementedError

    def list_recent(self, *, limit: int) -> Sequence[Event]:
        raise NotImplementedError

    def count_events(self) -> int:
        raise NotImplementedError

    def get_attendances(
        self,
        event_ids: Sequence[str],
        member_filter: "MemberFilter",
        *,
        region_id: Optional[str] = None,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def count_attendances(
        self,
        event_ids: Sequence[str],
        member_filter: "MemberFilter",
    ) -> dict[str, int]:
        """Per-event member attendance counts (events with none may be omitted)."""

        raise NotImplementedError

    def get_guests(self, event_ids: Sequence[str]) -> Sequence[GuestAttendance]:
        raise NotImplementedError

    def count_guests(self, event_ids: Sequence[str]) -> dict[str, int]:
        raise NotImplementedError

    def get_decisions(
        self,
        event_ids: Sequence[str],
        member_filter: "MemberFilter",
        *,
        region_id: Optional[str] = None,
    ) -> Sequence[DecisionRecord]:
        """Decisions at the events; any narrowing drops guest decisions."""

        raise NotImplementedError
