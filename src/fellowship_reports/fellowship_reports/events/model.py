from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..core.enums import DecisionType, EventStatus
from ..members.model import Member


@dataclass(frozen=True)
class Event:
    event_id: str
    name: str
    event_type: str
    event_date: date
    start_time: time = time(0, 0)
    end_time: time = time(23, 59)

    def status(self, now: datetime) -> EventStatus:
        start = datetime.combine(self.event_date, self.start_time)
        end = datetime.combine(self.event_date, self.end_time)
        if now < start:
            return EventStatus.UPCOMING
        if now <= end:
            return EventStatus.ONGOING
        return EventStatus.PAST

    @property
    def sort_key(self) -> tuple[date, time, str]:
        return (self.event_date, self.start_time, self.event_id)


@dataclass(frozen=True)
class AttendanceRecord:
    """A member's attendance at an event, with the member projection read alongside."""

    event_id: str
    member: Member


@dataclass(frozen=True)
class GuestAttendance:
    event_id: str
    guest_name: str
    purpose: Optional[str] = None


@dataclass(frozen=True)
class DecisionRecord:
    """A spiritual decision recorded at an event; guests have no member_id."""

    event_id: str
    decision_type: DecisionType
    member_id: Optional[str] = None
