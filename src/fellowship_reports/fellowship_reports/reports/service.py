from __future__ import annotations

import hashlib
import logging
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import format_label, now_local
from ..common.numbers import pct, percentage_change, safe_average
from ..common.validators import require_date_range
from ..core.constants import DEFAULT_DASHBOARD_EVENTS, DEFAULT_TREND_WINDOW, TAG_FIRST_TIMER
from ..core.exceptions import NotFoundError
from ..events.model import AttendanceRecord, DecisionRecord, Event, GuestAttendance
from ..events.repository import EventRepository
from ..members.repository import MemberRepository
from ..scope.filters import MemberFilter
from ..scope.model import ReportScope
from ..scope.service import build_member_filter, scope_summary
from . import breakdowns
from .model import (
    Comparison,
    EventReportRequest,
    RangeReportRequest,
    ReportRequest,
    ReportResult,
    ReportStats,
    TrendPoint,
    TrendReport,
)

logger = logging.getLogger(__name__)

EventVisibility = Callable[[str], bool]


def fingerprint(request: ReportRequest, scope: ReportScope) -> str:
    """Cache key for a report: same request + same scope -> same result."""
    raw = f"{request.fingerprint_key()}|{scope.descriptor()}"
    return hashlib.sha1(raw.encode("utf-8")).hexdigest()


def _attendee_row(record: AttendanceRecord) -> dict:
    m = record.member
    return {
        "id": m.member_id,
        "name": m.full_name,
        "gender": m.gender.value,
        "region": m.region_name,
        "college": m.college,
        "course": m.course,
        "year": m.year_of_study,
        "families": list(m.family_names),
        "teams": list(m.team_names),
        "tags": list(m.tags),
        "isGuest": False,
    }


def _guest_row(guest: GuestAttendance) -> dict:
    return {"name": guest.guest_name, "isGuest": True, "purpose": guest.purpose}


class ReportService:
    """Aggregation engine: attendance counts and breakdowns for one scope.

    Pure read/compute; nothing here writes. The scope's member filter is
    built once per call and handed to every repository query.
    """

    def __init__(
        self,
        events: EventRepository,
        members: MemberRepository,
        *,
        trend_window: int = DEFAULT_TREND_WINDOW,
        clock: Callable[[], datetime] = now_local,
    ):
        self._events = events
        self._members = members
        self._trend_window = max(2, int(trend_window))
        self._clock = clock

    # ---- public use cases ----

    def aggregate(
        self,
        request: ReportRequest,
        scope: ReportScope,
        *,
        visible: Optional[EventVisibility] = None,
    ) -> ReportResult:
        """Build a report for ``scope``.

        ``visible`` (when given) decides which earlier events may appear on
        the trend; the requested event itself is always shown.
        """
        member_filter = build_member_filter(scope)
        if isinstance(request, EventReportRequest):
            result = self._event_report(request, scope, member_filter, visible)
        else:
            result = self._range_report(request, scope, member_filter)
        result.fingerprint = fingerprint(request, scope)
        return result

    def compare(
        self,
        event_id: str,
        scope: ReportScope,
        *,
        visible: Optional[EventVisibility] = None,
    ) -> TrendReport:
        member_filter = build_member_filter(scope)
        event = self._require_event(event_id)
        return self._trend(event, member_filter, visible)

    def dashboard(self, scope: ReportScope) -> dict:
        member_filter = build_member_filter(scope)
        recent = list(self._events.list_recent(limit=DEFAULT_DASHBOARD_EVENTS))
        totals = self._totals_by_event([e.event_id for e in recent], member_filter)
        return {
            "totalMembers": self._members.count_members(member_filter),
            "totalEvents": self._events.count_events(),
            "averageAttendance": safe_average(sum(totals.values()), len(recent)),
        }

    # ---- single event ----

    def _require_event(self, event_id: str) -> Event:
        event = self._events.get_by_id(event_id)
        if event is None:
            raise NotFoundError("Event not found")
        return event

    def _event_report(
        self,
        request: EventReportRequest,
        scope: ReportScope,
        member_filter: MemberFilter,
        visible: Optional[EventVisibility] = None,
    ) -> ReportResult:
        event = self._require_event(request.event_id)
        ids = [event.event_id]

        records = list(self._events.get_attendances(ids, member_filter))
        guests = list(self._events.get_guests(ids)) if member_filter.is_unrestricted else []
        decisions = list(self._events.get_decisions(ids, member_filter))

        stats = self._build_stats(records, guests, decisions)
        return ReportResult(
            stats=stats,
            scope=scope_summary(scope),
            event={
                "id": event.event_id,
                "name": event.name,
                "date": event.event_date.isoformat(),
                "type": event.event_type,
                "status": event.status(self._clock()).value,
            },
            guests=[{"name": g.guest_name, "purpose": g.purpose} for g in guests],
            attendees=[_attendee_row(r) for r in records] + [_guest_row(g) for g in guests],
            trend=self._trend(event, member_filter, visible),
        )

    def _trend(
        self,
        event: Event,
        member_filter: MemberFilter,
        visible: Optional[EventVisibility] = None,
    ) -> TrendReport:
        previous = list(self._events.list_previous_of_type(event, limit=self._trend_window - 1))
        if visible is not None:
            previous = [e for e in previous if visible(e.event_id)]
        series = list(reversed(previous)) + [event]
        totals = self._totals_by_event([e.event_id for e in series], member_filter)

        points = tuple(
            TrendPoint(
                event_id=e.event_id,
                name=e.name,
                event_date=e.event_date,
                label=format_label(e.event_date),
                attendance=totals.get(e.event_id, 0),
            )
            for e in series
        )

        comparison = None
        if previous:
            last = previous[0]
            current_total = totals.get(event.event_id, 0)
            previous_total = totals.get(last.event_id, 0)
            comparison = Comparison(
                previous_event_id=last.event_id,
                previous_total=previous_total,
                difference=current_total - previous_total,
                percentage_change=percentage_change(current_total, previous_total),
            )
        return TrendReport(points=points, comparison=comparison)

    def _totals_by_event(self, event_ids: Sequence[str], member_filter: MemberFilter) -> dict[str, int]:
        if not event_ids:
            return {}
        members = self._events.count_attendances(event_ids, member_filter)
        guests = self._events.count_guests(event_ids) if member_filter.is_unrestricted else {}
        return {eid: members.get(eid, 0) + guests.get(eid, 0) for eid in event_ids}

    # ---- date range ----

    def _range_report(
        self,
        request: RangeReportRequest,
        scope: ReportScope,
        member_filter: MemberFilter,
    ) -> ReportResult:
        require_date_range(request.start_date, request.end_date, today=self._clock().date())

        events = list(
            self._events.list_between(
                start_date=request.start_date,
                end_date=request.end_date,
                event_type=request.event_type,
            )
        )
        ids = [e.event_id for e in events]

        records = list(self._events.get_attendances(ids, member_filter, region_id=request.region_id))
        include_guests = member_filter.is_unrestricted and not request.region_id
        guests = list(self._events.get_guests(ids)) if include_guests else []
        decisions = list(self._events.get_decisions(ids, member_filter, region_id=request.region_id))

        stats = self._build_stats(records, guests, decisions)
        stats.total_events = len(events)
        stats.average_attendance = safe_average(stats.total_attendance, len(events))
        stats.unique_members = len({r.member.member_id for r in records})

        members_per_event: dict[str, int] = {}
        for r in records:
            members_per_event[r.event_id] = members_per_event.get(r.event_id, 0) + 1
        guests_per_event: dict[str, int] = {}
        for g in guests:
            guests_per_event[g.event_id] = guests_per_event.get(g.event_id, 0) + 1

        chart_data = [
            {
                "date": e.event_date.isoformat(),
                "name": e.name,
                "attendance": members_per_event.get(e.event_id, 0) + guests_per_event.get(e.event_id, 0),
            }
            for e in events
        ]

        logger.debug(
            "Range report %s..%s: %s events, %s records",
            request.start_date,
            request.end_date,
            len(events),
            len(records),
        )
        return ReportResult(
            stats=stats,
            scope=scope_summary(scope),
            guests=[{"name": g.guest_name, "purpose": g.purpose} for g in guests],
            attendees=[_attendee_row(r) for r in records],
            chart_data=chart_data,
        )

    # ---- shared ----

    @staticmethod
    def _build_stats(
        records: Sequence[AttendanceRecord],
        guests: Sequence[GuestAttendance],
        decisions: Sequence[DecisionRecord],
    ) -> ReportStats:
        members = [r.member for r in records]
        first_timers = len({m.member_id for m in members if m.has_tag(TAG_FIRST_TIMER)})

        return ReportStats(
            total_attendance=len(records) + len(guests),
            member_count=len(records),
            guest_count=len(guests),
            first_timers_count=first_timers,
            first_timers_share=pct(first_timers, len({m.member_id for m in members})),
            gender_breakdown=breakdowns.gender_breakdown(members),
            region_breakdown=breakdowns.region_breakdown(members),
            college_breakdown=breakdowns.college_breakdown(members),
            course_breakdown=breakdowns.course_breakdown(members),
            year_of_study_breakdown=breakdowns.year_of_study_breakdown(members),
            family_breakdown=breakdowns.family_breakdown(members),
            team_breakdown=breakdowns.team_breakdown(members),
            tag_distribution=breakdowns.tag_distribution(members),
            salvation_breakdown=breakdowns.decision_breakdown(decisions),
            member_type_breakdown=breakdowns.member_type_breakdown(members),
            special_tag_stats=breakdowns.special_tag_stats(members) if members else {},
        )
