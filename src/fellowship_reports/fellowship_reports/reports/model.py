from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional, Union


@dataclass(frozen=True)
class EventReportRequest:
    event_id: str

    def fingerprint_key(self) -> str:
        return f"event:{self.event_id}"


@dataclass(frozen=True)
class RangeReportRequest:
    start_date: date
    end_date: date
    event_type: Optional[str] = None
    region_id: Optional[str] = None

    def fingerprint_key(self) -> str:
        return ":".join(
            [
                "range",
                self.start_date.isoformat(),
                self.end_date.isoformat(),
                self.event_type or "*",
                self.region_id or "*",
            ]
        )


ReportRequest = Union[EventReportRequest, RangeReportRequest]


@dataclass(frozen=True)
class Comparison:
    previous_event_id: str
    previous_total: int
    difference: int
    percentage_change: Optional[int]

    def to_dict(self) -> dict:
        return {
            "previousEventId": self.previous_event_id,
            "previousTotal": self.previous_total,
            "difference": self.difference,
            "percentageChange": self.percentage_change,
        }


@dataclass(frozen=True)
class TrendPoint:
    event_id: str
    name: str
    event_date: date
    label: str
    attendance: int


@dataclass(frozen=True)
class TrendReport:
    """Attendance of comparable events, oldest first, ending at the requested one."""

    points: tuple[TrendPoint, ...]
    comparison: Optional[Comparison]

    def to_dict(self) -> dict:
        return {
            "labels": [p.label for p in self.points],
            "data": [p.attendance for p in self.points],
            "comparison": self.comparison.to_dict() if self.comparison else None,
        }


@dataclass
class ReportStats:
    total_attendance: int = 0
    member_count: int = 0
    guest_count: int = 0
    first_timers_count: int = 0
    first_timers_share: str = "0%"
    gender_breakdown: dict[str, int] = field(default_factory=dict)
    region_breakdown: dict[str, int] = field(default_factory=dict)
    college_breakdown: dict[str, int] = field(default_factory=dict)
    course_breakdown: dict[str, int] = field(default_factory=dict)
    year_of_study_breakdown: dict[str, int] = field(default_factory=dict)
    family_breakdown: dict[str, int] = field(default_factory=dict)
    team_breakdown: dict[str, int] = field(default_factory=dict)
    tag_distribution: dict[str, int] = field(default_factory=dict)
    salvation_breakdown: dict[str, int] = field(default_factory=dict)
    member_type_breakdown: dict[str, int] = field(default_factory=dict)
    special_tag_stats: dict[str, int] = field(default_factory=dict)

    # Range reports only
    total_events: Optional[int] = None
    average_attendance: Optional[int] = None
    unique_members: Optional[int] = None

    def breakdowns(self) -> dict[str, dict[str, int]]:
        return {
            "gender": self.gender_breakdown,
            "region": self.region_breakdown,
            "college": self.college_breakdown,
            "course": self.course_breakdown,
            "yearOfStudy": self.year_of_study_breakdown,
            "family": self.family_breakdown,
            "team": self.team_breakdown,
            "tag": self.tag_distribution,
            "salvation": self.salvation_breakdown,
            "memberType": self.member_type_breakdown,
        }

    def to_dict(self) -> dict:
        out: dict[str, Any] = {
            "totalAttendance": self.total_attendance,
            "memberCount": self.member_count,
            "guestCount": self.guest_count,
            "firstTimersCount": self.first_timers_count,
            "firstTimersShare": self.first_timers_share,
            "genderBreakdown": self.gender_breakdown,
            "regionBreakdown": self.region_breakdown,
            "collegeBreakdown": self.college_breakdown,
            "courseBreakdown": self.course_breakdown,
            "yearOfStudyBreakdown": self.year_of_study_breakdown,
            "familyBreakdown": self.family_breakdown,
            "teamBreakdown": self.team_breakdown,
            "tagDistribution": self.tag_distribution,
            "salvationBreakdown": self.salvation_breakdown,
            "memberTypeBreakdown": self.member_type_breakdown,
            "specialTagStats": self.special_tag_stats,
        }
        if self.total_events is not None:
            out["totalEvents"] = self.total_events
            out["averageAttendance"] = self.average_attendance
            out["uniqueMembers"] = self.unique_members
        return out


@dataclass
class ReportResult:
    stats: ReportStats
    scope: dict
    event: Optional[dict] = None
    guests: list[dict] = field(default_factory=list)
    attendees: list[dict] = field(default_factory=list)
    trend: Optional[TrendReport] = None
    chart_data: list[dict] = field(default_factory=list)
    fingerprint: str = ""

    def to_dict(self) -> dict:
        out: dict[str, Any] = {
            "stats": self.stats.to_dict(),
            "scope": self.scope,
            "guests": self.guests,
            "attendees": self.attendees,
            "fingerprint": self.fingerprint,
        }
        if self.event is not None:
            out["event"] = self.event
        if self.trend is not None:
            out["comparison"] = self.trend.to_dict()
        if self.event is None:
            out["chartData"] = self.chart_data
        return out
