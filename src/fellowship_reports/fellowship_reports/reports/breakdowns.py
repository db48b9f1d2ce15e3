"""Frequency maps over attendee projections.

Every breakdown is a plain ``dict[str, int]`` ordered by count (descending)
then key (ascending), so ties always render in the same order. Attendees
missing a value for a dimension are left out of it; only the family and
team dimensions carry an explicit catch-all bucket.
"""

from __future__ import annotations

from collections import Counter
from typing import Iterable, Optional, Sequence

from ..core.constants import (
    MEMBER_TYPE_ALUMNI,
    MEMBER_TYPE_OTHER,
    MEMBER_TYPE_STUDENT,
    NO_FAMILY,
    NO_TEAM,
    TAG_ALUMNI,
    TAG_FINALIST,
    TAG_VOLUNTEER,
)
from ..events.model import DecisionRecord
from ..members.model import Member


def frequency(values: Iterable[Optional[str]]) -> dict[str, int]:
    counts = Counter(v for v in values if v)
    return dict(sorted(counts.items(), key=lambda kv: (-kv[1], kv[0])))


def _with_catch_all(named: Iterable[str], unassigned: int, label: str, *, has_population: bool) -> dict[str, int]:
    counts = Counter(named)
    if has_population:
        counts[label] = unassigned
    return dict(sorted(counts.items(), key=lambda kv: (-kv[1], kv[0])))


def gender_breakdown(members: Sequence[Member]) -> dict[str, int]:
    return frequency(m.gender.value for m in members)


def region_breakdown(members: Sequence[Member]) -> dict[str, int]:
    return frequency(m.region_name for m in members)


def college_breakdown(members: Sequence[Member]) -> dict[str, int]:
    return frequency(m.college for m in members)


def course_breakdown(members: Sequence[Member]) -> dict[str, int]:
    return frequency(m.course for m in members)


def year_of_study_breakdown(members: Sequence[Member]) -> dict[str, int]:
    return frequency(f"Year {m.year_of_study}" if m.year_of_study else None for m in members)


def family_breakdown(members: Sequence[Member]) -> dict[str, int]:
    return _with_catch_all(
        (name for m in members for name in m.family_names),
        sum(1 for m in members if not m.family_ids),
        NO_FAMILY,
        has_population=bool(members),
    )


def team_breakdown(members: Sequence[Member]) -> dict[str, int]:
    return _with_catch_all(
        (name for m in members for name in m.team_names),
        sum(1 for m in members if not m.team_ids),
        NO_TEAM,
        has_population=bool(members),
    )


def tag_distribution(members: Sequence[Member]) -> dict[str, int]:
    return frequency(tag for m in members for tag in m.tags)


def decision_breakdown(decisions: Sequence[DecisionRecord]) -> dict[str, int]:
    return frequency(d.decision_type.value for d in decisions)


def member_type(member: Member) -> str:
    """Alumni tag wins; otherwise a course marks a current student."""
    if member.has_tag(TAG_ALUMNI):
        return MEMBER_TYPE_ALUMNI
    if member.course:
        return MEMBER_TYPE_STUDENT
    return MEMBER_TYPE_OTHER


def member_type_breakdown(members: Sequence[Member]) -> dict[str, int]:
    return frequency(member_type(m) for m in members)


def special_tag_stats(members: Sequence[Member]) -> dict[str, int]:
    return {
        "finalists": sum(1 for m in members if m.has_tag(TAG_FINALIST)),
        "alumni": sum(1 for m in members if m.has_tag(TAG_ALUMNI)),
        "volunteers": sum(1 for m in members if m.has_tag(TAG_VOLUNTEER)),
    }
