from __future__ import annotations

from enum import Enum


class MemberRole(str, Enum):
    """Base role stored on the member record."""

    FELLOWSHIP_MANAGER = "FELLOWSHIP_MANAGER"
    MEMBER = "MEMBER"


class ScopeKind(str, Enum):
    """Leadership tier a viewer resolves to, in decreasing breadth."""

    FELLOWSHIP_MANAGER = "FELLOWSHIP_MANAGER"
    REGIONAL_HEAD = "REGIONAL_HEAD"
    FAMILY_HEAD = "FAMILY_HEAD"
    TEAM_LEADER = "TEAM_LEADER"
    NONE = "NONE"


class Gender(str, Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"


class DecisionType(str, Enum):
    """Spiritual decisions recorded at an event."""

    SALVATION = "SALVATION"
    REDEDICATION = "REDEDICATION"
    BAPTISM_INTEREST = "BAPTISM_INTEREST"
    PRAYER_REQUEST = "PRAYER_REQUEST"


class EventStatus(str, Enum):
    UPCOMING = "UPCOMING"
    ONGOING = "ONGOING"
    PAST = "PAST"
