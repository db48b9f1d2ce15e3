from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..core.enums import Gender, MemberRole


@dataclass(frozen=True)
class Region:
    region_id: str
    name: str


@dataclass(frozen=True)
class Family:
    family_id: str
    name: str
    is_active: bool = True


@dataclass(frozen=True)
class MinistryTeam:
    team_id: str
    name: str
    is_active: bool = True


@dataclass(frozen=True)
class Member:
    """Read-only member projection used by scoping and aggregation.

    ``family_*`` and ``team_*`` only list *active* memberships; ``tags``
    only lists active tag assignments.
    """

    member_id: str
    full_name: str
    role: MemberRole
    gender: Gender
    region_id: Optional[str] = None
    region_name: Optional[str] = None
    college: Optional[str] = None
    course: Optional[str] = None
    year_of_study: Optional[int] = None
    tags: tuple[str, ...] = ()
    family_ids: tuple[str, ...] = ()
    family_names: tuple[str, ...] = ()
    team_ids: tuple[str, ...] = ()
    team_names: tuple[str, ...] = ()
    is_active: bool = True

    def has_tag(self, name: str) -> bool:
        return name in self.tags


@dataclass(frozen=True)
class Headships:
    """Leadership relations a member structurally holds.

    Several may be present at once; the scope resolver decides which one
    wins.
    """

    member: Member
    region: Optional[Region] = None
    families: tuple[Family, ...] = field(default_factory=tuple)
    teams: tuple[MinistryTeam, ...] = field(default_factory=tuple)

    @property
    def active_families(self) -> tuple[Family, ...]:
        return tuple(f for f in self.families if f.is_active)
