"""Member predicates derived from a report scope.

A ``MemberFilter`` is the one access filter applied to report data. It can
be evaluated in memory against a ``Member`` projection or rendered as a SQL
clause over the ``members`` table for the MySQL repositories.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from ..core.enums import ScopeKind
from ..database.mysql_base import in_clause
from ..members.model import Member


@dataclass(frozen=True)
class MemberFilter:
    kind: ScopeKind
    region_id: Optional[str] = None
    family_ids: frozenset[str] = frozenset()
    team_ids: frozenset[str] = frozenset()

    @classmethod
    def everyone(cls) -> "MemberFilter":
        return cls(kind=ScopeKind.FELLOWSHIP_MANAGER)

    @property
    def is_unrestricted(self) -> bool:
        return self.kind == ScopeKind.FELLOWSHIP_MANAGER

    def matches(self, member: Member) -> bool:
        if self.kind == ScopeKind.FELLOWSHIP_MANAGER:
            return True
        if self.kind == ScopeKind.REGIONAL_HEAD:
            return member.region_id is not None and member.region_id == self.region_id
        if self.kind == ScopeKind.FAMILY_HEAD:
            return any(fid in self.family_ids for fid in member.family_ids)
        if self.kind == ScopeKind.TEAM_LEADER:
            return any(tid in self.team_ids for tid in member.team_ids)
        return False

    def sql(self, alias: str = "m") -> tuple[str, tuple[Any, ...]]:
        """Render as ``(where_fragment, params)`` over ``members AS alias``."""
        if self.kind == ScopeKind.FELLOWSHIP_MANAGER:
            return "1=1", ()
        if self.kind == ScopeKind.REGIONAL_HEAD:
            return f"{alias}.region_id = %s", (self.region_id,)
        if self.kind == ScopeKind.FAMILY_HEAD and self.family_ids:
            ids = tuple(sorted(self.family_ids))
            return (
                "EXISTS (SELECT 1 FROM family_members fm "
                f"WHERE fm.member_id = {alias}.member_id AND fm.is_active = 1 "
                f"AND fm.family_id IN ({in_clause(ids)}))",
                ids,
            )
        if self.kind == ScopeKind.TEAM_LEADER and self.team_ids:
            ids = tuple(sorted(self.team_ids))
            return (
                "EXISTS (SELECT 1 FROM ministry_team_members tm "
                f"WHERE tm.member_id = {alias}.member_id AND tm.is_active = 1 "
                f"AND tm.team_id IN ({in_clause(ids)}))",
                ids,
            )
        return "1=0", ()
