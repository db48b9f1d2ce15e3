from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import MemberRole, ScopeKind


@dataclass(frozen=True)
class ReportScope:
    """What slice of the fellowship a viewer may report on.

    Ephemeral: recomputed for every request from the viewer's headships and
    never persisted. ``kind`` is the single leadership tier the viewer
    resolved to; ``role`` is the member's stored base role.
    """

    role: MemberRole
    kind: ScopeKind
    region_id: Optional[str] = None
    region_name: Optional[str] = None
    family_ids: tuple[str, ...] = ()
    family_names: tuple[str, ...] = ()
    team_ids: tuple[str, ...] = ()
    team_names: tuple[str, ...] = ()

    @property
    def is_manager(self) -> bool:
        return self.kind == ScopeKind.FELLOWSHIP_MANAGER

    def descriptor(self) -> str:
        """Stable textual identity of the scope, used in cache fingerprints."""
        if self.kind == ScopeKind.REGIONAL_HEAD:
            return f"region:{self.region_id}"
        if self.kind == ScopeKind.FAMILY_HEAD:
            return "family:" + ",".join(sorted(self.family_ids))
        if self.kind == ScopeKind.TEAM_LEADER:
            return "team:" + ",".join(sorted(self.team_ids))
        return self.kind.value.lower()

    def to_dict(self) -> dict:
        return {
            "role": self.role.value,
            "kind": self.kind.value,
            "regionId": self.region_id,
            "regionName": self.region_name,
            "familyIds": list(self.family_ids),
            "familyNames": list(self.family_names),
            "teamIds": list(self.team_ids),
            "teamNames": list(self.team_names),
        }
