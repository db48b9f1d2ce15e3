from __future__ import annotations

import logging

from ..core.constants import MSG_INSUFFICIENT_PERMISSIONS
from ..core.enums import MemberRole, ScopeKind
from ..core.exceptions import AuthorizationError, NotFoundError
from ..members.model import Headships
from ..members.repository import MemberRepository
from .filters import MemberFilter
from .model import ReportScope

logger = logging.getLogger(__name__)


def scope_from_headships(headships: Headships) -> ReportScope:
    """Pick exactly one leadership tier.

    Precedence is fixed: manager > regional head > family head (active
    families only) > team leader > none. A tier with nothing left in it
    (e.g. every family deactivated) falls through to the next one.
    """
    member = headships.member

    if member.role == MemberRole.FELLOWSHIP_MANAGER:
        return ReportScope(role=member.role, kind=ScopeKind.FELLOWSHIP_MANAGER)

    if headships.region is not None:
        return ReportScope(
            role=member.role,
            kind=ScopeKind.REGIONAL_HEAD,
            region_id=headships.region.region_id,
            region_name=headships.region.name,
        )

    families = headships.active_families
    if families:
        return ReportScope(
            role=member.role,
            kind=ScopeKind.FAMILY_HEAD,
            family_ids=tuple(f.family_id for f in families),
            family_names=tuple(f.name for f in families),
        )

    if headships.teams:
        return ReportScope(
            role=member.role,
            kind=ScopeKind.TEAM_LEADER,
            team_ids=tuple(t.team_id for t in headships.teams),
            team_names=tuple(t.name for t in headships.teams),
        )

    return ReportScope(role=member.role, kind=ScopeKind.NONE)


def build_member_filter(scope: ReportScope) -> MemberFilter:
    if scope.kind == ScopeKind.FELLOWSHIP_MANAGER:
        return MemberFilter.everyone()
    if scope.kind == ScopeKind.REGIONAL_HEAD and scope.region_id:
        return MemberFilter(kind=scope.kind, region_id=scope.region_id)
    if scope.kind == ScopeKind.FAMILY_HEAD and scope.family_ids:
        return MemberFilter(kind=scope.kind, family_ids=frozenset(scope.family_ids))
    if scope.kind == ScopeKind.TEAM_LEADER and scope.team_ids:
        return MemberFilter(kind=scope.kind, team_ids=frozenset(scope.team_ids))
    raise AuthorizationError(MSG_INSUFFICIENT_PERMISSIONS)


def is_leader(scope: ReportScope) -> bool:
    return scope.kind != ScopeKind.NONE


def describe_scope(scope: ReportScope) -> str:
    """Human-readable scope label for the UI."""
    if scope.kind == ScopeKind.FELLOWSHIP_MANAGER:
        return "All Members"
    if scope.kind == ScopeKind.REGIONAL_HEAD and scope.region_name:
        return f"{scope.region_name} Region"
    if scope.kind == ScopeKind.FAMILY_HEAD and scope.family_names:
        if len(scope.family_names) == 1:
            return f"{scope.family_names[0]} Family"
        return f"{len(scope.family_names)} Families"
    if scope.kind == ScopeKind.TEAM_LEADER and scope.team_names:
        if len(scope.team_names) == 1:
            return f"{scope.team_names[0]} Team"
        return f"{len(scope.team_names)} Teams"
    return "No Scope"


_SUMMARY_TYPES = {
    ScopeKind.FELLOWSHIP_MANAGER: "all",
    ScopeKind.REGIONAL_HEAD: "region",
    ScopeKind.FAMILY_HEAD: "family",
    ScopeKind.TEAM_LEADER: "team",
}


def scope_summary(scope: ReportScope) -> dict:
    """Scope block attached to report payloads."""
    return {
        "type": _SUMMARY_TYPES.get(scope.kind, "none"),
        "name": describe_scope(scope),
        "isFellowshipManager": scope.is_manager,
    }


class ScopeResolver:
    """Use case: work out which members a viewer may report on."""

    def __init__(self, members: MemberRepository):
        self._members = members

    def resolve_scope(self, viewer_id: str) -> ReportScope:
        headships = self._members.get_headships(viewer_id)
        if headships is None:
            raise NotFoundError("User not found")
        scope = scope_from_headships(headships)
        logger.debug("Resolved viewer %s to scope %s", viewer_id, scope.descriptor())
        return scope
