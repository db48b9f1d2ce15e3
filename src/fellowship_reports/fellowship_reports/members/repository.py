from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Protocol

from .model import Headships, Member

if TYPE_CHECKING:
    from ..scope.filters import MemberFilter


class MemberRepository(Protocol):
    """Member directory (read-only for reporting).

    Note (DIP): services depend on this interface, not on a concrete DB.
    """

    def get_by_id(self, member_id: str) -> Optional[Member]:
        raise NotImplementedError

    def get_headships(self, member_id: str) -> Optional[Headships]:
        """Return the member with every region/family/team they head."""

        raise NotImplementedError

    def count_members(self, member_filter: "MemberFilter") -> int:
        raise NotImplementedError
