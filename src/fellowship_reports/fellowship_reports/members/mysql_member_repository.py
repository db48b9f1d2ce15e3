from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from ..core.enums import Gender, MemberRole
from ..database.connection import DatabaseConnection
from ..database.mysql_base import GROUP_SEPARATOR, db_cursor, fetchall, fetchone, split_group
from .model import Family, Headships, Member, MinistryTeam, Region
from .repository import MemberRepository

if TYPE_CHECKING:
    from ..scope.filters import MemberFilter


# Projection shared with the event repository. Expects ``members m``.
MEMBER_COLUMNS = f"""
    m.member_id, m.full_name, m.role, m.gender, m.region_id, m.year_of_study, m.is_active,
    r.name AS region_name, c.name AS course_name, col.name AS college_name,
    (SELECT GROUP_CONCAT(t.name ORDER BY t.name SEPARATOR '{GROUP_SEPARATOR}')
       FROM member_tags mt JOIN tags t ON t.tag_id = mt.tag_id
      WHERE mt.member_id = m.member_id AND mt.is_active = 1) AS tag_names,
    (SELECT GROUP_CONCAT(f.family_id ORDER BY f.family_id SEPARATOR '{GROUP_SEPARATOR}')
       FROM family_members fm JOIN families f ON f.family_id = fm.family_id
      WHERE fm.member_id = m.member_id AND fm.is_active = 1) AS family_ids,
    (SELECT GROUP_CONCAT(f.name ORDER BY f.family_id SEPARATOR '{GROUP_SEPARATOR}')
       FROM family_members fm JOIN families f ON f.family_id = fm.family_id
      WHERE fm.member_id = m.member_id AND fm.is_active = 1) AS family_names,
    (SELECT GROUP_CONCAT(mtm.team_id ORDER BY mtm.team_id SEPARATOR '{GROUP_SEPARATOR}')
       FROM ministry_team_members mtm JOIN ministry_teams tt ON tt.team_id = mtm.team_id
      WHERE mtm.member_id = m.member_id AND mtm.is_active = 1) AS team_ids,
    (SELECT GROUP_CONCAT(tt.name ORDER BY mtm.team_id SEPARATOR '{GROUP_SEPARATOR}')
       FROM ministry_team_members mtm JOIN ministry_teams tt ON tt.team_id = mtm.team_id
      WHERE mtm.member_id = m.member_id AND mtm.is_active = 1) AS team_names
"""

MEMBER_JOINS = """
    LEFT JOIN regions r ON r.region_id = m.region_id
    LEFT JOIN courses c ON c.course_id = m.course_id
    LEFT JOIN colleges col ON col.college_id = c.college_id
"""


def _parse_role(value: Any) -> MemberRole:
    try:
        return MemberRole(value)
    except ValueError:
        # Any non-manager base role reports as a plain member.
        return MemberRole.MEMBER


def row_to_member(r: dict[str, Any]) -> Member:
    year = r.get("year_of_study")
    return Member(
        member_id=str(r["member_id"]),
        full_name=r["full_name"],
        role=_parse_role(r["role"]),
        gender=Gender(r["gender"]),
        region_id=r.get("region_id"),
        region_name=r.get("region_name"),
        college=r.get("college_name"),
        course=r.get("course_name"),
        year_of_study=int(year) if year is not None else None,
        tags=split_group(r.get("tag_names")),
        family_ids=split_group(r.get("family_ids")),
        family_names=split_group(r.get("family_names")),
        team_ids=split_group(r.get("team_ids")),
        team_names=split_group(r.get("team_names")),
        is_active=bool(r.get("is_active", 1)),
    )


class MySQLMemberRepository(MemberRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, member_id: str) -> Optional[Member]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {MEMBER_COLUMNS}
                FROM members m
                {MEMBER_JOINS}
                WHERE m.member_id=%s
                """,
                (member_id,),
            )
            r = fetchone(cur)
            return row_to_member(r) if r else None

    def get_headships(self, member_id: str) -> Optional[Headships]:
        member = self.get_by_id(member_id)
        if member is None:
            return None

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT region_id, name FROM regions WHERE regional_head_id=%s",
                (member_id,),
            )
            r = fetchone(cur)
            region = Region(region_id=str(r["region_id"]), name=r["name"]) if r else None

            cur.execute(
                """
                SELECT family_id, name, is_active
                FROM families
                WHERE family_head_id=%s
                ORDER BY name
                """,
                (member_id,),
            )
            families = tuple(
                Family(family_id=str(f["family_id"]), name=f["name"], is_active=bool(f["is_active"]))
                for f in fetchall(cur)
            )

            cur.execute(
                """
                SELECT team_id, name, is_active
                FROM ministry_teams
                WHERE leader_id=%s
                ORDER BY name
                """,
                (member_id,),
            )
            teams = tuple(
                MinistryTeam(team_id=str(t["team_id"]), name=t["name"], is_active=bool(t["is_active"]))
                for t in fetchall(cur)
            )

        return Headships(member=member, region=region, families=families, teams=teams)

    def count_members(self, member_filter: "MemberFilter") -> int:
        clause, params = member_filter.sql("m")
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM members m WHERE {clause}", params)
            r = fetchone(cur)
            return int(r["total"]) if r else 0
