from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Any, Optional, Sequence

from ..core.enums import DecisionType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause, normalize_mysql_time
from ..members.mysql_member_repository import MEMBER_COLUMNS, MEMBER_JOINS, row_to_member
from .model import AttendanceRecord, DecisionRecord, Event, GuestAttendance
from .repository import EventRepository

if TYPE_CHECKING:
    from ..scope.filters import MemberFilter

_EVENT_COLUMNS = "event_id, name, event_type, event_date, start_time, end_time"


def _row_to_event(r: dict[str, Any]) -> Event:
    return Event(
        event_id=str(r["event_id"]),
        name=r["name"],
        event_type=r["event_type"],
        event_date=r["event_date"],
        start_time=normalize_mysql_time(r["start_time"]),
        end_time=normalize_mysql_time(r["end_time"]),
    )


class MySQLEventRepository(EventRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, event_id: str) -> Optional[Event]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_EVENT_COLUMNS} FROM events WHERE event_id=%s", (event_id,))
            r = fetchone(cur)
            return _row_to_event(r) if r else None

    def list_between(
        self,
        *,
        start_date: date,
        end_date: date,
        event_type: Optional[str] = None,
    ) -> Sequence[Event]:
        clauses = ["event_date BETWEEN %s AND %s"]
        params: list[object] = [start_date, end_date]
        if event_type:
            clauses.append("event_type=%s")
            params.append(event_type)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_EVENT_COLUMNS}
                FROM events
                WHERE {" AND ".join(clauses)}
                ORDER BY event_date ASC, start_time ASC, event_id ASC
                """,
                tuple(params),
            )
            return [_row_to_event(r) for r in fetchall(cur)]

    def list_previous_of_type(self, event: Event, *, limit: int) -> Sequence[Event]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_EVENT_COLUMNS}
                FROM events
                WHERE event_type=%s
                  AND event_id<>%s
                  AND (event_date < %s OR (event_date = %s AND start_time < %s))
                ORDER BY event_date DESC, start_time DESC, event_id DESC
                LIMIT %s
                """,
                (
                    event.event_type,
                    event.event_id,
                    event.event_date,
                    event.event_date,
                    event.start_time,
                    int(limit),
                ),
            )
            return [_row_to_event(r) for r in fetchall(cur)]

    def list_recent(self, *, limit: int) -> Sequence[Event]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_EVENT_COLUMNS}
                FROM events
                ORDER BY event_date DESC, start_time DESC, event_id DESC
                LIMIT %s
                """,
                (int(limit),),
            )
            return [_row_to_event(r) for r in fetchall(cur)]

    def count_events(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM events")
            r = fetchone(cur)
            return int(r["total"]) if r else 0

    def get_attendances(
        self,
        event_ids: Sequence[str],
        member_filter: "MemberFilter",
        *,
        region_id: Optional[str] = None,
    ) -> Sequence[AttendanceRecord]:
        if not event_ids:
            return []

        scope_clause, scope_params = member_filter.sql("m")
        clauses = [f"a.event_id IN ({in_clause(event_ids)})", scope_clause]
        params: list[object] = [*event_ids, *scope_params]
        if region_id:
            clauses.append("m.region_id=%s")
            params.append(region_id)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT a.event_id, {MEMBER_COLUMNS}
                FROM attendances a
                JOIN members m ON m.member_id = a.member_id
                {MEMBER_JOINS}
                WHERE {" AND ".join(clauses)}
                ORDER BY a.checked_in_at ASC
                """,
                tuple(params),
            )
            return [
                AttendanceRecord(event_id=str(r["event_id"]), member=row_to_member(r))
                for r in fetchall(cur)
            ]

    def count_attendances(
        self,
        event_ids: Sequence[str],
        member_filter: "MemberFilter",
    ) -> dict[str, int]:
        if not event_ids:
            return {}

        scope_clause, scope_params = member_filter.sql("m")
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT a.event_id, COUNT(*) AS total
                FROM attendances a
                JOIN members m ON m.member_id = a.member_id
                WHERE a.event_id IN ({in_clause(event_ids)}) AND {scope_clause}
                GROUP BY a.event_id
                """,
                (*event_ids, *scope_params),
            )
            return {str(r["event_id"]): int(r["total"]) for r in fetchall(cur)}

    def get_guests(self, event_ids: Sequence[str]) -> Sequence[GuestAttendance]:
        if not event_ids:
            return []

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT event_id, guest_name, purpose
                FROM guest_attendances
                WHERE event_id IN ({in_clause(event_ids)})
                ORDER BY guest_attendance_id ASC
                """,
                tuple(event_ids),
            )
            return [
                GuestAttendance(event_id=str(r["event_id"]), guest_name=r["guest_name"], purpose=r.get("purpose"))
                for r in fetchall(cur)
            ]

    def count_guests(self, event_ids: Sequence[str]) -> dict[str, int]:
        if not event_ids:
            return {}

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT event_id, COUNT(*) AS total
                FROM guest_attendances
                WHERE event_id IN ({in_clause(event_ids)})
                GROUP BY event_id
                """,
                tuple(event_ids),
            )
            return {str(r["event_id"]): int(r["total"]) for r in fetchall(cur)}

    def get_decisions(
        self,
        event_ids: Sequence[str],
        member_filter: "MemberFilter",
        *,
        region_id: Optional[str] = None,
    ) -> Sequence[DecisionRecord]:
        if not event_ids:
            return []

        clauses = [f"s.event_id IN ({in_clause(event_ids)})"]
        params: list[object] = list(event_ids)
        if not member_filter.is_unrestricted or region_id:
            # Narrowed reports only count decisions made by in-scope members.
            scope_clause, scope_params = member_filter.sql("m")
            clauses.append(scope_clause)
            params.extend(scope_params)
            if region_id:
                clauses.append("m.region_id=%s")
                params.append(region_id)
            join = "JOIN members m ON m.member_id = s.member_id"
        else:
            join = ""

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT s.event_id, s.decision_type, s.member_id
                FROM salvations s
                {join}
                WHERE {" AND ".join(clauses)}
                """,
                tuple(params),
            )
            return [
                DecisionRecord(
                    event_id=str(r["event_id"]),
                    decision_type=DecisionType(r["decision_type"]),
                    member_id=r.get("member_id"),
                )
                for r in fetchall(cur)
            ]
