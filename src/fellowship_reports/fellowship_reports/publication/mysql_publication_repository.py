from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import PublishedReport, ReportPublication
from .repository import PublicationRepository

_SELECT = """
    SELECT er.event_id, er.is_published, er.published_at, er.published_by, er.updated_at,
           m.full_name AS publisher_name
    FROM event_reports er
    LEFT JOIN members m ON m.member_id = er.published_by
"""


def _row_to_publication(r: dict[str, Any]) -> ReportPublication:
    return ReportPublication(
        event_id=str(r["event_id"]),
        is_published=bool(r["is_published"]),
        published_at=r.get("published_at"),
        publisher_id=r.get("published_by"),
        publisher_name=r.get("publisher_name"),
        updated_at=r.get("updated_at"),
    )


class MySQLPublicationRepository(PublicationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, event_id: str) -> Optional[ReportPublication]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE er.event_id=%s", (event_id,))
            r = fetchone(cur)
            return _row_to_publication(r) if r else None

    def mark_published(self, event_id: str, *, publisher_id: str, at: datetime) -> ReportPublication:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO event_reports(event_id, is_published, published_at, published_by, updated_at)
                VALUES(%s, 1, %s, %s, %s)
                ON DUPLICATE KEY UPDATE
                    is_published=1,
                    published_at=VALUES(published_at),
                    published_by=VALUES(published_by),
                    updated_at=VALUES(updated_at)
                """,
                (event_id, at, publisher_id, at),
            )
            cur.execute(f"{_SELECT} WHERE er.event_id=%s", (event_id,))
            return _row_to_publication(fetchone(cur))

    def mark_unpublished(self, event_id: str, *, at: datetime) -> ReportPublication:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO event_reports(event_id, is_published, published_at, published_by, updated_at)
                VALUES(%s, 0, NULL, NULL, %s)
                ON DUPLICATE KEY UPDATE
                    is_published=0,
                    published_at=NULL,
                    published_by=NULL,
                    updated_at=VALUES(updated_at)
                """,
                (event_id, at),
            )
            cur.execute(f"{_SELECT} WHERE er.event_id=%s", (event_id,))
            return _row_to_publication(fetchone(cur))

    def list_published(self, *, limit: int) -> Sequence[PublishedReport]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT er.event_id, er.is_published, er.published_at, er.published_by, er.updated_at,
                       m.full_name AS publisher_name,
                       e.name AS event_name, e.event_type, e.event_date
                FROM event_reports er
                JOIN events e ON e.event_id = er.event_id
                LEFT JOIN members m ON m.member_id = er.published_by
                WHERE er.is_published = 1
                ORDER BY er.published_at DESC
                LIMIT %s
                """,
                (int(limit),),
            )
            return [
                PublishedReport(
                    event_id=str(r["event_id"]),
                    event_name=r["event_name"],
                    event_type=r["event_type"],
                    event_date=r["event_date"],
                    publication=_row_to_publication(r),
                )
                for r in fetchall(cur)
            ]
