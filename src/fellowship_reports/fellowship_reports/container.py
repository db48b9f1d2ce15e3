from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .database.connection import DBConfig, DatabaseConnection
from .events.mysql_event_repository import MySQLEventRepository
from .members.mysql_member_repository import MySQLMemberRepository
from .publication.mysql_publication_repository import MySQLPublicationRepository
from .publication.notifier import PublicationNotifier
from .publication.service import PublicationController
from .reports.access import ReportAccessService
from .reports.service import ReportService
from .scope.service import ScopeResolver


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    members_repo: MySQLMemberRepository
    events_repo: MySQLEventRepository
    publications_repo: MySQLPublicationRepository

    scope_resolver: ScopeResolver
    report_service: ReportService
    publication_controller: PublicationController
    report_access: ReportAccessService


def build_container(
    *,
    db_config: dict,
    trend_window: int = 5,
    notifier: Optional[PublicationNotifier] = None,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    members_repo = MySQLMemberRepository(conn)
    events_repo = MySQLEventRepository(conn)
    publications_repo = MySQLPublicationRepository(conn)

    scope_resolver = ScopeResolver(members_repo)
    report_service = ReportService(events_repo, members_repo, trend_window=trend_window)
    publication_controller = PublicationController(
        publications_repo,
        events_repo,
        scope_resolver,
        notifier=notifier,
    )
    report_access = ReportAccessService(scope_resolver, publication_controller, report_service)

    return Container(
        conn=conn,
        members_repo=members_repo,
        events_repo=events_repo,
        publications_repo=publications_repo,
        scope_resolver=scope_resolver,
        report_service=report_service,
        publication_controller=publication_controller,
        report_access=report_access,
    )
