from __future__ import annotations

from typing import Sequence

from ..core.constants import MSG_MANAGER_ONLY
from ..core.exceptions import AuthorizationError
from ..publication.model import PublishedReport, ReportPublication
from ..publication.service import PublicationController
from ..scope.model import ReportScope
from ..scope.service import ScopeResolver, describe_scope, is_leader
from .model import EventReportRequest, RangeReportRequest, ReportResult, TrendReport
from .service import ReportService


class ReportAccessService:
    """Entry point for report requests coming from the HTTP layer.

    Order per request: resolve the viewer's scope, pass the publication
    gate, then aggregate. The viewer id is always passed in explicitly.
    """

    def __init__(self, scopes: ScopeResolver, publications: PublicationController, reports: ReportService):
        self._scopes = scopes
        self._publications = publications
        self._reports = reports

    def _manager_scope(self, viewer_id: str) -> ReportScope:
        scope = self._scopes.resolve_scope(viewer_id)
        if not scope.is_manager:
            raise AuthorizationError(MSG_MANAGER_ONLY)
        return scope

    def _trend_visibility(self, scope: ReportScope):
        # Non-managers only see earlier events whose reports are published.
        return None if scope.is_manager else self._publications.is_published

    def scope_for(self, viewer_id: str) -> dict:
        scope = self._scopes.resolve_scope(viewer_id)
        return {
            **scope.to_dict(),
            "isLeader": is_leader(scope),
            "displayName": describe_scope(scope),
        }

    def event_report(self, viewer_id: str, event_id: str) -> ReportResult:
        scope = self._scopes.resolve_scope(viewer_id)
        self._publications.ensure_viewable(event_id, scope)
        return self._reports.aggregate(
            EventReportRequest(event_id=event_id),
            scope,
            visible=self._trend_visibility(scope),
        )

    def compare(self, viewer_id: str, event_id: str) -> TrendReport:
        scope = self._scopes.resolve_scope(viewer_id)
        self._publications.ensure_viewable(event_id, scope)
        return self._reports.compare(event_id, scope, visible=self._trend_visibility(scope))

    def custom_report(self, viewer_id: str, request: RangeReportRequest) -> ReportResult:
        return self._reports.aggregate(request, self._manager_scope(viewer_id))

    def dashboard(self, viewer_id: str) -> dict:
        return self._reports.dashboard(self._manager_scope(viewer_id))

    def status(self, viewer_id: str, event_id: str) -> dict:
        self._manager_scope(viewer_id)
        return self._publications.get_status(event_id)

    def publish(self, viewer_id: str, event_id: str) -> ReportPublication:
        return self._publications.publish(event_id, viewer_id)

    def unpublish(self, viewer_id: str, event_id: str) -> ReportPublication:
        return self._publications.unpublish(event_id, viewer_id)

    def published(self, viewer_id: str) -> Sequence[PublishedReport]:
        scope = self._scopes.resolve_scope(viewer_id)
        return self._publications.list_published(scope)
