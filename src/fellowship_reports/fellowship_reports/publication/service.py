from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.constants import (
    DEFAULT_PUBLISHED_LIMIT,
    MSG_INSUFFICIENT_PERMISSIONS,
    MSG_MANAGER_ONLY,
    MSG_REPORT_NOT_AVAILABLE,
)
from ..core.exceptions import AuthorizationError, NotFoundError
from ..events.model import Event
from ..events.repository import EventRepository
from ..scope.model import ReportScope
from ..scope.service import ScopeResolver, is_leader
from .model import PublishedReport, ReportPublication
from .notifier import LoggingNotifier, PublicationNotifier
from .repository import PublicationRepository

logger = logging.getLogger(__name__)


class PublicationController:
    """Publish/unpublish workflow for event reports.

    UNPUBLISHED (initial) -> PUBLISHED -> UNPUBLISHED, repeatable. Only
    Fellowship Managers write; everyone else reads reports only once they
    are published.
    """

    def __init__(
        self,
        publications: PublicationRepository,
        events: EventRepository,
        scopes: ScopeResolver,
        *,
        notifier: Optional[PublicationNotifier] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._publications = publications
        self._events = events
        self._scopes = scopes
        self._notifier = notifier or LoggingNotifier()
        self._clock = clock

    def _require_manager(self, actor_id: str) -> None:
        if not self._scopes.resolve_scope(actor_id).is_manager:
            raise AuthorizationError(MSG_MANAGER_ONLY)

    def _require_event(self, event_id: str) -> Event:
        event = self._events.get_by_id(event_id)
        if event is None:
            raise NotFoundError("Event not found")
        return event

    def publish(self, event_id: str, actor_id: str) -> ReportPublication:
        """Publish (or re-publish, refreshing the timestamp) an event's report."""
        self._require_manager(actor_id)
        event = self._require_event(event_id)

        publication = self._publications.mark_published(event_id, publisher_id=actor_id, at=self._clock())
        logger.info("Report %s published by %s", event_id, actor_id)
        self._notify(self._notifier.report_published, event, publication)
        return publication

    def unpublish(self, event_id: str, actor_id: str) -> ReportPublication:
        self._require_manager(actor_id)
        event = self._require_event(event_id)

        publication = self._publications.mark_unpublished(event_id, at=self._clock())
        logger.info("Report %s unpublished by %s", event_id, actor_id)
        self._notify(self._notifier.report_unpublished, event, publication)
        return publication

    def get_status(self, event_id: str) -> dict:
        self._require_event(event_id)
        publication = self._publications.get(event_id) or ReportPublication.unpublished(event_id)
        return publication.to_status()

    def is_published(self, event_id: str) -> bool:
        publication = self._publications.get(event_id)
        return bool(publication and publication.is_published)

    def ensure_viewable(self, event_id: str, scope: ReportScope) -> None:
        """Gate a report before anything is computed.

        Managers always pass. For everyone else an unknown event looks the
        same as an unpublished one.
        """
        if scope.is_manager:
            return
        if not is_leader(scope):
            raise AuthorizationError(MSG_INSUFFICIENT_PERMISSIONS)
        if not self.is_published(event_id):
            raise AuthorizationError(MSG_REPORT_NOT_AVAILABLE)

    def list_published(self, scope: ReportScope, *, limit: int = DEFAULT_PUBLISHED_LIMIT) -> Sequence[PublishedReport]:
        if not is_leader(scope):
            raise AuthorizationError(MSG_INSUFFICIENT_PERMISSIONS)
        return self._publications.list_published(limit=limit)

    @staticmethod
    def _notify(callback, event: Event, publication: ReportPublication) -> None:
        # Fire-and-forget: a failed notification never undoes a transition.
        try:
            callback(event, publication)
        except Exception:
            logger.warning("Publication notifier failed for %s", event.event_id, exc_info=True)
