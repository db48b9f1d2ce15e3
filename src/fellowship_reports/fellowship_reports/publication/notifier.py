from __future__ import annotations

import logging
from typing import Protocol

from ..events.model import Event
from .model import ReportPublication

logger = logging.getLogger(__name__)


class PublicationNotifier(Protocol):
    """Told about publish/unpublish transitions (e.g. to email leaders)."""

    def report_published(self, event: Event, publication: ReportPublication) -> None:
        raise NotImplementedError

    def report_unpublished(self, event: Event, publication: ReportPublication) -> None:
        raise NotImplementedError


class LoggingNotifier:
    """Default notifier: records transitions in the application log."""

    def report_published(self, event: Event, publication: ReportPublication) -> None:
        logger.info("Report for %s (%s) dispatched to leaders", event.name, event.event_id)

    def report_unpublished(self, event: Event, publication: ReportPublication) -> None:
        logger.info("Report for %s (%s) withdrawn from leaders", event.name, event.event_id)
