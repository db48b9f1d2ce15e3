from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import PublishedReport, ReportPublication


class PublicationRepository(Protocol):
    """Storage of report publication state, one row per event.

    Writes are single atomic upserts keyed by event id; concurrent writers
    resolve as last-writer-wins.
    """

    def get(self, event_id: str) -> Optional[ReportPublication]:
        raise NotImplementedError

    def mark_published(self, event_id: str, *, publisher_id: str, at: datetime) -> ReportPublication:
        raise NotImplementedError

    def mark_unpublished(self, event_id: str, *, at: datetime) -> ReportPublication:
        raise NotImplementedError

    def list_published(self, *, limit: int) -> Sequence[PublishedReport]:
        """Published reports, most recently published first."""

        raise NotImplementedError
