from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class ReportPublication:
    """Publication row of one event's report.

    Created on first publish and kept afterwards; after a revoke
    ``is_published`` is False and the publisher fields are cleared, while
    ``updated_at`` records when the last transition happened.
    """

    event_id: str
    is_published: bool = False
    published_at: Optional[datetime] = None
    publisher_id: Optional[str] = None
    publisher_name: Optional[str] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def unpublished(cls, event_id: str) -> "ReportPublication":
        return cls(event_id=event_id)

    def to_status(self) -> dict:
        publisher = None
        if self.is_published and self.publisher_id:
            publisher = {"id": self.publisher_id, "fullName": self.publisher_name}
        return {
            "isPublished": self.is_published,
            "publishedAt": self.published_at.isoformat() if self.is_published and self.published_at else None,
            "publisher": publisher,
        }


@dataclass(frozen=True)
class PublishedReport:
    """Row of the published-reports feed shown to leaders."""

    event_id: str
    event_name: str
    event_type: str
    event_date: date
    publication: ReportPublication

    def to_dict(self) -> dict:
        return {
            "eventId": self.event_id,
            "event": {
                "id": self.event_id,
                "name": self.event_name,
                "type": self.event_type,
                "date": self.event_date.isoformat(),
            },
            **self.publication.to_status(),
        }
