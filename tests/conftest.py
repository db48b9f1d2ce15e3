from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, time, timedelta
from typing import Optional, Sequence

import pytest

from src.fellowship_reports.fellowship_reports.container import Container
from src.fellowship_reports.fellowship_reports.core.enums import DecisionType, Gender, MemberRole
from src.fellowship_reports.fellowship_reports.events.model import (
    AttendanceRecord,
    DecisionRecord,
    Event,
    GuestAttendance,
)
from src.fellowship_reports.fellowship_reports.members.model import Family, Headships, Member, MinistryTeam, Region
from src.fellowship_reports.fellowship_reports.publication.model import PublishedReport, ReportPublication
from src.fellowship_reports.fellowship_reports.publication.service import PublicationController
from src.fellowship_reports.fellowship_reports.reports.access import ReportAccessService
from src.fellowship_reports.fellowship_reports.reports.service import ReportService
from src.fellowship_reports.fellowship_reports.scope.service import ScopeResolver

FIXED_NOW = datetime(2026, 3, 10, 20, 0, 0)


class InMemoryMembers:
    def __init__(self):
        self.members: dict[str, Member] = {}
        self.regions_headed: dict[str, Region] = {}
        self.families_headed: dict[str, list[Family]] = {}
        self.teams_led: dict[str, list[MinistryTeam]] = {}

    def add(self, member: Member) -> Member:
        self.members[member.member_id] = member
        return member

    def get_by_id(self, member_id: str) -> Optional[Member]:
        return self.members.get(member_id)

    def get_headships(self, member_id: str) -> Optional[Headships]:
        member = self.members.get(member_id)
        if member is None:
            return None
        return Headships(
            member=member,
            region=self.regions_headed.get(member_id),
            families=tuple(self.families_headed.get(member_id, [])),
            teams=tuple(self.teams_led.get(member_id, [])),
        )

    def count_members(self, member_filter) -> int:
        return sum(1 for m in self.members.values() if member_filter.matches(m))


class InMemoryEvents:
    def __init__(self, members: InMemoryMembers):
        self._members = members
        self.events: dict[str, Event] = {}
        self.attendances: list[AttendanceRecord] = []
        self.guests: list[GuestAttendance] = []
        self.decisions: list[DecisionRecord] = []
        self.filters_seen: list = []

    def add_event(self, event: Event) -> Event:
        self.events[event.event_id] = event
        return event

    def attend(self, event_id: str, *member_ids: str) -> None:
        for mid in member_ids:
            self.attendances.append(AttendanceRecord(event_id=event_id, member=self._members.members[mid]))

    def get_by_id(self, event_id: str) -> Optional[Event]:
        return self.events.get(event_id)

    def list_between(self, *, start_date: date, end_date: date, event_type: Optional[str] = None) -> Sequence[Event]:
        items = [
            e
            for e in self.events.values()
            if start_date <= e.event_date <= end_date and (not event_type or e.event_type == event_type)
        ]
        return sorted(items, key=lambda e: e.sort_key)

    def list_previous_of_type(self, event: Event, *, limit: int) -> Sequence[Event]:
        items = [
            e
            for e in self.events.values()
            if e.event_type == event.event_type
            and e.event_id != event.event_id
            and (e.event_date, e.start_time) < (event.event_date, event.start_time)
        ]
        items.sort(key=lambda e: e.sort_key, reverse=True)
        return items[:limit]

    def list_recent(self, *, limit: int) -> Sequence[Event]:
        return sorted(self.events.values(), key=lambda e: e.sort_key, reverse=True)[:limit]

    def count_events(self) -> int:
        return len(self.events)

    def get_attendances(self, event_ids, member_filter, *, region_id=None) -> Sequence[AttendanceRecord]:
        self.filters_seen.append(member_filter)
        return [
            a
            for a in self.attendances
            if a.event_id in event_ids
            and member_filter.matches(a.member)
            and (not region_id or a.member.region_id == region_id)
        ]

    def count_attendances(self, event_ids, member_filter) -> dict[str, int]:
        out: dict[str, int] = {}
        for a in self.get_attendances(event_ids, member_filter):
            out[a.event_id] = out.get(a.event_id, 0) + 1
        return out

    def get_guests(self, event_ids) -> Sequence[GuestAttendance]:
        return [g for g in self.guests if g.event_id in event_ids]

    def count_guests(self, event_ids) -> dict[str, int]:
        out: dict[str, int] = {}
        for g in self.get_guests(event_ids):
            out[g.event_id] = out.get(g.event_id, 0) + 1
        return out

    def get_decisions(self, event_ids, member_filter, *, region_id=None) -> Sequence[DecisionRecord]:
        out = []
        for d in self.decisions:
            if d.event_id not in event_ids:
                continue
            if member_filter.is_unrestricted and not region_id:
                out.append(d)
                continue
            member = self._members.members.get(d.member_id) if d.member_id else None
            if member is None or not member_filter.matches(member):
                continue
            if region_id and member.region_id != region_id:
                continue
            out.append(d)
        return out


class InMemoryPublications:
    def __init__(self, members: InMemoryMembers, events: InMemoryEvents):
        self._members = members
        self._events = events
        self.rows: dict[str, ReportPublication] = {}

    def get(self, event_id: str) -> Optional[ReportPublication]:
        return self.rows.get(event_id)

    def mark_published(self, event_id: str, *, publisher_id: str, at: datetime) -> ReportPublication:
        publisher = self._members.members.get(publisher_id)
        self.rows[event_id] = ReportPublication(
            event_id=event_id,
            is_published=True,
            published_at=at,
            publisher_id=publisher_id,
            publisher_name=publisher.full_name if publisher else None,
            updated_at=at,
        )
        return self.rows[event_id]

    def mark_unpublished(self, event_id: str, *, at: datetime) -> ReportPublication:
        self.rows[event_id] = ReportPublication(event_id=event_id, is_published=False, updated_at=at)
        return self.rows[event_id]

    def list_published(self, *, limit: int) -> Sequence[PublishedReport]:
        items = [p for p in self.rows.values() if p.is_published]
        items.sort(key=lambda p: p.published_at, reverse=True)
        out = []
        for p in items[:limit]:
            e = self._events.events[p.event_id]
            out.append(
                PublishedReport(
                    event_id=e.event_id,
                    event_name=e.name,
                    event_type=e.event_type,
                    event_date=e.event_date,
                    publication=p,
                )
            )
        return out


class TickingClock:
    """Returns FIXED_NOW, then one minute later on every call."""

    def __init__(self, start: datetime = FIXED_NOW):
        self._now = start

    def __call__(self) -> datetime:
        current = self._now
        self._now = self._now + timedelta(minutes=1)
        return current


def _member(member_id: str, name: str, gender: Gender, role: MemberRole = MemberRole.MEMBER, **kwargs) -> Member:
    return Member(member_id=member_id, full_name=name, role=role, gender=gender, **kwargs)


class World:
    """A small fellowship: two regions, three families, two teams, four events."""

    def __init__(self):
        self.members = InMemoryMembers()
        self.events = InMemoryEvents(self.members)
        self.publications = InMemoryPublications(self.members, self.events)

        central = Region("R1", "Central")
        kikoni = Region("R2", "Kikoni")
        alpha = Family("F1", "Alpha", is_active=True)
        beta = Family("F2", "Beta", is_active=False)
        ushering = MinistryTeam("T1", "Ushering")
        media = MinistryTeam("T2", "Media")

        add = self.members.add
        add(_member("mgr", "Grace Manager", Gender.FEMALE, role=MemberRole.FELLOWSHIP_MANAGER))
        add(_member("rh1", "Robert Head", Gender.MALE, region_id="R1", region_name="Central"))
        add(_member("fh1", "Faith Head", Gender.FEMALE, region_id="R1", region_name="Central"))
        add(_member("tl1", "Tom Leader", Gender.MALE, region_id="R2", region_name="Kikoni"))
        add(_member("plain", "Paul Plain", Gender.MALE, region_id="R2", region_name="Kikoni"))

        add(_member(
            "a1", "Alice", Gender.FEMALE, region_id="R1", region_name="Central",
            college="CEDAT", course="BSc Civil Engineering", year_of_study=2,
            tags=("PENDING_FIRST_ATTENDANCE",),
            family_ids=("F1",), family_names=("Alpha",), team_ids=("T1",), team_names=("Ushering",),
        ))
        add(_member(
            "a2", "Brian", Gender.MALE, region_id="R1", region_name="Central",
            college="CoCIS", course="BSc Computer Science", year_of_study=3,
            tags=("FINALIST",),
            family_ids=("F2",), family_names=("Beta",),
        ))
        add(_member(
            "a3", "Cedric", Gender.MALE, region_id="R2", region_name="Kikoni",
            tags=("ALUMNI",),
            team_ids=("T2",), team_names=("Media",),
        ))
        add(_member(
            "a4", "Diana", Gender.FEMALE, region_id="R2", region_name="Kikoni",
            college="CoCIS", course="BSc Computer Science", year_of_study=1,
            tags=("CHECK_IN_VOLUNTEER",),
            family_ids=("F1",), family_names=("Alpha",), team_ids=("T1",), team_names=("Ushering",),
        ))

        self.members.regions_headed["rh1"] = central
        self.members.families_headed["fh1"] = [alpha, beta]
        self.members.teams_led["tl1"] = [ushering, media]
        self.kikoni = kikoni

        ev = self.events.add_event
        ev(Event("e1", "Tuesday Fellowship 1", "TUESDAY_FELLOWSHIP", date(2026, 2, 17), time(17, 0), time(20, 0)))
        ev(Event("e2", "Tuesday Fellowship 2", "TUESDAY_FELLOWSHIP", date(2026, 2, 24), time(17, 0), time(20, 0)))
        ev(Event("e3", "Tuesday Fellowship 3", "TUESDAY_FELLOWSHIP", date(2026, 3, 3), time(17, 0), time(20, 0)))
        ev(Event("e4", "Thursday Phaneroo", "THURSDAY_PHANEROO", date(2026, 2, 26), time(18, 0), time(21, 0)))

        self.events.attend("e1", "a1")
        self.events.attend("e2", "a1", "a2", "a3")
        self.events.attend("e3", "a1", "a2", "a3", "a4")
        self.events.attend("e4", "a4")
        self.events.guests.append(GuestAttendance("e3", "Visitor One", "Invited by a friend"))
        self.events.decisions.append(DecisionRecord("e3", DecisionType.SALVATION, member_id="a3"))
        self.events.decisions.append(DecisionRecord("e3", DecisionType.PRAYER_REQUEST, member_id=None))

    def member(self, member_id: str) -> Member:
        return self.members.members[member_id]

    def replace_member(self, member_id: str, **changes) -> None:
        self.members.members[member_id] = replace(self.members.members[member_id], **changes)


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def world() -> World:
    return World()


@pytest.fixture
def scope_resolver(world) -> ScopeResolver:
    return ScopeResolver(world.members)


@pytest.fixture
def report_service(world) -> ReportService:
    return ReportService(world.events, world.members, trend_window=5, clock=lambda: FIXED_NOW)


@pytest.fixture
def publication_controller(world, scope_resolver) -> PublicationController:
    return PublicationController(world.publications, world.events, scope_resolver, clock=TickingClock())


@pytest.fixture
def report_access(scope_resolver, publication_controller, report_service) -> ReportAccessService:
    return ReportAccessService(scope_resolver, publication_controller, report_service)


@pytest.fixture
def container(world, scope_resolver, report_service, publication_controller, report_access) -> Container:
    return Container(
        conn=None,
        members_repo=world.members,
        events_repo=world.events,
        publications_repo=world.publications,
        scope_resolver=scope_resolver,
        report_service=report_service,
        publication_controller=publication_controller,
        report_access=report_access,
    )
