"""CSV rendering of a computed report.

Renderers only format; every number comes from the ``ReportResult``.
"""

from __future__ import annotations

import csv
import io

from ..common.numbers import pct
from .model import ReportResult

FIELDNAMES = ["section", "category", "count", "share"]

# Breakdowns whose shares are taken over attendees rather than summing to 100%.
_MULTI_VALUED = {"family", "team", "tag"}


def _summary_rows(result: ReportResult) -> list[dict]:
    s = result.stats
    rows = [
        {"section": "summary", "category": "Total Attendance", "count": s.total_attendance, "share": ""},
        {"section": "summary", "category": "Members", "count": s.member_count, "share": pct(s.member_count, s.total_attendance)},
        {"section": "summary", "category": "Guests", "count": s.guest_count, "share": pct(s.guest_count, s.total_attendance)},
        {"section": "summary", "category": "First Timers", "count": s.first_timers_count, "share": s.first_timers_share},
    ]
    if s.total_events is not None:
        rows += [
            {"section": "summary", "category": "Total Events", "count": s.total_events, "share": ""},
            {"section": "summary", "category": "Average Attendance", "count": s.average_attendance, "share": ""},
            {"section": "summary", "category": "Unique Members", "count": s.unique_members, "share": ""},
        ]
    return rows


def report_rows(result: ReportResult) -> list[dict]:
    rows = _summary_rows(result)
    for section, counts in result.stats.breakdowns().items():
        total = result.stats.member_count if section in _MULTI_VALUED else sum(counts.values())
        for category, count in counts.items():
            rows.append({"section": section, "category": category, "count": count, "share": pct(count, total)})
    return rows


def report_to_csv(result: ReportResult) -> bytes:
    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=FIELDNAMES)
    writer.writeheader()
    for row in report_rows(result):
        writer.writerow(row)
    # Excel opens UTF-8 CSV correctly only with a BOM.
    return out.getvalue().encode("utf-8-sig")
