"""Example: use the service layer directly (no Flask).

Prints a viewer's scope label and, if they may see it, the headline numbers
of one event report.
"""

import importlib
import sys

from config import get_settings_module

from src.fellowship_reports.fellowship_reports.container import build_container
from src.fellowship_reports.fellowship_reports.scope.service import describe_scope


def main(viewer_id: str, event_id: str) -> None:
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    scope = container.scope_resolver.resolve_scope(viewer_id)
    print("Scope:", describe_scope(scope))

    result = container.report_access.event_report(viewer_id, event_id)
    stats = result.stats
    print(f"Total {stats.total_attendance} (members {stats.member_count}, guests {stats.guest_count})")
    if result.trend and result.trend.comparison:
        print("Change vs previous:", result.trend.comparison.to_dict())


if __name__ == "__main__":
    main(sys.argv[1], sys.argv[2])
