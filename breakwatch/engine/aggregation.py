"""Report aggregation for breakwatch.

Sums paired break time per user, decides who makes it into the report and
orders the result.
"""

import math
from typing import List, Mapping

from breakwatch.models.constants import MS_PER_MINUTE, UNKNOWN_SITE_NAME, UNKNOWN_USER_NAME
from breakwatch.models.report import UserReport


def format_duration(duration_ms: int) -> str:
    """Format a duration as whole hours and minutes.

    Minutes are rounded to the nearest minute (halves round up).

    Examples:
        0 -> "0m", 59000 -> "1m", 3600000 -> "1h 0m", 5400000 -> "1h 30m"
    """
    total_minutes = int(math.floor(max(0, duration_ms) / MS_PER_MINUTE + 0.5))
    hours, minutes = divmod(total_minutes, 60)
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def build_user_report(result) -> UserReport:
    """Build a UserReport from one user's PairingResult."""
    total_ms = sum(pair.duration_ms for pair in result.pairs)
    first_pair = result.pairs[0] if result.pairs else None
    first_event = result.events[0] if result.events else None

    user_name = (first_pair.user_name if first_pair else None) or (first_event.user_name if first_event else None)
    site_name = (first_pair.site_name if first_pair else None) or (first_event.site_name if first_event else None)

    return UserReport(
        user_id=result.user_id,
        user_name=user_name or UNKNOWN_USER_NAME,
        site_name=site_name or UNKNOWN_SITE_NAME,
        total_duration_ms=total_ms,
        total_duration_label=format_duration(total_ms),
        pairs=result.pairs,
        violations=result.violations,
    )


def meets_threshold(report: UserReport, threshold_minutes: float) -> bool:
    """A user is reported if their break time reaches the threshold or they have any violation."""
    return report.total_duration_ms >= threshold_minutes * MS_PER_MINUTE or len(report.violations) > 0


def _report_sort_key(report: UserReport) -> tuple:
    # Longest total first, then most violations
    return (-report.total_duration_ms, -len(report.violations))


def aggregate_reports(results: Mapping[str, object], threshold_minutes: float) -> List[UserReport]:
    """Aggregate per-user pairing results into the ordered report list.

    Args:
        results: user_id -> PairingResult, in grouping order
        threshold_minutes: Minimum total break time for a user without violations

    Returns:
        UserReports sorted by total duration descending, then violation count
        descending; remaining ties keep grouping order
    """
    reports = [build_user_report(result) for result in results.values()]
    included = [report for report in reports if meets_threshold(report, threshold_minutes)]
    return sorted(included, key=_report_sort_key)
