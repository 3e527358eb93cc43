# student_hub/services/analytics_service.py
import calendar
from collections import Counter
from typing import Dict, Iterable, List, Tuple

from pydantic import BaseModel

from student_hub.models.achievement import AchievementRecord, AchievementStatus
from student_hub.repositories.achievements import AchievementRepository

UNASSIGNED_DEPARTMENT = "Unassigned"


class EngagementPoint(BaseModel):
    name: str
    year: int
    month: int
    submissions: int


class DepartmentPoint(BaseModel):
    name: str
    achievements: int


class AnalyticsSummary(BaseModel):
    total_achievements: int
    status_counts: Dict[str, int]
    engagement: List[EngagementPoint]
    performance: List[DepartmentPoint]


def month_label(year: int, month: int) -> str:
    """Chart label such as "Dec '24" """
    return f"{calendar.month_abbr[month]} '{year % 100:02d}"


def engagement_by_month(records: Iterable[AchievementRecord]) -> List[EngagementPoint]:
    """
    Submissions per calendar month of ``submittedAt``.

    Ordered on the (year, month) key, never on the label, so Dec '24 comes
    before Jan '25. Records without a submission time are skipped.
    """
    counts: Counter = Counter()
    for record in records:
        if record.submitted_at is None:
            continue
        counts[(record.submitted_at.year, record.submitted_at.month)] += 1

    return [
        EngagementPoint(name=month_label(year, month), year=year, month=month, submissions=count)
        for (year, month), count in sorted(counts.items())
    ]


def performance_by_department(records: Iterable[AchievementRecord]) -> List[DepartmentPoint]:
    """Achievement count per department, ordered by department name"""
    counts: Counter = Counter(record.department or UNASSIGNED_DEPARTMENT for record in records)
    ordered: List[Tuple[str, int]] = sorted(counts.items(), key=lambda item: item[0].casefold())
    return [DepartmentPoint(name=name, achievements=count) for name, count in ordered]


def summarize(records: Iterable[AchievementRecord]) -> AnalyticsSummary:
    records = list(records)
    status_counts = {status.value: 0 for status in AchievementStatus}
    for record in records:
        status_counts[record.status.value] += 1
    return AnalyticsSummary(
        total_achievements=len(records),
        status_counts=status_counts,
        engagement=engagement_by_month(records),
        performance=performance_by_department(records),
    )


class AnalyticsService:

    def __init__(self, achievements: AchievementRepository):
        self.achievements = achievements

    async def get_dashboard(self) -> AnalyticsSummary:
        """
        Institution-wide engagement and department performance.

        Aggregates every achievement record; the charts are not scoped to
        the faculty member's class.
        """
        return summarize(self.achievements.all())
