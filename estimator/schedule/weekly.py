# estimator/schedule/weekly.py
from typing import List, Tuple

from estimator.service.models import ScheduleWeek, TimelinePlan


def week_window(week: int) -> Tuple[int, int]:
    return (week - 1) * 7 + 1, week * 7


def project_schedule(timeline: TimelinePlan) -> Tuple[ScheduleWeek, ...]:
    """Week-by-week view of the phase plan. Weeks with no active phase are skipped."""
    weeks: List[ScheduleWeek] = []
    for w in range(1, timeline.total_weeks + 1):
        start, end = week_window(w)
        active = [p for p in timeline.phases if p.start_day <= end and p.end_day >= start]
        if not active:
            continue
        weeks.append(ScheduleWeek(
            week=w,
            activities=tuple(p.name for p in active),
            phase=active[-1].name,
            workers_needed=max(p.workers for p in active),
        ))
    return tuple(weeks)
