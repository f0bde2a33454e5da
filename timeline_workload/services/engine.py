import logging

from timeline_workload.domain.report import ProjectReport
from timeline_workload.domain.workload import DailyWorkload, WorkloadPeriodSummary
from timeline_workload.services.timeline_analyzer import analyze_timeline
from timeline_workload.services.workload_allocator import (
    aggregate_team_workload,
    allocate_workload,
)
from timeline_workload.utils.config import merge_config
from timeline_workload.utils.graph import DependencyGraph
from timeline_workload.utils.time_window import (
    TimeWindowError,
    date_range,
    ensure_normalized,
    inclusive_day_span,
)

logger = logging.getLogger(__name__)


class EngineError(ValueError):
    """Exception raised for invalid engine requests."""

    pass


class TimelineWorkloadEngine:
    """
    Entry point for the presentation layer.

    Composes the timeline analyzer and the workload allocator per project
    and date range. The engine only holds its configuration; every call
    works on the snapshot it is given, so one instance can serve
    concurrent requests.
    """

    def __init__(self, config=None):
        self._config = merge_config(config)

    @property
    def config(self):
        return merge_config(self._config)

    def analyze_timeline(self, tasks, project_status, now):
        return analyze_timeline(tasks, project_status, now, config=self._config)

    def allocate_workload(self, tasks, users, date):
        return allocate_workload(tasks, users, date, config=self._config)

    def aggregate_team_workload(self, samples, date=None):
        return aggregate_team_workload(samples, date=date, config=self._config)

    def workload_calendar(self, tasks, users, start_date, end_date):
        """
        Build the workload grid for every day of an inclusive date range.

        Args:
            tasks: Tasks with their assignments
            users: Users to show in the grid
            start_date: First day of the range
            end_date: Last day of the range

        Returns:
            list: One DailyWorkload per day

        Raises:
            EngineError: If the range is inverted or its bounds are not normalized
        """
        try:
            start = ensure_normalized(start_date)
            end = ensure_normalized(end_date)
        except TimeWindowError as e:
            raise EngineError(f"Invalid calendar range: {e}") from e
        if start > end:
            raise EngineError(f"Calendar range starts after it ends: {start} > {end}")

        tasks = list(tasks)
        users = list(users)

        calendar = []
        for day in date_range(start, end):
            samples = self.allocate_workload(tasks, users, day)
            team = self.aggregate_team_workload(samples, date=day)
            calendar.append(DailyWorkload(date=day, samples=samples, team=team))

        logger.debug(
            "Built workload calendar %s -> %s for %d users", start, end, len(users)
        )
        return calendar

    def summarize_calendar(self, days):
        """
        Summarize a run of calendar days the way the month view does.

        Average utilization is taken over days on which somebody works.
        A high-risk day is never also counted as a bottleneck day.
        """
        days = list(days)
        if not days:
            raise EngineError("Cannot summarize an empty calendar")

        task_ids = set()
        max_daily_tasks = 0
        active_averages = []
        bottleneck_days = 0
        high_risk_days = 0

        for day in days:
            day_task_ids = day.active_task_ids
            task_ids.update(day_task_ids)
            max_daily_tasks = max(max_daily_tasks, len(day_task_ids))

            if day.team.sample_user_count:
                active_averages.append(day.team.average_utilization_percent)
            if day.team.is_high_risk:
                high_risk_days += 1
            elif day.team.is_bottleneck:
                bottleneck_days += 1

        average = sum(active_averages) / len(active_averages) if active_averages else 0.0

        return WorkloadPeriodSummary(
            start_date=days[0].date,
            end_date=days[-1].date,
            total_tasks=len(task_ids),
            max_daily_tasks=max_daily_tasks,
            average_utilization_percent=average,
            bottleneck_days=bottleneck_days,
            high_risk_days=high_risk_days,
            active_days=len(active_averages),
        )

    def analyze_project(
        self, tasks, users, project_status, now, start_date=None, end_date=None
    ):
        """
        Analyze a project's timeline and its team workload in one call.

        The calendar range defaults to the planned window; a missing bound
        is taken from it. When no range can be determined the calendar is
        left empty.

        Args:
            tasks: Tasks of the project
            users: Users whose workload should be shown
            project_status: Status of the project
            now: Status date
            start_date: Optional first calendar day
            end_date: Optional last calendar day

        Returns:
            ProjectReport: Analysis, calendar and calendar summary
        """
        tasks = list(tasks)
        users = list(users)
        analysis = self.analyze_timeline(tasks, project_status, now)

        start = start_date if start_date is not None else analysis.planned_start_date
        end = end_date if end_date is not None else analysis.planned_end_date
        if start is None or end is None:
            logger.info("No calendar range for project, returning timeline only")
            return ProjectReport(analysis=analysis)
        if start_date is None and end_date is None and start > end:
            # Planned window can be inverted when tasks are
            logger.info("Planned window %s -> %s is inverted, skipping calendar", start, end)
            return ProjectReport(analysis=analysis)

        calendar = self.workload_calendar(tasks, users, start, end)
        return ProjectReport(
            analysis=analysis,
            calendar=tuple(calendar),
            summary=self.summarize_calendar(calendar),
        )

    def dependency_critical_path(self, tasks):
        """
        Precedence-aware critical path for tasks that declare dependencies.

        Durations are the inclusive scheduled spans; unscheduled tasks count
        as zero days.
        """
        tasks = list(tasks)
        graph = DependencyGraph.from_tasks(tasks)
        durations = {
            task.id: max(1, inclusive_day_span(task.start_date, task.end_date))
            if task.has_schedule
            else 0
            for task in tasks
        }
        return graph.critical_path(durations)
