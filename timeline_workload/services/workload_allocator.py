import logging
import math

from timeline_workload.domain.workload import (
    TeamWorkloadSample,
    WorkloadSample,
    classify_load,
)
from timeline_workload.utils.config import merge_config
from timeline_workload.utils.time_window import (
    TimeWindowError,
    contains,
    ensure_normalized,
    inclusive_day_span,
)

logger = logging.getLogger(__name__)


class WorkloadError(ValueError):
    """Exception raised for invalid workload requests."""

    pass


def allocate_workload(tasks, users, date, config=None):
    """
    Compute each user's allocated hours and utilization on one date.

    Every supplied user gets a sample, including users without work that
    day. Tasks assigned to users outside ``users`` are ignored.

    Args:
        tasks: Iterable of Task objects with their assignments
        users: Iterable of User objects
        date: The calendar day, already normalized to midnight
        config: Optional configuration overrides

    Returns:
        dict: WorkloadSample keyed by user id

    Raises:
        WorkloadError: If ``date`` is not a normalized calendar day
    """
    try:
        day = ensure_normalized(date)
    except TimeWindowError as e:
        raise WorkloadError(f"Cannot allocate workload: {e}") from e

    config = merge_config(config)
    workload_config = config["workload"]
    default_hours = workload_config["default_task_hours"]
    default_capacity = workload_config["default_capacity_hours"]

    # Index eligible task shares by assignee once, then read per user
    shares_by_user = {}
    for task in tasks:
        if not task.assignees or not is_active_on(task, day):
            continue
        hours = daily_hours(task, default_hours)
        for user_id in task.assignees:
            shares_by_user.setdefault(user_id, []).append((task.id, hours))

    samples = {}
    for user in users:
        shares = shares_by_user.get(user.id, [])
        allocated = sum(hours for _, hours in shares)
        capacity = user.capacity_hours(default_capacity)
        load = allocated / capacity * 100

        samples[user.id] = WorkloadSample(
            user_id=user.id,
            date=day,
            active_task_count=len(shares),
            allocated_hours=allocated,
            utilization_percent=utilization_percent(allocated, capacity),
            capacity_hours=capacity,
            task_ids=tuple(sorted((task_id for task_id, _ in shares), key=str)),
            level=classify_load(load, config["load_levels"]),
        )

    logger.debug(
        "Allocated workload for %d users on %s (%d with active tasks)",
        len(samples),
        day,
        sum(1 for s in samples.values() if s.active_task_count),
    )
    return samples


def is_active_on(task, day):
    """A task occupies its assignees on every day of its inclusive window."""
    return task.has_schedule and contains(task.start_date, task.end_date, day)


def daily_hours(task, default_hours=4.0):
    """
    Hours per day a single assignee spends on ``task``.

    The estimate (or ``default_hours`` when the task has none) is spread
    evenly over the inclusive window, then capped by the task's
    ``max_daily_hours`` when set.
    """
    span = max(1, inclusive_day_span(task.start_date, task.end_date))
    estimate = task.estimated_hours if task.estimated_hours is not None else default_hours
    hours = estimate / span
    if task.max_daily_hours is not None:
        hours = min(hours, task.max_daily_hours)
    return hours


def utilization_percent(allocated_hours, capacity_hours):
    """Allocated hours as a whole percentage of capacity, rounded half up and clamped to [0, 100]."""
    if capacity_hours <= 0:
        return 0
    percent = math.floor(allocated_hours / capacity_hours * 100 + 0.5)
    return max(0, min(100, percent))


def aggregate_team_workload(samples, date=None, config=None):
    """
    Aggregate per-user samples for one date into a team figure.

    Only users with allocated hours count toward the average and peak.

    Args:
        samples: Dict of WorkloadSample keyed by user id (or an iterable)
        date: Date of the aggregate when ``samples`` is empty; left None
            when nothing supplies one
        config: Optional configuration overrides

    Returns:
        TeamWorkloadSample: Average and peak utilization of the active users
    """
    config = merge_config(config)
    calendar_config = config["calendar"]

    values = list(samples.values()) if isinstance(samples, dict) else list(samples)
    if date is None and values:
        date = values[0].date

    working = [sample for sample in values if sample.allocated_hours > 0]
    if not working:
        return TeamWorkloadSample(date=date)

    utilizations = [sample.utilization_percent for sample in working]
    average = sum(utilizations) / len(utilizations)
    peak = max(utilizations)
    peak_load = max(sample.load_percent for sample in working)
    overloaded = sum(1 for sample in working if sample.is_overloaded)

    is_high_risk = (
        peak_load > calendar_config["high_risk_peak_percent"]
        or overloaded > calendar_config["high_risk_overloaded_users"]
    )
    is_bottleneck = (
        not is_high_risk and average > calendar_config["bottleneck_average_percent"]
    )

    return TeamWorkloadSample(
        date=date,
        average_utilization_percent=average,
        peak_utilization_percent=peak,
        sample_user_count=len(working),
        overloaded_user_count=overloaded,
        peak_load_percent=peak_load,
        is_bottleneck=is_bottleneck,
        is_high_risk=is_high_risk,
    )
