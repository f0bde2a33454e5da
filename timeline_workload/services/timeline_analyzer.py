import logging
import math
from fractions import Fraction

from timeline_workload.domain.analysis import (
    DelayBreakdown,
    DelayFactor,
    OverdueTask,
    ProjectDateAnalysis,
    ProjectStatus,
    TimelineStatus,
    classify_delay,
)
from timeline_workload.utils.config import merge_config
from timeline_workload.utils.time_window import (
    add_days,
    days_between,
    is_in_past,
    to_day,
)

logger = logging.getLogger(__name__)


def analyze_timeline(tasks, project_status, now, config=None):
    """
    Derive a project's planned and actual timeline from its tasks.

    The planned window always comes from the task schedule fields. For an
    ongoing project four independent delay estimates are computed and the
    largest one is reported, together with the factor that produced it. A
    completed project is measured once, from its last completion.

    Args:
        tasks: Iterable of Task objects making up the project
        project_status: ProjectStatus (or its string value) of the project
        now: The status date, injected by the caller
        config: Optional configuration overrides

    Returns:
        ProjectDateAnalysis: The immutable analysis result
    """
    config = merge_config(config)
    timeline_config = config["timeline"]
    tasks = list(tasks)
    now = to_day(now)
    project_status = ProjectStatus.coerce(project_status)

    if not tasks:
        logger.debug("No tasks to analyze, returning empty timeline")
        return ProjectDateAnalysis()

    # Step 1: planned window
    planned_start, planned_end = planned_window(tasks)

    # Step 2: actual start and completion
    completed_tasks = [task for task in tasks if task.is_completed]
    completion = Fraction(len(completed_tasks), len(tasks))
    completion_percentage = float(completion * 100)

    start_signals = [
        task.completed_at or task.start_date
        for task in completed_tasks
        if task.completed_at or task.start_date
    ]
    actual_start = min(start_signals) if start_signals else planned_start

    logger.debug(
        "Planned window %s -> %s, completion %.1f%% (%d/%d)",
        planned_start,
        planned_end,
        completion_percentage,
        len(completed_tasks),
        len(tasks),
    )

    breakdown = None
    if project_status == ProjectStatus.COMPLETED:
        # Step 3: a completed project is a single closed measurement
        completions = [t.completed_at for t in completed_tasks if t.completed_at]
        actual_end = max(completions) if completions else planned_end
        delay_days = 0
        if planned_end is not None and actual_end is not None:
            delay_days = max(0, days_between(planned_end, actual_end))
        status = TimelineStatus.COMPLETED
    else:
        # Step 4: four alternative explanations, keep the largest
        latest_signal = latest_task_signal(tasks)
        task_delay = task_based_delay(latest_signal, planned_end)
        schedule_delay = schedule_based_delay(planned_end, now, completion)
        progress_delay = progress_based_delay(
            completion,
            planned_start,
            planned_end,
            actual_start,
            now,
            timeline_config["progress_fallback_duration_days"],
        )
        overdue = overdue_tasks(tasks, now)
        overdue_delay = overdue[0].days_overdue if overdue else 0

        delay_days = max(task_delay, schedule_delay, progress_delay, overdue_delay)
        dominant = dominant_factor(
            task_delay, schedule_delay, progress_delay, overdue_delay
        )
        breakdown = DelayBreakdown(
            task_based_delay=task_delay,
            schedule_based_delay=schedule_delay,
            progress_based_delay=progress_delay,
            overdue_task_delay=overdue_delay,
            dominant_factor=dominant,
            overdue_tasks=tuple(overdue),
        )

        logger.debug(
            "Delay factors: tasks=%d schedule=%d progress=%d overdue=%d "
            "(%d overdue tasks) -> %d days, dominant %s",
            task_delay,
            schedule_delay,
            progress_delay,
            overdue_delay,
            len(overdue),
            delay_days,
            dominant.value,
        )

        if planned_end is not None:
            actual_end = add_days(planned_end, delay_days)
        else:
            actual_end = latest_signal

        # Step 5: status classification
        if delay_days > 0:
            status = TimelineStatus.DELAYED
        elif (
            planned_end is not None
            and actual_end is not None
            and actual_end < planned_end
        ):
            status = TimelineStatus.EARLY
        else:
            status = TimelineStatus.ON_TIME

    # Step 6: risk ranking
    critical = critical_tasks(tasks, now, timeline_config["critical_task_ratio"])

    return ProjectDateAnalysis(
        planned_start_date=planned_start,
        planned_end_date=planned_end,
        actual_start_date=actual_start,
        actual_end_date=actual_end,
        completion_percentage=completion_percentage,
        delay_days=delay_days,
        delay_breakdown=breakdown,
        critical_tasks=critical,
        status=status,
        severity=classify_delay(delay_days, config["severity"]),
    )


def planned_window(tasks):
    """Earliest declared start and latest declared end, None when nobody declares one."""
    starts = [task.start_date for task in tasks if task.start_date is not None]
    ends = [task.end_date for task in tasks if task.end_date is not None]
    return (min(starts) if starts else None, max(ends) if ends else None)


def latest_task_signal(tasks):
    """
    Latest date any task points at: its completion for completed tasks,
    otherwise its scheduled end.
    """
    signals = []
    for task in tasks:
        if task.is_completed and task.completed_at is not None:
            signals.append(task.completed_at)
        elif task.end_date is not None:
            signals.append(task.end_date)
    return max(signals) if signals else None


def task_based_delay(latest_signal, planned_end):
    if latest_signal is None or planned_end is None:
        return 0
    return max(0, days_between(planned_end, latest_signal))


def schedule_based_delay(planned_end, now, completion):
    """Days the status date is past the planned end while work remains."""
    if planned_end is None or completion >= 1:
        return 0
    if now > planned_end:
        return days_between(planned_end, now)
    return 0


def progress_based_delay(
    completion, planned_start, planned_end, actual_start, now, fallback_days
):
    """
    Extrapolate the finish date from the completion rate.

    If a fraction ``completion`` of the work took the planned duration so
    far, the whole project takes ``duration / completion``; counting that
    from the actual start gives a projected end.

    Args:
        completion: Completed share of tasks as a Fraction in [0, 1]
        planned_start: Planned start, or None
        planned_end: Planned end, or None
        actual_start: Actual start, or None
        now: Status date, last resort anchor for the projection
        fallback_days: Planned duration assumed when the start is unknown

    Returns:
        int: Projected days past the planned end, at least 0
    """
    if planned_end is None or not 0 < completion < 1:
        return 0

    if planned_start is not None:
        planned_duration = days_between(planned_start, planned_end)
    else:
        planned_duration = fallback_days

    projected_total = Fraction(planned_duration) / completion
    anchor = actual_start or planned_start or now
    overrun = days_between(planned_end, anchor) + projected_total
    return max(0, math.ceil(overrun))


def overdue_tasks(tasks, now):
    """
    Open tasks whose scheduled end has passed, most overdue first.

    Returns:
        list: OverdueTask entries sorted by days overdue, then id
    """
    overdue = [
        OverdueTask(
            id=task.id,
            title=task.title,
            days_overdue=days_between(task.end_date, now),
        )
        for task in tasks
        if task.is_open and task.end_date is not None and is_in_past(task.end_date, now)
    ]
    overdue.sort(key=lambda entry: (-entry.days_overdue, str(entry.id)))
    return overdue


def dominant_factor(task_delay, schedule_delay, progress_delay, overdue_delay):
    """
    Pick the factor that produced the maximum delay.

    On ties the more concrete signal wins: overdue tasks, then the
    schedule, then the progress projection, then task dates.
    """
    delay = max(task_delay, schedule_delay, progress_delay, overdue_delay)
    if overdue_delay == delay and overdue_delay > 0:
        return DelayFactor.OVERDUE
    if schedule_delay == delay and schedule_delay > 0:
        return DelayFactor.SCHEDULE
    if progress_delay == delay and progress_delay > 0:
        return DelayFactor.PROGRESS
    return DelayFactor.TASKS


def critical_tasks(tasks, now, ratio):
    """
    Flag the tasks where schedule risk is concentrated.

    Every overdue open task is flagged first. Then up to
    ``ceil(ratio * open task count)`` not-yet-started tasks are added by
    descending estimate, ties broken by id. This is a risk ranking, not a
    precedence-aware critical path.

    Args:
        tasks: Tasks of the project
        now: Status date
        ratio: Share of open tasks to add from the high-effort backlog

    Returns:
        tuple: Task ids, overdue ones first
    """
    flagged = [entry.id for entry in overdue_tasks(tasks, now)]
    open_count = sum(1 for task in tasks if task.is_open)
    extra = math.ceil(Fraction(str(ratio)) * open_count)

    backlog = [
        task
        for task in tasks
        if task.is_not_started and task.id not in flagged
    ]
    backlog.sort(key=lambda task: (-(task.estimated_hours or 0.0), str(task.id)))

    flagged.extend(task.id for task in backlog[:extra])
    return tuple(flagged)
