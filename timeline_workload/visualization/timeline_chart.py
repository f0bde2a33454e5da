import matplotlib.pyplot as plt
from matplotlib.lines import Line2D
from matplotlib.patches import Patch

from timeline_workload.domain.task import TaskStatus
from timeline_workload.utils.time_window import days_between, inclusive_day_span, to_day

STATUS_COLORS = {
    TaskStatus.COMPLETED: "green",
    TaskStatus.IN_PROGRESS: "blue",
    TaskStatus.REVIEW: "purple",
    TaskStatus.BLOCKED: "orange",
    TaskStatus.CANCELLED: "lightgray",
    TaskStatus.TODO: "steelblue",
}


def create_timeline_chart(tasks, analysis, now, filename=None, show=True, title=None):
    """
    Create a Gantt-style chart of the project's tasks with its planned and
    projected end dates.

    Args:
        tasks: Iterable of Task objects
        analysis: The ProjectDateAnalysis for these tasks
        now: The status date used for the analysis
        filename: Optional filename to save the chart
        show: Whether to display the chart (default: True)
        title: Optional chart title

    Returns:
        The matplotlib figure, or None when no task has a schedule
    """
    scheduled = [task for task in tasks if task.has_schedule]
    if not scheduled:
        return None

    now = to_day(now)
    # Sort tasks by start date
    scheduled.sort(key=lambda task: (task.start_date, str(task.id)))
    origin = min(task.start_date for task in scheduled)
    critical = set(analysis.critical_tasks)

    fig, ax = plt.subplots(figsize=(14, max(4, len(scheduled) * 0.5 + 2)))

    for i, task in enumerate(scheduled):
        start_day = days_between(origin, task.start_date)
        duration = max(1, inclusive_day_span(task.start_date, task.end_date))

        ax.barh(
            i,
            duration,
            left=start_day,
            color=STATUS_COLORS[task.status],
            alpha=0.7,
            edgecolor="red" if task.id in critical else "black",
            linewidth=2 if task.id in critical else 0.5,
        )
        ax.text(
            start_day + duration / 2,
            i,
            f"{task.id}: {task.title}",
            ha="center",
            va="center",
            color="black",
            fontsize=8,
        )

        # Completion marker for finished tasks
        if task.is_completed and task.completed_at is not None:
            done_day = days_between(origin, task.completed_at) + 1
            ax.plot(done_day, i, marker="D", color="darkgreen", markersize=5)

    ax.set_yticks(range(len(scheduled)))
    ax.set_yticklabels([task.title or str(task.id) for task in scheduled])
    ax.invert_yaxis()

    # Vertical lines: status date, planned end, projected end
    ax.axvline(x=days_between(origin, now), color="green", linestyle="--", linewidth=2)
    if analysis.planned_end_date is not None:
        ax.axvline(
            x=days_between(origin, analysis.planned_end_date) + 1,
            color="black",
            linestyle=":",
            linewidth=1.5,
        )
    if analysis.actual_end_date is not None and analysis.is_delayed:
        ax.axvline(
            x=days_between(origin, analysis.actual_end_date) + 1,
            color="red",
            linestyle="-.",
            linewidth=1.5,
        )

    ax.set_xlabel(f"Days from {origin.isoformat()}")
    ax.set_title(
        title
        or f"Project timeline (status {now.isoformat()}, {analysis.status.value}, "
        f"{analysis.delay_days} days delay)"
    )
    ax.grid(axis="x", alpha=0.3)

    legend_elements = [
        Patch(facecolor=color, alpha=0.7, label=status.value)
        for status, color in STATUS_COLORS.items()
    ]
    legend_elements.extend(
        [
            Patch(facecolor="white", edgecolor="red", linewidth=2, label="Critical"),
            Line2D([0], [0], color="green", linestyle="--", label="Status date"),
            Line2D([0], [0], color="black", linestyle=":", label="Planned end"),
            Line2D([0], [0], color="red", linestyle="-.", label="Projected end"),
        ]
    )
    ax.legend(handles=legend_elements, loc="upper right", ncol=2, fontsize=8)

    # Adjust layout
    plt.tight_layout()

    # Save if filename provided
    if filename:
        plt.savefig(filename, dpi=150, bbox_inches="tight")

    # Show if requested
    if show:
        plt.show()

    return fig
