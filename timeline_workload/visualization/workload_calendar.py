import matplotlib.pyplot as plt
import numpy as np
from matplotlib.colors import BoundaryNorm, ListedColormap

from timeline_workload.domain.workload import WorkloadLevel, classify_load
from timeline_workload.utils.config import merge_config

# Calendar colour bands, light to overloaded
LEVEL_ORDER = list(WorkloadLevel)
LEVEL_COLORS = {
    WorkloadLevel.LIGHT: "#22c55e",
    WorkloadLevel.MODERATE: "#16a34a",
    WorkloadLevel.ELEVATED: "#d97706",
    WorkloadLevel.HIGH: "#ea580c",
    WorkloadLevel.OVERLOADED: "#dc2626",
}


def build_utilization_matrix(calendar, user_ids=None):
    """
    Turn a workload calendar into a users x days matrix.

    Cells hold the unclamped load percentage so overloads stand out; days
    on which a user has no work are NaN.

    Args:
        calendar: List of DailyWorkload entries
        user_ids: Optional row order; defaults to every user in the calendar

    Returns:
        tuple: (matrix, user_ids, dates)
    """
    dates = [day.date for day in calendar]
    if user_ids is None:
        seen = set()
        for day in calendar:
            seen.update(day.samples.keys())
        user_ids = sorted(seen, key=str)

    matrix = np.full((len(user_ids), len(dates)), np.nan)
    for col, day in enumerate(calendar):
        for row, user_id in enumerate(user_ids):
            sample = day.samples.get(user_id)
            if sample is not None and sample.allocated_hours > 0:
                matrix[row, col] = sample.load_percent

    return matrix, list(user_ids), dates


def build_level_matrix(matrix, thresholds):
    """
    Map load percentages onto WorkloadLevel indices (positions in LEVEL_ORDER).

    Uses classify_load so a cell is coloured with exactly its workload level,
    band edges included. NaN cells stay NaN.
    """
    levels = np.full(matrix.shape, np.nan)
    for index, value in np.ndenumerate(matrix):
        if not np.isnan(value):
            levels[index] = LEVEL_ORDER.index(classify_load(value, thresholds))
    return levels


def create_workload_heatmap(
    calendar, filename=None, show=True, user_names=None, title=None, config=None
):
    """
    Create a heatmap of daily utilization per user, with the team average below.

    Args:
        calendar: List of DailyWorkload entries (see TimelineWorkloadEngine.workload_calendar)
        filename: Optional filename to save the chart
        show: Whether to display the chart (default: True)
        user_names: Optional dict mapping user id to display name
        title: Optional chart title
        config: Optional configuration overrides for the load level thresholds

    Returns:
        The matplotlib figure, or None when the calendar is empty
    """
    if not calendar:
        return None

    matrix, user_ids, dates = build_utilization_matrix(calendar)
    team_row = np.array(
        [
            day.team.average_utilization_percent if day.team.sample_user_count else np.nan
            for day in calendar
        ]
    )

    thresholds = merge_config(config)["load_levels"]
    cmap = ListedColormap([LEVEL_COLORS[level] for level in LEVEL_ORDER])
    cmap.set_bad(color="#f3f4f6")
    # One bin per level index
    norm = BoundaryNorm(np.arange(len(LEVEL_ORDER) + 1) - 0.5, cmap.N)

    fig, (ax_users, ax_team) = plt.subplots(
        2,
        1,
        figsize=(max(8, len(dates) * 0.4), max(3, len(user_ids) * 0.5) + 1.5),
        gridspec_kw={"height_ratios": [max(1, len(user_ids)), 1]},
        sharex=True,
    )

    ax_users.imshow(
        np.ma.masked_invalid(build_level_matrix(matrix, thresholds)),
        aspect="auto",
        cmap=cmap,
        norm=norm,
    )
    names = user_names or {}
    ax_users.set_yticks(range(len(user_ids)))
    ax_users.set_yticklabels([str(names.get(u, u)) for u in user_ids])

    # Write the percentage into each busy cell
    for row in range(matrix.shape[0]):
        for col in range(matrix.shape[1]):
            value = matrix[row, col]
            if not np.isnan(value):
                ax_users.text(
                    col, row, f"{value:.0f}", ha="center", va="center", fontsize=7
                )

    ax_team.imshow(
        np.ma.masked_invalid(build_level_matrix(team_row.reshape(1, -1), thresholds)),
        aspect="auto",
        cmap=cmap,
        norm=norm,
    )
    ax_team.set_yticks([0])
    ax_team.set_yticklabels(["Team avg"])

    # Mark high-risk days
    for col, day in enumerate(calendar):
        if day.team.is_high_risk:
            ax_team.text(col, 0, "!", ha="center", va="center", fontweight="bold")

    ax_team.set_xticks(range(len(dates)))
    ax_team.set_xticklabels([d.strftime("%m-%d") for d in dates], rotation=90)

    ax_users.set_title(
        title
        or f"Team workload {dates[0].isoformat()} to {dates[-1].isoformat()}"
    )

    # Adjust layout
    plt.tight_layout()

    # Save if filename provided
    if filename:
        plt.savefig(filename, dpi=150, bbox_inches="tight")

    # Show if requested
    if show:
        plt.show()

    return fig
