"""
Visualization Package
=====================

matplotlib charts for the timeline and workload analysis results.

Available modules:
- workload_calendar: Users x days utilization heatmap
- timeline_chart: Gantt-style task timeline with planned and projected end
"""

from timeline_workload.visualization.workload_calendar import (
    build_level_matrix,
    build_utilization_matrix,
    create_workload_heatmap,
)
from timeline_workload.visualization.timeline_chart import create_timeline_chart

__all__ = [
    "build_level_matrix",
    "build_utilization_matrix",
    "create_workload_heatmap",
    "create_timeline_chart",
]
