"""
Timeline & Workload Analysis Engine
===================================

Pure, deterministic analysis of a project's task snapshot.

Available modules:
- services.timeline_analyzer: planned/actual windows, four-factor delay, critical tasks
- services.workload_allocator: per-user daily allocation and team aggregation
- services.engine: facade composing both per project and date range
- visualization: workload heatmap and timeline charts
"""

from timeline_workload.domain.task import Task, TaskStatus, TaskError
from timeline_workload.domain.user import User, UserError
from timeline_workload.domain.analysis import (
    DelayFactor,
    DelaySeverity,
    ProjectDateAnalysis,
    ProjectStatus,
    TimelineStatus,
)
from timeline_workload.domain.workload import (
    TeamWorkloadSample,
    WorkloadLevel,
    WorkloadSample,
)
from timeline_workload.services.timeline_analyzer import analyze_timeline
from timeline_workload.services.workload_allocator import (
    WorkloadError,
    aggregate_team_workload,
    allocate_workload,
)
from timeline_workload.services.engine import EngineError, TimelineWorkloadEngine

__all__ = [
    "Task",
    "TaskStatus",
    "TaskError",
    "User",
    "UserError",
    "DelayFactor",
    "DelaySeverity",
    "ProjectDateAnalysis",
    "ProjectStatus",
    "TimelineStatus",
    "TeamWorkloadSample",
    "WorkloadLevel",
    "WorkloadSample",
    "WorkloadError",
    "EngineError",
    "TimelineWorkloadEngine",
    "analyze_timeline",
    "allocate_workload",
    "aggregate_team_workload",
]
