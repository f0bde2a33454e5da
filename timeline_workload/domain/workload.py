from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class WorkloadLevel(Enum):
    """Calendar colour bands for a person's load on one day."""

    LIGHT = "light"
    MODERATE = "moderate"
    ELEVATED = "elevated"
    HIGH = "high"
    OVERLOADED = "overloaded"


def classify_load(load_percent: float, thresholds: Dict[str, Any]) -> WorkloadLevel:
    """
    Map an unclamped load percentage onto a workload level.

    Args:
        load_percent: Allocated hours as a percentage of capacity
        thresholds: The ``load_levels`` section of the configuration

    Returns:
        WorkloadLevel: The band the load falls in
    """
    if load_percent > thresholds["overloaded_percent"]:
        return WorkloadLevel.OVERLOADED
    if load_percent > thresholds["high_percent"]:
        return WorkloadLevel.HIGH
    if load_percent > thresholds["elevated_percent"]:
        return WorkloadLevel.ELEVATED
    if load_percent > thresholds["moderate_percent"]:
        return WorkloadLevel.MODERATE
    return WorkloadLevel.LIGHT


@dataclass(frozen=True)
class WorkloadSample:
    """
    One user's allocation on one date.

    ``allocated_hours`` is never clamped so over-allocation stays visible;
    ``utilization_percent`` is clamped to [0, 100] for display.
    """

    user_id: Any
    date: date
    active_task_count: int
    allocated_hours: float
    utilization_percent: int
    capacity_hours: float
    task_ids: Tuple[Any, ...] = ()
    level: WorkloadLevel = WorkloadLevel.LIGHT

    @property
    def load_percent(self) -> float:
        if self.capacity_hours <= 0:
            return 0.0
        return self.allocated_hours / self.capacity_hours * 100

    @property
    def is_overloaded(self) -> bool:
        return self.allocated_hours > self.capacity_hours

    def to_dict(self) -> Dict[str, Any]:
        return {
            "user_id": self.user_id,
            "date": self.date.isoformat(),
            "active_task_count": self.active_task_count,
            "allocated_hours": self.allocated_hours,
            "utilization_percent": self.utilization_percent,
            "capacity_hours": self.capacity_hours,
            "task_ids": list(self.task_ids),
            "level": self.level.value,
            "is_overloaded": self.is_overloaded,
        }


@dataclass(frozen=True)
class TeamWorkloadSample:
    """
    Team load on one date, over the users that have work that day.

    Users without any allocated hours are left out of the average rather
    than counted as 0%. ``date`` is None only for an empty, undated sample set.
    """

    date: Optional[date]
    average_utilization_percent: float = 0.0
    peak_utilization_percent: int = 0
    sample_user_count: int = 0
    overloaded_user_count: int = 0
    peak_load_percent: float = 0.0
    is_bottleneck: bool = False
    is_high_risk: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date.isoformat() if self.date is not None else None,
            "average_utilization_percent": self.average_utilization_percent,
            "peak_utilization_percent": self.peak_utilization_percent,
            "sample_user_count": self.sample_user_count,
            "overloaded_user_count": self.overloaded_user_count,
            "peak_load_percent": self.peak_load_percent,
            "is_bottleneck": self.is_bottleneck,
            "is_high_risk": self.is_high_risk,
        }


@dataclass(frozen=True)
class DailyWorkload:
    """Per-user samples and the team aggregate for one calendar cell."""

    date: date
    samples: Dict[Any, WorkloadSample]
    team: TeamWorkloadSample

    @property
    def active_task_ids(self) -> Tuple[Any, ...]:
        ids = set()
        for sample in self.samples.values():
            ids.update(sample.task_ids)
        return tuple(sorted(ids, key=str))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "samples": {str(k): v.to_dict() for k, v in self.samples.items()},
            "team": self.team.to_dict(),
        }


@dataclass(frozen=True)
class WorkloadPeriodSummary:
    """Statistics over a run of calendar days (typically a month view)."""

    start_date: date
    end_date: date
    total_tasks: int = 0
    max_daily_tasks: int = 0
    average_utilization_percent: float = 0.0
    bottleneck_days: int = 0
    high_risk_days: int = 0
    active_days: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "total_tasks": self.total_tasks,
            "max_daily_tasks": self.max_daily_tasks,
            "average_utilization_percent": self.average_utilization_percent,
            "bottleneck_days": self.bottleneck_days,
            "high_risk_days": self.high_risk_days,
            "active_days": self.active_days,
        }
