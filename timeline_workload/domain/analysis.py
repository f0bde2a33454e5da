from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union


class ProjectStatus(Enum):
    """
    Enum representing the lifecycle status of the project being analyzed.

    Only ``COMPLETED`` changes how the timeline is measured.
    """

    PLANNING = "PLANNING"
    IN_PROGRESS = "IN_PROGRESS"
    ON_HOLD = "ON_HOLD"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"

    @classmethod
    def coerce(cls, value: Union["ProjectStatus", str, None]) -> "ProjectStatus":
        """Turn a string (any case) or None into a ProjectStatus; None means in progress."""
        if value is None:
            return cls.IN_PROGRESS
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            valid = [s.value for s in cls]
            raise ValueError(f"Invalid project status: {value}. Must be one of {valid}")


class TimelineStatus(Enum):
    EARLY = "EARLY"
    ON_TIME = "ON_TIME"
    DELAYED = "DELAYED"
    COMPLETED = "COMPLETED"


class DelayFactor(Enum):
    """The four alternative explanations of a project's lateness."""

    TASKS = "tasks"
    SCHEDULE = "schedule"
    PROGRESS = "progress"
    OVERDUE = "overdue"

    @property
    def label(self) -> str:
        return _FACTOR_LABELS[self]


_FACTOR_LABELS = {
    DelayFactor.TASKS: "Task-based",
    DelayFactor.SCHEDULE: "Schedule-based",
    DelayFactor.PROGRESS: "Progress-based",
    DelayFactor.OVERDUE: "Overdue tasks",
}


class DelaySeverity(Enum):
    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


def classify_delay(delay_days: int, thresholds: Dict[str, Any]) -> DelaySeverity:
    """
    Map a delay in days onto a severity level.

    Args:
        delay_days: Delay of the project in days
        thresholds: The ``severity`` section of the configuration

    Returns:
        DelaySeverity: The severity bucket
    """
    if delay_days <= 0:
        return DelaySeverity.NONE
    if delay_days <= thresholds["low_max_days"]:
        return DelaySeverity.LOW
    if delay_days <= thresholds["medium_max_days"]:
        return DelaySeverity.MEDIUM
    if delay_days <= thresholds["high_max_days"]:
        return DelaySeverity.HIGH
    return DelaySeverity.CRITICAL


@dataclass(frozen=True)
class OverdueTask:
    id: Any
    title: str
    days_overdue: int

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "title": self.title, "days_overdue": self.days_overdue}


@dataclass(frozen=True)
class DelayBreakdown:
    """Component delays of an ongoing project and the factor that dominated."""

    task_based_delay: int
    schedule_based_delay: int
    progress_based_delay: int
    overdue_task_delay: int
    dominant_factor: DelayFactor
    overdue_tasks: Tuple[OverdueTask, ...] = ()

    def factor_values(self) -> Dict[DelayFactor, int]:
        return {
            DelayFactor.TASKS: self.task_based_delay,
            DelayFactor.SCHEDULE: self.schedule_based_delay,
            DelayFactor.PROGRESS: self.progress_based_delay,
            DelayFactor.OVERDUE: self.overdue_task_delay,
        }

    @property
    def max_delay(self) -> int:
        return max(self.factor_values().values())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "task_based_delay": self.task_based_delay,
            "schedule_based_delay": self.schedule_based_delay,
            "progress_based_delay": self.progress_based_delay,
            "overdue_task_delay": self.overdue_task_delay,
            "dominant_factor": self.dominant_factor.value,
            "overdue_tasks": [t.to_dict() for t in self.overdue_tasks],
        }


@dataclass(frozen=True)
class ProjectDateAnalysis:
    """
    Timeline of one project as derived from its tasks.

    ``delay_breakdown`` is only present for ongoing projects; a completed
    project's delay is a single closed measurement.
    """

    planned_start_date: Optional[date] = None
    planned_end_date: Optional[date] = None
    actual_start_date: Optional[date] = None
    actual_end_date: Optional[date] = None
    completion_percentage: float = 0.0
    delay_days: int = 0
    delay_breakdown: Optional[DelayBreakdown] = None
    critical_tasks: Tuple[Any, ...] = field(default_factory=tuple)
    status: TimelineStatus = TimelineStatus.ON_TIME
    severity: DelaySeverity = DelaySeverity.NONE

    @property
    def is_delayed(self) -> bool:
        return self.delay_days > 0

    def summary(self) -> str:
        """One line describing the largest delay and what caused it."""
        if self.status == TimelineStatus.COMPLETED:
            if self.delay_days:
                return f"Completed {self.delay_days} days after the planned end"
            return "Completed on schedule"
        if self.delay_breakdown is None:
            return "No delay analysis available"
        if not self.delay_days:
            return "On schedule"
        factor = self.delay_breakdown.dominant_factor
        return f"Largest delay: {self.delay_days} days ({factor.label})"

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the analysis to a dictionary for the presentation layer.

        Returns:
            dict: Dictionary with ISO dates and enum values
        """
        result = {
            "completion_percentage": self.completion_percentage,
            "delay_days": self.delay_days,
            "is_delayed": self.is_delayed,
            "critical_tasks": list(self.critical_tasks),
            "status": self.status.value,
            "severity": self.severity.value,
            "delay_breakdown": (
                self.delay_breakdown.to_dict() if self.delay_breakdown else None
            ),
        }

        for attr in [
            "planned_start_date",
            "planned_end_date",
            "actual_start_date",
            "actual_end_date",
        ]:
            value = getattr(self, attr)
            result[attr] = value.isoformat() if value is not None else None

        return result
