import math
from datetime import date, datetime
from enum import Enum
from typing import List, Dict, Union, Optional, Any, Tuple

from timeline_workload.utils.time_window import to_day


class TaskStatus(Enum):
    """
    Enum representing the possible status values of a task.
    """

    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    REVIEW = "REVIEW"
    BLOCKED = "BLOCKED"
    CANCELLED = "CANCELLED"


# Work on these tasks is still outstanding; REVIEW and BLOCKED count as open and can be overdue
OPEN_STATUSES = frozenset(
    {TaskStatus.TODO, TaskStatus.IN_PROGRESS, TaskStatus.REVIEW, TaskStatus.BLOCKED}
)


class TaskError(Exception):
    """Exception raised for errors in the Task class."""

    pass


def _parse_date(value: Any, field: str) -> Optional[date]:
    """Accept a date, datetime or ISO formatted string and return the calendar day."""
    if value is None or value == "":
        return None
    if isinstance(value, (date, datetime)):
        return to_day(value)
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
        except ValueError as e:
            raise TaskError(f"{field} is not a valid ISO date: {value!r}") from e
    raise TaskError(f"{field} must be a date, datetime or ISO string")


def _parse_hours(value: Any, field: str) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TaskError(f"{field} must be a number")
    if not math.isfinite(value):
        raise TaskError(f"{field} must be a finite number")
    if value < 0:
        raise TaskError(f"{field} cannot be negative")
    return float(value)


class Task:
    """
    Represents a task as read from the tracking application's task store.

    Tasks are read-only inputs to the analyzers. Schedule fields have
    date-only semantics: any time of day is dropped on construction.
    Assignment comes from two places, the legacy single ``assigned_id``
    and the ``assigned_user_ids`` edge set, and ``assignees`` merges both.
    """

    def __init__(
        self,
        id: Any,
        title: str = "",
        status: Union[TaskStatus, str] = TaskStatus.TODO,
        start_date: Optional[Union[date, datetime, str]] = None,
        end_date: Optional[Union[date, datetime, str]] = None,
        completed_at: Optional[Union[date, datetime, str]] = None,
        estimated_hours: Optional[float] = None,
        max_daily_hours: Optional[float] = None,
        assigned_id: Optional[Any] = None,
        assigned_user_ids: Optional[List[Any]] = None,
        priority: Optional[str] = None,
        dependencies: Optional[List[Any]] = None,
    ):
        """
        Initialize a new Task.

        Args:
            id: Identifier of the task, unique within its project
            title: Display label
            status: A TaskStatus or its string value
            start_date: Optional scheduled start
            end_date: Optional scheduled end
            completed_at: Optional completion timestamp
            estimated_hours: Optional effort estimate for the whole task
            max_daily_hours: Optional cap on hours per day for one assignee
            assigned_id: Legacy single assignee
            assigned_user_ids: Assignees from the multi-assignment edge set
            priority: Optional display priority label
            dependencies: IDs of tasks this task depends on

        Raises:
            TaskError: If any input validation fails
        """
        if id is None:
            raise TaskError("Task ID cannot be None")
        self.id = id

        if title is None or not isinstance(title, str):
            raise TaskError("Task title must be a string")
        self.title = title

        self._status = TaskStatus.TODO
        self.status = status

        self.start_date = _parse_date(start_date, "start_date")
        self.end_date = _parse_date(end_date, "end_date")
        self.completed_at = _parse_date(completed_at, "completed_at")

        self.estimated_hours = _parse_hours(estimated_hours, "estimated_hours")
        self.max_daily_hours = _parse_hours(max_daily_hours, "max_daily_hours")

        self.assigned_id = assigned_id
        if assigned_user_ids is not None and not isinstance(
            assigned_user_ids, (list, tuple, set, frozenset)
        ):
            raise TaskError("assigned_user_ids must be a list")
        self.assigned_user_ids = list(assigned_user_ids or [])

        self.priority = priority

        if dependencies is not None and not isinstance(dependencies, (list, tuple)):
            raise TaskError("Dependencies must be a list")
        self.dependencies = list(dependencies or [])

    @property
    def status(self) -> TaskStatus:
        """Get the current status of the task."""
        return self._status

    @status.setter
    def status(self, value: Union[TaskStatus, str]):
        """Set the status of the task from an enum member or its string value."""
        if isinstance(value, TaskStatus):
            self._status = value
            return
        if isinstance(value, str):
            try:
                self._status = TaskStatus(value.strip().upper())
                return
            except ValueError:
                pass
        valid_statuses = [s.value for s in TaskStatus]
        raise TaskError(f"Invalid status: {value}. Must be one of {valid_statuses}")

    @property
    def assignees(self) -> Tuple[Any, ...]:
        """
        All users assigned to this task, from either assignment source.

        The legacy assignee comes first, followed by the edge set in its
        own order; a user present in both is listed once.
        """
        seen = []
        if self.assigned_id is not None:
            seen.append(self.assigned_id)
        for user_id in self.assigned_user_ids:
            if user_id is not None and user_id not in seen:
                seen.append(user_id)
        return tuple(seen)

    def is_assigned_to(self, user_id: Any) -> bool:
        return user_id in self.assignees

    @property
    def is_completed(self) -> bool:
        return self._status == TaskStatus.COMPLETED

    @property
    def is_open(self) -> bool:
        """True while work on the task is outstanding (not completed or cancelled)."""
        return self._status in OPEN_STATUSES

    @property
    def is_not_started(self) -> bool:
        return self._status == TaskStatus.TODO

    @property
    def has_schedule(self) -> bool:
        """True when both a start and an end date are declared."""
        return self.start_date is not None and self.end_date is not None

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert task to a dictionary representation.

        Dates are rendered as ISO strings.

        Returns:
            dict: Dictionary representation of the task
        """
        result = {
            "id": self.id,
            "title": self.title,
            "status": self._status.value,
            "estimated_hours": self.estimated_hours,
            "max_daily_hours": self.max_daily_hours,
            "assigned_id": self.assigned_id,
            "assigned_user_ids": list(self.assigned_user_ids),
            "priority": self.priority,
            "dependencies": list(self.dependencies),
        }

        for attr in ["start_date", "end_date", "completed_at"]:
            value = getattr(self, attr)
            result[attr] = value.isoformat() if value is not None else None

        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        """
        Create a task from a dictionary representation.

        Both snake_case keys and the camelCase keys used by the task store
        (``startDate``, ``estimatedHours``, ``assignedUsers`` ...) are accepted.
        ``assignedUsers`` may hold plain IDs or ``{"userId": ...}`` records.

        Args:
            data: Dictionary representation of the task

        Returns:
            Task: New task instance
        """

        def pick(*keys):
            for key in keys:
                if key in data:
                    return data[key]
            return None

        assigned_users = pick("assigned_user_ids", "assignedUsers") or []
        assigned_user_ids = [
            entry.get("userId", entry.get("user_id"))
            if isinstance(entry, dict)
            else entry
            for entry in assigned_users
        ]

        return cls(
            id=data["id"],
            title=pick("title", "name") or "",
            status=pick("status") or TaskStatus.TODO,
            start_date=pick("start_date", "startDate"),
            end_date=pick("end_date", "endDate"),
            completed_at=pick("completed_at", "completedAt"),
            estimated_hours=pick("estimated_hours", "estimatedHours"),
            max_daily_hours=pick("max_daily_hours", "maxDailyHours"),
            assigned_id=pick("assigned_id", "assignedId"),
            assigned_user_ids=assigned_user_ids,
            priority=pick("priority"),
            dependencies=pick("dependencies"),
        )

    def __repr__(self) -> str:
        return (
            f"Task(id={self.id}, title={self.title}, status={self._status.value}, "
            f"start={self.start_date}, end={self.end_date})"
        )
