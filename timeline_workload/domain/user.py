import math
from typing import Any, Dict, Optional

DEFAULT_MAX_HOURS_PER_DAY = 8.0


class UserError(ValueError):
    """Exception raised for invalid user records."""

    pass


class User:
    """
    Represents a person that tasks can be assigned to.

    Only the daily capacity matters to the workload calculation. An unset or
    zero ``max_hours_per_day`` falls back to the default capacity.
    """

    def __init__(self, id, name="", max_hours_per_day=None):
        """
        Initialize a user with id, name and daily capacity.

        Args:
            id: Unique identifier for the user
            name: Human-readable name
            max_hours_per_day: Hours this user can work per day (default: 8)

        Raises:
            UserError: If the id is missing or the capacity is negative
        """
        if id is None:
            raise UserError("User ID cannot be None")
        self.id = id
        self.name = name or ""

        if max_hours_per_day is not None:
            if isinstance(max_hours_per_day, bool) or not isinstance(
                max_hours_per_day, (int, float)
            ):
                raise UserError("max_hours_per_day must be a number")
            if not math.isfinite(max_hours_per_day):
                raise UserError("max_hours_per_day must be a finite number")
            if max_hours_per_day < 0:
                raise UserError(
                    f"max_hours_per_day cannot be negative (user {id}: {max_hours_per_day})"
                )
            max_hours_per_day = float(max_hours_per_day)
        self.max_hours_per_day = max_hours_per_day

    def capacity_hours(self, default=DEFAULT_MAX_HOURS_PER_DAY):
        """
        Get the effective daily capacity.

        Args:
            default: Capacity used when none is set (default: 8)

        Returns:
            float: Hours available per day
        """
        if self.max_hours_per_day:
            return self.max_hours_per_day
        return float(default)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "max_hours_per_day": self.max_hours_per_day,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        max_hours: Optional[float] = data.get("max_hours_per_day", data.get("maxHoursPerDay"))
        return cls(id=data["id"], name=data.get("name", ""), max_hours_per_day=max_hours)

    def __repr__(self) -> str:
        return f"User(id={self.id}, name={self.name}, max_hours_per_day={self.max_hours_per_day})"
