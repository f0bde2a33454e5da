from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from timeline_workload.domain.analysis import ProjectDateAnalysis
from timeline_workload.domain.workload import DailyWorkload, WorkloadPeriodSummary


@dataclass(frozen=True)
class ProjectReport:
    """Timeline analysis of a project together with its workload calendar."""

    analysis: ProjectDateAnalysis
    calendar: Tuple[DailyWorkload, ...] = ()
    summary: Optional[WorkloadPeriodSummary] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "analysis": self.analysis.to_dict(),
            "calendar": [day.to_dict() for day in self.calendar],
            "summary": self.summary.to_dict() if self.summary else None,
        }
