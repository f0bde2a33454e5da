from datetime import date

from timeline_workload.domain.task import Task
from timeline_workload.domain.user import User
from timeline_workload.domain.analysis import ProjectStatus
from timeline_workload.services.engine import TimelineWorkloadEngine
from timeline_workload.visualization.workload_calendar import create_workload_heatmap

STATUS_DATE = date(2025, 4, 21)


def create_sample_tasks():
    return [
        Task(
            "T1",
            "Requirements",
            status="COMPLETED",
            start_date=date(2025, 4, 1),
            end_date=date(2025, 4, 4),
            completed_at=date(2025, 4, 5),
            estimated_hours=24,
            assigned_id="ana",
        ),
        Task(
            "T2",
            "System design",
            status="COMPLETED",
            start_date=date(2025, 4, 7),
            end_date=date(2025, 4, 11),
            completed_at=date(2025, 4, 11),
            estimated_hours=30,
            assigned_id="ana",
            assigned_user_ids=["ana", "ben"],
            dependencies=["T1"],
        ),
        Task(
            "T3",
            "Backend",
            status="IN_PROGRESS",
            start_date=date(2025, 4, 14),
            end_date=date(2025, 4, 18),
            estimated_hours=40,
            max_daily_hours=6,
            assigned_user_ids=["ben"],
            dependencies=["T2"],
        ),
        Task(
            "T4",
            "Frontend",
            status="IN_PROGRESS",
            start_date=date(2025, 4, 14),
            end_date=date(2025, 4, 25),
            estimated_hours=60,
            assigned_user_ids=["cem", "ben"],
            dependencies=["T2"],
        ),
        Task(
            "T5",
            "Integration tests",
            status="TODO",
            start_date=date(2025, 4, 22),
            end_date=date(2025, 4, 30),
            estimated_hours=32,
            assigned_id="cem",
            dependencies=["T3", "T4"],
        ),
        Task(
            "T6",
            "Release notes",
            status="TODO",
            start_date=date(2025, 4, 28),
            end_date=date(2025, 4, 30),
            assigned_id="ana",
            dependencies=["T5"],
        ),
    ]


def create_sample_users():
    return [
        User("ana", "Ana", max_hours_per_day=8),
        User("ben", "Ben", max_hours_per_day=6),
        User("cem", "Cem"),
        User("dee", "Dee", max_hours_per_day=4),
    ]


def create_sample_project(output=None, show=False, config=None):
    tasks = create_sample_tasks()
    users = create_sample_users()

    engine = TimelineWorkloadEngine(config)
    report = engine.analyze_project(tasks, users, ProjectStatus.IN_PROGRESS, STATUS_DATE)

    # Create visualization
    if output:
        create_workload_heatmap(
            list(report.calendar),
            filename=output,
            show=show,
            user_names={user.id: user.name for user in users},
            config=config,
        )

    analysis = report.analysis

    # Print report
    print("Project Timeline Report")
    print("=======================")
    print(f"Status date:      {STATUS_DATE.isoformat()}")
    print(f"Planned window:   {analysis.planned_start_date} -> {analysis.planned_end_date}")
    print(f"Actual window:    {analysis.actual_start_date} -> {analysis.actual_end_date}")
    print(f"Completion:       {analysis.completion_percentage:.1f}%")
    print(f"Status:           {analysis.status.value} ({analysis.severity.value})")
    print(f"Summary:          {analysis.summary()}")
    print(f"Critical tasks:   {', '.join(str(t) for t in analysis.critical_tasks) or '-'}")
    print(f"Dependency path:  {' -> '.join(engine.dependency_critical_path(tasks))}")

    print("\nTeam calendar")
    print("-------------")
    for day in report.calendar:
        team = day.team
        flag = " HIGH RISK" if team.is_high_risk else (" BOTTLENECK" if team.is_bottleneck else "")
        print(
            f"{day.date.isoformat()}  avg {team.average_utilization_percent:5.1f}%  "
            f"peak {team.peak_utilization_percent:3d}%  users {team.sample_user_count}{flag}"
        )

    return report


if __name__ == "__main__":
    create_sample_project("workload_heatmap_example.png")
