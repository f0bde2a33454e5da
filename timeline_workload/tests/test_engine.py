import json
import unittest
from datetime import date, datetime, timedelta

from timeline_workload import TimelineWorkloadEngine
from timeline_workload.domain.analysis import TimelineStatus
from timeline_workload.domain.task import Task
from timeline_workload.domain.user import User
from timeline_workload.services.engine import EngineError

DAY = date(2025, 4, 1)


def days(n):
    return DAY + timedelta(days=n)


class TimelineWorkloadEngineTestCase(unittest.TestCase):
    def setUp(self):
        self.engine = TimelineWorkloadEngine()
        self.users = [User("ana", "Ana"), User("ben", "Ben")]
        self.tasks = [
            Task("T1", "Design", status="IN_PROGRESS", start_date=DAY, end_date=days(1),
                 estimated_hours=16, assigned_id="ana"),
            Task("T2", "Review", status="TODO", start_date=days(1), end_date=days(1),
                 estimated_hours=4, assigned_user_ids=["ben"]),
        ]

    def test_delegations_use_engine_config(self):
        engine = TimelineWorkloadEngine({"workload": {"default_capacity_hours": 4.0}})
        task = Task("T1", start_date=DAY, end_date=DAY, estimated_hours=2, assigned_id="u1")
        sample = engine.allocate_workload([task], [User("u1")], DAY)["u1"]
        self.assertEqual(sample.utilization_percent, 50)

    def test_config_is_a_copy(self):
        self.engine.config["workload"]["default_capacity_hours"] = 1.0
        self.assertEqual(self.engine.config["workload"]["default_capacity_hours"], 8.0)

    def test_workload_calendar(self):
        calendar = self.engine.workload_calendar(self.tasks, self.users, DAY, days(2))
        self.assertEqual([day.date for day in calendar], [DAY, days(1), days(2)])
        self.assertEqual(set(calendar[0].samples), {"ana", "ben"})
        self.assertEqual(calendar[0].samples["ana"].utilization_percent, 100)
        self.assertEqual(calendar[1].active_task_ids, ("T1", "T2"))
        self.assertEqual(calendar[1].team.average_utilization_percent, 75)
        self.assertEqual(calendar[2].team.sample_user_count, 0)

    def test_single_day_calendar(self):
        calendar = self.engine.workload_calendar(self.tasks, self.users, DAY, DAY)
        self.assertEqual(len(calendar), 1)

    def test_inverted_calendar_range(self):
        with self.assertRaises(EngineError):
            self.engine.workload_calendar(self.tasks, self.users, days(2), DAY)

    def test_unnormalized_calendar_range(self):
        with self.assertRaises(EngineError):
            self.engine.workload_calendar(
                self.tasks, self.users, datetime(2025, 4, 1, 8, 0), days(2)
            )

    def test_summarize_calendar(self):
        calendar = self.engine.workload_calendar(self.tasks, self.users, DAY, days(2))
        summary = self.engine.summarize_calendar(calendar)
        self.assertEqual(summary.start_date, DAY)
        self.assertEqual(summary.end_date, days(2))
        self.assertEqual(summary.total_tasks, 2)
        self.assertEqual(summary.max_daily_tasks, 2)
        self.assertEqual(summary.average_utilization_percent, 87.5)
        self.assertEqual(summary.bottleneck_days, 1)
        self.assertEqual(summary.high_risk_days, 0)
        self.assertEqual(summary.active_days, 2)

    def test_high_risk_day_is_not_a_bottleneck_day(self):
        tasks = [
            Task("T1", start_date=DAY, end_date=DAY, estimated_hours=12, assigned_id="ana"),
            Task("T2", start_date=DAY, end_date=DAY, estimated_hours=9, assigned_id="ben"),
        ]
        summary = self.engine.summarize_calendar(
            self.engine.workload_calendar(tasks, self.users, DAY, DAY)
        )
        self.assertEqual(summary.high_risk_days, 1)
        self.assertEqual(summary.bottleneck_days, 0)

    def test_summarize_empty_calendar(self):
        with self.assertRaises(EngineError):
            self.engine.summarize_calendar([])

    def test_analyze_project_defaults_to_planned_window(self):
        report = self.engine.analyze_project(self.tasks, self.users, "IN_PROGRESS", DAY)
        self.assertEqual(
            report.analysis, self.engine.analyze_timeline(self.tasks, "IN_PROGRESS", DAY)
        )
        self.assertEqual([day.date for day in report.calendar], [DAY, days(1)])
        self.assertEqual(report.summary.total_tasks, 2)
        self.assertEqual(report.analysis.status, TimelineStatus.ON_TIME)
        json.dumps(report.to_dict())

    def test_analyze_project_with_explicit_range(self):
        report = self.engine.analyze_project(
            self.tasks, self.users, "IN_PROGRESS", DAY, start_date=days(-2), end_date=days(4)
        )
        self.assertEqual(len(report.calendar), 7)
        self.assertEqual(report.summary.active_days, 2)

    def test_analyze_project_without_dates(self):
        tasks = [Task("T1", "Someday", assigned_id="ana")]
        report = self.engine.analyze_project(tasks, self.users, "IN_PROGRESS", DAY)
        self.assertEqual(report.calendar, ())
        self.assertIsNone(report.summary)
        self.assertEqual(report.to_dict()["summary"], None)

    def test_analyze_project_with_inverted_planned_window(self):
        tasks = [Task("T1", start_date=days(5), end_date=DAY, assigned_id="ana")]
        report = self.engine.analyze_project(tasks, self.users, "IN_PROGRESS", DAY)
        self.assertEqual(report.calendar, ())

    def test_analyze_project_with_inverted_explicit_range(self):
        with self.assertRaises(EngineError):
            self.engine.analyze_project(
                self.tasks, self.users, "IN_PROGRESS", DAY, start_date=days(3), end_date=DAY
            )

    def test_dependency_critical_path(self):
        tasks = [
            Task("A", start_date=DAY, end_date=days(2)),
            Task("B", start_date=days(3), end_date=days(4), dependencies=["A"]),
            Task("C", start_date=days(3), end_date=days(3), dependencies=["A"]),
            Task("D", start_date=days(5), end_date=days(5), dependencies=["B", "C"]),
        ]
        self.assertEqual(self.engine.dependency_critical_path(tasks), ["A", "B", "D"])


if __name__ == "__main__":
    unittest.main()
