import math
import os
import tempfile
import unittest
from datetime import date, timedelta

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402

from timeline_workload.domain.task import Task  # noqa: E402
from timeline_workload.domain.user import User  # noqa: E402
from timeline_workload.services.engine import TimelineWorkloadEngine  # noqa: E402
from timeline_workload.domain.workload import WorkloadLevel  # noqa: E402
from timeline_workload.utils.config import get_default_config  # noqa: E402
from timeline_workload.visualization import (  # noqa: E402
    build_level_matrix,
    build_utilization_matrix,
    create_timeline_chart,
    create_workload_heatmap,
)
from timeline_workload.visualization.workload_calendar import LEVEL_ORDER  # noqa: E402

DAY = date(2025, 4, 1)


class VisualizationTestCase(unittest.TestCase):
    def setUp(self):
        self.engine = TimelineWorkloadEngine()
        self.users = [User("ana", "Ana"), User("ben", "Ben", max_hours_per_day=4)]
        self.tasks = [
            Task("T1", "Design", status="COMPLETED", start_date=DAY,
                 end_date=DAY + timedelta(days=1), completed_at=DAY + timedelta(days=1),
                 estimated_hours=8, assigned_id="ana"),
            Task("T2", "Build", status="IN_PROGRESS", start_date=DAY + timedelta(days=1),
                 end_date=DAY + timedelta(days=3), estimated_hours=18,
                 assigned_user_ids=["ana", "ben"]),
            Task("T3", "Someday", status="TODO"),
        ]
        self.calendar = self.engine.workload_calendar(
            self.tasks, self.users, DAY, DAY + timedelta(days=3)
        )

    def tearDown(self):
        plt.close("all")

    def test_build_utilization_matrix(self):
        matrix, user_ids, dates = build_utilization_matrix(self.calendar)
        self.assertEqual(user_ids, ["ana", "ben"])
        self.assertEqual(len(dates), 4)
        self.assertEqual(matrix.shape, (2, 4))
        self.assertEqual(matrix[0, 0], 50.0)
        # 4h from T1 plus 6h from T2 on day two, unclamped
        self.assertEqual(matrix[0, 1], 125.0)
        self.assertEqual(matrix[1, 1], 150.0)
        self.assertTrue(math.isnan(matrix[1, 0]))

    def test_matrix_row_order(self):
        matrix, user_ids, _ = build_utilization_matrix(self.calendar, ["ben"])
        self.assertEqual(user_ids, ["ben"])
        self.assertEqual(matrix.shape, (1, 4))

    def test_level_colours_match_workload_levels_at_band_edges(self):
        """A load exactly on a threshold keeps the colour of its WorkloadLevel."""
        thresholds = get_default_config()["load_levels"]
        loads = np.array([[50.0, 50.5, 70.0, 85.0, 100.0, 100.5, np.nan]])
        levels = build_level_matrix(loads, thresholds)
        expected = [
            WorkloadLevel.LIGHT,
            WorkloadLevel.MODERATE,
            WorkloadLevel.MODERATE,
            WorkloadLevel.ELEVATED,
            WorkloadLevel.HIGH,
            WorkloadLevel.OVERLOADED,
        ]
        self.assertEqual([LEVEL_ORDER[int(i)] for i in levels[0, :6]], expected)
        self.assertTrue(math.isnan(levels[0, 6]))

    def test_level_colours_follow_configured_thresholds(self):
        thresholds = dict(get_default_config()["load_levels"], moderate_percent=40)
        levels = build_level_matrix(np.array([[45.0]]), thresholds)
        self.assertEqual(LEVEL_ORDER[int(levels[0, 0])], WorkloadLevel.MODERATE)

    def test_heatmap(self):
        fig = create_workload_heatmap(
            self.calendar, show=False, user_names={"ana": "Ana"}
        )
        self.assertIsNotNone(fig)
        self.assertEqual(len(fig.axes), 2)

    def test_heatmap_saved_to_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            filename = os.path.join(tmpdir, "heatmap.png")
            create_workload_heatmap(self.calendar, filename=filename, show=False)
            self.assertTrue(os.path.exists(filename))

    def test_heatmap_of_empty_calendar(self):
        self.assertIsNone(create_workload_heatmap([], show=False))

    def test_timeline_chart(self):
        now = DAY + timedelta(days=5)
        analysis = self.engine.analyze_timeline(self.tasks, "IN_PROGRESS", now)
        self.assertTrue(analysis.is_delayed)
        fig = create_timeline_chart(self.tasks, analysis, now, show=False)
        self.assertIsNotNone(fig)
        # Two scheduled tasks, the unscheduled one is left out
        self.assertEqual(len(fig.axes[0].get_yticklabels()), 2)

    def test_timeline_chart_without_schedule(self):
        tasks = [Task("T1", "Loose")]
        analysis = self.engine.analyze_timeline(tasks, "IN_PROGRESS", DAY)
        self.assertIsNone(create_timeline_chart(tasks, analysis, DAY, show=False))


if __name__ == "__main__":
    unittest.main()
