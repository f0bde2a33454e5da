import unittest

from timeline_workload.domain.task import Task
from timeline_workload.utils.graph import DependencyGraph, GraphError


class DependencyGraphTestCase(unittest.TestCase):
    def setUp(self):
        self.graph = DependencyGraph()
        for node_id in ["A", "B", "C", "D"]:
            self.graph.add_node(node_id)

    def test_add_edge(self):
        self.assertTrue(self.graph.add_edge("A", "B"))
        self.assertTrue(self.graph.add_edge("A", "B"))
        self.assertEqual(self.graph.successors("A"), ["B"])
        self.assertEqual(self.graph.predecessors("B"), ["A"])

    def test_self_edge_refused(self):
        self.assertTrue(self.graph.would_create_cycle("A", "A"))
        self.assertFalse(self.graph.add_edge("A", "A"))

    def test_cycle_refused(self):
        self.graph.add_edge("A", "B")
        self.graph.add_edge("B", "C")
        self.assertTrue(self.graph.would_create_cycle("C", "A"))
        self.assertFalse(self.graph.add_edge("C", "A"))
        self.assertFalse(self.graph.graph.has_edge("C", "A"))
        self.assertFalse(self.graph.would_create_cycle("A", "C"))

    def test_unknown_nodes_never_close_a_cycle(self):
        self.assertFalse(self.graph.would_create_cycle("A", "Z"))
        self.assertEqual(self.graph.successors("Z"), [])

    def test_remove_edge(self):
        self.graph.add_edge("A", "B")
        self.assertTrue(self.graph.remove_edge("A", "B"))
        self.assertFalse(self.graph.remove_edge("A", "B"))
        self.assertTrue(self.graph.add_edge("B", "A"))

    def test_from_tasks(self):
        tasks = [
            Task("T1"),
            Task("T2", dependencies=["T1"]),
            Task("T3", dependencies=["T1", "T2", "missing"]),
        ]
        graph = DependencyGraph.from_tasks(tasks)
        self.assertEqual(graph.predecessors("T3"), ["T1", "T2"])
        self.assertNotIn("missing", graph.graph)

    def test_from_tasks_with_cycle(self):
        tasks = [Task("T1", dependencies=["T2"]), Task("T2", dependencies=["T1"])]
        with self.assertRaises(GraphError):
            DependencyGraph.from_tasks(tasks)

    def test_critical_path(self):
        self.graph.add_edge("A", "B")
        self.graph.add_edge("A", "C")
        self.graph.add_edge("B", "D")
        self.graph.add_edge("C", "D")
        path = self.graph.critical_path({"A": 3, "B": 2, "C": 1, "D": 1})
        self.assertEqual(path, ["A", "B", "D"])

    def test_critical_path_of_parallel_chains(self):
        # Equal chains are both critical
        self.graph.add_edge("A", "B")
        self.graph.add_edge("C", "D")
        path = self.graph.critical_path({"A": 2, "B": 2, "C": 3, "D": 1})
        self.assertEqual(path, ["A", "B", "C", "D"])

    def test_critical_path_of_empty_graph(self):
        self.assertEqual(DependencyGraph().critical_path({}), [])


if __name__ == "__main__":
    unittest.main()
