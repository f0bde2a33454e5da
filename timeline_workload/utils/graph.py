import networkx as nx


class GraphError(ValueError):
    """Exception raised for invalid dependency graphs."""

    pass


class DependencyGraph:
    """
    Directed task dependency store that refuses cycles.

    An edge ``from_id -> to_id`` means ``to_id`` depends on ``from_id``.
    """

    def __init__(self):
        self.graph = nx.DiGraph()

    @classmethod
    def from_tasks(cls, tasks):
        """Build a directed graph representing task dependencies"""
        dependency_graph = cls()
        task_ids = {task.id for task in tasks}

        # Add task nodes
        for task in tasks:
            dependency_graph.graph.add_node(task.id, task=task)

        # Add task dependencies (edges)
        for task in tasks:
            for dep_id in task.dependencies:
                if dep_id in task_ids:  # Ensure dependency exists
                    dependency_graph.graph.add_edge(dep_id, task.id)

        # Check for cycles
        if not nx.is_directed_acyclic_graph(dependency_graph.graph):
            raise GraphError("Task dependencies contain cycles!")

        return dependency_graph

    def add_node(self, node_id):
        self.graph.add_node(node_id)

    def would_create_cycle(self, from_id, to_id):
        """Adding ``from_id -> to_id`` closes a cycle when ``to_id`` already reaches ``from_id``."""
        if from_id == to_id:
            return True
        if from_id not in self.graph or to_id not in self.graph:
            return False
        return nx.has_path(self.graph, to_id, from_id)

    def add_edge(self, from_id, to_id):
        """
        Add a dependency unless it would create a cycle.

        Args:
            from_id: The predecessor task
            to_id: The dependent task

        Returns:
            bool: True if the edge is present afterwards, False if it was refused
        """
        if self.would_create_cycle(from_id, to_id):
            return False
        self.graph.add_edge(from_id, to_id)
        return True

    def remove_edge(self, from_id, to_id):
        """Remove a dependency; False when there was none."""
        if not self.graph.has_edge(from_id, to_id):
            return False
        self.graph.remove_edge(from_id, to_id)
        return True

    def predecessors(self, node_id):
        if node_id not in self.graph:
            return []
        return sorted(self.graph.predecessors(node_id), key=str)

    def successors(self, node_id):
        if node_id not in self.graph:
            return []
        return sorted(self.graph.successors(node_id), key=str)

    def critical_path(self, durations):
        """
        Find the zero-slack chain of tasks with a forward and backward pass.

        Args:
            durations: Dict of duration (days) keyed by node id; missing nodes count as 0

        Returns:
            list: Critical node ids in topological order
        """
        if not self.graph.nodes:
            return []

        order = list(nx.lexicographical_topological_sort(self.graph, key=str))

        # Forward pass: early start and early finish
        early_finish = {}
        early_start = {}
        for node_id in order:
            early_start[node_id] = max(
                (early_finish[p] for p in self.graph.predecessors(node_id)),
                default=0,
            )
            early_finish[node_id] = early_start[node_id] + durations.get(node_id, 0)

        project_duration = max(early_finish.values())

        # Backward pass: late start, then slack
        late_start = {}
        for node_id in reversed(order):
            late_finish = min(
                (late_start[s] for s in self.graph.successors(node_id)),
                default=project_duration,
            )
            late_start[node_id] = late_finish - durations.get(node_id, 0)

        return [
            node_id
            for node_id in order
            if abs(late_start[node_id] - early_start[node_id]) < 1e-9
        ]
