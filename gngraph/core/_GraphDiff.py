class GraphDiff:
    """Represents the difference between two graph states.

    Attributes
    --
    vertices_added : set
        Vertex indices live in b but not in a
    vertices_removed : set
        Vertex indices live in a but not in b
    edges_added : collections.Counter
        ``(tail, head)`` pairs with more records in b than in a
    edges_removed : collections.Counter
        ``(tail, head)`` pairs with more records in a than in b

    Notes
    -
    Indices are slot positions, so a vertex erased and recycled between the
    two states is reported only through its edges.

    """

    def __init__(self, snapshot_a, snapshot_b):
        self.snapshot_a = snapshot_a
        self.snapshot_b = snapshot_b

        # Compute differences
        self.vertices_added = snapshot_b["vertex_ids"] - snapshot_a["vertex_ids"]
        self.vertices_removed = snapshot_a["vertex_ids"] - snapshot_b["vertex_ids"]
        self.edges_added = snapshot_b["edge_pairs"] - snapshot_a["edge_pairs"]
        self.edges_removed = snapshot_a["edge_pairs"] - snapshot_b["edge_pairs"]

    def summary(self):
        """Human-readable summary of differences."""
        lines = [
            f"Diff: {self.snapshot_a['label']} - {self.snapshot_b['label']}",
            "",
            f"Vertices: {len(self.vertices_added):+d} added, {len(self.vertices_removed)} removed",
            f"Edges: {self.edges_added.total():+d} added, {self.edges_removed.total()} removed",
        ]
        return "\n".join(lines)

    def is_empty(self):
        """Check if there are no differences."""
        return (
            not self.vertices_added
            and not self.vertices_removed
            and not self.edges_added
            and not self.edges_removed
        )

    def __repr__(self):
        return self.summary()

    def to_dict(self):
        return {
            "snapshot_a": self.snapshot_a["label"],
            "snapshot_b": self.snapshot_b["label"],
            "vertices_added": sorted(self.vertices_added),
            "vertices_removed": sorted(self.vertices_removed),
            "edges_added": sorted(self.edges_added.elements()),
            "edges_removed": sorted(self.edges_removed.elements()),
        }