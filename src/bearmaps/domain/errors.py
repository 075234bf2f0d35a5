# bearmaps/domain/errors.py


class UnknownVertexError(KeyError):
    """Vertex id is not present in the graph."""

    def __init__(self, vertex_id):
        super().__init__(vertex_id)
        self.vertex_id = vertex_id

    def __str__(self) -> str:
        return f"unknown vertex {self.vertex_id!r}"


class EmptyGraphError(LookupError):
    pass


class GraphFinalizedError(RuntimeError):
    pass
