"""FlowGraph: networkx view over a resolved flow.

Wraps a MultiDiGraph so renderers and the CLI can ask topology questions
(successors, reachability) without re-walking edge lists. The graph is
built once from a FlowStructure and its edges and is never mutated
afterwards; a new parse produces a new FlowGraph.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import networkx as nx
from networkx import MultiDiGraph

from flowedit.contracts.enums import NodeRole
from flowedit.core.flow.models import Edge, FlowStructure, Node


@dataclass(frozen=True, slots=True)
class FlowWarning:
    """Non-fatal finding about a flow.

    Unlike the errors in flowedit.contracts.errors, warnings never stop a
    graph from being drawn. They point at configurations that are valid
    markup but probably not what the author meant.
    """

    code: str
    message: str
    node_ids: tuple[str, ...]


class FlowGraph:
    """Directed multigraph of one flow.

    Node keys are uids; the implicit exit of a pipeline without Exit
    elements appears under its bare path with ``node=None`` data.
    """

    def __init__(self, structure: FlowStructure) -> None:
        self._structure = structure
        self._graph: MultiDiGraph[str] = nx.MultiDiGraph()

    @classmethod
    def from_structure(cls, structure: FlowStructure, edges: Sequence[Edge]) -> FlowGraph:
        """Build the graph view for a parsed flow.

        Args:
            structure: Assembled flow structure
            edges: Edges from resolve_forwards() for the same structure
        """
        graph = cls(structure)
        for node in structure.nodes:
            assert node.uid is not None  # assigned by assemble()
            graph._graph.add_node(node.uid, node=node, role=node.role)
        for edge in edges:
            if not graph._graph.has_node(edge.target):
                graph._graph.add_node(edge.target, node=None, role=NodeRole.EXIT)
            graph._graph.add_edge(edge.source, edge.target, key=edge.label, edge=edge)
        return graph

    @property
    def node_count(self) -> int:
        return self._graph.number_of_nodes()

    @property
    def edge_count(self) -> int:
        return self._graph.number_of_edges()

    def has_node(self, uid: str) -> bool:
        return self._graph.has_node(uid)

    def node(self, uid: str) -> Node | None:
        """The Node behind a uid; None for the implicit exit."""
        data: dict[str, Any] = self._graph.nodes[uid]
        node: Node | None = data["node"]
        return node

    def get_nx_graph(self) -> MultiDiGraph[str]:
        """Return a frozen copy of the underlying networkx graph."""
        return nx.freeze(self._graph.copy())  # type: ignore[no-any-return]

    def successors(self, uid: str) -> list[str]:
        """Distinct targets of a node's outgoing edges, in edge order."""
        return list(dict.fromkeys(target for _, target in self._graph.out_edges(uid)))

    def predecessors(self, uid: str) -> list[str]:
        return list(dict.fromkeys(source for source, _ in self._graph.in_edges(uid)))

    def edges_from(self, uid: str) -> list[Edge]:
        return [data["edge"] for _, _, data in self._graph.out_edges(uid, data=True)]

    def entry_points(self) -> list[str]:
        """Uids the flow starts from: the receivers and the first pipe."""
        entries: list[str] = [str(node.uid) for node in self._structure.receivers]
        first_pipe_uid = self._structure.first_pipe_uid
        if first_pipe_uid is not None and first_pipe_uid not in entries:
            entries.append(first_pipe_uid)
        return entries

    def unreachable_nodes(self) -> list[str]:
        """Pipes and exits no path from an entry point reaches, in source order."""
        entries = self.entry_points()
        if not entries:
            return []
        reachable: set[str] = set(entries)
        for entry in entries:
            reachable |= nx.descendants(self._graph, entry)
        return [
            str(node.uid)
            for node in self._structure.nodes
            if node.role in (NodeRole.PIPE, NodeRole.EXIT) and node.uid not in reachable
        ]

    def warnings(self) -> list[FlowWarning]:
        """Non-fatal findings: unreachable nodes and dead-end pipes."""
        found: list[FlowWarning] = []
        unreachable = self.unreachable_nodes()
        if unreachable:
            found.append(
                FlowWarning(
                    code="unreachable_node",
                    message=f"{len(unreachable)} node(s) cannot be reached from the receiver or first pipe",
                    node_ids=tuple(unreachable),
                )
            )

        dead_ends = [
            str(pipe.uid)
            for pipe in self._structure.pipes
            if self._graph.out_degree(pipe.uid) == 0 and pipe.uid != self._structure.last_pipe
        ]
        if dead_ends:
            found.append(
                FlowWarning(
                    code="dead_end_pipe",
                    message=f"{len(dead_ends)} pipe(s) have no outgoing forward",
                    node_ids=tuple(dead_ends),
                )
            )
        return found
