"""Static directed graph with two cost attributes per edge."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Tuple

from .exceptions import ConfigError, GraphFormatError, InputError

Vertex = int
Float = float
Edge = Tuple[Vertex, Vertex, Float, Float]

COST_METRICS: Tuple[str, ...] = ("travel_time", "length")


def check_cost_metric(metric: str) -> str:
    """Return ``metric`` if it names a known edge cost.

    Raises:
        ConfigError: If ``metric`` is not one of :data:`COST_METRICS`.
    """
    if metric not in COST_METRICS:
        raise ConfigError(f"unknown cost metric '{metric}' (expected one of {', '.join(COST_METRICS)})")
    return metric


def _check_cost(u: Vertex, v: Vertex, name: str, value: object) -> Float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise GraphFormatError(f"non-numeric {name} {value!r} on edge ({u}, {v})")
    if not math.isfinite(value):
        raise GraphFormatError(f"non-finite {name} {value} on edge ({u}, {v})")
    if value < 0:
        raise GraphFormatError(f"negative {name} {value} on edge ({u}, {v})")
    return float(value)


@dataclass
class Graph:
    """Directed graph whose edges carry a physical length and a travel time.

    Both costs must be finite and non-negative. Which of them weights the
    edges during exploration is chosen per run through
    :meth:`cost_adjacency`; the graph itself is never rewritten.

    Attributes:
        n: Number of vertices in the range ``0`` .. ``n-1``.
        adj: Outgoing adjacency lists of ``(head, length, travel_time)``.
    """

    n: int

    def __post_init__(self) -> None:
        """Validate vertex count and initialize adjacency lists."""
        if isinstance(self.n, bool) or not isinstance(self.n, int) or self.n <= 0:
            raise InputError("Graph.n must be a positive integer.")
        self.adj: List[List[Tuple[Vertex, Float, Float]]] = [[] for _ in range(self.n)]

    def add_edge(self, u: Vertex, v: Vertex, length: Float, travel_time: Float) -> None:
        """Add a directed edge from ``u`` to ``v``.

        Args:
            u: Tail vertex.
            v: Head vertex.
            length: Non-negative physical length.
            travel_time: Non-negative travel time.

        Raises:
            InputError: If ``u`` or ``v`` are out of range.
            GraphFormatError: If a cost is non-numeric, non-finite or negative.

        Examples:
            ```python
            >>> g = Graph(2)
            >>> g.add_edge(0, 1, 120.0, 9.0)
            >>> g.adj
            [[(1, 120.0, 9.0)], []]
            ```
        """
        if not (0 <= u < self.n and 0 <= v < self.n):
            raise InputError("u and v must be vertex ids in [0, n).")
        ln = _check_cost(u, v, "length", length)
        tt = _check_cost(u, v, "travel time", travel_time)
        self.adj[u].append((int(v), ln, tt))

    @classmethod
    def from_edges(cls, n: int, edges: Iterable[Edge]) -> "Graph":
        """Create a graph from an iterable of ``(u, v, length, travel_time)`` edges."""
        g = cls(n)
        for u, v, length, travel_time in edges:
            g.add_edge(int(u), int(v), length, travel_time)
        return g

    def edges(self) -> Iterator[Edge]:
        """Yield every edge as ``(u, v, length, travel_time)``."""
        for u in range(self.n):
            for v, length, travel_time in self.adj[u]:
                yield u, v, length, travel_time

    @property
    def m(self) -> int:
        """Number of edges."""
        return sum(len(lst) for lst in self.adj)

    def out_degree(self, u: Vertex) -> int:
        """Return the out-degree of vertex ``u``."""
        return len(self.adj[u])

    def cost_adjacency(self, metric: str = "travel_time") -> List[List[Tuple[Vertex, Float]]]:
        """Return the ``(head, cost)`` adjacency lists under ``metric``.

        Args:
            metric: ``"travel_time"`` or ``"length"``.

        Returns:
            A fresh list per vertex; the graph is left untouched.
        """
        idx = 2 if check_cost_metric(metric) == "travel_time" else 1
        return [[(e[0], e[idx]) for e in lst] for lst in self.adj]
