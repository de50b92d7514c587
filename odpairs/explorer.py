"""Incremental single-source shortest-path exploration.

The explorer runs Dijkstra's algorithm lazily: vertices are produced one at
a time in the order they are settled, so a caller can stop as soon as it has
seen enough of the graph. Rank-bounded and distance-bounded queries are two
ways of consuming the same generator.
"""

from __future__ import annotations

import heapq
import math
from dataclasses import dataclass
from typing import Dict, Iterator, List, Set, Tuple

from .exceptions import AlgorithmError, ConfigError, ExplorationExhausted, InputError
from .graph import Float, Graph, Vertex
from .logger import Logger, NoopLogger


@dataclass(frozen=True)
class SettledVertex:
    """A vertex together with its final distance and Dijkstra rank."""

    vertex: Vertex
    distance: Float
    rank: int


class ShortestPathExplorer:
    """Dijkstra expansion over the active cost of a :class:`Graph`.

    Each call to :meth:`expand_from` owns its distance labels and heap; nothing
    is shared between explorations apart from the read-only graph.
    """

    def __init__(
        self,
        G: Graph,
        cost: str = "travel_time",
        logger: Logger | None = None,
    ) -> None:
        """Initialize the explorer.

        Args:
            G: Input graph.
            cost: Edge attribute used as cost, ``"travel_time"`` or ``"length"``.
            logger: Optional event logger.
        """
        self.G = G
        self.cost = cost
        self.logger = logger or NoopLogger()
        self._adj: List[List[Tuple[Vertex, Float]]] = G.cost_adjacency(cost)
        self.counters: Dict[str, int] = {
            "explorations": 0,
            "vertices_settled": 0,
            "edges_relaxed": 0,
        }

    def expand_from(self, source: Vertex) -> Iterator[SettledVertex]:
        """Yield vertices reachable from ``source`` by increasing distance.

        Rank 1 is ``source`` itself at distance ``0``. Ties are settled by
        smaller vertex id. The generator ends when the frontier is empty.

        Args:
            source: Vertex to explore from.

        Raises:
            InputError: If ``source`` is not a valid vertex id.
            AlgorithmError: If a negative or non-finite cost is relaxed.
        """
        if not (0 <= source < self.G.n):
            raise InputError(f"source {source} is not a vertex id in [0, {self.G.n}).")
        self.counters["explorations"] += 1

        dist: Dict[Vertex, Float] = {source: 0.0}
        settled: Set[Vertex] = set()
        pq: List[Tuple[Float, Vertex]] = [(0.0, source)]
        rank = 0
        while pq:
            d_u, u = heapq.heappop(pq)
            # lazy deletion
            if u in settled:
                continue
            settled.add(u)
            rank += 1
            self.counters["vertices_settled"] += 1
            yield SettledVertex(u, d_u, rank)

            for v, w in self._adj[u]:
                self.counters["edges_relaxed"] += 1
                if not (0.0 <= w < math.inf):
                    raise AlgorithmError(f"invalid cost {w} on edge ({u}, {v})")
                if v in settled:
                    continue
                nd = d_u + w
                if nd < dist.get(v, math.inf):
                    dist[v] = nd
                    heapq.heappush(pq, (nd, v))

    def settle_until_rank(self, source: Vertex, rank: int) -> SettledVertex:
        """Return the vertex settled at position ``rank`` from ``source``.

        Raises:
            ConfigError: If ``rank`` is smaller than 1.
            ExplorationExhausted: If fewer than ``rank`` vertices are reachable.
        """
        if rank < 1:
            raise ConfigError("Dijkstra rank must be at least 1.")
        count = 0
        for sv in self.expand_from(source):
            count = sv.rank
            if sv.rank == rank:
                return sv
        self.logger.debug("exhausted", source=source, settled=count, rank=rank)
        raise ExplorationExhausted(source, count, rank=rank)

    def settle_until_distance(self, source: Vertex, distance: Float) -> SettledVertex:
        """Return the first vertex settled at or beyond ``distance``.

        The result may lie past ``distance`` when no vertex sits exactly at it.

        Raises:
            ConfigError: If ``distance`` is negative or not a number.
            ExplorationExhausted: If every reachable vertex is closer.
        """
        if not distance >= 0:
            raise ConfigError("target distance must be non-negative.")
        count = 0
        for sv in self.expand_from(source):
            count = sv.rank
            if sv.distance >= distance:
                return sv
        self.logger.debug("exhausted", source=source, settled=count, distance=distance)
        raise ExplorationExhausted(source, count, distance=distance)

    def summary(self) -> Dict[str, int]:
        """Return a copy of internal counter values."""
        return dict(self.counters)
