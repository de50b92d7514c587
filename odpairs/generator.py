"""Synthetic road-like graphs for experiments and tests.

SUPPORTED GRAPH TYPES
---------------------
1. cycle
   Bidirectional ring ``0 - 1 - ... - n-1 - 0``. Every vertex has exactly two
   neighbours, which makes Dijkstra ranks easy to reason about.

2. grid
   Near-square 2D grid with bidirectional edges between 4-neighbours, the
   usual stand-in for a street network.

3. erdos_renyi
   Random directed edges on top of a bidirectional backbone ``i <-> i+1`` so
   that every vertex can reach every other one.

WEIGHT DISTRIBUTIONS
--------------------
- road: integer lengths in metres and a per-edge speed; travel time is
  ``length / speed`` in whole seconds (at least 1).
- unit: length and travel time are both 1.
"""

from __future__ import annotations

import math
import random
from typing import Literal, Optional, Set, Tuple

from .exceptions import ConfigError
from .graph import Graph

GraphType = Literal["cycle", "grid", "erdos_renyi"]
WeightDist = Literal["road", "unit"]

GRAPH_TYPES: Tuple[str, ...] = ("cycle", "grid", "erdos_renyi")


def _sample_costs(
    rng: random.Random,
    dist: WeightDist,
    min_length: int,
    max_length: int,
    min_speed_kph: float,
    max_speed_kph: float,
) -> Tuple[float, float]:
    if dist == "unit":
        return 1.0, 1.0
    if dist == "road":
        length = rng.randint(min_length, max_length)
        speed_mps = rng.uniform(min_speed_kph, max_speed_kph) * 1000.0 / 3600.0
        return float(length), float(max(1, round(length / speed_mps)))
    raise ConfigError(f"Unknown weight distribution: {dist}")


def generate_graph(
    *,
    n: int,
    m: Optional[int] = None,
    graph_type: GraphType = "grid",
    weight_dist: WeightDist = "road",
    seed: Optional[int] = 0,
    min_length: int = 20,
    max_length: int = 500,
    min_speed_kph: float = 20.0,
    max_speed_kph: float = 90.0,
) -> Graph:
    """Generate a directed graph with length and travel-time costs.

    Args:
        n: Number of vertices.
        m: Target edge count for ``erdos_renyi`` (default ``4 * n``);
            ignored by the other types.
        graph_type: One of :data:`GRAPH_TYPES`.
        weight_dist: ``"road"`` or ``"unit"``.
        seed: Seed of the private random stream.
        min_length: Smallest edge length in metres.
        max_length: Largest edge length in metres.
        min_speed_kph: Lowest edge speed.
        max_speed_kph: Highest edge speed.

    Returns:
        The generated graph. Antiparallel edges get independent costs.

    Raises:
        ConfigError: If a parameter is out of range.
    """
    if n <= 0:
        raise ConfigError("n must be > 0.")
    if min_length < 0 or max_length < min_length:
        raise ConfigError("need 0 <= min_length <= max_length.")
    if min_speed_kph <= 0 or max_speed_kph < min_speed_kph:
        raise ConfigError("need 0 < min_speed_kph <= max_speed_kph.")
    if m is not None and m < 0:
        raise ConfigError("m must be >= 0.")

    rng = random.Random(seed)
    g = Graph(n)
    seen: Set[Tuple[int, int]] = set()

    def add_edge(u: int, v: int) -> None:
        if u == v or (u, v) in seen:
            return
        seen.add((u, v))
        length, travel_time = _sample_costs(
            rng, weight_dist, min_length, max_length, min_speed_kph, max_speed_kph
        )
        g.add_edge(u, v, length, travel_time)

    if graph_type == "cycle":
        for u in range(n):
            v = (u + 1) % n
            add_edge(u, v)
            add_edge(v, u)

    elif graph_type == "grid":
        cols = max(1, math.isqrt(n))
        for u in range(n):
            c = u % cols
            # right neighbour
            if c + 1 < cols and u + 1 < n:
                add_edge(u, u + 1)
                add_edge(u + 1, u)
            # down neighbour
            if u + cols < n:
                add_edge(u, u + cols)
                add_edge(u + cols, u)

    elif graph_type == "erdos_renyi":
        for u in range(n - 1):
            add_edge(u, u + 1)
            add_edge(u + 1, u)
        target_m = min(m if m is not None else 4 * n, n * (n - 1))
        while len(seen) < target_m:
            add_edge(rng.randrange(n), rng.randrange(n))

    else:
        raise ConfigError(f"Unknown graph_type: {graph_type}")

    return g
