from __future__ import annotations

import random
from typing import List

import networkx as nx
import pytest

from odpairs.generator import generate_graph
from odpairs.graph import Graph


class ScriptedRandom(random.Random):
    """Random stream whose ``randrange`` replays fixed values first."""

    def __init__(self, values: List[int], seed: int = 0) -> None:
        super().__init__(seed)
        self._values = list(values)

    def randrange(self, *args, **kwargs):  # type: ignore[override]
        if self._values:
            return self._values.pop(0)
        return super().randrange(*args, **kwargs)


def to_networkx(G: Graph, cost: str = "travel_time") -> nx.DiGraph:
    idx = 2 if cost == "travel_time" else 1
    nxg = nx.DiGraph()
    nxg.add_nodes_from(range(G.n))
    for u in range(G.n):
        for e in G.adj[u]:
            nxg.add_edge(u, e[0], weight=e[idx])
    return nxg


@pytest.fixture
def cycle5() -> Graph:
    return generate_graph(n=5, graph_type="cycle", weight_dist="unit")


@pytest.fixture
def road() -> Graph:
    return generate_graph(n=80, m=240, graph_type="erdos_renyi", seed=3)


@pytest.fixture
def isolated_pair() -> Graph:
    return Graph(2)
