import io
import random

import networkx as nx
import pytest

from odpairs.exceptions import ConfigError, ExplorationExhausted
from odpairs.generator import generate_graph
from odpairs.graph import Graph
from odpairs.logger import StdLogger
from odpairs.sampler import ODPairSampler, OriginDestination, geometric_variate

from .conftest import ScriptedRandom, to_networkx

# chi-square critical value, 9 degrees of freedom, alpha = 0.001
CHI2_CRIT_DF9 = 27.877


def _chi_square(counts, expected):
    return sum((c - expected) ** 2 / expected for c in counts)


def test_uniform_pairs_are_uniform():
    G = generate_graph(n=10, graph_type="cycle", weight_dist="unit")
    sampler = ODPairSampler(G, random.Random(2024))
    draws = 5000
    origins = [0] * G.n
    destinations = [0] * G.n
    for _ in range(draws):
        pair = sampler.random_pair()
        origins[pair.origin] += 1
        destinations[pair.destination] += 1
    assert _chi_square(origins, draws / G.n) < CHI2_CRIT_DF9
    assert _chi_square(destinations, draws / G.n) < CHI2_CRIT_DF9


def test_uniform_pair_draws_origin_then_destination():
    G = generate_graph(n=10, graph_type="grid", weight_dist="unit")
    rng = random.Random(11)
    expected = random.Random(11)
    pair = ODPairSampler(G, rng).random_pair()
    assert pair == OriginDestination(expected.randrange(10), expected.randrange(10))


def test_cycle_rank_two_from_vertex_zero(cycle5):
    sampler = ODPairSampler(cycle5, ScriptedRandom([0]))
    assert sampler.pair_by_dijkstra_rank(2) == OriginDestination(0, 1, dijkstra_rank=2)


def test_cycle_rank_two_is_reproducible_for_a_seed(cycle5):
    origin = random.Random(7).randrange(5)
    nearest = min((origin - 1) % 5, (origin + 1) % 5)
    pairs = [ODPairSampler(cycle5, random.Random(7)).pair_by_dijkstra_rank(2) for _ in range(3)]
    assert pairs == [OriginDestination(origin, nearest, dijkstra_rank=2)] * 3


@pytest.mark.parametrize("cost", ["travel_time", "length"])
def test_rank_selected_destination_has_rank_order_distance(road, cost):
    sampler = ODPairSampler(road, random.Random(5), cost=cost)
    reference = to_networkx(road, cost)
    for k in range(7):
        rank = 1 << k
        pair = sampler.pair_by_dijkstra_rank(rank)
        assert pair.dijkstra_rank == rank
        dist = nx.single_source_dijkstra_path_length(reference, pair.origin)
        ordered = sorted(dist.values())
        assert dist[pair.destination] == pytest.approx(ordered[rank - 1])
        assert all(d <= dist[pair.destination] for d in ordered[: rank - 1])
        assert all(d >= dist[pair.destination] for d in ordered[rank:])


def test_rank_one_returns_origin(road):
    pair = ODPairSampler(road, random.Random(1)).pair_by_dijkstra_rank(1)
    assert pair.destination == pair.origin


def test_single_vertex_graph_pairs_with_itself():
    sampler = ODPairSampler(Graph(1), random.Random(0))
    assert sampler.random_pair() == OriginDestination(0, 0)
    assert sampler.pair_by_dijkstra_rank(1) == OriginDestination(0, 0, dijkstra_rank=1)
    assert sampler.pair_by_distance(0) == OriginDestination(0, 0)


def test_exact_distance_is_hit_when_a_vertex_lies_on_it(road):
    sampler = ODPairSampler(road, ScriptedRandom([4]), cost="length")
    reference = nx.single_source_dijkstra_path_length(to_networkx(road, "length"), 4)
    target = sorted(reference.values())[30]
    pair = sampler.pair_by_distance(target)
    assert pair.origin == 4
    assert pair.dijkstra_rank is None
    assert reference[pair.destination] == target


def test_distance_mode_may_overshoot_the_target():
    g = Graph.from_edges(2, [(0, 1, 10.0, 10.0)])
    sampler = ODPairSampler(g, ScriptedRandom([0]))
    assert sampler.pair_by_distance(5) == OriginDestination(0, 1)


def test_geometric_target_is_met_or_overshot_by_nearest_distance():
    # bidirectional cycle with cost 3: distances are multiples of 3 up to 60
    n = 40
    edges = []
    for u in range(n):
        edges += [(u, (u + 1) % n, 3.0, 3.0), ((u + 1) % n, u, 3.0, 3.0)]
    G = Graph.from_edges(n, edges)
    sampler = ODPairSampler(G, random.Random(3))
    replay = random.Random(3)
    reference = to_networkx(G)
    exact = overshot = 0
    for _ in range(60):
        origin = replay.randrange(n)
        target = geometric_variate(replay, 1.0 / 10)
        dist = nx.single_source_dijkstra_path_length(reference, origin)
        try:
            pair = sampler.pair_by_distance(10, geometric=True)
        except ExplorationExhausted:
            assert max(dist.values()) < target
            continue
        assert pair.origin == origin
        got = dist[pair.destination]
        assert got >= target
        assert got == min(d for d in dist.values() if d >= target)
        if target in dist.values():
            assert got == target
            exact += 1
        else:
            assert got > target
            overshot += 1
    assert exact > 0
    assert overshot > 0


def test_exhaustion_is_signalled(isolated_pair):
    sampler = ODPairSampler(isolated_pair, random.Random(0))
    with pytest.raises(ExplorationExhausted):
        sampler.pair_by_dijkstra_rank(2)
    with pytest.raises(ExplorationExhausted):
        sampler.pair_by_distance(1)


def test_geometric_variate_mean_and_support():
    rng = random.Random(99)
    draws = [geometric_variate(rng, 1.0 / 50) for _ in range(20000)]
    assert min(draws) >= 1
    assert sum(draws) / len(draws) == pytest.approx(50, rel=0.05)
    assert geometric_variate(rng, 1.0) == 1


@pytest.mark.parametrize("p", [0.0, -0.1, 1.5])
def test_geometric_variate_rejects_bad_probability(p):
    with pytest.raises(ConfigError):
        geometric_variate(random.Random(0), p)


def test_sample_dispatches_on_mode(cycle5):
    a = ODPairSampler(cycle5, random.Random(8))
    b = ODPairSampler(cycle5, random.Random(8))
    assert a.sample("uniform") == b.random_pair()
    assert a.sample("rank", rank=4) == b.pair_by_dijkstra_rank(4)
    assert a.sample("distance", distance=2) == b.pair_by_distance(2)
    with pytest.raises(ConfigError):
        a.sample("nearest")
    with pytest.raises(ConfigError):
        a.sample("rank")


def test_invalid_requests(cycle5):
    sampler = ODPairSampler(cycle5, random.Random(0))
    with pytest.raises(ConfigError):
        sampler.pair_by_dijkstra_rank(0)
    with pytest.raises(ConfigError):
        sampler.pair_by_distance(-1)
    with pytest.raises(ConfigError):
        sampler.pair_by_distance(0.5, geometric=True)


def test_as_row():
    assert OriginDestination(3, 9).as_row() == [3, 9]
    assert OriginDestination(3, 9, dijkstra_rank=16).as_row() == [3, 9, 16]


def test_geometric_target_is_logged(cycle5):
    stream = io.StringIO()
    sampler = ODPairSampler(cycle5, ScriptedRandom([2]), logger=StdLogger(level="debug", stream=stream))
    sampler.pair_by_distance(1, geometric=True)
    assert stream.getvalue() == "debug target origin=2 distance=1 mean=1\n"
