import numpy as np
import pytest

from odpairs.exceptions import GraphFormatError
from odpairs.graph import Graph
from odpairs.graph_numpy import NumpyGraph


def test_from_graph_builds_csr_offsets():
    g = Graph.from_edges(3, [(0, 1, 5.0, 1.0), (0, 2, 7.0, 2.0), (2, 1, 3.0, 3.0)])
    ng = NumpyGraph.from_graph(g)
    assert ng.n == 3
    assert ng.m == 3
    assert ng.first_out.tolist() == [0, 2, 2, 3]
    assert ng.head.tolist() == [1, 2, 1]
    assert ng.length.tolist() == [5.0, 7.0, 3.0]
    assert ng.travel_time.tolist() == [1.0, 2.0, 3.0]
    assert [ng.out_degree(u) for u in range(3)] == [2, 0, 1]


def test_round_trip_through_graph(road):
    assert list(NumpyGraph.from_graph(road).to_graph().edges()) == list(road.edges())


def test_save_and_load(tmp_path, cycle5):
    path = tmp_path / "cycle.bin"
    NumpyGraph.from_graph(cycle5).save(path)
    assert path.exists()
    loaded = NumpyGraph.load(path)
    assert loaded.first_out.tolist() == NumpyGraph.from_graph(cycle5).first_out.tolist()


@pytest.mark.parametrize(
    "first_out, head, length, travel_time",
    [
        ([0], [], [], []),
        ([0, 1], [0, 0], [1.0], [1.0]),
        ([0, 2, 1], [0, 1], [1.0, 1.0], [1.0, 1.0]),
        ([0, 1, 1], [2], [1.0], [1.0]),
        ([0, 1, 1], [1], [-1.0], [1.0]),
        ([0, 1, 1], [1], [1.0], [np.inf]),
    ],
)
def test_invalid_arrays(first_out, head, length, travel_time):
    with pytest.raises(GraphFormatError):
        NumpyGraph(
            np.array(first_out),
            np.array(head, dtype=np.int64),
            np.array(length, dtype=np.float64),
            np.array(travel_time, dtype=np.float64),
        )


def test_load_reports_missing_arrays(tmp_path):
    path = tmp_path / "partial.npz"
    np.savez(path, first_out=np.array([0, 0]))
    with pytest.raises(GraphFormatError):
        NumpyGraph.load(path)
