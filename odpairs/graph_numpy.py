"""NumPy-backed graph in compressed sparse row form."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Union

import numpy as np
import numpy.typing as npt

from .exceptions import GraphFormatError
from .graph import Graph

PathLike = Union[str, Path]

_ARRAYS = ("first_out", "head", "length", "travel_time")


@dataclass
class NumpyGraph:
    """Directed graph stored as CSR arrays.

    The outgoing edges of ``u`` occupy ``first_out[u]:first_out[u + 1]`` in
    ``head``, ``length`` and ``travel_time``. This is the layout of the binary
    graph files consumed by the generator (``.npz``).
    """

    first_out: npt.NDArray[np.int64]
    head: npt.NDArray[np.int64]
    length: npt.NDArray[np.float64]
    travel_time: npt.NDArray[np.float64]

    def __post_init__(self) -> None:
        """Check array shapes, vertex ids and costs."""
        self.first_out = np.asarray(self.first_out, dtype=np.int64)
        self.head = np.asarray(self.head, dtype=np.int64)
        self.length = np.asarray(self.length, dtype=np.float64)
        self.travel_time = np.asarray(self.travel_time, dtype=np.float64)
        if self.first_out.ndim != 1 or self.first_out.shape[0] < 2:
            raise GraphFormatError("first_out must hold n + 1 offsets for n >= 1.")
        m = self.head.shape[0]
        if self.length.shape != (m,) or self.travel_time.shape != (m,):
            raise GraphFormatError("head, length and travel_time must have equal length.")
        if self.first_out[0] != 0 or self.first_out[-1] != m or np.any(np.diff(self.first_out) < 0):
            raise GraphFormatError("first_out must be non-decreasing from 0 to m.")
        if m and (self.head.min() < 0 or self.head.max() >= self.n):
            raise GraphFormatError("head contains vertex ids outside [0, n).")
        for name in ("length", "travel_time"):
            arr = getattr(self, name)
            if not np.all(np.isfinite(arr)) or np.any(arr < 0):
                raise GraphFormatError(f"{name} must be finite and non-negative.")

    @property
    def n(self) -> int:
        return int(self.first_out.shape[0] - 1)

    @property
    def m(self) -> int:
        return int(self.head.shape[0])

    def out_degree(self, u: int) -> int:
        """Return the out-degree of vertex ``u``."""
        return int(self.first_out[u + 1] - self.first_out[u])

    @classmethod
    def from_graph(cls, G: Graph) -> "NumpyGraph":
        """Pack a :class:`~odpairs.graph.Graph` into CSR arrays."""
        degrees = np.array([G.out_degree(u) for u in range(G.n)], dtype=np.int64)
        first_out = np.zeros(G.n + 1, dtype=np.int64)
        np.cumsum(degrees, out=first_out[1:])
        edges = list(G.edges())
        head = np.array([e[1] for e in edges], dtype=np.int64)
        length = np.array([e[2] for e in edges], dtype=np.float64)
        travel_time = np.array([e[3] for e in edges], dtype=np.float64)
        return cls(first_out, head, length, travel_time)

    def to_graph(self) -> Graph:
        """Return a standard :class:`~odpairs.graph.Graph` copy of this graph."""
        g = Graph(self.n)
        heads = self.head.tolist()
        lengths = self.length.tolist()
        times = self.travel_time.tolist()
        offsets = self.first_out.tolist()
        for u in range(self.n):
            for e in range(offsets[u], offsets[u + 1]):
                g.add_edge(u, heads[e], lengths[e], times[e])
        return g

    @classmethod
    def load(cls, path: PathLike) -> "NumpyGraph":
        """Read the CSR arrays from an ``.npz`` archive."""
        with np.load(path) as data:
            missing = [name for name in _ARRAYS if name not in data.files]
            if missing:
                raise GraphFormatError(f"missing arrays in {path}: {', '.join(missing)}")
            return cls(*(data[name] for name in _ARRAYS))

    def save(self, path: PathLike) -> None:
        """Write the CSR arrays to an ``.npz`` archive at exactly ``path``."""
        with open(path, "wb") as fh:
            np.savez(
                fh,
                first_out=self.first_out,
                head=self.head,
                length=self.length,
                travel_time=self.travel_time,
            )


__all__ = ["NumpyGraph"]
