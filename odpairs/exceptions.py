"""Custom exception types used across :mod:`odpairs`."""

from __future__ import annotations

from typing import Optional


class ODPairsError(Exception):
    """Base class for all package-specific errors."""


class InputError(ODPairsError, ValueError):
    """Raised for invalid user input such as out-of-range vertex ids."""


class GraphFormatError(InputError):
    """Raised when parsing a graph file fails or an edge cost is invalid."""


class ConfigError(ODPairsError, ValueError):
    """Raised for invalid configuration options."""


class AlgorithmError(ODPairsError, RuntimeError):
    """Raised when exploration invariants are violated at runtime."""


class ExplorationExhausted(ODPairsError, LookupError):
    """Raised when the frontier runs empty before the requested target.

    Attributes:
        source: Origin the exploration started from.
        settled: Number of vertices settled before the frontier ran empty.
        rank: Requested Dijkstra rank, if the query was rank-bounded.
        distance: Requested distance, if the query was distance-bounded.
    """

    def __init__(
        self,
        source: int,
        settled: int,
        rank: Optional[int] = None,
        distance: Optional[float] = None,
    ) -> None:
        self.source = source
        self.settled = settled
        self.rank = rank
        self.distance = distance
        if rank is not None:
            what = f"rank {rank} exceeds the {settled} vertices reachable"
        else:
            what = f"distance {distance} not reached by the {settled} vertices reachable"
        super().__init__(f"{what} from vertex {source}")


__all__ = [
    "ODPairsError",
    "InputError",
    "GraphFormatError",
    "ConfigError",
    "AlgorithmError",
    "ExplorationExhausted",
]
