"""Origin-destination pair sampling strategies."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import List, Optional

from .exceptions import ConfigError, InputError
from .explorer import ShortestPathExplorer
from .graph import Float, Graph, Vertex
from .logger import Logger, NoopLogger

SAMPLING_MODES = ("uniform", "distance", "rank")


@dataclass(frozen=True)
class OriginDestination:
    """An OD-pair, optionally labelled with the Dijkstra rank that chose it."""

    origin: Vertex
    destination: Vertex
    dijkstra_rank: Optional[int] = None

    def as_row(self) -> List[int]:
        """Return the CSV fields of this pair."""
        row = [self.origin, self.destination]
        if self.dijkstra_rank is not None:
            row.append(self.dijkstra_rank)
        return row


def geometric_variate(rng: random.Random, p: Float) -> int:
    """Draw the number of Bernoulli(``p``) trials up to the first success.

    The support is ``1, 2, ...`` and the mean is ``1 / p``. A single uniform
    draw is consumed per call, so the stream advances by the same amount
    regardless of the outcome.

    Args:
        rng: Random stream to draw from.
        p: Success probability in ``(0, 1]``.

    Returns:
        The trial count of the first success.
    """
    if not 0.0 < p <= 1.0:
        raise ConfigError("success probability must lie in (0, 1].")
    u = 1.0 - rng.random()  # (0, 1]
    if p == 1.0:
        return 1
    return int(math.floor(math.log(u) / math.log1p(-p))) + 1


class ODPairSampler:
    """Draws OD-pairs from a graph using an explicitly owned random stream.

    Every operation draws the origin uniformly from ``[0, n)`` first. The
    destination is then chosen uniformly, by distance, or by Dijkstra rank.
    Origin and destination may coincide (rank 1, target distance 0, or a
    uniform draw hitting the same vertex twice); such pairs are returned as
    they are.

    Args:
        G: Input graph, treated as read-only.
        rng: Random stream; every draw advances it.
        cost: Active edge cost, ``"travel_time"`` or ``"length"``.
        logger: Optional event logger.
    """

    def __init__(
        self,
        G: Graph,
        rng: random.Random,
        cost: str = "travel_time",
        logger: Logger | None = None,
    ) -> None:
        if G.n <= 0:
            raise InputError("cannot sample OD-pairs from an empty graph.")
        self.G = G
        self.rng = rng
        self.cost = cost
        self.logger = logger or NoopLogger()
        self.explorer = ShortestPathExplorer(G, cost=cost, logger=self.logger)

    def random_vertex(self) -> Vertex:
        """Return a vertex drawn uniformly at random."""
        return self.rng.randrange(self.G.n)

    def random_pair(self) -> OriginDestination:
        """Return a pair whose origin and destination are both uniform."""
        origin = self.random_vertex()
        destination = self.random_vertex()
        return OriginDestination(origin, destination)

    def pair_by_distance(self, distance: Float, geometric: bool = False) -> OriginDestination:
        """Return a pair roughly ``distance`` apart under the active cost.

        With ``geometric`` set, the target for this call is drawn from a
        geometric distribution with mean ``distance``. The destination is the
        first vertex settled at or beyond the target, so it can overshoot it;
        it hits the target exactly whenever some vertex lies at that distance.

        Raises:
            ConfigError: If ``distance`` is negative, or below 1 when geometric.
            ExplorationExhausted: If no reachable vertex is far enough.
        """
        if geometric and not distance >= 1:
            raise ConfigError("expected distance must be at least 1 when geometric.")
        if not distance >= 0:
            raise ConfigError("target distance must be non-negative.")
        origin = self.random_vertex()
        target = distance
        if geometric:
            target = geometric_variate(self.rng, 1.0 / distance)
            self.logger.debug("target", origin=origin, distance=target, mean=distance)
        settled = self.explorer.settle_until_distance(origin, target)
        return OriginDestination(origin, settled.vertex)

    def pair_by_dijkstra_rank(self, rank: int) -> OriginDestination:
        """Return a pair whose destination has Dijkstra rank ``rank``.

        The origin itself has rank 1.

        Raises:
            ConfigError: If ``rank`` is smaller than 1.
            ExplorationExhausted: If fewer than ``rank`` vertices are reachable.
        """
        if rank < 1:
            raise ConfigError("Dijkstra rank must be at least 1.")
        origin = self.random_vertex()
        settled = self.explorer.settle_until_rank(origin, rank)
        return OriginDestination(origin, settled.vertex, dijkstra_rank=rank)

    def sample(
        self,
        mode: str,
        *,
        rank: Optional[int] = None,
        distance: Optional[Float] = None,
        geometric: bool = False,
    ) -> OriginDestination:
        """Dispatch to the sampling strategy named by ``mode``."""
        if mode == "uniform":
            return self.random_pair()
        if mode == "distance":
            if distance is None:
                raise ConfigError("distance mode requires a distance.")
            return self.pair_by_distance(distance, geometric=geometric)
        if mode == "rank":
            if rank is None:
                raise ConfigError("rank mode requires a Dijkstra rank.")
            return self.pair_by_dijkstra_rank(rank)
        raise ConfigError(f"unknown sampling mode '{mode}'")
