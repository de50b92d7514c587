"""Batch generation of OD-pairs from a validated configuration.

This module is the pure half of the generator: given a graph, a
:class:`BatchConfig` and a seed it always produces the same sequence of
pairs. Console output and file writing live in :mod:`odpairs.cli`.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from .exceptions import ConfigError, ExplorationExhausted
from .graph import COST_METRICS, Graph
from .logger import Logger, NoopLogger
from .sampler import ODPairSampler, OriginDestination

DEFAULT_SEED = 19900325
MAX_RANK_EXPONENT = 62


@dataclass(frozen=True)
class BatchConfig:
    """Options controlling one generator run.

    Attributes:
        count: Number of pairs per batch (per Dijkstra rank in rank mode).
        seed: Seed of the random stream.
        cost: Active edge cost, ``"travel_time"`` or ``"length"``.
        ranks: Exponents ``k``; each requests Dijkstra rank ``2**k``.
        distance: Target (or expected) origin-destination distance.
        geometric: Draw per-pair distances geometrically around ``distance``.
        max_attempts: Origins tried per pair before an exhausted exploration
            aborts the run.
    """

    count: int
    seed: int = DEFAULT_SEED
    cost: str = "travel_time"
    ranks: Tuple[int, ...] = ()
    distance: Optional[float] = None
    geometric: bool = False
    max_attempts: int = 1

    def __post_init__(self) -> None:
        if self.count < 1:
            raise ConfigError("count must be a positive integer.")
        if self.cost not in COST_METRICS:
            raise ConfigError(f"unknown cost metric '{self.cost}'")
        if self.ranks and self.distance is not None:
            raise ConfigError("ranks and distance are mutually exclusive.")
        for k in self.ranks:
            if not 0 <= k <= MAX_RANK_EXPONENT:
                raise ConfigError(f"rank exponent {k} outside [0, {MAX_RANK_EXPONENT}].")
        if self.geometric and self.distance is None:
            raise ConfigError("geometric distances require a distance.")
        if self.distance is not None:
            if self.geometric and not self.distance >= 1:
                raise ConfigError("expected distance must be at least 1 when geometric.")
            if not self.distance >= 0:
                raise ConfigError("distance must be non-negative.")
        if self.max_attempts < 1:
            raise ConfigError("max_attempts must be at least 1.")

    @property
    def mode(self) -> str:
        """Sampling mode: ``"rank"``, ``"distance"`` or ``"uniform"``."""
        if self.ranks:
            return "rank"
        if self.distance is not None:
            return "distance"
        return "uniform"

    def methodology(self) -> str:
        """Describe how destinations are chosen, for output headers."""
        if self.mode == "rank":
            return "Dijkstra rank"
        if self.mode == "distance":
            kind = "geometrically distributed" if self.geometric else "equidistant"
            return f"{kind} ({self.distance:g})"
        return "random"


@dataclass(frozen=True)
class Batch:
    """A run of ``count`` pairs drawn with the same request."""

    label: str
    count: int
    rank: Optional[int] = None


class BatchGenerator:
    """Produces the OD-pairs described by a :class:`BatchConfig`.

    The generator owns a single ``random.Random`` seeded from the config;
    every pair is drawn from it in sequence.
    """

    def __init__(self, G: Graph, config: BatchConfig, logger: Logger | None = None) -> None:
        self.G = G
        self.config = config
        self.logger = logger or NoopLogger()
        self.rng = random.Random(config.seed)
        self.sampler = ODPairSampler(G, self.rng, cost=config.cost, logger=self.logger)
        self.counters = {"pairs": 0, "exhausted": 0}

    def batches(self) -> List[Batch]:
        """Return the batches of this run in generation order."""
        cfg = self.config
        if cfg.mode == "rank":
            return [Batch(label=f"2^{k}", count=cfg.count, rank=1 << k) for k in cfg.ranks]
        return [Batch(label="all", count=cfg.count)]

    def draw(self, batch: Batch) -> OriginDestination:
        """Draw one pair for ``batch``, retrying with fresh origins on exhaustion.

        Raises:
            ExplorationExhausted: If all ``max_attempts`` origins fail.
        """
        cfg = self.config
        attempt = 1
        while True:
            try:
                pair = self.sampler.sample(
                    cfg.mode,
                    rank=batch.rank,
                    distance=cfg.distance,
                    geometric=cfg.geometric,
                )
            except ExplorationExhausted as exc:
                self.counters["exhausted"] += 1
                if attempt >= cfg.max_attempts:
                    self.logger.warning(
                        "gave_up",
                        batch=batch.label,
                        attempts=attempt,
                        source=exc.source,
                        settled=exc.settled,
                    )
                    raise
                self.logger.debug("retry", batch=batch.label, attempt=attempt, source=exc.source)
                attempt += 1
                continue
            self.counters["pairs"] += 1
            return pair

    def run(self, batch: Batch) -> Iterator[OriginDestination]:
        """Yield the ``batch.count`` pairs of ``batch``."""
        self.logger.info("batch", label=batch.label, count=batch.count, mode=self.config.mode)
        for _ in range(batch.count):
            yield self.draw(batch)

    def __iter__(self) -> Iterator[OriginDestination]:
        for batch in self.batches():
            yield from self.run(batch)

    def summary(self) -> dict:
        """Return pair counters merged with the explorer counters."""
        out = dict(self.counters)
        out.update(self.sampler.explorer.summary())
        return out
