"""Public package exports for :mod:`odpairs`."""

from __future__ import annotations

from .batch import DEFAULT_SEED, Batch, BatchConfig, BatchGenerator
from .exceptions import (
    AlgorithmError,
    ConfigError,
    ExplorationExhausted,
    GraphFormatError,
    InputError,
    ODPairsError,
)
from .explorer import SettledVertex, ShortestPathExplorer
from .generator import generate_graph
from .graph import COST_METRICS, Graph
from .graph_numpy import NumpyGraph
from .io import ODPairWriter, read_graph, write_graph
from .logger import Logger, NoopLogger, StdLogger
from .sampler import ODPairSampler, OriginDestination, geometric_variate

__version__ = "0.1.0"

__all__ = [
    "Graph",
    "NumpyGraph",
    "COST_METRICS",
    "ShortestPathExplorer",
    "SettledVertex",
    "ODPairSampler",
    "OriginDestination",
    "geometric_variate",
    "Batch",
    "BatchConfig",
    "BatchGenerator",
    "DEFAULT_SEED",
    "generate_graph",
    "ODPairWriter",
    "read_graph",
    "write_graph",
    "Logger",
    "NoopLogger",
    "StdLogger",
    "ODPairsError",
    "InputError",
    "GraphFormatError",
    "ConfigError",
    "AlgorithmError",
    "ExplorationExhausted",
]
