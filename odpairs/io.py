"""Graph input/output and OD-pair record writing."""

from __future__ import annotations

import csv
import json
import zipfile
from pathlib import Path
from typing import IO, Iterable, List, Optional, Tuple

from .exceptions import GraphFormatError, InputError
from .graph import Edge, Graph
from .graph_numpy import NumpyGraph
from .sampler import OriginDestination

EdgeList = List[Edge]

OD_HEADER = ("origin", "destination", "dijkstra_rank")


def _read_csv(path: Path) -> Graph:
    """Read a CSV/TSV edge list.

    Each data row holds ``u,v,length,travel_time``; a row with a single cost
    column uses it for both attributes. Lines starting with ``#``, empty lines
    and rows that fail to parse are ignored. Columns can be separated by
    commas or tabs.

    Raises:
        GraphFormatError: If no edges are parsed from the file.
    """
    edges: EdgeList = []
    max_id = -1
    with path.open("r", encoding="utf-8") as fh:
        for raw in fh:
            row = raw.strip()
            if not row or row.startswith("#"):
                continue
            parts = row.replace("\t", ",").split(",")
            if len(parts) < 3:
                continue
            try:
                u = int(parts[0].strip())
                v = int(parts[1].strip())
                length = float(parts[2].strip())
                travel_time = float(parts[3].strip()) if len(parts) > 3 else length
            except ValueError:
                continue
            edges.append((u, v, length, travel_time))
            max_id = max(max_id, u, v)
    if max_id < 0:
        raise GraphFormatError("no edges parsed from file")
    return Graph.from_edges(max_id + 1, edges)


def _write_csv(path: Path, G: Graph) -> None:
    with path.open("w", encoding="utf-8") as fh:
        fh.write("# u,v,length,travel_time\n")
        for u, v, length, travel_time in G.edges():
            fh.write(f"{u},{v},{length},{travel_time}\n")


def _read_jsonl(path: Path) -> Graph:
    """Read a JSON Lines edge list.

    Each line is an object with ``u``, ``v``, ``length`` and ``travel_time``;
    a lone ``w`` key stands in for both costs.

    Raises:
        GraphFormatError: If a line is malformed or no edges are parsed.
    """
    edges: EdgeList = []
    max_id = -1
    with path.open("r", encoding="utf-8") as fh:
        for lineno, raw in enumerate(fh, start=1):
            row = raw.strip()
            if not row:
                continue
            try:
                obj = json.loads(row)
                u = int(obj["u"])
                v = int(obj["v"])
                length = float(obj["length"] if "length" in obj else obj["w"])
                travel_time = float(obj["travel_time"] if "travel_time" in obj else obj.get("w", length))
            except (ValueError, KeyError, TypeError) as exc:
                raise GraphFormatError(f"malformed edge on line {lineno}: {row}") from exc
            edges.append((u, v, length, travel_time))
            max_id = max(max_id, u, v)
    if max_id < 0:
        raise GraphFormatError("no edges parsed from file")
    return Graph.from_edges(max_id + 1, edges)


def _write_jsonl(path: Path, G: Graph) -> None:
    with path.open("w", encoding="utf-8") as fh:
        for u, v, length, travel_time in G.edges():
            fh.write(json.dumps({"u": u, "v": v, "length": length, "travel_time": travel_time}) + "\n")


def _read_npz(path: Path) -> Graph:
    """Read a binary graph stored as CSR arrays, keeping isolated vertices."""
    try:
        ng = NumpyGraph.load(path)
    except GraphFormatError:
        raise
    except (OSError, ValueError, zipfile.BadZipFile) as exc:
        raise GraphFormatError(f"cannot read binary graph {path}: {exc}") from exc
    return ng.to_graph()


def _write_npz(path: Path, G: Graph) -> None:
    NumpyGraph.from_graph(G).save(path)


_FMT_READERS = {
    "csv": _read_csv,
    "jsonl": _read_jsonl,
    "npz": _read_npz,
}

_FMT_WRITERS = {
    "csv": _write_csv,
    "jsonl": _write_jsonl,
    "npz": _write_npz,
}

GRAPH_FORMATS: Tuple[str, ...] = tuple(_FMT_READERS)


def _detect_format(path: Path) -> Optional[str]:
    """Detect the graph format from the file extension."""
    ext = path.suffix.lower()
    if ext in {".csv", ".tsv"}:
        return "csv"
    if ext in {".jsonl", ".json"}:
        return "jsonl"
    if ext == ".npz":
        return "npz"
    return None


def read_graph(path: str, fmt: Optional[str] = None) -> Graph:
    """Read a graph from a file in the specified format.

    Args:
        path: The path to the graph file.
        fmt: ``"csv"``, ``"jsonl"`` or ``"npz"``; auto-detected when ``None``.

    Returns:
        The graph object constructed from the file.

    Raises:
        InputError: If the file does not exist.
        GraphFormatError: If the format is unknown or the file is malformed.
    """
    p = Path(path)
    if not p.is_file():
        raise InputError(f"file not found -- '{path}'")
    fmt = fmt or _detect_format(p)
    if fmt is None or fmt not in _FMT_READERS:
        raise GraphFormatError("unknown graph format")
    try:
        return _FMT_READERS[fmt](p)
    except (OSError, UnicodeDecodeError) as exc:
        raise GraphFormatError(f"cannot read graph {path}: {exc}") from exc


def write_graph(G: Graph, path: str, fmt: Optional[str] = None) -> None:
    """Write a graph to a file in the specified format.

    Raises:
        GraphFormatError: If the format is unknown or unsupported.
    """
    p = Path(path)
    fmt = fmt or _detect_format(p)
    if fmt is None or fmt not in _FMT_WRITERS:
        raise GraphFormatError("unknown graph format")
    _FMT_WRITERS[fmt](p, G)


class ODPairWriter:
    """Writes OD-pairs as CSV records preceded by a commented preamble.

    ```
    # Input graph: <name>
    # Methodology: <methodology>
    origin,destination,dijkstra_rank
    ```

    Rows carry the ``dijkstra_rank`` field only for rank-selected pairs.
    """

    def __init__(self, fh: IO[str], input_name: str, methodology: str) -> None:
        self._fh = fh
        fh.write(f"# Input graph: {input_name}\n")
        fh.write(f"# Methodology: {methodology}\n")
        self._writer = csv.writer(fh, lineterminator="\n")
        self._writer.writerow(OD_HEADER)
        self.rows = 0

    def write(self, pair: OriginDestination) -> None:
        self._writer.writerow(pair.as_row())
        self.rows += 1

    def write_all(self, pairs: Iterable[OriginDestination]) -> None:
        for pair in pairs:
            self.write(pair)
