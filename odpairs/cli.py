"""Command-line interface for generating OD-pair workloads."""

from __future__ import annotations

import argparse
import sys
import traceback
from pathlib import Path
from typing import List, Optional, Tuple

from tqdm import tqdm

from .batch import DEFAULT_SEED, BatchConfig, BatchGenerator
from .exceptions import (
    ConfigError,
    ExplorationExhausted,
    GraphFormatError,
    InputError,
    ODPairsError,
)
from .generator import GRAPH_TYPES, generate_graph
from .graph import Graph
from .io import GRAPH_FORMATS, ODPairWriter, read_graph
from .logger import StdLogger

EXIT_OK = 0
EXIT_USAGE = 64
EXIT_EXHAUSTED = 65
EXIT_INTERNAL = 70


def _build_parser() -> argparse.ArgumentParser:
    examples = (
        "Examples:\n"
        "  odpairs -n 1000 -i graph.npz -o pairs\n"
        "  odpairs -n 1000 -i graph.csv -o pairs -r 10 12 14 --len\n"
        "  odpairs -n 1000 -i graph.csv -o pairs -d 600 --geo\n"
        "  odpairs -n 100 --random --vertices 2500 -o pairs -r 4 6 8\n"
    )
    p = argparse.ArgumentParser(
        prog="odpairs",
        description=(
            "Generate OD-pairs, with the origin chosen uniformly at random.\n"
            "The destination is also picked uniformly at random, or chosen by distance or\n"
            "Dijkstra rank. Dijkstra ranks are specified in terms of powers of two."
        ),
        epilog=examples,
        formatter_class=argparse.RawTextHelpFormatter,
    )
    p.add_argument(
        "-n",
        "--count",
        type=int,
        required=True,
        help="Number of OD-pairs to generate (per Dijkstra rank)",
    )
    p.add_argument("-s", "--seed", type=int, default=DEFAULT_SEED, help="Seed for the random stream")
    p.add_argument(
        "--len",
        dest="use_length",
        action="store_true",
        help="Use physical length as cost function (default: travel time)",
    )

    mode = p.add_mutually_exclusive_group()
    mode.add_argument("-r", "--ranks", type=int, nargs="+", help="Dijkstra ranks as powers of two")
    mode.add_argument(
        "-d",
        "--distance",
        type=int,
        help="(Expected) distance between a pair's origin and destination",
    )
    p.add_argument(
        "--geo",
        action="store_true",
        help="Geometrically distributed distances with expected value -d",
    )
    p.add_argument(
        "--max-attempts",
        type=int,
        default=1,
        help="Origins to try per pair when the target is unreachable",
    )

    src = p.add_mutually_exclusive_group(required=True)
    src.add_argument("-i", "--input", type=str, help="Input graph file")
    src.add_argument("--random", action="store_true", help="Use a synthetic graph")
    p.add_argument(
        "--format",
        choices=list(GRAPH_FORMATS),
        default=None,
        help="Input graph format (auto-detected from extension)",
    )
    p.add_argument("--graph-type", choices=list(GRAPH_TYPES), default="grid", help="Synthetic graph type")
    p.add_argument("--vertices", type=int, default=1024, help="Vertices (synthetic graph)")
    p.add_argument("--edges", type=int, default=None, help="Edges (synthetic erdos_renyi graph)")
    p.add_argument("--graph-seed", type=int, default=0, help="Seed of the synthetic graph")

    p.add_argument("-o", "--output", type=str, required=True, help="Output file (.csv is appended)")
    p.add_argument("--quiet", action="store_true", help="Suppress console output and progress bars")
    p.add_argument("--verbose", action="store_true", help="Show full tracebacks")
    p.add_argument("--log-json", action="store_true", help="Emit structured log lines as JSON")
    p.add_argument(
        "--log-level",
        choices=["debug", "info", "warning"],
        default="warning",
        help="Log verbosity",
    )
    return p


def _config_from_args(args: argparse.Namespace) -> BatchConfig:
    return BatchConfig(
        count=args.count,
        seed=args.seed,
        cost="length" if args.use_length else "travel_time",
        ranks=tuple(args.ranks or ()),
        distance=args.distance,
        geometric=args.geo,
        max_attempts=args.max_attempts,
    )


def _load_graph(args: argparse.Namespace) -> Tuple[Graph, str]:
    """Return the input graph and the name recorded in the output preamble."""
    if args.random:
        G = generate_graph(
            n=args.vertices,
            m=args.edges,
            graph_type=args.graph_type,
            seed=args.graph_seed,
        )
        return G, f"random {args.graph_type} (n={args.vertices}, seed={args.graph_seed})"
    return read_graph(args.input, args.format), args.input


def _output_path(output: str) -> Path:
    p = Path(output)
    if p.suffix.lower() != ".csv":
        p = p.with_name(p.name + ".csv")
    return p


def _describe(config: BatchConfig) -> List[str]:
    lines: List[str] = []
    if config.mode == "rank":
        lines.append("The destinations are chosen by Dijkstra rank.")
    elif config.mode == "distance":
        if config.geometric:
            lines.append("The origin-destination distance is geometrically distributed.")
            lines.append(f"Expected distance: {config.distance}")
        else:
            lines.append(f"The origin-destination distance is {config.distance}.")
    else:
        lines.append("The destinations are chosen uniformly at random.")
    cost = "physical lengths" if config.cost == "length" else "travel times"
    lines.append(f"Cost function: {cost}")
    return lines


def generate(
    G: Graph,
    config: BatchConfig,
    out_path: Path,
    input_name: str,
    logger: StdLogger,
    quiet: bool = False,
) -> BatchGenerator:
    """Write the pairs described by ``config`` to ``out_path``.

    Pairs are written to ``<out_path>.part`` first and moved into place once
    every batch is complete; on failure the partial file is removed.

    Raises:
        InputError: If the output file cannot be opened.
        ExplorationExhausted: If a pair cannot be drawn within the retry bound.
    """
    part = out_path.with_name(out_path.name + ".part")
    try:
        fh = part.open("w", encoding="utf-8", newline="")
    except OSError as exc:
        raise InputError(f"file cannot be opened -- '{out_path}'") from exc

    gen = BatchGenerator(G, config, logger=logger)
    try:
        with fh:
            writer = ODPairWriter(fh, input_name, config.methodology())
            for batch in gen.batches():
                desc = f"Generating {batch.count} OD-pairs"
                if batch.rank is not None:
                    desc += f" ({batch.label})"
                pairs = tqdm(
                    gen.run(batch),
                    total=batch.count,
                    desc=desc,
                    unit="pair",
                    disable=quiet,
                    file=sys.stderr,
                )
                writer.write_all(pairs)
        part.replace(out_path)
    except BaseException:
        part.unlink(missing_ok=True)
        raise
    return gen


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the ``odpairs`` command-line tool."""
    p = _build_parser()
    args = p.parse_args(argv)

    stream = sys.stdout if args.log_json else sys.stderr
    logger = StdLogger(level=args.log_level, json_fmt=args.log_json, stream=stream)
    quiet = args.quiet or args.log_json

    try:
        config = _config_from_args(args)
        out_path = _output_path(args.output)

        if not quiet:
            print("Reading the input graph...", end="", flush=True)
        G, input_name = _load_graph(args)
        if not quiet:
            print(" done.")
        logger.info("graph", source=input_name, n=G.n, m=G.m)

        if not quiet:
            for line in _describe(config):
                print(line)

        gen = generate(G, config, out_path, input_name, logger, quiet=quiet)
        logger.info("run", output=str(out_path), mode=config.mode, seed=config.seed, **gen.summary())
        return EXIT_OK

    except (InputError, ConfigError, GraphFormatError) as exc:
        if args.verbose:
            traceback.print_exc()
        else:
            sys.stderr.write(f"odpairs: {exc}\n")
            sys.stderr.write("Try 'odpairs --help' for more information.\n")
        return EXIT_USAGE
    except ExplorationExhausted as exc:
        if args.verbose:
            traceback.print_exc()
        else:
            sys.stderr.write(f"odpairs: destination not found: {exc}\n")
        return EXIT_EXHAUSTED
    except ODPairsError as exc:
        if args.verbose:
            traceback.print_exc()
        else:
            sys.stderr.write(f"odpairs: internal error: {exc}\n")
        return EXIT_INTERNAL
    except Exception as exc:  # pragma: no cover - unexpected
        if args.verbose:
            traceback.print_exc()
        else:
            sys.stderr.write(f"odpairs: internal error: {exc}\n")
        return EXIT_INTERNAL


if __name__ == "__main__":
    sys.exit(main())
