"""Command-line interface for the jassmin minifier."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys

from ..constants import DEFAULT_CONSTANT_TABLE, DEFAULT_FUNCTION_TABLE
from ..externals import ExternalTableError
from .analysis import export_call_graph, visualize_call_graph
from .compiler import minify_file
from .core import MalformedInputError


def parse_args(args):
    argp = argparse.ArgumentParser(description="JASS script minifier")

    argp.add_argument("source", help="Script to minify")
    argp.add_argument("output", help="Destination for the minified script")
    argp.add_argument(
        "--functions",
        default=DEFAULT_FUNCTION_TABLE,
        metavar="PATH",
        help="External function substitution table",
    )
    argp.add_argument(
        "--constants",
        default=DEFAULT_CONSTANT_TABLE,
        metavar="PATH",
        help="External constant substitution table",
    )
    argp.add_argument(
        "--callgraph",
        metavar="OUTPUT",
        help="Export the call graph before dead code removal (.dot or .svg)",
    )
    argp.add_argument(
        "--visualize", action="store_true", help="Draw the call graph with matplotlib"
    )
    argp.add_argument("--stats", action="store_true", help="Print size statistics")
    argp.add_argument(
        "-v", "--verbose", action="store_true", help="Log every pipeline stage"
    )

    return argp.parse_args(args)


def main(args):
    params = parse_args(args)

    if params.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    try:
        result = minify_file(params.source, params.functions, params.constants)
    except (MalformedInputError, ExternalTableError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    Path(params.output).write_text(result.text, encoding="utf-8")

    for line in result.report.lines():
        print(line)

    if params.stats:
        before = len(result.context.source)
        after = len(result.text)
        ratio = after / before * 100 if before else 0.0
        print(f"{before} -> {after} bytes ({ratio:.1f}%)")

    if params.callgraph:
        export_call_graph(result.context.call_graph, params.callgraph)
        print(f"Call graph exported to {params.callgraph}")
    if params.visualize:  # pragma: no cover
        visualize_call_graph(result.context.call_graph)
    return 0


__all__ = ["main", "parse_args"]


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main(sys.argv[1:]))
