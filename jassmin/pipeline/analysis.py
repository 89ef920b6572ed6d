"""Call-graph reachability and declaration usage counting."""
from __future__ import annotations

import logging
from pathlib import Path
import re

import networkx as nx

try:
    import matplotlib.pyplot as plt
except ModuleNotFoundError:  # pragma: no cover
    plt = None

try:
    import pydot
except ModuleNotFoundError:  # pragma: no cover
    pydot = None

from ..constants import (
    CALL_GRAPH_COLORS,
    CALLBACK_NATIVE,
    ENTRY_POINTS,
    VARIABLE_EVENT_NATIVE,
)
from .core import Declaration, Function, LiteralTable, MinifyContext, word_pattern

logger = logging.getLogger(__name__)

CALLBACK_IDIOM = re.compile(rf"\b{CALLBACK_NATIVE}\(\x00(\d+)\x00\)")
VARIABLE_EVENT_IDIOM = re.compile(rf"\b{VARIABLE_EVENT_NATIVE}\(.*?\x00(\d+)\x00")
EMBEDDED_NAME = re.compile(r"\w+")


def embedded_name(literal: str) -> str | None:
    """Return the identifier wrapped by a string literal, if any."""
    match = EMBEDDED_NAME.search(literal)
    return match.group(0) if match else None


def call_sites(body, pattern, literals: LiteralTable, known) -> list[str]:
    """List every function referenced from *body*, once per occurrence."""

    names = pattern.findall(body) if pattern else []
    for match in CALLBACK_IDIOM.finditer(body):
        name = embedded_name(literals[int(match.group(1))])
        if name in known:
            names.append(name)
    return names


def build_call_graph(functions: dict[str, Function], literals: LiteralTable) -> nx.DiGraph:
    """Nodes are function names; edge ``calls`` counts call sites."""

    graph = nx.DiGraph()
    for name, function in functions.items():
        graph.add_node(name, entry=function.is_entry_point)
    pattern = word_pattern(functions)
    for caller, function in functions.items():
        for callee in call_sites(function.body, pattern, literals, functions):
            if graph.has_edge(caller, callee):
                graph[caller][callee]["calls"] += 1
            else:
                graph.add_edge(caller, callee, calls=1)
    return graph


def compute_reachability(context: MinifyContext) -> nx.DiGraph:
    """Count call sites reachable from the entry points.

    Each reachable function is expanded exactly once, and every call site in
    an expanded body adds one to the callee's usage, so a function called
    from three reachable places ends up with a usage of three.
    """

    graph = build_call_graph(context.functions, context.literals)
    usage = dict.fromkeys(graph, 0)
    pending = [name for name in ENTRY_POINTS if name in graph]
    expanded = set(pending)
    while pending:
        caller = pending.pop(0)
        for callee, edge in graph[caller].items():
            usage[callee] += edge["calls"]
            if callee not in expanded:
                expanded.add(callee)
                pending.append(callee)

    for name, function in context.functions.items():
        function.usage = usage[name]
    nx.set_node_attributes(graph, usage, "usage")
    nx.set_node_attributes(graph, {name: name in expanded for name in graph}, "reachable")
    logger.debug("%d of %d functions reachable", len(expanded), len(graph))
    return graph


def count_declaration_usage(
    declarations: dict[str, Declaration],
    bodies,
    literals: LiteralTable,
    initializers=(),
) -> None:
    """Reset and recount whole-word uses of each declaration."""

    for decl in declarations.values():
        decl.usage = 0
    pattern = word_pattern(declarations)
    if pattern is None:
        return
    for body in bodies:
        for name in pattern.findall(body):
            declarations[name].usage += 1
        for match in VARIABLE_EVENT_IDIOM.finditer(body):
            name = embedded_name(literals[int(match.group(1))])
            if name in declarations:
                declarations[name].usage += 1
    for value in initializers:
        for name in pattern.findall(value):
            declarations[name].usage += 1


def live_functions(context: MinifyContext) -> list[Function]:
    return [f for f in context.functions.values() if f.usage > 0 or f.is_entry_point]


def _count_declarations(context: MinifyContext) -> None:
    bodies = [function.body for function in live_functions(context)]
    initializers = [d.value for d in context.declarations() if d.value]
    count_declaration_usage(context.constants, bodies, context.literals, initializers)
    count_declaration_usage(context.globals, bodies, context.literals, initializers)


def analyze_usage(context: MinifyContext) -> MinifyContext:
    """Compute function reachability, then constant and global usage."""

    context.call_graph = compute_reachability(context)
    _count_declarations(context)
    return context


def recount_usage(context: MinifyContext) -> MinifyContext:
    """Recount usage over what survived, keeping the original call graph."""

    compute_reachability(context)
    _count_declarations(context)
    return context


def _node_role(data) -> str:
    if data.get("entry"):
        return "entry"
    return "reachable" if data.get("reachable") else "dead"


def export_call_graph(graph: nx.DiGraph, output_path):
    """Export the call graph through Graphviz; ``.dot`` paths get raw DOT."""

    if pydot is None:  # pragma: no cover
        raise RuntimeError("Call graph export requires pydot to be installed")

    dot = pydot.Dot(
        "jassmin_calls",
        graph_type="digraph",
        rankdir="LR",
        fontname="Helvetica",
    )
    for name, data in graph.nodes(data=True):
        role = _node_role(data)
        dot.add_node(
            pydot.Node(
                f'"{name}"',
                label=f"{name}\\n[{role} x{data.get('usage', 0)}]",
                shape="box",
                style="filled",
                fillcolor=CALL_GRAPH_COLORS[role],
                color="#34495e",
                fontname="Helvetica",
            )
        )
    for caller, callee, data in graph.edges(data=True):
        dot.add_edge(
            pydot.Edge(
                f'"{caller}"',
                f'"{callee}"',
                label=str(data.get("calls", 1)),
                color="#7f8c8d",
                arrowsize="0.8",
            )
        )

    output_path = Path(output_path)
    if output_path.parent and not output_path.parent.exists():
        output_path.parent.mkdir(parents=True, exist_ok=True)
    if output_path.suffix == ".dot":
        dot.write_raw(str(output_path))
    else:
        dot.write_svg(str(output_path))
    return dot


def visualize_call_graph(graph: nx.DiGraph):  # pragma: no cover
    """Draw the call graph coloured by entry/reachable/dead."""

    if plt is None:
        raise RuntimeError("Visualization requires matplotlib to be installed")

    colors = [CALL_GRAPH_COLORS[_node_role(data)] for _, data in graph.nodes(data=True)]
    positions = nx.spring_layout(graph, seed=42)
    plt.figure()
    nx.draw(
        graph,
        positions,
        with_labels=True,
        node_color=colors,
        edgecolors="black",
        font_size=8,
    )
    nx.draw_networkx_edge_labels(
        graph,
        positions,
        edge_labels={(u, v): d.get("calls", 1) for u, v, d in graph.edges(data=True)},
        font_size=7,
    )
    plt.title("jassmin call graph")
    plt.tight_layout()
    plt.show()


__all__ = [
    "CALLBACK_IDIOM",
    "VARIABLE_EVENT_IDIOM",
    "analyze_usage",
    "build_call_graph",
    "call_sites",
    "compute_reachability",
    "count_declaration_usage",
    "embedded_name",
    "export_call_graph",
    "live_functions",
    "recount_usage",
    "visualize_call_graph",
]
