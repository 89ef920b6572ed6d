from textwrap import dedent

import networkx as nx
import pytest

from jassmin import (
    MinifyContext,
    analyze_usage,
    build_call_graph,
    embedded_name,
    export_call_graph,
    live_functions,
    normalize_blocks,
    parse_structure,
    split_blocks,
)


def prepare(source):
    context = MinifyContext(source=dedent(source))
    return parse_structure(normalize_blocks(split_blocks(context)))


CALLS = """
    function Leaf takes nothing returns nothing
    endfunction
    function Helper takes nothing returns nothing
        call Leaf()
        call Leaf()
    endfunction
    function Orphan takes nothing returns nothing
        call Helper()
    endfunction
    function Callback takes nothing returns nothing
    endfunction
    function main takes nothing returns nothing
        call Helper()
        call ExecuteFunc("Callback")
    endfunction
    function config takes nothing returns nothing
        call Helper()
    endfunction
"""


@pytest.fixture
def analyzed():
    return analyze_usage(prepare(CALLS))


def test_every_reachable_call_site_is_counted(analyzed):
    usage = {name: f.usage for name, f in analyzed.functions.items()}
    assert usage == {
        "Leaf": 2,
        "Helper": 2,
        "Orphan": 0,
        "Callback": 1,
        "main": 0,
        "config": 0,
    }


def test_live_functions_include_entry_points(analyzed):
    names = [f.name for f in live_functions(analyzed)]
    assert names == ["Leaf", "Helper", "Callback", "main", "config"]


def test_call_graph_attributes(analyzed):
    graph = analyzed.call_graph
    assert isinstance(graph, nx.DiGraph)
    assert graph["Helper"]["Leaf"]["calls"] == 2
    assert graph.has_edge("main", "Callback")
    assert graph.has_edge("Orphan", "Helper")
    assert graph.nodes["main"]["entry"]
    assert graph.nodes["Orphan"]["reachable"] is False
    assert graph.nodes["Leaf"]["usage"] == 2


def test_build_call_graph_without_calls():
    context = prepare("function main takes nothing returns nothing\nendfunction\n")
    graph = build_call_graph(context.functions, context.literals)
    assert list(graph.nodes) == ["main"]
    assert graph.number_of_edges() == 0


def test_declaration_usage_counts():
    context = analyze_usage(
        prepare(
            """
            globals
                integer used = 0
                integer unused = 0
                real watched = 0
                integer onlyDead = 0
                constant integer BASE = 10
                constant integer DERIVED = BASE * 2
            endglobals
            function Dead takes nothing returns nothing
                set onlyDead = 1
            endfunction
            function main takes nothing returns nothing
                local trigger t = CreateTrigger()
                set used = used + DERIVED
                call TriggerRegisterVariableEvent(t, "watched", EQUAL, 1.)
            endfunction
            """
        )
    )
    usage = {d.name: d.usage for d in context.declarations()}
    assert usage == {
        "BASE": 1,
        "DERIVED": 1,
        "used": 2,
        "unused": 0,
        "watched": 1,
        "onlyDead": 0,
    }


def test_embedded_name():
    assert embedded_name('"Callback"') == "Callback"
    assert embedded_name('""') is None


def test_export_call_graph_as_dot(analyzed, tmp_path):
    target = tmp_path / "graphs" / "calls.dot"
    export_call_graph(analyzed.call_graph, target)
    text = target.read_text()
    assert "digraph" in text
    assert "Orphan" in text
    assert "#B0BEC5" in text
