import pytest

from jassmin import (
    ExternalTableError,
    Declaration,
    Function,
    FunctionInliner,
    LiteralTable,
    MinifyContext,
    coerce_external_table,
    inline_external_constants,
    inline_externals,
    parse_external_table,
    split_call_arguments,
)

TABLE = (
    "GetUnitLoc Location(GetUnitX(\\0),GetUnitY(\\0))\n"
    "SetUnitLife set life[\\0]=\\1\n"
    "Say BJDebugMsg(\"[\"+\\0+\"]\")\n"
)


@pytest.fixture
def inliner():
    return FunctionInliner(parse_external_table(TABLE), LiteralTable())


def test_split_call_arguments():
    text = "Foo(a,Bar(b,c),d)"
    assert split_call_arguments(text, 3) == (["a", "Bar(b,c)", "d"], 16)
    assert split_call_arguments("Foo()", 3) == ([], 4)
    assert split_call_arguments("Foo(a", 3) == (None, None)


def test_inline_expands_arguments(inliner):
    assert inliner.inline("call Foo(GetUnitLoc(u))") == (
        "call Foo(Location(GetUnitX(u),GetUnitY(u)))"
    )


def test_inline_drops_call_before_set(inliner):
    assert inliner.inline("set x=1\ncall SetUnitLife(u,5.)") == "set x=1\nset life[u]=5."


def test_inline_handles_nested_and_repeated_calls(inliner):
    assert inliner.inline("call SetUnitLife(GetUnitLoc(u),1)") == (
        "set life[Location(GetUnitX(u),GetUnitY(u))]=1"
    )
    assert inliner.inline("set a=GetUnitLoc(u)+GetUnitLoc(v)") == (
        "set a=Location(GetUnitX(u),GetUnitY(u))+Location(GetUnitX(v),GetUnitY(v))"
    )
    assert inliner.inlined == 4


def test_code_reference_is_left_alone(inliner):
    text = "call ForGroup(g,function GetUnitLoc)"
    assert inliner.inline(text) == text


def test_template_literals_become_placeholders(inliner):
    assert inliner.inline("call Say(s)\ncall Say(t)") == (
        "call BJDebugMsg(\x000\x00+s+\x001\x00)\ncall BJDebugMsg(\x000\x00+t+\x001\x00)"
    )
    assert inliner.literals.literals == ['"["', '"]"']


def test_missing_template_argument(inliner):
    with pytest.raises(ExternalTableError):
        inliner.inline("call SetUnitLife(u)")


def test_inline_external_constants():
    ctx = MinifyContext(
        external_constants=coerce_external_table({"bj_PI": "3.14159", "UNIT_ID": "'hfoo'"}),
        constants={"TAU": Declaration("real", "TAU", "bj_PI*2", is_constant=True)},
        functions={"main": Function("main", "nothing", "nothing", "set x=bj_PI\nset u=UNIT_ID")},
    )
    inline_external_constants(ctx)
    assert ctx.constants["TAU"].value == "3.14159*2"
    assert ctx.functions["main"].body == "set x=3.14159\nset u=\x000\x00"
    assert ctx.literals.literals == ["'hfoo'"]


def test_inline_externals_runs_functions_then_constants():
    ctx = MinifyContext(
        external_functions=coerce_external_table("Half (\\0/HALF)"),
        external_constants=coerce_external_table("HALF 2"),
        functions={"main": Function("main", "nothing", "nothing", "set x=Half(y)")},
    )
    inline_externals(ctx)
    assert ctx.functions["main"].body == "set x=(y/2)"


def test_call_must_supply_every_referenced_argument():
    inliner = FunctionInliner(
        parse_external_table("Second (\\1)\nFirst (\\0)\n"), LiteralTable()
    )
    assert inliner.inline("set x=First(a,b)") == "set x=(a)"
    with pytest.raises(ExternalTableError, match="Second expects argument 1 but the call passes 1"):
        inliner.inline("set x=Second(a)")
