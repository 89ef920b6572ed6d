import pytest

from jassmin import (
    ExternalSubstitution,
    ExternalTableError,
    coerce_external_table,
    load_external_table,
    parse_external_table,
)


def test_parse_external_table():
    table = parse_external_table(
        "GetUnitLoc Location(GetUnitX(\\0), GetUnitY(\\0))\n"
        "\n"
        "bj_PI    3.14159\n"
        "Nothing\n"
    )
    assert list(table) == ["GetUnitLoc", "bj_PI", "Nothing"]
    assert table["bj_PI"].text == "3.14159"
    assert table["Nothing"].text == ""
    assert table["GetUnitLoc"].arity == 1


def test_substitution_expands_arguments():
    entry = ExternalSubstitution("SetLife", "set life[\\0]=\\1")
    assert entry.arity == 2
    assert entry.expand(["u", "5."]) == "set life[u]=5."


def test_substitution_with_missing_argument():
    entry = ExternalSubstitution("SetLife", "set life[\\0]=\\1")
    with pytest.raises(ExternalTableError, match="argument 1"):
        entry.expand(["u"])


def test_substitution_requires_name():
    with pytest.raises(ValueError):
        ExternalSubstitution("  ", "x")


def test_coerce_external_table():
    assert coerce_external_table(None) == {}
    assert coerce_external_table("A 1")["A"].text == "1"
    table = coerce_external_table({"B": "2", "C": ExternalSubstitution("C", "3")})
    assert table["B"].text == "2"
    assert table["C"].text == "3"
    with pytest.raises(TypeError):
        coerce_external_table(42)


def test_load_external_table(tmp_path):
    path = tmp_path / "jass_constants.j"
    path.write_text("bj_PI 3.14159\n", encoding="utf-8")
    assert load_external_table(path)["bj_PI"].text == "3.14159"
    assert load_external_table(tmp_path / "missing.j") == {}
    assert load_external_table(None) == {}
