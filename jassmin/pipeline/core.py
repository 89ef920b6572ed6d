"""Core data structures shared by every pipeline stage."""

from __future__ import annotations

from dataclasses import dataclass, field
import re
from typing import Any, Iterable, Optional

from ..constants import ENTRY_POINTS

PLACEHOLDER = re.compile(r"\x00(\d+)\x00")
IDENTIFIER = re.compile(r"\b[A-Za-z_]\w*")
QUOTED_LITERAL = re.compile(r"\"(?:\\.|[^\"\\])*\"|'(?:\\.|[^'\\])*'")


class MalformedInputError(ValueError):
    """Raised for source text the pipeline cannot split into blocks."""

    def __init__(self, message: str, context: str | None = None, line: int | None = None):
        self.context = context
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)


class ConstantEvaluationFailure(ValueError):
    """Raised when a constant initializer is not a literal expression."""


def placeholder(literal_id: int) -> str:
    return f"\x00{literal_id}\x00"


def word_pattern(names: Iterable[str]) -> Optional[re.Pattern]:
    """Compile a whole-word alternation over *names*, or ``None`` if empty."""

    ordered = sorted(set(names), key=lambda n: (-len(n), n))
    if not ordered:
        return None
    return re.compile(r"\b(" + "|".join(re.escape(n) for n in ordered) + r")\b")


class LiteralTable:
    """Dense id -> literal text table backing the placeholder tokens."""

    def __init__(self):
        self.literals: list[str] = []

    def __len__(self) -> int:
        return len(self.literals)

    def __getitem__(self, literal_id: int) -> str:
        return self.literals[literal_id]

    def __setitem__(self, literal_id: int, text: str) -> None:
        self.literals[literal_id] = text

    def register(self, text: str) -> str:
        """Record *text* and return the placeholder that stands for it."""
        self.literals.append(text)
        return placeholder(len(self.literals) - 1)

    def capture(self, text: str) -> str:
        """Placeholder every quoted literal found in plain *text*."""
        return QUOTED_LITERAL.sub(lambda m: self.register(m.group(0)), text)

    def restore(self, text: str) -> str:
        return PLACEHOLDER.sub(lambda m: self.literals[int(m.group(1))], text)


@dataclass
class Declaration:
    """A constant or global from the globals block."""

    datatype: str
    name: str
    value: Optional[str] = None
    is_constant: bool = False
    is_array: bool = False
    usage: int = 0
    folded: bool = False

    def source(self) -> str:
        parts = []
        if self.is_constant:
            parts.append("constant")
        parts.append(self.datatype)
        if self.is_array:
            parts.append("array")
        parts.append(self.name)
        text = " ".join(parts)
        if self.value:
            text += f"={self.value}"
        return text


@dataclass
class Function:
    name: str
    params: str
    returns: str
    body: str
    usage: int = 0

    @property
    def is_entry_point(self) -> bool:
        return self.name in ENTRY_POINTS

    def source(self) -> str:
        body = f"{self.body}\n" if self.body else ""
        return (
            f"function {self.name} takes {self.params} returns {self.returns}\n"
            f"{body}endfunction"
        )


@dataclass
class Native:
    """A host-implemented function signature; only parameter names change."""

    name: str
    params: list[tuple[str, str]]
    returns: str
    is_constant: bool = False

    def source(self) -> str:
        takes = ",".join(f"{typ} {name}" for typ, name in self.params) or "nothing"
        prefix = "constant " if self.is_constant else ""
        return f"{prefix}native {self.name} takes {takes} returns {self.returns}"


@dataclass
class RemovalReport:
    functions: int = 0
    constants: int = 0
    globals: int = 0

    def lines(self) -> list[str]:
        return [
            f"Removed {self.functions} functions",
            f"Removed {self.constants} constants",
            f"Removed {self.globals} globals",
        ]


@dataclass
class MinifyContext:
    """Everything one pipeline run owns, threaded through each stage."""

    source: str = ""
    literals: LiteralTable = field(default_factory=LiteralTable)
    globals_block: str = ""
    function_blocks: list[str] = field(default_factory=list)
    native_blocks: list[str] = field(default_factory=list)
    constants: dict[str, Declaration] = field(default_factory=dict)
    globals: dict[str, Declaration] = field(default_factory=dict)
    functions: dict[str, Function] = field(default_factory=dict)
    natives: list[Native] = field(default_factory=list)
    external_functions: dict[str, Any] = field(default_factory=dict)
    external_constants: dict[str, Any] = field(default_factory=dict)
    call_graph: Any = None
    names: Any = None
    rename_map: dict[str, str] = field(default_factory=dict)
    report: RemovalReport = field(default_factory=RemovalReport)
    text: str = ""

    def declarations(self) -> list[Declaration]:
        return list(self.constants.values()) + list(self.globals.values())

    def bodies(self) -> list[str]:
        return [function.body for function in self.functions.values()]


__all__ = [
    "ConstantEvaluationFailure",
    "Declaration",
    "Function",
    "IDENTIFIER",
    "LiteralTable",
    "MalformedInputError",
    "MinifyContext",
    "Native",
    "PLACEHOLDER",
    "QUOTED_LITERAL",
    "RemovalReport",
    "placeholder",
    "word_pattern",
]
