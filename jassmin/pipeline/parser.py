"""Whitespace normalisation and structural parsing of the split blocks."""

from __future__ import annotations

import logging
import re

from ..constants import DATATYPE_PATTERN, OPERATOR_CHARS
from .core import Declaration, Function, MalformedInputError, MinifyContext, Native

logger = logging.getLogger(__name__)

HORIZONTAL_SPACE = re.compile(r"[ \t]+")
LINE_EDGE_SPACE = re.compile(r"^ | $", re.M)
BLANK_LINES = re.compile(r"\n+")
OPERATOR_SPACE = re.compile(
    r"[ \t]*([" + "".join("\\" + ch for ch in OPERATOR_CHARS) + r"])[ \t]*"
)

FUNCTION_BLOCK = re.compile(
    r"^function\s+(\w+)\s+takes\s+(.*?)\s+returns\s+(\w+)(.*?)endfunction$", re.S
)
GLOBAL_DECLARATION = re.compile(
    rf"^(constant )?({DATATYPE_PATTERN}) (array )?(\w+)(?:=(.*))?$"
)
NATIVE_DECLARATION = re.compile(
    r"^(constant )?native (\w+) takes (.*?) returns (\w+)$"
)


def normalize_whitespace(block: str) -> str:
    """Collapse a block to one statement per line with no optional spaces."""

    block = HORIZONTAL_SPACE.sub(" ", block)
    block = LINE_EDGE_SPACE.sub("", block)
    block = BLANK_LINES.sub("\n", block)
    block = OPERATOR_SPACE.sub(r"\1", block)
    return block.strip()


def normalize_blocks(context: MinifyContext) -> MinifyContext:
    context.globals_block = normalize_whitespace(context.globals_block)
    context.function_blocks = [normalize_whitespace(b) for b in context.function_blocks]
    context.native_blocks = [" ".join(b.split()) for b in context.native_blocks]
    return context


def parse_function_block(block: str) -> Function:
    match = FUNCTION_BLOCK.match(block)
    if not match:
        head = block.split("\n", 1)[0]
        raise MalformedInputError(f"malformed function header: {head!r}", "function block")
    name, params, returns, body = match.groups()
    return Function(name, params.strip(), returns, body.strip())


def parse_globals_block(block: str) -> tuple[dict[str, Declaration], dict[str, Declaration]]:
    """Split the globals block into ``(constants, globals)`` keyed by name."""

    constants: dict[str, Declaration] = {}
    globals_: dict[str, Declaration] = {}
    for line in block.splitlines():
        match = GLOBAL_DECLARATION.match(line)
        if not match:
            if line:
                logger.debug("skipping unrecognised globals line %r", line)
            continue
        constant, datatype, array, name, value = match.groups()
        decl = Declaration(
            datatype,
            name,
            value if value else None,
            is_constant=bool(constant),
            is_array=bool(array),
        )
        (constants if decl.is_constant else globals_)[name] = decl
    return constants, globals_


def parse_native(block: str) -> Native:
    match = NATIVE_DECLARATION.match(block)
    if not match:
        raise MalformedInputError(f"malformed native declaration: {block!r}", "native declaration")
    constant, name, takes, returns = match.groups()
    params = []
    if takes.strip() != "nothing":
        for argument in takes.split(","):
            typ, param = argument.split()
            params.append((typ, param))
    return Native(name, params, returns, is_constant=bool(constant))


def parse_structure(context: MinifyContext) -> MinifyContext:
    context.constants, context.globals = parse_globals_block(context.globals_block)
    context.functions = {}
    for block in context.function_blocks:
        function = parse_function_block(block)
        context.functions[function.name] = function
    context.natives = [parse_native(block) for block in context.native_blocks]
    logger.debug(
        "parsed %d constants, %d globals, %d functions, %d natives",
        len(context.constants),
        len(context.globals),
        len(context.functions),
        len(context.natives),
    )
    return context


__all__ = [
    "normalize_blocks",
    "normalize_whitespace",
    "parse_function_block",
    "parse_globals_block",
    "parse_native",
    "parse_structure",
]
