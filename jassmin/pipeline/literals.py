"""Rawcode codec, boolean constant extraction and numeric literal rewriting."""

from __future__ import annotations

import logging
import re

from ..constants import BOOLEAN_LITERALS, RAWCODE_THRESHOLD
from .core import Declaration, LiteralTable, MinifyContext

logger = logging.getLogger(__name__)

RAWCODE_ESCAPE = re.compile(r"\\(.)", re.S)
HEX_LITERAL = re.compile(r"(?<![\w.\x00])(?:0[xX]|\$)([0-9A-Fa-f]+)\b")
DECIMAL_LITERAL = re.compile(r"(?<![\w.\x00])(\d+)(?![\w.\x00])")
BOOLEAN = re.compile(r"\b(true|false)\b")

# Bytes that can sit between rawcode quotes without an escape.
RAWCODE_BYTES = frozenset(range(32, 127)) - {ord("'"), ord("\\")}


def rawcode_to_integer(literal: str) -> int:
    """Read a quoted rawcode literal as a big-endian base-256 integer."""

    value = 0
    for ch in RAWCODE_ESCAPE.sub(r"\1", literal[1:-1]):
        value = value * 256 + ord(ch)
    return value


def integer_to_rawcode(value: int) -> str | None:
    """Encode *value* as a 4-character rawcode, or ``None`` if that is lossy."""

    if not 0 <= value < 1 << 32:
        return None
    chars = []
    for _ in range(4):
        value, byte = divmod(value, 256)
        if byte not in RAWCODE_BYTES:
            return None
        chars.append(chr(byte))
    return "'" + "".join(reversed(chars)) + "'"


def rewrite_numbers(text: str, literals: LiteralTable) -> str:
    """Hex to decimal, then large decimals to rawcode placeholders."""

    text = HEX_LITERAL.sub(lambda m: str(int(m.group(1), 16)), text)

    def compact(match):
        digits = match.group(1)
        if len(digits) > 1 and digits.startswith("0"):
            return digits
        value = int(digits)
        if value > RAWCODE_THRESHOLD:
            rawcode = integer_to_rawcode(value)
            if rawcode is not None:
                return literals.register(rawcode)
        return digits

    return DECIMAL_LITERAL.sub(compact, text)


def count_boolean_literals(texts) -> dict[str, int]:
    counts = dict.fromkeys(BOOLEAN_LITERALS, 0)
    for text in texts:
        for word in BOOLEAN.findall(text):
            counts[word] += 1
    return counts


def extraction_saves_bytes(literal: str, uses: int, name: str) -> bool:
    current = uses * len(literal)
    declaration = len(f"constant boolean ={literal}") + len(name)
    return current > uses * len(name) + declaration


def extract_boolean_constants(context: MinifyContext) -> MinifyContext:
    """Replace ``true``/``false`` by a short constant where that is smaller."""

    globals_ = [d for d in context.globals.values() if d.value]
    texts = [d.value for d in globals_] + context.bodies()
    counts = count_boolean_literals(texts)

    replacements = {}
    for literal in BOOLEAN_LITERALS:
        uses = counts[literal]
        if not extraction_saves_bytes(literal, uses, context.names.peek()):
            continue
        name = next(context.names)
        replacements[literal] = name
        context.constants[name] = Declaration(
            "boolean", name, literal, is_constant=True, usage=uses
        )
        logger.debug("extracted %s into constant %s (%d uses)", literal, name, uses)

    if replacements:
        pattern = re.compile(r"\b(" + "|".join(replacements) + r")\b")
        for decl in globals_:
            decl.value = pattern.sub(lambda m: replacements[m.group(1)], decl.value)
        for function in context.functions.values():
            function.body = pattern.sub(lambda m: replacements[m.group(1)], function.body)
    return context


__all__ = [
    "RAWCODE_BYTES",
    "count_boolean_literals",
    "extract_boolean_constants",
    "extraction_saves_bytes",
    "integer_to_rawcode",
    "rawcode_to_integer",
    "rewrite_numbers",
]
