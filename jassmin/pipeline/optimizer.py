"""Dead code elimination and constant folding."""

from __future__ import annotations

import ast
from decimal import Decimal
import logging
import math
import operator
import re

from ..constants import FOLDABLE_DATATYPES
from .core import (
    PLACEHOLDER,
    ConstantEvaluationFailure,
    Declaration,
    LiteralTable,
    MinifyContext,
    word_pattern,
)
from .literals import rawcode_to_integer

logger = logging.getLogger(__name__)

JASS_HEX = re.compile(r"(?<![\w.])\$([0-9A-Fa-f]+)\b")
JASS_OCTAL = re.compile(r"(?<![\w.])0([0-7]+)\b")
BARE_REAL = re.compile(r"(?<![\w.])(\d+\.)(?![\d\w])")

INT_BITS = 32
ARITHMETIC_OPERATORS = "+-*/"

ARITHMETIC = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
}
COMPARISONS = {
    ast.Eq: operator.eq,
    ast.NotEq: operator.ne,
    ast.Lt: operator.lt,
    ast.LtE: operator.le,
    ast.Gt: operator.gt,
    ast.GtE: operator.ge,
}


def eliminate_dead_code(context: MinifyContext) -> MinifyContext:
    """Drop unused functions, constants and globals in a single pass."""

    report = context.report
    count = len(context.functions)
    context.functions = {
        name: f for name, f in context.functions.items() if f.usage > 0 or f.is_entry_point
    }
    report.functions = count - len(context.functions)

    count = len(context.constants)
    context.constants = {n: d for n, d in context.constants.items() if d.usage > 0}
    report.constants = count - len(context.constants)

    count = len(context.globals)
    context.globals = {n: d for n, d in context.globals.items() if d.usage > 0}
    report.globals = count - len(context.globals)

    logger.debug(
        "removed %d functions, %d constants, %d globals",
        report.functions,
        report.constants,
        report.globals,
    )
    return context


def wrap_integer(value: int) -> int:
    """Wrap to a signed 32-bit integer the way the host runtime does."""
    span = 1 << INT_BITS
    return (value + (span >> 1)) % span - (span >> 1)


def _is_number(value) -> bool:
    return type(value) in (int, float)


def _divide(left, right):
    if right == 0:
        raise ConstantEvaluationFailure("division by zero")
    if type(left) is int and type(right) is int:
        quotient = abs(left) // abs(right)
        return quotient if (left < 0) == (right < 0) else -quotient
    return left / right


def _evaluate(node):
    if isinstance(node, ast.Expression):
        return _evaluate(node.body)
    if isinstance(node, ast.Constant) and _is_number(node.value):
        return node.value
    if isinstance(node, ast.Name) and node.id in ("true", "false"):
        return node.id == "true"
    if isinstance(node, ast.UnaryOp):
        value = _evaluate(node.operand)
        if isinstance(node.op, ast.Not) and type(value) is bool:
            return not value
        if isinstance(node.op, ast.USub) and _is_number(value):
            return -value
        if isinstance(node.op, ast.UAdd) and _is_number(value):
            return value
    elif isinstance(node, ast.BinOp):
        left, right = _evaluate(node.left), _evaluate(node.right)
        if _is_number(left) and _is_number(right):
            if isinstance(node.op, ast.Div):
                return _divide(left, right)
            if type(node.op) in ARITHMETIC:
                return ARITHMETIC[type(node.op)](left, right)
    elif isinstance(node, ast.BoolOp):
        values = [_evaluate(v) for v in node.values]
        if all(type(v) is bool for v in values):
            return all(values) if isinstance(node.op, ast.And) else any(values)
    elif isinstance(node, ast.Compare) and len(node.ops) == 1:
        left, right = _evaluate(node.left), _evaluate(node.comparators[0])
        compare = COMPARISONS.get(type(node.ops[0]))
        same_kind = (type(left) is bool) == (type(right) is bool)
        if compare and same_kind:
            if type(left) is bool or isinstance(node.ops[0], (ast.Eq, ast.NotEq)):
                return compare(left, right)
            if _is_number(left) and _is_number(right):
                return compare(left, right)
    raise ConstantEvaluationFailure(f"not a constant expression: {ast.dump(node)}")


def _resolve_literal(match, literals: LiteralTable) -> str:
    literal = literals[int(match.group(1))]
    if not literal.startswith("'"):
        raise ConstantEvaluationFailure(f"string literal {literal} in numeric constant")
    return str(rawcode_to_integer(literal))


def evaluate_constant_expression(expression: str, literals: LiteralTable):
    """Evaluate a literal arithmetic/boolean initializer."""

    text = PLACEHOLDER.sub(lambda m: _resolve_literal(m, literals), expression)
    text = JASS_HEX.sub(r"0x\1", text)
    text = JASS_OCTAL.sub(r"0o\1", text)
    text = BARE_REAL.sub(r"\g<1>0", text)
    try:
        tree = ast.parse(text.strip(), mode="eval")
    except SyntaxError as exc:
        raise ConstantEvaluationFailure(f"cannot parse {expression!r}") from exc
    value = _evaluate(tree)
    if type(value) is int:
        value = wrap_integer(value)
    return value


def format_real(value: float) -> str:
    """Shortest fixed-point spelling of a real (``.5``, ``100.``)."""

    if math.isinf(value) or math.isnan(value):
        raise ConstantEvaluationFailure(f"real constant out of range: {value}")
    text = format(Decimal(repr(float(value))), "f")
    if "." not in text:
        text += "."
    text = text.rstrip("0")
    sign = "-" if text.startswith("-") else ""
    digits = text.lstrip("-")
    if digits.startswith("0.") and len(digits) > 2:
        digits = digits[1:]
    return sign + digits


def format_constant(value, datatype: str) -> str:
    if datatype == "boolean":
        if type(value) is not bool:
            raise ConstantEvaluationFailure("boolean constant with a non-boolean value")
        return "true" if value else "false"
    if type(value) is bool:
        raise ConstantEvaluationFailure(f"{datatype} constant with a boolean value")
    if datatype == "integer":
        if type(value) is not int:
            raise ConstantEvaluationFailure("integer constant with a real value")
        return str(value)
    return format_real(value)


def fold_constant(decl: Declaration, literals: LiteralTable) -> str:
    value = evaluate_constant_expression(decl.value, literals)
    return format_constant(value, decl.datatype)


def substitute_folded(pattern, text: str, values: dict[str, str]) -> str:
    """Substitute folded literals; a negative one after an operator is parenthesised."""

    def replace(match):
        literal = values[match.group(1)]
        start = match.start()
        if literal.startswith("-") and start and text[start - 1] in ARITHMETIC_OPERATORS:
            return f"({literal})"
        return literal

    return pattern.sub(replace, text)


def fold_constants(context: MinifyContext) -> MinifyContext:
    """Replace every literal-valued constant by its value and drop it."""

    folded = {}
    for decl in context.constants.values():
        if decl.datatype not in FOLDABLE_DATATYPES or not decl.value or decl.is_array:
            continue
        try:
            literal = fold_constant(decl, context.literals)
        except ConstantEvaluationFailure as exc:
            logger.debug("keeping constant %s: %s", decl.name, exc)
            continue
        decl.value = literal
        decl.folded = True
        folded[decl.name] = literal
        own = word_pattern([decl.name])
        for other in context.declarations():
            if other is not decl and other.value:
                other.value = substitute_folded(own, other.value, {decl.name: literal})
        logger.debug("folded constant %s = %s", decl.name, literal)

    pattern = word_pattern(folded)
    if pattern is not None:
        for function in context.functions.values():
            function.body = substitute_folded(pattern, function.body, folded)
    context.constants = {n: d for n, d in context.constants.items() if not d.folded}
    return context


__all__ = [
    "eliminate_dead_code",
    "evaluate_constant_expression",
    "fold_constant",
    "fold_constants",
    "format_constant",
    "format_real",
    "substitute_folded",
    "wrap_integer",
]
