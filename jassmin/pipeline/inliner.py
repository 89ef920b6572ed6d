"""Inline host-library functions and constants from the external tables."""

from __future__ import annotations

import logging
import re

from ..externals import ExternalSubstitution
from .core import LiteralTable, MinifyContext, word_pattern

logger = logging.getLogger(__name__)

CALL_STATEMENT = re.compile(r"\bcall $")


def split_call_arguments(text: str, open_index: int):
    """Split the argument list opening at ``text[open_index]``.

    Returns ``(arguments, close_index)``, or ``(None, None)`` when the
    parenthesis is never closed.
    """

    depth = 0
    start = open_index + 1
    arguments = []
    for index in range(open_index, len(text)):
        ch = text[index]
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                arguments.append(text[start:index])
                if arguments == [""]:
                    arguments = []
                return arguments, index
        elif ch == "," and depth == 1:
            arguments.append(text[start:index])
            start = index + 1
    return None, None


class FunctionInliner:
    def __init__(self, table: dict[str, ExternalSubstitution], literals: LiteralTable):
        self.table = table
        self.literals = literals
        self.pattern = word_pattern(table)
        self.templates: dict[str, ExternalSubstitution] = {}
        self.inlined = 0

    def template(self, name: str) -> ExternalSubstitution:
        if name not in self.templates:
            text = self.literals.capture(self.table[name].text)
            self.templates[name] = ExternalSubstitution(name, text)
        return self.templates[name]

    def inline(self, text: str) -> str:
        if self.pattern is None:
            return text
        out = []
        pos = 0
        while True:
            match = self.pattern.search(text, pos)
            if not match:
                break
            end = match.end()
            arguments, close = (None, None)
            if text.startswith("(", end):
                arguments, close = split_call_arguments(text, end)
            if arguments is None:
                out.append(text[pos:end])
                pos = end
                continue
            arguments = [self.inline(argument) for argument in arguments]
            replacement = self.template(match.group(1)).expand(arguments)
            prefix = text[pos:match.start()]
            if replacement.startswith("set "):
                prefix = CALL_STATEMENT.sub("", prefix)
            out.append(prefix + replacement)
            self.inlined += 1
            pos = close + 1
        out.append(text[pos:])
        return "".join(out)


def inline_external_functions(context: MinifyContext) -> MinifyContext:
    inliner = FunctionInliner(context.external_functions, context.literals)
    for function in context.functions.values():
        function.body = inliner.inline(function.body)
    logger.debug("inlined %d external function calls", inliner.inlined)
    return context


def inline_external_constants(context: MinifyContext) -> MinifyContext:
    pattern = word_pattern(context.external_constants)
    if pattern is None:
        return context

    def substitute(match):
        return context.literals.capture(context.external_constants[match.group(1)].text)

    for decl in context.declarations():
        if decl.value:
            decl.value = pattern.sub(substitute, decl.value)
    for function in context.functions.values():
        function.body = pattern.sub(substitute, function.body)
    return context


def inline_externals(context: MinifyContext) -> MinifyContext:
    inline_external_functions(context)
    return inline_external_constants(context)


__all__ = [
    "FunctionInliner",
    "inline_external_constants",
    "inline_external_functions",
    "inline_externals",
    "split_call_arguments",
]
