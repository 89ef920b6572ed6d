"""Frequency-ranked identifier renaming for global and local scopes."""

from __future__ import annotations

import itertools
import logging
import re
import string

from ..constants import (
    CALLBACK_NATIVE,
    DATATYPE_PATTERN,
    ENTRY_POINTS,
    RESERVED_NAMES,
    VARIABLE_EVENT_NATIVE,
)
from .analysis import embedded_name
from .core import IDENTIFIER, Function, MinifyContext, word_pattern

logger = logging.getLogger(__name__)

GLOBAL_FIRST = string.ascii_uppercase + string.ascii_lowercase
GLOBAL_REST = string.ascii_uppercase + string.ascii_lowercase + string.digits + "_"
LOCAL_FIRST = string.ascii_lowercase
LOCAL_REST = string.ascii_lowercase + string.digits

PARAMETER = re.compile(rf"\b(?:{DATATYPE_PATTERN}) (\w+)")
LOCAL_DECLARATION = re.compile(rf"^local (?:{DATATYPE_PATTERN}) (?:array )?(\w+).*$", re.M)
LITERAL_IDIOM = re.compile(
    rf"\b(?:{CALLBACK_NATIVE}|{VARIABLE_EVENT_NATIVE})\(.*?\x00(\d+)\x00"
)


def _names(first_chars, rest_chars, accept):
    for length in itertools.count(1):
        for first in first_chars:
            for rest in itertools.product(rest_chars, repeat=length - 1):
                name = first + "".join(rest)
                if not name.endswith("_") and accept(name):
                    yield name


def global_names():
    """Shortest-first names that always carry an uppercase letter up front."""
    return _names(
        GLOBAL_FIRST,
        GLOBAL_REST,
        lambda n: n[0].isupper() or (len(n) > 1 and n[1].isupper()),
    )


def local_names():
    """Shortest-first lowercase names; these can never equal a global name."""
    return _names(LOCAL_FIRST, LOCAL_REST, lambda n: True)


class NamePool:
    """Lazy, restartable supply of the next shortest unused identifier."""

    def __init__(self, factory=global_names, exclude=()):
        self.factory = factory
        self.exclude = set(RESERVED_NAMES) | set(exclude)
        self.restart()

    def restart(self) -> None:
        self._names = self.factory()
        self._next = None

    def __iter__(self):
        return self

    def peek(self) -> str:
        if self._next is None:
            self._next = next(n for n in self._names if n not in self.exclude)
        return self._next

    def __next__(self) -> str:
        name = self.peek()
        self._next = None
        return name


def rank_by_usage(entries):
    """Sort ``(name, usage)`` pairs by descending usage, stable on ties."""
    return [name for name, _ in sorted(entries, key=lambda entry: -entry[1])]


def fixed_identifiers(texts, renamed) -> set[str]:
    """Identifiers that appear in *texts* and keep their spelling."""

    found = set()
    for text in texts:
        found.update(IDENTIFIER.findall(text))
    return found - set(renamed)


def rename_global_scope(context: MinifyContext) -> MinifyContext:
    """Rename constants, globals and non-entry functions together."""

    entries = [(d.name, d.usage) for d in context.declarations()]
    entries += [(f.name, f.usage) for f in context.functions.values() if not f.is_entry_point]
    ranked = rank_by_usage(entries)

    texts = [d.value for d in context.declarations() if d.value]
    for function in context.functions.values():
        texts += [function.params, function.body]
    texts += [native.source() for native in context.natives]
    fixed = fixed_identifiers(texts, ranked) | set(ENTRY_POINTS)
    context.names = NamePool(global_names, exclude=fixed)

    rename_map = {name: next(context.names) for name in ranked}
    context.rename_map = rename_map
    pattern = word_pattern(rename_map)
    if pattern is None:
        return context

    def rename(text):
        return pattern.sub(lambda m: rename_map[m.group(1)], text)

    for decl in context.declarations():
        decl.name = rename_map[decl.name]
        if decl.value:
            decl.value = rename(decl.value)
    context.constants = {d.name: d for d in context.constants.values()}
    context.globals = {d.name: d for d in context.globals.values()}

    renamed_literals = set()
    functions = {}
    for function in context.functions.values():
        if not function.is_entry_point:
            function.name = rename_map[function.name]
        function.params = rename(function.params)
        function.body = rename(function.body)
        for match in LITERAL_IDIOM.finditer(function.body):
            literal_id = int(match.group(1))
            if literal_id in renamed_literals:
                continue
            renamed_literals.add(literal_id)
            literal = context.literals[literal_id]
            name = embedded_name(literal)
            if name in rename_map:
                context.literals[literal_id] = literal.replace(name, rename_map[name], 1)
        functions[function.name] = function
    context.functions = functions
    logger.debug("renamed %d global symbols", len(rename_map))
    return context


def rename_function_locals(function: Function) -> dict[str, str]:
    """Rename parameters and locals of one function; drop unused locals."""

    usage: dict[str, int] = {}
    for name in PARAMETER.findall(function.params):
        usage[name] = 1
    declarations = {}
    for match in LOCAL_DECLARATION.finditer(function.body):
        usage[match.group(1)] = -1
        declarations[match.group(1)] = match.group(0)

    pattern = word_pattern(usage)
    if pattern is None:
        return {}
    for name in pattern.findall(function.body):
        usage[name] += 1

    lines = function.body.split("\n")
    for name, count in list(usage.items()):
        if count == 0:
            lines.remove(declarations[name])
            del usage[name]
    function.body = "\n".join(lines)

    fixed = fixed_identifiers([function.params, function.body], usage)
    pool = NamePool(local_names, exclude=fixed)
    local_map = {name: next(pool) for name in rank_by_usage(usage.items())}
    pattern = word_pattern(local_map)
    if pattern is not None:
        function.params = pattern.sub(lambda m: local_map[m.group(1)], function.params)
        function.body = pattern.sub(lambda m: local_map[m.group(1)], function.body)
    return local_map


def rename_locals(context: MinifyContext) -> MinifyContext:
    for function in context.functions.values():
        rename_function_locals(function)
    return context


def rename_natives(context: MinifyContext) -> MinifyContext:
    """Give each native's parameters their own single-letter names."""

    for native in context.natives:
        pool = NamePool(local_names)
        native.params = [(typ, next(pool)) for typ, _ in native.params]
    return context


def rename_identifiers(context: MinifyContext) -> MinifyContext:
    rename_global_scope(context)
    rename_locals(context)
    return rename_natives(context)


__all__ = [
    "NamePool",
    "fixed_identifiers",
    "global_names",
    "local_names",
    "rank_by_usage",
    "rename_function_locals",
    "rename_global_scope",
    "rename_identifiers",
    "rename_locals",
    "rename_natives",
]
