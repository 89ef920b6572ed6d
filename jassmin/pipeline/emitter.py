"""Assemble the retained program and restore literal placeholders."""

from __future__ import annotations

import re

from .core import MinifyContext
from .literals import rewrite_numbers

BLANK_LINES = re.compile(r"\n+")


def assemble_source(context: MinifyContext) -> str:
    parts = []
    declarations = context.declarations()
    if declarations:
        parts.append("globals")
        parts.extend(decl.source() for decl in declarations)
        parts.append("endglobals")
    parts.extend(native.source() for native in context.natives)
    parts.extend(function.source() for function in context.functions.values())
    return "\n".join(parts) + "\n" if parts else ""


def emit_source(context: MinifyContext) -> MinifyContext:
    text = assemble_source(context)
    text = rewrite_numbers(text, context.literals)
    text = BLANK_LINES.sub("\n", text)
    context.text = context.literals.restore(text)
    return context


__all__ = ["assemble_source", "emit_source"]
