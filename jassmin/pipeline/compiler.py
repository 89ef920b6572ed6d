"""The minification pipeline: one pass of every stage, in order."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path

from ..constants import DEFAULT_CONSTANT_TABLE, DEFAULT_FUNCTION_TABLE
from ..externals import coerce_external_table, load_external_table
from .analysis import analyze_usage, recount_usage
from .core import MinifyContext, RemovalReport
from .emitter import emit_source
from .inliner import inline_externals
from .lexer import split_blocks
from .literals import extract_boolean_constants
from .optimizer import eliminate_dead_code, fold_constants
from .parser import normalize_blocks, parse_structure
from .renamer import rename_identifiers

logger = logging.getLogger(__name__)

PIPELINE = (
    split_blocks,
    normalize_blocks,
    parse_structure,
    inline_externals,
    analyze_usage,
    eliminate_dead_code,
    fold_constants,
    recount_usage,
    rename_identifiers,
    extract_boolean_constants,
    emit_source,
)


@dataclass
class MinifyResult:
    text: str
    report: RemovalReport
    context: MinifyContext


def run_pipeline(context: MinifyContext, stages=PIPELINE) -> MinifyContext:
    for stage in stages:
        logger.debug("stage %s", stage.__name__)
        context = stage(context)
    return context


def minify_source(source, external_functions=None, external_constants=None) -> MinifyResult:
    """Minify script text; tables may be text, mappings or ``None``."""

    context = MinifyContext(
        source=source,
        external_functions=coerce_external_table(external_functions),
        external_constants=coerce_external_table(external_constants),
    )
    context = run_pipeline(context)
    logger.debug("minified %d -> %d characters", len(source), len(context.text))
    return MinifyResult(context.text, context.report, context)


def minify_file(
    path,
    functions_path=DEFAULT_FUNCTION_TABLE,
    constants_path=DEFAULT_CONSTANT_TABLE,
) -> MinifyResult:
    source = Path(path).read_text(encoding="utf-8")
    return minify_source(
        source,
        load_external_table(functions_path),
        load_external_table(constants_path),
    )


__all__ = ["MinifyResult", "PIPELINE", "minify_file", "minify_source", "run_pipeline"]
