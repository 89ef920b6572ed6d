"""Block splitter: a stack-based lexer over the raw script text.

The lexer walks the source once and recognises eight lexical contexts.
Comments are dropped, string and rawcode literals are moved into the
:class:`~jassmin.pipeline.core.LiteralTable` and replaced by placeholders,
and the remaining text is sorted into the globals block, function blocks
and native declarations. Anything else at the top level is discarded.
"""

from __future__ import annotations

from enum import Enum
import logging
import re

from .core import LiteralTable, MalformedInputError, MinifyContext

logger = logging.getLogger(__name__)

TOKEN = re.compile(
    r"""[ \t]+|\n|//|/\*|\*/|["']|\\.|\w+|[^\w\s"'\\/*]+|.""",
    re.S,
)


class Context(Enum):
    DEFAULT = "default"
    LINE_COMMENT = "line comment"
    BLOCK_COMMENT = "block comment"
    STRING = "string literal"
    RAWCODE = "rawcode literal"
    GLOBALS = "globals block"
    FUNCTION = "function block"
    NATIVE = "native declaration"


COLLECTING = (Context.GLOBALS, Context.FUNCTION, Context.NATIVE)
CODE = (Context.DEFAULT,) + COLLECTING
QUOTES = {'"': Context.STRING, "'": Context.RAWCODE}


class BlockSplitter:
    def __init__(self, literals: LiteralTable | None = None):
        self.literals = literals if literals is not None else LiteralTable()
        self.stack: list[tuple[Context, int]] = [(Context.DEFAULT, 1)]
        self.line = 1
        self.block: list[str] = []
        self.literal: list[str] = []
        self.previous_word: str | None = None
        self.globals_parts: list[str] = []
        self.functions: list[str] = []
        self.natives: list[str] = []

    @property
    def context(self) -> Context:
        return self.stack[-1][0]

    def push(self, context: Context) -> None:
        self.stack.append((context, self.line))

    def pop(self) -> Context:
        return self.stack.pop()[0]

    def split(self, source: str) -> "BlockSplitter":
        for token in TOKEN.findall(source.replace("\r\n", "\n")):
            self.feed(token)
            self.line += token.count("\n")
        self.finish()
        return self

    def feed(self, token: str) -> None:
        context = self.context
        if context is Context.LINE_COMMENT:
            if token == "\n":
                self.pop()
                self.feed(token)
        elif context is Context.BLOCK_COMMENT:
            if token == "*/":
                opened = self.stack.pop()[1]
                if self.context in COLLECTING:
                    self.block.append("\n" if self.line > opened else " ")
        elif context in (Context.STRING, Context.RAWCODE):
            self.literal.append(token)
            if QUOTES.get(token) is context:
                self.close_literal()
        elif not self.open_nested(token):
            self.feed_code(context, token)

    def open_nested(self, token: str) -> bool:
        if token == "//":
            self.push(Context.LINE_COMMENT)
        elif token == "/*":
            self.push(Context.BLOCK_COMMENT)
        elif token in QUOTES:
            self.push(QUOTES[token])
            self.literal = [token]
        else:
            return False
        return True

    def close_literal(self) -> None:
        text = "".join(self.literal)
        self.literal = []
        self.pop()
        if self.context in COLLECTING:
            self.block.append(self.literals.register(text))

    def feed_code(self, context: Context, token: str) -> None:
        if context is Context.DEFAULT:
            if token == "globals":
                self.push(Context.GLOBALS)
                self.block = []
            elif token == "function":
                self.push(Context.FUNCTION)
                self.block = [token]
            elif token == "native":
                self.push(Context.NATIVE)
                prefix = "constant " if self.previous_word == "constant" else ""
                self.block = [prefix + token]
            if token[0].isalnum() or token[0] == "_":
                self.previous_word = token
        elif context is Context.GLOBALS and token == "endglobals":
            self.globals_parts.append("".join(self.block))
            self.pop()
        elif context is Context.FUNCTION and token == "endfunction":
            self.block.append(token)
            self.functions.append("".join(self.block))
            self.pop()
        elif context is Context.NATIVE and token == "\n":
            self.natives.append("".join(self.block))
            self.pop()
        else:
            self.block.append(token)

    def finish(self) -> None:
        while self.context is not Context.DEFAULT:
            context, opened = self.stack[-1]
            if context is Context.LINE_COMMENT:
                self.pop()
            elif context is Context.NATIVE:
                self.feed("\n")
            else:
                raise MalformedInputError(
                    f"unterminated {context.value}", context.value, opened
                )


def split_blocks(context: MinifyContext) -> MinifyContext:
    """Split ``context.source`` into globals, function and native blocks."""

    splitter = BlockSplitter(context.literals).split(context.source)
    context.globals_block = "\n".join(splitter.globals_parts)
    context.function_blocks = splitter.functions
    context.native_blocks = splitter.natives
    logger.debug(
        "split %d function blocks, %d natives, %d literals",
        len(splitter.functions),
        len(splitter.natives),
        len(context.literals),
    )
    return context


__all__ = ["BlockSplitter", "Context", "TOKEN", "split_blocks"]
