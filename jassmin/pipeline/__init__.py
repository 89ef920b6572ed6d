"""
jassmin pipeline: JASS source in, byte-minimal JASS source out.

  split → normalize → parse → inline → analyze → eliminate → fold
        → recount → rename → extract booleans → emit

| Stage                    | Module      |
<------------------------- + ----------- >
| Block splitter           | `lexer`     |
| Whitespace + structure   | `parser`    |
| External inliner         | `inliner`   |
| Usage & reachability     | `analysis`  |
| Dead code + folding      | `optimizer` |
| Identifier renamer       | `renamer`   |
| Boolean/numeric literals | `literals`  |
| Source emitter           | `emitter`   |
"""

from . import core as _core
from . import lexer as _lexer
from . import parser as _parser
from . import inliner as _inliner
from . import analysis as _analysis
from . import optimizer as _optimizer
from . import renamer as _renamer
from . import literals as _literals
from . import emitter as _emitter
from . import compiler as _compiler
from .cli import main, parse_args

from .core import *
from .lexer import *
from .parser import *
from .inliner import *
from .analysis import *
from .optimizer import *
from .renamer import *
from .literals import *
from .emitter import *
from .compiler import *

__all__ = []
for module in (
    _core,
    _lexer,
    _parser,
    _inliner,
    _analysis,
    _optimizer,
    _renamer,
    _literals,
    _emitter,
    _compiler,
):
    __all__.extend(getattr(module, "__all__", []))
__all__ += ["main", "parse_args"]
__all__ = list(dict.fromkeys(__all__))
