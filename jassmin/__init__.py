"""JASS minifier: dead code removal, inlining, folding and renaming."""

from . import constants as _constants
from . import externals as _externals
from . import pipeline as _pipeline
from .constants import *  # noqa: F401,F403
from .externals import *  # noqa: F401,F403
from .pipeline import *  # noqa: F401,F403

__all__ = []
__all__ += getattr(_constants, "__all__", [])
__all__ += getattr(_externals, "__all__", [])
__all__ += getattr(_pipeline, "__all__", [])
