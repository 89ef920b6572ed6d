"""External substitution tables for host-library functions and constants."""

from dataclasses import dataclass
import logging
from pathlib import Path
import re

logger = logging.getLogger(__name__)

ARGUMENT_PLACEHOLDER = re.compile(r"\\(\d+)")


class ExternalTableError(ValueError):
    """Raised when an external template cannot be applied to a call site."""


@dataclass
class ExternalSubstitution:
    """Replacement text for one host-library name."""

    name: str
    text: str

    def __post_init__(self):
        self.name = (self.name or "").strip()
        if not self.name:
            raise ValueError("External substitution requires a name")
        self.text = (self.text or "").strip()

    @property
    def arity(self):
        """Number of call-site arguments the template refers to."""
        indexes = [int(m) for m in ARGUMENT_PLACEHOLDER.findall(self.text)]
        return max(indexes) + 1 if indexes else 0

    def expand(self, arguments):
        """Return the template with every ``\\N`` replaced by argument ``N``."""

        if len(arguments) < self.arity:
            raise ExternalTableError(
                f"{self.name} expects argument {self.arity - 1} but the call passes "
                f"{len(arguments)}"
            )
        return ARGUMENT_PLACEHOLDER.sub(lambda m: arguments[int(m.group(1))], self.text)


def parse_external_table(text):
    """Parse ``NAME REPLACEMENT-TEXT`` lines into a name -> substitution map."""

    table = {}
    if not text:
        return table
    for line in text.splitlines():
        entry = line.strip()
        if not entry:
            continue
        parts = entry.split(None, 1)
        replacement = parts[1] if len(parts) > 1 else ""
        table[parts[0]] = ExternalSubstitution(parts[0], replacement)
    return table


def coerce_external_table(source):
    """Normalise table text, a mapping, or ``None`` into a substitution map."""

    if source is None:
        return {}
    if isinstance(source, str):
        return parse_external_table(source)
    if isinstance(source, dict):
        table = {}
        for name, value in source.items():
            if isinstance(value, ExternalSubstitution):
                table[value.name] = value
            else:
                table[name] = ExternalSubstitution(name, value)
        return table
    raise TypeError(f"Unsupported external table type: {type(source)!r}")


def load_external_table(path):
    """Load a table from disk; a missing file yields an empty table."""

    if path is None:
        return {}
    path = Path(path)
    if not path.is_file():
        logger.debug("external table %s not found, using an empty table", path)
        return {}
    table = parse_external_table(path.read_text(encoding="utf-8"))
    logger.debug("loaded %d entries from %s", len(table), path)
    return table


__all__ = [
    "ARGUMENT_PLACEHOLDER",
    "ExternalSubstitution",
    "ExternalTableError",
    "coerce_external_table",
    "load_external_table",
    "parse_external_table",
]
