"""
Ignore rules

A user-editable pattern file at the working root, one pattern per line,
decides which files the staging area silently skips. Patterns are
matched against the file's base name only.

Two matching strategies are supported:

    glob   fnmatch-style patterns (``*.log``, ``build``)    (default)
    regex  Python regular expressions, full match          (``.*\\.tmp``)

The staging area only ever sees ``should_ignore(name) -> bool``, so the
strategy can change without touching it.
"""

import fnmatch
import logging
import re
from pathlib import Path

from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_IGNORE_FILE = ".minigitignore"
SYNTAXES = ("glob", "regex")

# Always skipped, whatever the pattern file says
ALWAYS_IGNORE = frozenset({".minigit"})


class IgnoreRules:
    """Base-name ignore predicate built from a list of patterns."""

    def __init__(self, patterns=(), syntax: str = "glob"):
        if syntax not in SYNTAXES:
            raise ConfigError(f"Unknown ignore syntax '{syntax}' (expected one of {', '.join(SYNTAXES)})")
        self.syntax = syntax
        self.patterns = [p for p in patterns if p]
        self._compiled = []
        if syntax == "regex":
            for pattern in self.patterns:
                try:
                    self._compiled.append(re.compile(pattern))
                except re.error as e:
                    raise ConfigError(f"Invalid ignore pattern {pattern!r}: {e}") from e

    @classmethod
    def from_file(cls, path: Path, syntax: str = "glob") -> "IgnoreRules":
        """
        Load patterns from a pattern file.

        A missing file means no user patterns. Blank lines and lines
        starting with ``#`` are skipped.
        """
        path = Path(path)
        patterns = []
        if path.is_file():
            for line in path.read_text(encoding="utf-8").splitlines():
                line = line.strip()
                if not line or line.startswith("#"):
                    continue
                patterns.append(line)
            logger.debug("Loaded %d ignore patterns from %s", len(patterns), path)
        return cls(patterns, syntax=syntax)

    def should_ignore(self, name: str) -> bool:
        name = Path(name).name
        if name in ALWAYS_IGNORE:
            return True
        if self.syntax == "regex":
            return any(rx.fullmatch(name) for rx in self._compiled)
        for pattern in self.patterns:
            if name == pattern or fnmatch.fnmatchcase(name, pattern):
                return True
        return False

    __call__ = should_ignore
