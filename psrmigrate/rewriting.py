"""Text substitutions applied across every loaded file."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

from psrmigrate.models import SourceFile


@dataclass(frozen=True)
class Replacement:
    """A literal or regex search and its replacement.

    Regex replacements use ``re.sub`` template syntax (``\\1``); literal
    ones are inserted verbatim.
    """

    search: str | re.Pattern[str]
    replace: str

    def apply(self, text: str) -> str:
        if isinstance(self.search, re.Pattern):
            return self.search.sub(self.replace, text)
        return text.replace(self.search, self.replace)


def parse_replacement(spec: str) -> Replacement:
    """Parse an ``OLD=NEW`` command-line rule into a literal Replacement.

    Raises:
        ValueError: If the rule has no ``=`` or an empty search side.
    """
    search, sep, replace = spec.partition("=")
    if not sep or not search:
        raise ValueError(f"invalid replacement {spec!r}, expected OLD=NEW")
    return Replacement(search=search, replace=replace)


def apply_replacements(files: list[SourceFile], rules: Iterable[Replacement]) -> int:
    """Apply rules in order to every file's contents.

    Returns:
        Number of files whose contents changed.
    """
    rules = list(rules)
    if not rules:
        return 0
    changed = 0
    for f in files:
        contents = f.contents
        for rule in rules:
            contents = rule.apply(contents)
        if contents != f.contents:
            f.contents = contents
            changed += 1
    return changed
