"""Load rule sources, merging multi-file rules."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Sequence

from rulecast.constants import MERGE_SEPARATOR
from rulecast.errors import SourceNotFoundError, SourceReadError
from rulecast.models import Rule

_FRONTMATTER_RE = re.compile(
    r"\A---[ \t]*\r?\n(?:.*?\r?\n)?---[ \t]*(?:\r?\n|\Z)", re.DOTALL
)


def strip_frontmatter(text: str) -> str:
    """Drop exactly one leading ``---`` delimited block, if present."""
    match = _FRONTMATTER_RE.match(text)
    if match is None:
        return text
    return text[match.end() :]


class ContentLoader:
    def __init__(self, project_root: Path) -> None:
        self.project_root = project_root

    def load(self, rule: Rule) -> str:
        if rule.is_merge:
            return self.merge(rule.sources)
        return self.load_single(rule.source)

    def load_single(self, source: str) -> str:
        return self._read(self.project_root / source)

    def merge(self, sources: Sequence[str]) -> str:
        # Every source is read before anything is joined: one bad file fails the rule.
        bodies = [
            strip_frontmatter(self._read(self.project_root / source))
            for source in sources
            if source
        ]
        return MERGE_SEPARATOR.join(bodies)

    @staticmethod
    def _read(path: Path) -> str:
        if not path.is_file():
            raise SourceNotFoundError(path)
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise SourceReadError(path, str(exc)) from exc
