"""Managed block of generated paths inside .gitignore."""

from __future__ import annotations

from pathlib import Path

from rulecast.constants import (
    GITIGNORE_END_MARKER,
    GITIGNORE_FILENAME,
    GITIGNORE_START_MARKER,
)


class GitignoreService:
    def __init__(self, project_root: Path) -> None:
        self._path = project_root / GITIGNORE_FILENAME

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> str:
        if not self._path.exists():
            return ""
        return self._path.read_text(encoding="utf-8")

    @staticmethod
    def remove_block(text: str) -> str:
        lines = text.split("\n")
        kept: list[str] = []
        inside = False
        for line in lines:
            stripped = line.strip()
            if stripped == GITIGNORE_START_MARKER:
                inside = True
                continue
            if inside and stripped == GITIGNORE_END_MARKER:
                inside = False
                continue
            if not inside:
                kept.append(line)
        return "\n".join(kept).rstrip("\n")

    @staticmethod
    def render_block(paths: list[str]) -> str:
        return "\n".join([GITIGNORE_START_MARKER, *paths, GITIGNORE_END_MARKER])

    def update(self, paths: list[str]) -> bool:
        if not paths:
            return False
        base = self.remove_block(self._read())
        block = self.render_block(paths)
        content = f"{base}\n\n{block}\n" if base.strip() else f"{block}\n"
        self._path.write_text(content, encoding="utf-8")
        return True

    def cleanup(self) -> bool:
        if not self._path.exists():
            return False
        cleaned = self.remove_block(self._read())
        self._path.write_text(f"{cleaned}\n" if cleaned.strip() else "", encoding="utf-8")
        return True
