"""Generated-artifact manifest and stale output pruning."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable

from rulecast.constants import DEFAULT_CONFIG_DIR, MANIFEST_FILENAME, MANIFEST_VERSION
from rulecast.utils import (
    is_directory_marker,
    normalize_generated_path,
    read_json_safe,
    strip_directory_marker,
    write_json,
)


@dataclass(frozen=True)
class GeneratedArtifactSet:
    files: tuple[str, ...] = ()
    directories: tuple[str, ...] = ()
    symlinks: tuple[str, ...] = ()
    version: int = MANIFEST_VERSION

    @classmethod
    def build(
        cls, paths: Iterable[str], symlinks: Iterable[str] = ()
    ) -> "GeneratedArtifactSet":
        files, directories = split_paths(paths)
        return cls(
            files=tuple(sorted(files)),
            directories=tuple(sorted(directories)),
            symlinks=tuple(sorted({normalize_generated_path(p) for p in symlinks})),
        )

    @classmethod
    def from_payload(cls, payload: Any) -> "GeneratedArtifactSet":
        if not isinstance(payload, dict):
            return cls()
        version = payload.get("version")
        return cls(
            files=_string_tuple(payload.get("generatedFiles")),
            directories=_string_tuple(payload.get("generatedDirectories")),
            symlinks=_string_tuple(payload.get("generatedSymlinks")),
            version=version if isinstance(version, int) else MANIFEST_VERSION,
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "generatedFiles": list(self.files),
            "generatedDirectories": list(self.directories),
            "generatedSymlinks": list(self.symlinks),
        }


def _string_tuple(raw: Any) -> tuple[str, ...]:
    if not isinstance(raw, list):
        return ()
    return tuple(item for item in raw if isinstance(item, str))


def split_paths(paths: Iterable[str]) -> tuple[set[str], set[str]]:
    """Split generated paths into files and directories (trailing "/" dropped)."""
    files: set[str] = set()
    directories: set[str] = set()
    for path in paths:
        normalized = normalize_generated_path(path)
        if is_directory_marker(normalized):
            directories.add(strip_directory_marker(normalized))
        else:
            files.add(normalized)
    return files, directories


class ManifestReconciler:
    def __init__(self, project_root: Path, config_dir: str = DEFAULT_CONFIG_DIR) -> None:
        self.project_root = project_root
        self.manifest_path = project_root / config_dir / MANIFEST_FILENAME

    def load(self) -> GeneratedArtifactSet:
        payload, _ = read_json_safe(self.manifest_path)
        # An unreadable manifest is only a cache miss.
        return GeneratedArtifactSet.from_payload(payload)

    def save(self, artifacts: GeneratedArtifactSet) -> None:
        write_json(self.manifest_path, artifacts.as_dict())

    def prune(self, current_paths: Iterable[str]) -> list[str]:
        """Delete previously generated paths that the current run no longer produces."""
        previous = self.load()
        current_files, current_dirs = split_paths(current_paths)
        removed: list[str] = []

        for file in previous.files:
            if file in current_files:
                continue
            path = self.project_root / file
            if not (path.exists() or path.is_symlink()):
                continue
            try:
                path.unlink()
            except OSError:
                continue
            removed.append(file)

        # Deepest first so emptied children free their parents.
        for directory in sorted(previous.directories, reverse=True):
            if directory in current_dirs:
                continue
            path = self.project_root / directory
            if not path.is_dir() or path.is_symlink():
                continue
            try:
                # rmdir refuses non-empty directories.
                path.rmdir()
            except OSError:
                continue
            removed.append(f"{directory}/")

        return removed

    def reconcile(
        self, current_paths: Iterable[str], symlink_paths: Iterable[str] = ()
    ) -> list[str]:
        paths = list(current_paths)
        removed = self.prune(paths)
        self.save(GeneratedArtifactSet.build(paths, symlink_paths))
        return removed

    def clear(self) -> None:
        if self.manifest_path.exists():
            self.manifest_path.unlink()
