"""Recursive synchronization of directory sources (commands, skills, agents)."""

from __future__ import annotations

import os
import shutil
from pathlib import Path, PurePosixPath
from typing import Iterable

from rulecast.agents.catalog import AgentCatalog
from rulecast.constants import MARKDOWN_SUFFIX
from rulecast.delivery.strategies import SymlinkStrategy, detach_symlink
from rulecast.errors import (
    DirectorySyncError,
    SymlinkCreationError,
    UnknownDirectoryTypeError,
    UnsupportedDirectoryError,
)
from rulecast.models import AgentTarget, Config, OverrideTarget, Rule, SyncContext
from rulecast.transforms.pipeline import TransformPipeline
from rulecast.utils import join_generated, normalize_generated_path, write_text


def resolve_directory_destination(
    rule: Rule, target: AgentTarget, catalog: AgentCatalog
) -> str:
    """Project-relative destination directory for one target of a directory rule."""
    if isinstance(target, OverrideTarget):
        return normalize_generated_path(target.path).rstrip("/")
    key = rule.name or rule.source.rstrip("/").split("/")[-1]
    directory_type = catalog.parse_directory_type(key)
    if directory_type is None:
        raise UnknownDirectoryTypeError(key, target.agent.value)
    mapped = catalog.resolve_directory(target.agent, directory_type)
    if mapped is None:
        raise UnsupportedDirectoryError(target.agent.value, directory_type.value)
    return join_generated(rule.to, mapped)


def walk_files(source_dir: Path) -> list[Path]:
    """Every leaf file under ``source_dir`` as a path relative to it."""

    def _raise(exc: OSError) -> None:
        raise exc

    files: list[Path] = []
    for root, _, file_names in os.walk(str(source_dir), onerror=_raise):
        current = Path(root)
        for name in file_names:
            files.append((current / name).relative_to(source_dir))
    return sorted(files)


def nested_directories(destination: str, produced: Iterable[str]) -> list[str]:
    """Directory markers for every level between ``destination`` and each produced file."""
    base = PurePosixPath(destination.rstrip("/") or ".")
    markers: set[str] = set()
    for path in produced:
        for parent in PurePosixPath(path).parents:
            if parent in (base, PurePosixPath(".")):
                break
            markers.add(f"{parent.as_posix()}/")
    return sorted(markers)


class DirectorySynchronizer:
    def __init__(
        self,
        config: Config,
        pipeline: TransformPipeline,
        symlinker: SymlinkStrategy,
    ) -> None:
        self.config = config
        self.pipeline = pipeline
        self.symlinker = symlinker

    @property
    def project_root(self) -> Path:
        return self.config.project_root

    async def copy_tree(
        self, rule: Rule, target: AgentTarget, source_dir: Path, destination: str
    ) -> list[str]:
        """Copy a tree; markdown runs through the transform pipeline only."""
        written: list[str] = []
        for relative in walk_files(source_dir):
            source_file = source_dir / relative
            generated = join_generated(destination, relative.as_posix())
            dest_file = self.project_root / generated
            detach_symlink(dest_file)
            if source_file.suffix == MARKDOWN_SUFFIX:
                context = SyncContext(
                    config=self.config,
                    rule=rule,
                    content=source_file.read_text(encoding="utf-8"),
                    target_path=dest_file,
                    agent=target.agent,
                )
                write_text(dest_file, await self.pipeline.run(context))
            else:
                dest_file.parent.mkdir(parents=True, exist_ok=True)
                shutil.copyfile(source_file, dest_file)
            written.append(generated)
        return written

    def link_tree(self, source_dir: Path, destination: str) -> list[str]:
        """Link every leaf file individually, never the directory itself."""
        linked: list[str] = []
        destination_dir = self.project_root / destination
        for relative in walk_files(source_dir):
            generated = join_generated(destination, relative.as_posix())
            try:
                self.symlinker.link(source_dir / relative, self.project_root / generated)
            except SymlinkCreationError as exc:
                raise DirectorySyncError(
                    relative, source_dir, destination_dir, exc.detail
                ) from exc
            linked.append(generated)
        return linked
