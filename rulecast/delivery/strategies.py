"""Copy and symlink delivery of rule content."""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

from rulecast.agents.writers import IAgentWriter
from rulecast.errors import SourceNotFoundError, SymlinkCreationError, SymlinkSecurityError
from rulecast.models import Config, DeliveryMode, Rule
from rulecast.utils import write_text

logger = logging.getLogger(__name__)


def select_mode(rule: Rule, config: Config) -> DeliveryMode:
    return rule.mode or config.mode or DeliveryMode.COPY


def validate_symlink_source(source: Path, project_root: Path) -> None:
    """Reject sources that normalize to a location outside the project root."""
    resolved = os.path.abspath(source)
    root = os.path.abspath(project_root)
    try:
        relative = os.path.relpath(resolved, root)
    except ValueError as exc:
        raise SymlinkSecurityError(source) from exc
    if relative == os.pardir or relative.startswith(os.pardir + os.sep):
        raise SymlinkSecurityError(source)
    if os.path.isabs(relative):
        raise SymlinkSecurityError(source)


def link_value(source: Path, destination: Path) -> str:
    """Relative link text when both paths share a filesystem root, else absolute."""
    abs_source = os.path.abspath(source)
    abs_parent = os.path.abspath(destination.parent)
    if Path(abs_source).anchor != Path(abs_parent).anchor:
        return abs_source
    return os.path.relpath(abs_source, abs_parent)


def remove_existing(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()


def detach_symlink(destination: Path) -> None:
    """Drop a link left by an earlier symlink sync so a copy never writes through it."""
    if destination.is_symlink():
        destination.unlink()
        logger.warning("Replaced symlink %s with a copy", destination)


class CopyStrategy:
    mode = DeliveryMode.COPY

    def deliver(
        self, content: str, destination: Path, rule: Rule, writer: IAgentWriter
    ) -> None:
        detach_symlink(destination)
        write_text(destination, writer.format_content(content, rule))


class SymlinkStrategy:
    mode = DeliveryMode.SYMLINK

    def __init__(self, project_root: Path) -> None:
        self.project_root = project_root

    def link(self, source: Path, destination: Path) -> None:
        if not source.exists():
            raise SourceNotFoundError(source)
        validate_symlink_source(source, self.project_root)

        if destination.is_symlink() and os.path.realpath(destination) == os.path.realpath(
            source
        ):
            return
        if destination.is_symlink() or destination.exists():
            remove_existing(destination)
            logger.warning("Replaced existing %s with a symlink", destination)

        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            os.symlink(link_value(source, destination), destination)
        except OSError as exc:
            raise SymlinkCreationError(source, destination, str(exc)) from exc
