"""Per-rule distribution to agent targets."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from rulecast.agents.catalog import AgentCatalog
from rulecast.agents.writers import writer_for
from rulecast.content.loader import ContentLoader
from rulecast.delivery.directory_sync import (
    DirectorySynchronizer,
    nested_directories,
    resolve_directory_destination,
)
from rulecast.delivery.strategies import CopyStrategy, SymlinkStrategy, select_mode
from rulecast.errors import (
    DirectorySyncError,
    MergeTargetError,
    RuleDistributionError,
    RulecastFileError,
    SymlinkCreationError,
)
from rulecast.models import (
    AgentTarget,
    Config,
    DeliveryMode,
    NamedTarget,
    Rule,
    RuleFormat,
    SyncContext,
)
from rulecast.paths import resolve_rule_destination
from rulecast.transforms.pipeline import TransformPipeline

logger = logging.getLogger(__name__)

_IO_ERRORS = (
    RulecastFileError,
    SymlinkCreationError,
    DirectorySyncError,
    OSError,
    UnicodeDecodeError,
)


class RuleDistributor:
    """Distributes rules for a single run.

    Tracks which rules were already warned about and which paths were
    produced, so one instance must not be shared across runs.
    """

    def __init__(
        self,
        config: Config,
        catalog: AgentCatalog,
        pipeline: Optional[TransformPipeline] = None,
        loader: Optional[ContentLoader] = None,
    ) -> None:
        self.config = config
        self.catalog = catalog
        self.pipeline = pipeline or TransformPipeline(config.transforms.after)
        self.loader = loader or ContentLoader(config.project_root)
        self.copier = CopyStrategy()
        self.symlinker = SymlinkStrategy(config.project_root)
        self.synchronizer = DirectorySynchronizer(config, self.pipeline, self.symlinker)

        self.symlink_paths: set[str] = set()
        self.synced_files: set[str] = set()
        self.synced_directories: set[str] = set()
        self._warned: set[tuple[str, str]] = set()

    @property
    def project_root(self) -> Path:
        return self.config.project_root

    async def distribute_rule(self, rule: Rule) -> None:
        mode = select_mode(rule, self.config)

        if rule.is_merge:
            for target in rule.targets:
                if isinstance(target, NamedTarget):
                    raise MergeTargetError(rule.identity, target.agent.value)
            if mode == DeliveryMode.SYMLINK:
                self._warn_once(
                    "merge",
                    rule,
                    f'Symlink mode is not supported for merged rule "{rule.identity}"; '
                    "falling back to copy",
                )
                mode = DeliveryMode.COPY

        is_directory = (
            not rule.is_merge
            and bool(rule.source)
            and (self.project_root / rule.source).is_dir()
        )
        if mode == DeliveryMode.SYMLINK:
            self._warn_symlink_limitations(rule, formatted=not is_directory)

        if is_directory:
            await self._distribute_directory(rule, mode)
            return

        if mode == DeliveryMode.SYMLINK:
            for target in rule.targets:
                self._link_file(rule, target)
            return

        try:
            content = self.loader.load(rule)
        except _IO_ERRORS as exc:
            raise RuleDistributionError(
                rule.identity,
                ", ".join(s for s in rule.sources if s),
                ", ".join(
                    resolve_rule_destination(rule, target, self.catalog)
                    for target in rule.targets
                ),
                exc,
            ) from exc
        for target in rule.targets:
            await self._copy_file(rule, target, content)

    async def _copy_file(self, rule: Rule, target: AgentTarget, content: str) -> None:
        generated = resolve_rule_destination(rule, target, self.catalog)
        destination = self.project_root / generated
        context = SyncContext(
            config=self.config,
            rule=rule,
            content=content,
            target_path=destination,
            agent=target.agent,
        )
        transformed = await self.pipeline.run(context)
        writer = writer_for(self.catalog.resolve_format(target.agent))
        try:
            self.copier.deliver(transformed, destination, rule, writer)
        except OSError as exc:
            raise RuleDistributionError(
                rule.identity, rule.source, generated, exc
            ) from exc

    def _link_file(self, rule: Rule, target: AgentTarget) -> None:
        generated = resolve_rule_destination(rule, target, self.catalog)
        try:
            self.symlinker.link(self.project_root / rule.source, self.project_root / generated)
        except _IO_ERRORS as exc:
            raise RuleDistributionError(
                rule.identity, rule.source, generated, exc
            ) from exc
        self.symlink_paths.add(generated)

    async def _distribute_directory(self, rule: Rule, mode: DeliveryMode) -> None:
        source_dir = self.project_root / rule.source
        for target in rule.targets:
            destination = resolve_directory_destination(rule, target, self.catalog)
            try:
                if mode == DeliveryMode.SYMLINK:
                    produced = self.synchronizer.link_tree(source_dir, destination)
                    self.symlink_paths.update(produced)
                else:
                    produced = await self.synchronizer.copy_tree(
                        rule, target, source_dir, destination
                    )
            except _IO_ERRORS as exc:
                raise RuleDistributionError(
                    rule.identity, rule.source, destination, exc
                ) from exc
            self.synced_files.update(produced)
            self.synced_directories.update(nested_directories(destination, produced))

    def _warn_symlink_limitations(self, rule: Rule, formatted: bool) -> None:
        dropped: list[str] = []
        if rule.hooks:
            dropped.append(f"rule hooks ({', '.join(rule.hooks)})")
        if self.pipeline.has_global_transforms:
            dropped.append("global transforms")
        if formatted and any(
            self.catalog.resolve_format(target.agent) != RuleFormat.MARKDOWN
            for target in rule.targets
        ):
            dropped.append("agent formatting")
        if not dropped:
            return
        self._warn_once(
            "limitations",
            rule,
            f'Symlink mode limitations for rule "{rule.identity}": '
            f"{', '.join(dropped)} will not be applied",
        )

    def _warn_once(self, kind: str, rule: Rule, message: str) -> None:
        key = (kind, rule.identity)
        if key in self._warned:
            return
        self._warned.add(key)
        logger.warning(message)
