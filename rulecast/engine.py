"""Full sync pass: distribute, write auxiliary outputs, reconcile the manifest."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from rulecast.agents.catalog import AgentCatalog
from rulecast.distributor import RuleDistributor
from rulecast.gitignore_service import GitignoreService
from rulecast.hooks_service import AgentHooksService
from rulecast.manifest import ManifestReconciler
from rulecast.mcp_service import McpService
from rulecast.models import Config
from rulecast.paths import GeneratedPathCollector, directory_rules
from rulecast.utils import call_maybe_async, dedupe


@dataclass
class SyncResult:
    generated: list[str] = field(default_factory=list)
    synced_files: list[str] = field(default_factory=list)
    symlinks: list[str] = field(default_factory=list)
    mcp_files: list[str] = field(default_factory=list)
    hook_files: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    gitignore_updated: bool = False


class SyncEngine:
    def __init__(
        self,
        config: Config,
        catalog: Optional[AgentCatalog] = None,
        gitignore: Optional[GitignoreService] = None,
    ) -> None:
        self.config = config
        self.catalog = catalog or AgentCatalog()
        self.gitignore = gitignore or GitignoreService(config.project_root)
        self.collector = GeneratedPathCollector(config, self.catalog)
        self.reconciler = ManifestReconciler(config.project_root, config.config_dir)

    def collect_generated_paths(self) -> list[str]:
        return self.collector.collect()

    async def sync(self) -> SyncResult:
        try:
            return await self._sync()
        except Exception as exc:
            for transform in self.config.transforms.error:
                await call_maybe_async(transform.func, exc)
            raise

    async def _sync(self) -> SyncResult:
        for transform in self.config.transforms.before:
            await call_maybe_async(transform.func, self.config)

        distributor = RuleDistributor(self.config, self.catalog)
        for rule in self.config.rules:
            await distributor.distribute_rule(rule)
        for rule in directory_rules(self.config, self.catalog):
            # Shortcut sources are optional.
            if not (self.config.project_root / rule.source).is_dir():
                continue
            await distributor.distribute_rule(rule)

        mcp_files = McpService(self.config, self.catalog).distribute()
        hook_files = AgentHooksService(self.config).distribute()

        generated = self.collect_generated_paths()
        synced_files = sorted(distributor.synced_files)
        tracked = generated + synced_files + sorted(distributor.synced_directories)
        removed = self.reconciler.reconcile(dedupe(tracked), distributor.symlink_paths)
        gitignore_updated = self.gitignore.update(self.collector.collect_gitignore())

        return SyncResult(
            generated=generated,
            synced_files=synced_files,
            symlinks=sorted(distributor.symlink_paths),
            mcp_files=mcp_files,
            hook_files=hook_files,
            removed=removed,
            gitignore_updated=gitignore_updated,
        )

    def clean(self) -> list[str]:
        """Remove everything the manifest tracks, the .gitignore block and the manifest."""
        removed = self.reconciler.prune([])
        self.gitignore.cleanup()
        self.reconciler.clear()
        return removed

    def missing_sources(self) -> list[str]:
        missing: list[str] = []
        for rule in self.config.rules:
            for source in rule.sources:
                if source and not (self.config.project_root / source).exists():
                    missing.append(source)
        return missing
