"""Flat list of every path the current configuration generates.

Directories carry a trailing "/". The list feeds the manifest and the .gitignore block.
"""

from __future__ import annotations

from rulecast.agents.catalog import AgentCatalog
from rulecast.delivery.directory_sync import resolve_directory_destination
from rulecast.errors import RuleConfigurationError
from rulecast.hooks_service import AgentHooksService
from rulecast.models import AgentTarget, Config, NamedTarget, OverrideTarget, Rule
from rulecast.utils import dedupe, join_generated, normalize_generated_path


def resolve_rule_destination(
    rule: Rule, target: AgentTarget, catalog: AgentCatalog
) -> str:
    if isinstance(target, OverrideTarget):
        return normalize_generated_path(target.path)
    return join_generated(rule.to, catalog.resolve_path(target.agent, rule.logical_name))


def directory_rules(config: Config, catalog: AgentCatalog) -> list[Rule]:
    """Rules synthesized from the commands/skills/agents shortcuts."""
    rules: list[Rule] = []
    for entry in config.directories:
        agents = entry.targets or tuple(catalog.agents_supporting(entry.directory_type))
        rules.append(
            Rule(
                name=entry.directory_type.value,
                sources=(entry.path,),
                targets=tuple(NamedTarget(agent) for agent in agents),
            )
        )
    return rules


class GeneratedPathCollector:
    def __init__(self, config: Config, catalog: AgentCatalog) -> None:
        self.config = config
        self.catalog = catalog

    def is_directory_rule(self, rule: Rule) -> bool:
        if rule.is_merge or not rule.source:
            return False
        return (self.config.project_root / rule.source).is_dir()

    def rule_paths(self, rule: Rule) -> list[str]:
        paths: list[str] = []
        directory_rule = self.is_directory_rule(rule)
        for target in rule.targets:
            if directory_rule:
                try:
                    destination = resolve_directory_destination(
                        rule, target, self.catalog
                    )
                except RuleConfigurationError:
                    # Reported when the rule is distributed.
                    continue
                paths.append(f"{destination}/")
                continue
            paths.append(resolve_rule_destination(rule, target, self.catalog))
            if isinstance(target, NamedTarget):
                rules_dir = self.catalog.resolve_rules_directory(target.agent)
                if rules_dir:
                    paths.append(join_generated(rule.to, f"{rules_dir}/"))
        return paths

    def shortcut_paths(self) -> list[str]:
        paths: list[str] = []
        for rule in directory_rules(self.config, self.catalog):
            for target in rule.targets:
                try:
                    destination = resolve_directory_destination(
                        rule, target, self.catalog
                    )
                except RuleConfigurationError:
                    continue
                paths.append(f"{destination}/")
        return paths

    def mcp_paths(self) -> list[str]:
        paths: list[str] = []
        for mcp in self.config.mcps:
            for agent in mcp.targets:
                paths.append(
                    normalize_generated_path(
                        self.catalog.resolve_mcp_path(agent, mcp.output_path)
                    )
                )
        return paths

    def hook_paths(self) -> list[str]:
        return AgentHooksService(self.config).generated_paths()

    def collect(self) -> list[str]:
        paths: list[str] = []
        for rule in self.config.rules:
            paths.extend(self.rule_paths(rule))
        paths.extend(self.shortcut_paths())
        paths.extend(self.mcp_paths())
        paths.extend(self.hook_paths())
        return dedupe(paths)

    def collect_gitignore(self) -> list[str]:
        if not self.config.gitignore:
            return []
        paths: list[str] = []
        for rule in self.config.rules:
            if rule.gitignore:
                paths.extend(self.rule_paths(rule))
        paths.extend(self.shortcut_paths())
        paths.extend(self.mcp_paths())
        paths.extend(self.hook_paths())
        return dedupe(paths)
