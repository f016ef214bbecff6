from pathlib import Path

from rulecast.agents.catalog import AgentCatalog
from rulecast.models import (
    AgentHook,
    AgentId,
    Config,
    DirectorySyncEntry,
    DirectoryType,
    HookEvent,
    McpServer,
    NamedTarget,
    OverrideTarget,
    Rule,
)
from rulecast.paths import GeneratedPathCollector, directory_rules, resolve_rule_destination


def test_resolve_rule_destination(catalog: AgentCatalog) -> None:
    rule = Rule(sources=("rules/main.md",), targets=(), to="./app")
    assert (
        resolve_rule_destination(rule, NamedTarget(AgentId.CURSOR), catalog)
        == "app/.cursor/rules/main.mdc"
    )
    assert (
        resolve_rule_destination(rule, OverrideTarget(AgentId.CLAUDE, "./docs/AI.md"), catalog)
        == "docs/AI.md"
    )


def test_collect_file_rules_include_shared_rules_dir(
    project: Path, catalog: AgentCatalog, write_file
) -> None:
    write_file(project / "main.md", "# Main")
    config = Config(
        project_root=project,
        rules=[
            Rule(
                sources=("main.md",),
                targets=(
                    NamedTarget(AgentId.CLAUDE),
                    NamedTarget(AgentId.CURSOR),
                    OverrideTarget(AgentId.ROOCODE, "custom/roo.md"),
                ),
            )
        ],
    )

    paths = GeneratedPathCollector(config, catalog).collect()

    assert paths == ["CLAUDE.md", ".cursor/rules/main.mdc", ".cursor/rules/", "custom/roo.md"]


def test_collect_directory_rule(project: Path, catalog: AgentCatalog, write_file) -> None:
    write_file(project / "commands" / "deploy.md", "deploy")
    config = Config(
        project_root=project,
        rules=[
            Rule(
                sources=("commands",),
                targets=(NamedTarget(AgentId.CLAUDE), NamedTarget(AgentId.CODEX)),
            )
        ],
    )

    # Unsupported targets surface during distribution, not here.
    assert GeneratedPathCollector(config, catalog).collect() == [".claude/commands/"]


def test_shortcuts_default_to_supporting_agents(project: Path, catalog: AgentCatalog) -> None:
    config = Config(
        project_root=project,
        directories=[DirectorySyncEntry(DirectoryType.SKILLS, "ai/skills", ())],
    )

    rules = directory_rules(config, catalog)

    assert len(rules) == 1
    assert rules[0].name == "skills"
    assert [t.agent for t in rules[0].targets] == [
        AgentId.CLAUDE,
        AgentId.CURSOR,
        AgentId.OPENCODE,
    ]
    assert GeneratedPathCollector(config, catalog).shortcut_paths() == [
        ".claude/skills/",
        ".cursor/skills/",
        ".claude/skills/",
    ]
    assert GeneratedPathCollector(config, catalog).collect() == [
        ".claude/skills/",
        ".cursor/skills/",
    ]


def test_mcp_paths(project: Path, catalog: AgentCatalog) -> None:
    config = Config(
        project_root=project,
        mcps=[
            McpServer(name="db", config={}, targets=(AgentId.CLAUDE, AgentId.CURSOR)),
            McpServer(name="x", config={}, output_path="./tools/mcp.json"),
        ],
    )
    assert GeneratedPathCollector(config, catalog).mcp_paths() == [
        ".mcp.json",
        ".cursor/mcp.json",
        "tools/mcp.json",
    ]


def test_hook_paths_included_in_collect_and_gitignore(
    project: Path, catalog: AgentCatalog
) -> None:
    config = Config(
        project_root=project,
        agent_hooks=[
            AgentHook(event=HookEvent.STOP, targets=(AgentId.CURSOR,), command="done"),
        ],
    )
    collector = GeneratedPathCollector(config, catalog)

    assert collector.hook_paths() == [".cursor/hooks.json"]
    assert collector.collect() == [".cursor/hooks.json"]
    assert collector.collect_gitignore() == [".cursor/hooks.json"]


def test_collect_gitignore_opt_outs(project: Path, catalog: AgentCatalog) -> None:
    kept = Rule(sources=("a.md",), targets=(NamedTarget(AgentId.CLAUDE),))
    skipped = Rule(
        sources=("b.md",), targets=(NamedTarget(AgentId.GENERIC),), gitignore=False
    )
    config = Config(project_root=project, rules=[kept, skipped])
    collector = GeneratedPathCollector(config, catalog)

    assert collector.collect_gitignore() == ["CLAUDE.md"]
    assert "b.md" in collector.collect()

    config.gitignore = False
    assert collector.collect_gitignore() == []
