from pathlib import Path

from rulecast.agents.catalog import AGENT_CATALOG, AgentCatalog, PathEnvironment
from rulecast.models import AgentId, DirectoryType, RuleFormat


def test_catalog_covers_every_agent() -> None:
    assert set(AGENT_CATALOG) == set(AgentId)


def test_resolve_path_substitutes_name(catalog: AgentCatalog) -> None:
    assert catalog.resolve_path(AgentId.CURSOR, "main") == ".cursor/rules/main.mdc"
    assert catalog.resolve_path(AgentId.ROOCODE, "frontend") == ".roo/rules/frontend.md"
    assert catalog.resolve_path(AgentId.GENERIC, "docs") == "docs.md"


def test_resolve_path_static_templates_ignore_name(catalog: AgentCatalog) -> None:
    assert catalog.resolve_path(AgentId.CLAUDE, "any-name") == "CLAUDE.md"
    assert catalog.resolve_path(AgentId.CODEX, "any-name") == "AGENTS.md"
    assert catalog.resolve_path(AgentId.OPENCODE, "any-name") == "AGENTS.md"


def test_resolve_path_default_name(catalog: AgentCatalog) -> None:
    assert catalog.resolve_path(AgentId.CURSOR) == ".cursor/rules/global.mdc"


def test_formats(catalog: AgentCatalog) -> None:
    assert catalog.resolve_format(AgentId.CURSOR) == RuleFormat.FRONTMATTER
    assert catalog.resolve_format(AgentId.CLAUDE) == RuleFormat.MARKDOWN


def test_rules_directory(catalog: AgentCatalog) -> None:
    assert catalog.resolve_rules_directory(AgentId.CURSOR) == ".cursor/rules"
    assert catalog.resolve_rules_directory(AgentId.CLAUDE) is None


def test_resolve_directory_mapped_and_unsupported(catalog: AgentCatalog) -> None:
    assert (
        catalog.resolve_directory(AgentId.CLAUDE, DirectoryType.COMMANDS)
        == ".claude/commands"
    )
    assert (
        catalog.resolve_directory(AgentId.OPENCODE, DirectoryType.COMMANDS)
        == ".opencode/command"
    )
    assert (
        catalog.resolve_directory(AgentId.OPENCODE, DirectoryType.SKILLS)
        == ".claude/skills"
    )
    assert catalog.resolve_directory(AgentId.CODEX, DirectoryType.AGENTS) is None


def test_agents_supporting(catalog: AgentCatalog) -> None:
    assert catalog.agents_supporting(DirectoryType.COMMANDS) == [
        AgentId.CLAUDE,
        AgentId.CURSOR,
        AgentId.OPENCODE,
    ]


def test_parse_directory_type() -> None:
    assert AgentCatalog.parse_directory_type("skills") == DirectoryType.SKILLS
    assert AgentCatalog.parse_directory_type("recipes") is None


def test_mcp_path_project_environment(catalog: AgentCatalog) -> None:
    assert catalog.resolve_mcp_path(AgentId.CURSOR) == ".cursor/mcp.json"
    assert catalog.resolve_mcp_path(AgentId.CLAUDE) == ".mcp.json"
    assert catalog.resolve_mcp_path(AgentId.OPENCODE) == "opencode.jsonc"


def test_mcp_path_home_environment_expands_explicit_home(tmp_path: Path) -> None:
    home = tmp_path / "someone"
    catalog = AgentCatalog(environment=PathEnvironment.HOME, home=home)
    assert catalog.resolve_mcp_path(AgentId.CURSOR) == str(home / ".cursor" / "mcp.json")
    assert catalog.resolve_mcp_path(AgentId.ROOCODE) == ".roo/mcp.json"


def test_mcp_path_custom_wins(catalog: AgentCatalog) -> None:
    assert catalog.resolve_mcp_path(AgentId.CURSOR, "custom.json") == "custom.json"
