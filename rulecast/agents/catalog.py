"""Static agent catalog: default output locations per agent."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Final, Mapping, Optional

from rulecast.constants import DEFAULT_RULE_NAME
from rulecast.models import AgentId, DirectoryType, RuleFormat
from rulecast.utils import expand_home


NAME_PLACEHOLDER: Final[str] = "{name}"


class PathEnvironment(str, Enum):
    """How home-relative catalog paths are resolved.

    HOME expands ``~`` against the user's home directory (normal operation).
    PROJECT keeps every path project-relative (sandboxed runs and tests).
    """

    HOME = "home"
    PROJECT = "project"


@dataclass(frozen=True)
class AgentCatalogEntry:
    path: str
    format: RuleFormat
    mcp_path: str
    rules_directory: Optional[str] = None
    directories: Mapping[DirectoryType, str] = field(default_factory=dict)
    home_mcp_path: Optional[str] = None


def _dirs(**paths: str) -> Mapping[DirectoryType, str]:
    return MappingProxyType({DirectoryType(key): value for key, value in paths.items()})


AGENT_CATALOG: Final[Mapping[AgentId, AgentCatalogEntry]] = MappingProxyType(
    {
        AgentId.CLAUDE: AgentCatalogEntry(
            path="CLAUDE.md",
            format=RuleFormat.MARKDOWN,
            mcp_path=".mcp.json",
            directories=_dirs(
                commands=".claude/commands",
                skills=".claude/skills",
                agents=".claude/agents",
            ),
        ),
        AgentId.CURSOR: AgentCatalogEntry(
            path=".cursor/rules/{name}.mdc",
            format=RuleFormat.FRONTMATTER,
            mcp_path=".cursor/mcp.json",
            rules_directory=".cursor/rules",
            directories=_dirs(
                commands=".cursor/commands",
                skills=".cursor/skills",
                agents=".cursor/agents",
            ),
            home_mcp_path="~/.cursor/mcp.json",
        ),
        AgentId.CODEX: AgentCatalogEntry(
            path="AGENTS.md",
            format=RuleFormat.MARKDOWN,
            mcp_path="codex_mcp.json",
        ),
        AgentId.ROOCODE: AgentCatalogEntry(
            path=".roo/rules/{name}.md",
            format=RuleFormat.MARKDOWN,
            mcp_path=".roo/mcp.json",
            rules_directory=".roo/rules",
        ),
        AgentId.OPENCODE: AgentCatalogEntry(
            path="AGENTS.md",
            format=RuleFormat.MARKDOWN,
            mcp_path="opencode.jsonc",
            # OpenCode reads skills from the Claude-compatible location.
            directories=_dirs(
                commands=".opencode/command",
                skills=".claude/skills",
                agents=".opencode/agent",
            ),
        ),
        AgentId.GENERIC: AgentCatalogEntry(
            path="{name}.md",
            format=RuleFormat.MARKDOWN,
            mcp_path="mcp.json",
        ),
    }
)


class AgentCatalog:
    def __init__(
        self,
        environment: PathEnvironment = PathEnvironment.HOME,
        home: Optional[Path] = None,
        entries: Optional[Mapping[AgentId, AgentCatalogEntry]] = None,
    ) -> None:
        self.environment = environment
        self.home = home if home is not None else Path.home()
        self._entries = entries if entries is not None else AGENT_CATALOG

    def entry(self, agent: AgentId) -> AgentCatalogEntry:
        return self._entries[agent]

    def resolve_path(self, agent: AgentId, name: str = DEFAULT_RULE_NAME) -> str:
        return self.entry(agent).path.replace(NAME_PLACEHOLDER, name)

    def resolve_format(self, agent: AgentId) -> RuleFormat:
        return self.entry(agent).format

    def resolve_rules_directory(self, agent: AgentId) -> Optional[str]:
        return self.entry(agent).rules_directory

    def resolve_directory(
        self, agent: AgentId, directory_type: DirectoryType
    ) -> Optional[str]:
        return self.entry(agent).directories.get(directory_type)

    def resolve_mcp_path(self, agent: AgentId, custom_path: Optional[str] = None) -> str:
        if custom_path:
            return custom_path
        entry = self.entry(agent)
        if self.environment == PathEnvironment.HOME and entry.home_mcp_path:
            return expand_home(entry.home_mcp_path, self.home)
        return entry.mcp_path

    def agents_supporting(self, directory_type: DirectoryType) -> list[AgentId]:
        return [
            agent
            for agent in AgentId
            if agent in self._entries
            and directory_type in self._entries[agent].directories
        ]

    @staticmethod
    def parse_directory_type(key: str) -> Optional[DirectoryType]:
        try:
            return DirectoryType(key)
        except ValueError:
            return None
