"""Write MCP server descriptors into each agent's MCP config file."""

from __future__ import annotations

from collections import Counter
from pathlib import Path
from typing import Any

from rulecast.agents.catalog import AgentCatalog
from rulecast.errors import DuplicateMcpNameError
from rulecast.models import Config, McpServer
from rulecast.utils import normalize_generated_path, read_json_safe, write_json


def validate_mcp_names(mcps: list[McpServer]) -> None:
    counts = Counter(mcp.name for mcp in mcps)
    duplicates = [name for name, count in counts.items() if count > 1]
    if duplicates:
        raise DuplicateMcpNameError(duplicates)


class McpService:
    def __init__(self, config: Config, catalog: AgentCatalog) -> None:
        self.config = config
        self.catalog = catalog

    def group_by_output(self) -> dict[str, list[McpServer]]:
        groups: dict[str, list[McpServer]] = {}
        for mcp in self.config.mcps:
            for agent in mcp.targets:
                output = normalize_generated_path(
                    self.catalog.resolve_mcp_path(agent, mcp.output_path)
                )
                group = groups.setdefault(output, [])
                if mcp not in group:
                    group.append(mcp)
        return groups

    def build_payload(self, path: Path, servers: list[McpServer]) -> dict[str, Any]:
        existing: dict[str, Any] = {}
        if self.config.merge_mcps:
            payload, _ = read_json_safe(path)
            # Invalid JSON starts from scratch.
            if isinstance(payload, dict):
                existing = payload
        mcp_servers = existing.get("mcpServers")
        if not isinstance(mcp_servers, dict):
            mcp_servers = {}
        for server in servers:
            mcp_servers[server.name] = dict(server.config)
        existing["mcpServers"] = mcp_servers
        return existing

    def distribute(self) -> list[str]:
        if not self.config.mcps:
            return []
        validate_mcp_names(self.config.mcps)
        written: list[str] = []
        for output, servers in self.group_by_output().items():
            path = self.config.project_root / output
            write_json(path, self.build_payload(path, servers))
            written.append(output)
        return written
