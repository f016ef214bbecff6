"""Per-agent rule writers."""

from __future__ import annotations

from abc import ABC, abstractmethod

import yaml

from rulecast.models import Rule, RuleFormat

DEFAULT_GLOBS = "**/*"


class IAgentWriter(ABC):
    @abstractmethod
    def format_content(self, content: str, rule: Rule) -> str:
        """Return the final file content for the target agent."""


class MarkdownWriter(IAgentWriter):
    """Plain markdown agents take the content as-is."""

    def format_content(self, content: str, rule: Rule) -> str:
        return content


class FrontmatterWriter(IAgentWriter):
    """Prepend the metadata block Cursor-style rule files require."""

    def format_content(self, content: str, rule: Rule) -> str:
        fm: dict = {
            "description": f"AI Rules - {rule.logical_name}",
            "globs": rule.globs or DEFAULT_GLOBS,
            "alwaysApply": True,
        }
        parts: list[str] = []
        parts.append("---")
        parts.append(yaml.dump(fm, default_flow_style=False, sort_keys=False).rstrip())
        parts.append("---")
        parts.append(content)
        return "\n".join(parts)


_WRITERS: dict[RuleFormat, IAgentWriter] = {
    RuleFormat.MARKDOWN: MarkdownWriter(),
    RuleFormat.FRONTMATTER: FrontmatterWriter(),
}


def writer_for(format: RuleFormat) -> IAgentWriter:
    return _WRITERS[format]
