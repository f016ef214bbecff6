"""Built-in content transforms."""

from __future__ import annotations

import asyncio
import os
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Mapping, Optional

from rulecast.constants import STRUCTURE_IGNORED_DIRS
from rulecast.models import BuiltinHook, SyncContext

TIMESTAMP_TOKEN = "__TIMESTAMP__"
STRUCTURE_TOKEN = "__STRUCTURE__"
_ENV_TOKEN_RE = re.compile(r"__ENV_([A-Z_]+)__")

_FILLER_WORDS = (
    "basically",
    "literally",
    "actually",
    "really",
    "very",
    "quite",
    "pretty much",
    "sort of",
    "kind of",
    "rather",
    "fairly",
)

ContextHook = Callable[[SyncContext], Any]


def format_timestamp(now: datetime) -> str:
    return now.strftime("%B %d, %Y, %I:%M %p")


def add_timestamp(context: SyncContext, now: Optional[datetime] = None) -> str:
    stamp = format_timestamp(now or datetime.now())
    return context.content.replace(TIMESTAMP_TOKEN, stamp)


def replace_env(
    context: SyncContext, environ: Optional[Mapping[str, str]] = None
) -> str:
    env = os.environ if environ is None else environ

    def _sub(match: re.Match) -> str:
        return env.get(match.group(1)) or match.group(0)

    return _ENV_TOKEN_RE.sub(_sub, context.content)


def build_tree(root: Path, max_depth: int = 3) -> list[str]:
    def _walk(directory: Path, depth: int, prefix: str) -> list[str]:
        if depth > max_depth:
            return []
        try:
            names = sorted(os.listdir(directory))
        except OSError:
            return []
        visible = [
            name
            for name in names
            if not name.startswith(".") and name not in STRUCTURE_IGNORED_DIRS
        ]
        lines: list[str] = []
        for index, name in enumerate(visible):
            is_last = index == len(visible) - 1
            lines.append(prefix + ("└── " if is_last else "├── ") + name)
            child = directory / name
            if child.is_dir():
                lines.extend(
                    _walk(child, depth + 1, prefix + ("    " if is_last else "│   "))
                )
        return lines

    return _walk(root, 0, "")


async def replace_structure(context: SyncContext) -> str:
    if STRUCTURE_TOKEN not in context.content:
        return context.content
    tree = await asyncio.to_thread(build_tree, context.config.project_root)
    structure = "```\n" + "\n".join(tree) + "\n```"
    return context.content.replace(STRUCTURE_TOKEN, structure)


def _remove_fillers(content: str) -> str:
    lines: list[str] = []
    in_code_block = False
    for line in content.split("\n"):
        if line.strip().startswith("```"):
            in_code_block = not in_code_block
            lines.append(line)
            continue
        if in_code_block or "`" in line:
            lines.append(line)
            continue
        cleaned = line
        for filler in _FILLER_WORDS:
            cleaned = re.sub(rf"\b{filler}\b", "", cleaned, flags=re.IGNORECASE)
            cleaned = re.sub(r"\s{2,}", " ", cleaned).strip()
        lines.append(cleaned)
    return "\n".join(lines)


def _compact_lists(content: str) -> str:
    content = re.sub(
        r"(-|\*|\+|\d+\.)\s+([^\n]+)\n\n+(?=(-|\*|\+|\d+\.)\s)", r"\1 \2\n", content
    )
    return re.sub(r"(-|\*|\+|\d+\.)\s+([^\n]+)\n\n+$", r"\1 \2\n", content)


def compact_markdown(
    content: str,
    max_consecutive_newlines: int = 2,
    trim_trailing_spaces: bool = True,
    compact_lists: bool = True,
    remove_filler_words: bool = False,
) -> str:
    result = content
    if trim_trailing_spaces:
        result = "\n".join(line.rstrip() for line in result.split("\n"))
    if max_consecutive_newlines > 0:
        result = re.sub(
            "\n{%d,}" % (max_consecutive_newlines + 1),
            "\n" * max_consecutive_newlines,
            result,
        )
    if remove_filler_words:
        result = _remove_fillers(result)
    if compact_lists:
        result = _compact_lists(result)
    if trim_trailing_spaces:
        result = result.strip()
    return result


def compact(
    preserve_frontmatter: bool = True,
    max_consecutive_newlines: int = 2,
    trim_trailing_spaces: bool = True,
    compact_lists: bool = True,
    remove_filler_words: bool = False,
) -> ContextHook:
    def _compact(context: SyncContext) -> str:
        content = context.content
        frontmatter = ""
        body = content
        if preserve_frontmatter and content.startswith("---"):
            end = content.find("---", 3)
            if end != -1:
                frontmatter = content[: end + 3]
                body = content[end + 3 :]
        compacted = compact_markdown(
            body,
            max_consecutive_newlines=max_consecutive_newlines,
            trim_trailing_spaces=trim_trailing_spaces,
            compact_lists=compact_lists,
            remove_filler_words=remove_filler_words,
        )
        if frontmatter:
            return f"{frontmatter}\n{compacted}"
        return compacted

    return _compact


_RULE_HOOK_ALIASES: dict[str, BuiltinHook] = {
    "addTimestamp": BuiltinHook.ADD_TIMESTAMP,
    "replaceEnv": BuiltinHook.REPLACE_ENV,
    "replaceStructure": BuiltinHook.REPLACE_STRUCTURE,
}


def parse_builtin_hook(name: str) -> Optional[BuiltinHook]:
    """Map a configured hook name to a built-in; unknown names map to None."""
    if name in _RULE_HOOK_ALIASES:
        return _RULE_HOOK_ALIASES[name]
    try:
        return BuiltinHook(name)
    except ValueError:
        return None


def make_builtin(
    hook: BuiltinHook,
    options: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ContextHook:
    opts = dict(options or {})
    if hook == BuiltinHook.ADD_TIMESTAMP:
        return add_timestamp
    if hook == BuiltinHook.REPLACE_ENV:
        return lambda context: replace_env(context, environ)
    if hook == BuiltinHook.REPLACE_STRUCTURE:
        return replace_structure
    if hook == BuiltinHook.COMPACT:
        return compact(**opts)
    raise ValueError(f"Unhandled built-in hook: {hook}")
