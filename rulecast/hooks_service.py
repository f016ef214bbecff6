"""Write agent lifecycle hooks into Claude Code settings and Cursor hooks.json."""

from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath
from typing import Any

from rulecast.constants import CLAUDE_SETTINGS_PATH, CURSOR_HOOKS_PATH, CURSOR_HOOKS_VERSION
from rulecast.errors import InvalidAgentHookError
from rulecast.models import AgentHook, AgentId, Config, HookEvent
from rulecast.utils import read_json_safe, write_json

logger = logging.getLogger(__name__)

# Events each agent understands, keyed by the configured event name.
CLAUDE_EVENTS: dict[HookEvent, str] = {
    HookEvent.PRE_TOOL_USE: "PreToolUse",
    HookEvent.POST_TOOL_USE: "PostToolUse",
    HookEvent.STOP: "Stop",
    HookEvent.USER_PROMPT_SUBMIT: "UserPromptSubmit",
    HookEvent.BEFORE_SHELL_EXECUTION: "PreToolUse",
    HookEvent.AFTER_FILE_EDIT: "PostToolUse",
}

CURSOR_EVENTS: dict[HookEvent, str] = {
    HookEvent.BEFORE_SHELL_EXECUTION: "beforeShellExecution",
    HookEvent.AFTER_SHELL_EXECUTION: "afterShellExecution",
    HookEvent.BEFORE_FILE_EDIT: "beforeFileEdit",
    HookEvent.AFTER_FILE_EDIT: "afterFileEdit",
    HookEvent.BEFORE_READ_FILE: "beforeReadFile",
    HookEvent.STOP: "stop",
    HookEvent.POST_TOOL_USE: "afterFileEdit",
}

CLAUDE_DEFAULT_MATCHERS: dict[HookEvent, str] = {
    HookEvent.BEFORE_SHELL_EXECUTION: "Bash",
    HookEvent.AFTER_SHELL_EXECUTION: "Bash",
    HookEvent.BEFORE_FILE_EDIT: "Edit|Write",
    HookEvent.AFTER_FILE_EDIT: "Edit|Write",
    HookEvent.BEFORE_READ_FILE: "Read",
}

SCRIPT_RUNNERS: dict[str, str] = {
    ".ts": "bun run",
    ".mts": "bun run",
    ".js": "node",
    ".mjs": "node",
}


def build_command(hook: AgentHook) -> str:
    """Explicit command, or a script run through the runner its extension implies."""
    if hook.command:
        return hook.command
    if hook.script:
        runner = SCRIPT_RUNNERS.get(PurePosixPath(hook.script).suffix.lower())
        return f"{runner} {hook.script}" if runner else hook.script
    raise InvalidAgentHookError(hook.event.value)


def _load_object(path: Path) -> dict[str, Any]:
    payload, _ = read_json_safe(path)
    # Invalid JSON starts from scratch.
    return payload if isinstance(payload, dict) else {}


def _object_field(payload: dict[str, Any], key: str) -> dict[str, Any]:
    value = payload.get(key)
    if not isinstance(value, dict):
        value = {}
        payload[key] = value
    return value


def _list_field(payload: dict[str, Any], key: str) -> list[Any]:
    value = payload.get(key)
    if not isinstance(value, list):
        value = []
        payload[key] = value
    return value


class AgentHooksService:
    def __init__(self, config: Config) -> None:
        self.config = config

    def hooks_for(self, agent: AgentId) -> list[AgentHook]:
        return [hook for hook in self.config.agent_hooks if agent in hook.targets]

    def generated_paths(self) -> list[str]:
        paths: list[str] = []
        if self.hooks_for(AgentId.CLAUDE):
            paths.append(CLAUDE_SETTINGS_PATH)
        if self.hooks_for(AgentId.CURSOR):
            paths.append(CURSOR_HOOKS_PATH)
        return paths

    def build_claude_settings(self, path: Path, hooks: list[AgentHook]) -> dict[str, Any]:
        settings = _load_object(path)
        events = _object_field(settings, "hooks")
        for hook in hooks:
            event = CLAUDE_EVENTS.get(hook.event)
            if event is None:
                logger.warning(
                    "Event '%s' is not supported by Claude Code, skipping", hook.event.value
                )
                continue
            command = build_command(hook)
            matcher = hook.matcher or CLAUDE_DEFAULT_MATCHERS.get(hook.event, "*")
            entries = _list_field(events, event)
            entry = next(
                (
                    item
                    for item in entries
                    if isinstance(item, dict) and item.get("matcher") == matcher
                ),
                None,
            )
            if entry is None:
                entry = {"matcher": matcher, "hooks": []}
                entries.append(entry)
            commands = _list_field(entry, "hooks")
            handler = {"type": "command", "command": command}
            if handler not in commands:
                commands.append(handler)
        return settings

    def build_cursor_hooks(self, path: Path, hooks: list[AgentHook]) -> dict[str, Any]:
        payload = _load_object(path)
        payload.setdefault("version", CURSOR_HOOKS_VERSION)
        events = _object_field(payload, "hooks")
        for hook in hooks:
            event = CURSOR_EVENTS.get(hook.event)
            if event is None:
                logger.warning(
                    "Event '%s' is not supported by Cursor, skipping", hook.event.value
                )
                continue
            handler = {"command": build_command(hook)}
            entries = _list_field(events, event)
            if handler not in entries:
                entries.append(handler)
        return payload

    def distribute(self) -> list[str]:
        written: list[str] = []
        builders = (
            (AgentId.CLAUDE, CLAUDE_SETTINGS_PATH, self.build_claude_settings),
            (AgentId.CURSOR, CURSOR_HOOKS_PATH, self.build_cursor_hooks),
        )
        for agent, output, build in builders:
            hooks = self.hooks_for(agent)
            if not hooks:
                continue
            path = self.config.project_root / output
            write_json(path, build(path, hooks))
            written.append(output)
        return written
