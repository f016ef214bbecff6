import json
import logging
from pathlib import Path

import pytest

from rulecast.errors import InvalidAgentHookError
from rulecast.hooks_service import AgentHooksService, build_command
from rulecast.models import AgentHook, AgentId, Config, HookEvent

LOGGER = "rulecast.hooks_service"


def _read(path: Path) -> dict:
    return json.loads(path.read_text(encoding="utf-8"))


def _config(project: Path, *hooks: AgentHook) -> Config:
    return Config(project_root=project, agent_hooks=list(hooks))


@pytest.mark.parametrize(
    ("script", "expected"),
    [
        ("scripts/check.ts", "bun run scripts/check.ts"),
        ("scripts/check.MTS", "bun run scripts/check.MTS"),
        ("scripts/check.js", "node scripts/check.js"),
        ("scripts/check.mjs", "node scripts/check.mjs"),
        ("scripts/check.sh", "scripts/check.sh"),
    ],
)
def test_build_command_from_script(script: str, expected: str) -> None:
    hook = AgentHook(event=HookEvent.STOP, targets=(AgentId.CLAUDE,), script=script)
    assert build_command(hook) == expected


def test_build_command_prefers_explicit_command() -> None:
    hook = AgentHook(
        event=HookEvent.STOP, targets=(AgentId.CLAUDE,), command="make lint", script="x.ts"
    )
    assert build_command(hook) == "make lint"


def test_build_command_requires_command_or_script() -> None:
    with pytest.raises(InvalidAgentHookError):
        build_command(AgentHook(event=HookEvent.STOP, targets=(AgentId.CLAUDE,)))


def test_claude_hook_maps_cursor_event_with_default_matcher(project: Path) -> None:
    config = _config(
        project,
        AgentHook(
            event=HookEvent.BEFORE_SHELL_EXECUTION,
            targets=(AgentId.CLAUDE,),
            script="scripts/check.ts",
        ),
    )

    written = AgentHooksService(config).distribute()

    assert written == [".claude/settings.json"]
    settings = _read(project / ".claude/settings.json")
    assert settings == {
        "hooks": {
            "PreToolUse": [
                {
                    "matcher": "Bash",
                    "hooks": [{"type": "command", "command": "bun run scripts/check.ts"}],
                }
            ]
        }
    }


def test_claude_hooks_with_same_matcher_share_an_entry(project: Path) -> None:
    claude = (AgentId.CLAUDE,)
    config = _config(
        project,
        AgentHook(event=HookEvent.PRE_TOOL_USE, targets=claude, command="a", matcher="Bash"),
        AgentHook(event=HookEvent.PRE_TOOL_USE, targets=claude, command="b", matcher="Bash"),
        AgentHook(event=HookEvent.STOP, targets=(AgentId.CLAUDE,), command="c"),
    )

    AgentHooksService(config).distribute()

    hooks = _read(project / ".claude/settings.json")["hooks"]
    assert len(hooks["PreToolUse"]) == 1
    assert [h["command"] for h in hooks["PreToolUse"][0]["hooks"]] == ["a", "b"]
    assert hooks["Stop"] == [{"matcher": "*", "hooks": [{"type": "command", "command": "c"}]}]


def test_claude_settings_keep_existing_keys(project: Path, write_file) -> None:
    write_file(
        project / ".claude/settings.json",
        json.dumps({"permissions": {"allow": ["Bash"]}, "hooks": {"Stop": []}}),
    )
    config = _config(
        project, AgentHook(event=HookEvent.STOP, targets=(AgentId.CLAUDE,), command="done")
    )

    AgentHooksService(config).distribute()

    settings = _read(project / ".claude/settings.json")
    assert settings["permissions"] == {"allow": ["Bash"]}
    assert settings["hooks"]["Stop"][0]["hooks"] == [{"type": "command", "command": "done"}]


def test_invalid_existing_json_starts_fresh(project: Path, write_file) -> None:
    write_file(project / ".cursor/hooks.json", "{not json")
    config = _config(
        project,
        AgentHook(event=HookEvent.STOP, targets=(AgentId.CURSOR,), command="done"),
    )

    AgentHooksService(config).distribute()

    assert _read(project / ".cursor/hooks.json") == {
        "version": 1,
        "hooks": {"stop": [{"command": "done"}]},
    }


def test_cursor_hooks_use_cursor_event_names(project: Path) -> None:
    config = _config(
        project,
        AgentHook(
            event=HookEvent.AFTER_SHELL_EXECUTION,
            targets=(AgentId.CURSOR,),
            script="scripts/check.js",
        ),
        AgentHook(
            event=HookEvent.BEFORE_READ_FILE,
            targets=(AgentId.CURSOR,),
            script="scripts/check.sh",
        ),
        AgentHook(event=HookEvent.POST_TOOL_USE, targets=(AgentId.CURSOR,), command="fmt"),
    )

    assert AgentHooksService(config).distribute() == [".cursor/hooks.json"]

    hooks = _read(project / ".cursor/hooks.json")["hooks"]
    assert hooks["afterShellExecution"] == [{"command": "node scripts/check.js"}]
    assert hooks["beforeReadFile"] == [{"command": "scripts/check.sh"}]
    assert hooks["afterFileEdit"] == [{"command": "fmt"}]


def test_unsupported_events_are_skipped_with_warning(project: Path, caplog) -> None:
    config = _config(
        project,
        AgentHook(
            event=HookEvent.USER_PROMPT_SUBMIT,
            targets=(AgentId.CLAUDE, AgentId.CURSOR),
            command="log",
        ),
        AgentHook(event=HookEvent.BEFORE_READ_FILE, targets=(AgentId.CLAUDE,), command="r"),
    )

    with caplog.at_level(logging.WARNING, logger=LOGGER):
        AgentHooksService(config).distribute()

    messages = [r.message for r in caplog.records if r.name == LOGGER]
    assert any("UserPromptSubmit" in m and "Cursor" in m for m in messages)
    assert any("beforeReadFile" in m and "Claude Code" in m for m in messages)
    assert "beforeReadFile" not in json.dumps(_read(project / ".claude/settings.json"))
    assert _read(project / ".cursor/hooks.json")["hooks"] == {}


def test_other_agents_are_ignored(project: Path) -> None:
    config = _config(
        project,
        AgentHook(event=HookEvent.STOP, targets=(AgentId.CODEX, AgentId.ROOCODE), command="x"),
    )
    service = AgentHooksService(config)

    assert service.distribute() == []
    assert service.generated_paths() == []
    assert not (project / ".claude").exists()


def test_repeated_distribution_does_not_duplicate_commands(project: Path) -> None:
    config = _config(
        project,
        AgentHook(
            event=HookEvent.AFTER_FILE_EDIT,
            targets=(AgentId.CLAUDE, AgentId.CURSOR),
            command="fmt",
        ),
    )
    service = AgentHooksService(config)
    service.distribute()
    claude_before = _read(project / ".claude/settings.json")
    cursor_before = _read(project / ".cursor/hooks.json")

    service.distribute()

    assert _read(project / ".claude/settings.json") == claude_before
    assert _read(project / ".cursor/hooks.json") == cursor_before


def test_generated_paths_per_agent(project: Path) -> None:
    config = _config(
        project,
        AgentHook(event=HookEvent.STOP, targets=(AgentId.CURSOR, AgentId.CLAUDE), command="x"),
    )
    assert AgentHooksService(config).generated_paths() == [
        ".claude/settings.json",
        ".cursor/hooks.json",
    ]
