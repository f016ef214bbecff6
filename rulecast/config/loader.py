"""Load, validate and normalize rulecast.yaml."""

from __future__ import annotations

import importlib
import json
from pathlib import Path
from typing import Any, Optional

import yaml
from jsonschema import Draft202012Validator

from rulecast.constants import CONFIG_FILENAMES, DEFAULT_CONFIG_DIR
from rulecast.errors import (
    InvalidAgentHookError,
    InvalidConfigFormatError,
    InvalidConfigSchemaError,
    MergeTargetError,
    MissingConfigFileError,
    UnknownTransformError,
)
from rulecast.models import (
    AgentHook,
    AgentId,
    AgentTarget,
    BuiltinTransform,
    Config,
    CustomTransform,
    DeliveryMode,
    DirectorySyncEntry,
    DirectoryType,
    HookEvent,
    McpServer,
    NamedTarget,
    OverrideTarget,
    Rule,
    Transform,
    TransformSet,
)
from rulecast.transforms.builtin import parse_builtin_hook

SCHEMA_PATH = Path(__file__).resolve().parent / "schema.json"


def load_schema() -> dict[str, Any]:
    return json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))


def find_config_file(project_root: Path) -> Path:
    for name in CONFIG_FILENAMES:
        candidate = project_root / name
        if candidate.is_file():
            return candidate
    raise MissingConfigFileError(project_root / CONFIG_FILENAMES[0])


def import_callable(import_path: str) -> Any:
    """Resolve ``package.module:function`` to the callable it names."""
    module_name, sep, attr = import_path.partition(":")
    if not sep or not module_name or not attr:
        raise UnknownTransformError(import_path, "expected 'module:function'")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise UnknownTransformError(import_path, str(exc)) from exc
    func = getattr(module, attr, None)
    if not callable(func):
        raise UnknownTransformError(import_path, f"'{attr}' is not callable")
    return func


def parse_target(raw: Any) -> AgentTarget:
    if isinstance(raw, str):
        return NamedTarget(AgentId(raw))
    agent = AgentId(raw["name"])
    if raw.get("to"):
        return OverrideTarget(agent, str(raw["to"]))
    return NamedTarget(agent)


def parse_rule(raw: dict[str, Any]) -> Rule:
    file = raw["file"]
    sources = tuple(str(item) for item in file) if isinstance(file, list) else (str(file),)
    mode = raw.get("mode")
    rule = Rule(
        name=raw.get("name"),
        sources=sources,
        targets=tuple(parse_target(item) for item in raw["targets"]),
        to=str(raw.get("to", ".")),
        hooks=tuple(str(item) for item in raw.get("hooks", [])),
        globs=raw.get("globs"),
        gitignore=bool(raw.get("gitignore", True)),
        mode=DeliveryMode(mode) if mode else None,
    )
    if rule.is_merge:
        for target in rule.targets:
            if isinstance(target, NamedTarget):
                raise MergeTargetError(rule.identity, target.agent.value)
    return rule


def parse_transform(raw: Any) -> Transform:
    if isinstance(raw, dict):
        name, options = str(raw["name"]), dict(raw.get("options") or {})
    else:
        name, options = str(raw), {}
    hook = parse_builtin_hook(name)
    if hook is not None:
        return BuiltinTransform(hook=hook, options=options)
    if options:
        raise UnknownTransformError(name, "options are only accepted by built-ins")
    return CustomTransform(name=name, func=import_callable(name))


def parse_transforms(raw: Optional[dict[str, Any]]) -> TransformSet:
    raw = raw or {}
    return TransformSet(
        before=tuple(
            CustomTransform(name=item, func=import_callable(item))
            for item in raw.get("before", [])
        ),
        after=tuple(parse_transform(item) for item in raw.get("after", [])),
        error=tuple(
            CustomTransform(name=item, func=import_callable(item))
            for item in raw.get("error", [])
        ),
    )


def parse_directories(raw: dict[str, Any]) -> list[DirectorySyncEntry]:
    entries: list[DirectorySyncEntry] = []
    for directory_type in DirectoryType:
        value = raw.get(directory_type.value)
        if value is None:
            continue
        if isinstance(value, str):
            path, targets = value, ()
        else:
            path = value["path"]
            targets = tuple(AgentId(item) for item in value.get("targets", []))
        entries.append(
            DirectorySyncEntry(directory_type=directory_type, path=path, targets=targets)
        )
    return entries


def parse_mcps(raw: list[dict[str, Any]]) -> list[McpServer]:
    return [
        McpServer(
            name=item["name"],
            config=dict(item["config"]),
            targets=tuple(AgentId(agent) for agent in item.get("targets", ["claude"])),
            output_path=item.get("output_path"),
        )
        for item in raw
    ]


def parse_agent_hooks(raw: list[dict[str, Any]]) -> list[AgentHook]:
    hooks: list[AgentHook] = []
    for item in raw:
        hook = AgentHook(
            event=HookEvent(item["event"]),
            targets=tuple(AgentId(agent) for agent in item["targets"]),
            command=item.get("command"),
            script=item.get("script"),
            matcher=item.get("matcher"),
        )
        if not (hook.command or hook.script):
            raise InvalidAgentHookError(hook.event.value)
        hooks.append(hook)
    return hooks


def validate_config(payload: Any, path: Path) -> None:
    validator = Draft202012Validator(load_schema())
    errors = sorted(validator.iter_errors(payload), key=lambda err: list(err.path))
    if errors:
        first = errors[0]
        location = "/".join(str(part) for part in first.path) or "<root>"
        raise InvalidConfigSchemaError(path, f"{location}: {first.message}")


def parse_config(payload: dict[str, Any], project_root: Path) -> Config:
    return Config(
        project_root=project_root,
        rules=[parse_rule(item) for item in payload.get("rules", [])],
        config_dir=payload.get("config_dir", DEFAULT_CONFIG_DIR),
        mode=DeliveryMode(payload.get("mode", DeliveryMode.COPY.value)),
        gitignore=payload.get("gitignore", True),
        merge_mcps=payload.get("merge_mcps", True),
        directories=parse_directories(payload),
        mcps=parse_mcps(payload.get("mcps", [])),
        agent_hooks=parse_agent_hooks(payload.get("hooks", [])),
        transforms=parse_transforms(payload.get("transforms")),
    )


def load_config(
    path: Optional[Path] = None, project_root: Optional[Path] = None
) -> Config:
    """Load a config file; the project root defaults to the file's directory."""
    if path is None:
        path = find_config_file(project_root or Path.cwd())
    if not path.is_file():
        raise MissingConfigFileError(path)
    try:
        payload = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise InvalidConfigFormatError(path, str(exc)) from exc
    validate_config(payload, path)
    return parse_config(payload, project_root or path.resolve().parent)
