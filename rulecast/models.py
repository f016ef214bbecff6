from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Mapping, Optional, Union

from rulecast.constants import DEFAULT_CONFIG_DIR, FALLBACK_RULE_NAME, MARKDOWN_SUFFIX


class AgentId(str, Enum):
    CLAUDE = "claude"
    CURSOR = "cursor"
    CODEX = "codex"
    ROOCODE = "roocode"
    OPENCODE = "opencode"
    GENERIC = "generic"


class RuleFormat(str, Enum):
    MARKDOWN = "markdown"
    FRONTMATTER = "frontmatter"


class DirectoryType(str, Enum):
    COMMANDS = "commands"
    SKILLS = "skills"
    AGENTS = "agents"


class DeliveryMode(str, Enum):
    COPY = "copy"
    SYMLINK = "symlink"


class HookEvent(str, Enum):
    PRE_TOOL_USE = "PreToolUse"
    POST_TOOL_USE = "PostToolUse"
    STOP = "Stop"
    USER_PROMPT_SUBMIT = "UserPromptSubmit"
    BEFORE_SHELL_EXECUTION = "beforeShellExecution"
    AFTER_SHELL_EXECUTION = "afterShellExecution"
    BEFORE_FILE_EDIT = "beforeFileEdit"
    AFTER_FILE_EDIT = "afterFileEdit"
    BEFORE_READ_FILE = "beforeReadFile"


class BuiltinHook(str, Enum):
    ADD_TIMESTAMP = "add_timestamp"
    REPLACE_ENV = "replace_env"
    REPLACE_STRUCTURE = "replace_structure"
    COMPACT = "compact"


@dataclass(frozen=True)
class NamedTarget:
    agent: AgentId


@dataclass(frozen=True)
class OverrideTarget:
    agent: AgentId
    path: str


AgentTarget = Union[NamedTarget, OverrideTarget]


@dataclass(frozen=True)
class Rule:
    sources: tuple[str, ...]
    targets: tuple[AgentTarget, ...]
    to: str = "."
    name: Optional[str] = None
    hooks: tuple[str, ...] = ()
    globs: Optional[str] = None
    gitignore: bool = True
    mode: Optional[DeliveryMode] = None

    @property
    def present_sources(self) -> tuple[str, ...]:
        return tuple(item for item in self.sources if item)

    @property
    def is_merge(self) -> bool:
        return len(self.present_sources) > 1

    @property
    def source(self) -> str:
        present = self.present_sources
        return present[0] if present else ""

    @property
    def identity(self) -> str:
        if self.name:
            return self.name
        return " + ".join(self.present_sources) or FALLBACK_RULE_NAME

    @property
    def logical_name(self) -> str:
        """Name substituted into agent path templates: first source's file name."""
        first = self.source.rstrip("/").split("/")[-1]
        if first.endswith(MARKDOWN_SUFFIX):
            first = first[: -len(MARKDOWN_SUFFIX)]
        return first or FALLBACK_RULE_NAME


@dataclass(frozen=True)
class BuiltinTransform:
    hook: BuiltinHook
    options: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class CustomTransform:
    name: str
    func: Callable[..., Any]


Transform = Union[BuiltinTransform, CustomTransform]


@dataclass(frozen=True)
class TransformSet:
    before: tuple[CustomTransform, ...] = ()
    after: tuple[Transform, ...] = ()
    error: tuple[CustomTransform, ...] = ()


@dataclass(frozen=True)
class DirectorySyncEntry:
    directory_type: DirectoryType
    path: str
    targets: tuple[AgentId, ...]


@dataclass(frozen=True)
class McpServer:
    name: str
    config: Mapping[str, Any]
    targets: tuple[AgentId, ...] = (AgentId.CLAUDE,)
    output_path: Optional[str] = None


@dataclass(frozen=True)
class AgentHook:
    """Shell command an agent runs on one of its lifecycle events."""

    event: HookEvent
    targets: tuple[AgentId, ...]
    command: Optional[str] = None
    script: Optional[str] = None
    matcher: Optional[str] = None


@dataclass
class Config:
    project_root: Path
    rules: list[Rule] = field(default_factory=list)
    config_dir: str = DEFAULT_CONFIG_DIR
    mode: DeliveryMode = DeliveryMode.COPY
    gitignore: bool = True
    merge_mcps: bool = True
    directories: list[DirectorySyncEntry] = field(default_factory=list)
    mcps: list[McpServer] = field(default_factory=list)
    agent_hooks: list[AgentHook] = field(default_factory=list)
    transforms: TransformSet = field(default_factory=TransformSet)


@dataclass
class SyncContext:
    config: Config
    rule: Rule
    content: str
    target_path: Path
    agent: AgentId
