from pathlib import Path
from typing import Iterable


class RulecastError(Exception):
    """Base user-facing application error."""


class RulecastFileError(RulecastError):
    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"{message}: {path}")


class MissingConfigFileError(RulecastFileError):
    def __init__(self, path: Path) -> None:
        super().__init__(path=path, message="Missing required config file")


class InvalidConfigFormatError(RulecastFileError):
    def __init__(self, path: Path, detail: str) -> None:
        self.detail = detail
        super().__init__(path=path, message=f"Invalid YAML format ({detail})")


class InvalidConfigSchemaError(RulecastFileError):
    def __init__(self, path: Path, detail: str) -> None:
        self.detail = detail
        super().__init__(path=path, message=f"Invalid config schema ({detail})")


class SourceNotFoundError(RulecastFileError):
    def __init__(self, path: Path) -> None:
        super().__init__(path=path, message="Source file not found")


class SourceReadError(RulecastFileError):
    def __init__(self, path: Path, detail: str) -> None:
        self.detail = detail
        super().__init__(path=path, message=f"Failed to read source ({detail})")


class RuleConfigurationError(RulecastError):
    """Usage error in the rule configuration; aborts the whole run."""


class UnsupportedDirectoryError(RuleConfigurationError):
    def __init__(self, agent: str, directory_type: str) -> None:
        self.agent = agent
        self.directory_type = directory_type
        super().__init__(
            f"Agent '{agent}' does not support '{directory_type}' directories. "
            f"Add an explicit target path, e.g. {{name: {agent}, to: ./custom-{directory_type}}}"
        )


class UnknownDirectoryTypeError(RuleConfigurationError):
    def __init__(self, key: str, agent: str) -> None:
        self.key = key
        self.agent = agent
        super().__init__(
            f"Unknown directory type '{key}' for agent '{agent}'. "
            "Name the rule after a known directory type (commands, skills, agents) "
            "or give the target an explicit path"
        )


class MergeTargetError(RuleConfigurationError):
    def __init__(self, rule: str, agent: str) -> None:
        self.rule = rule
        self.agent = agent
        super().__init__(
            f"Rule '{rule}' merges multiple files, so target '{agent}' "
            "needs an explicit 'to' path"
        )


class DuplicateMcpNameError(RuleConfigurationError):
    def __init__(self, names: Iterable[str]) -> None:
        self.names = sorted(names)
        super().__init__(f"Duplicate MCP names found: {', '.join(self.names)}")


class UnknownTransformError(RuleConfigurationError):
    def __init__(self, name: str, detail: str = "") -> None:
        self.name = name
        suffix = f" ({detail})" if detail else ""
        super().__init__(f"Cannot resolve transform '{name}'{suffix}")


class InvalidAgentHookError(RuleConfigurationError):
    def __init__(self, event: str) -> None:
        self.event = event
        super().__init__(
            f"Hook for event '{event}' must define either 'command' or 'script'"
        )


class SymlinkSecurityError(RulecastError):
    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(
            f'Security: Source path "{path}" is outside project directory. '
            "Symlinks must reference files within the project."
        )


class SymlinkCreationError(RulecastError):
    def __init__(self, source: Path, destination: Path, detail: str) -> None:
        self.source = source
        self.destination = destination
        self.detail = detail
        super().__init__(
            f"Failed to create symlink {destination} -> {source}: {detail}"
        )


class DirectorySyncError(RulecastError):
    def __init__(
        self, file: Path, source_dir: Path, destination_dir: Path, detail: str
    ) -> None:
        self.file = file
        self.source_dir = source_dir
        self.destination_dir = destination_dir
        self.detail = detail
        super().__init__(
            f"Failed to symlink directory file '{file}' "
            f"({source_dir} -> {destination_dir}): {detail}"
        )


class RuleDistributionError(RulecastError):
    """I/O failure while distributing a rule, with rule/source/destination context."""

    def __init__(
        self, rule: str, source: str, destination: str, cause: Exception
    ) -> None:
        self.rule = rule
        self.source = source
        self.destination = destination
        self.cause = cause
        super().__init__(
            f"Rule '{rule}' failed ({source} -> {destination}): {cause}"
        )
