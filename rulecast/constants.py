from typing import Final


DEFAULT_CONFIG_DIR: Final[str] = ".agents"
CONFIG_FILENAMES: Final[tuple[str, ...]] = ("rulecast.yaml", "rulecast.yml")
MANIFEST_FILENAME: Final[str] = "manifest.json"
MANIFEST_VERSION: Final[int] = 2

GITIGNORE_FILENAME: Final[str] = ".gitignore"
GITIGNORE_START_MARKER: Final[str] = "# rulecast generated files"
GITIGNORE_END_MARKER: Final[str] = "# end rulecast generated files"

MARKDOWN_SUFFIX: Final[str] = ".md"
MERGE_SEPARATOR: Final[str] = "\n---\n"
DEFAULT_RULE_NAME: Final[str] = "global"
FALLBACK_RULE_NAME: Final[str] = "rule"

STRUCTURE_IGNORED_DIRS: Final[tuple[str, ...]] = (
    "node_modules",
    "dist",
    "build",
)

CLAUDE_SETTINGS_PATH: Final[str] = ".claude/settings.json"
CURSOR_HOOKS_PATH: Final[str] = ".cursor/hooks.json"
CURSOR_HOOKS_VERSION: Final[int] = 1
