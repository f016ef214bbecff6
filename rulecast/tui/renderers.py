from enum import Enum

from rich.console import Console, RenderableType
from rich.panel import Panel
from rich.table import Table

from rulecast.engine import SyncResult
from rulecast.utils import is_directory_marker


class PathKind(str, Enum):
    FILE = "file"
    DIRECTORY = "dir"
    SYMLINK = "symlink"


PATH_KIND_STYLE = {
    PathKind.FILE: "green",
    PathKind.DIRECTORY: "cyan",
    PathKind.SYMLINK: "magenta",
}


def _panel(title: str, body: RenderableType, style: str) -> Panel:
    return Panel(body, title=title, border_style=style, padding=(0, 1))


def _bullets(items: list[str], prefix: str = "") -> str:
    return "\n".join(f"- {prefix}{item}" for item in items)


def classify_path(path: str, symlinks: set[str]) -> PathKind:
    if is_directory_marker(path):
        return PathKind.DIRECTORY
    if path in symlinks:
        return PathKind.SYMLINK
    return PathKind.FILE


class SyncConsoleUI:
    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    @staticmethod
    def _paths_table(paths: list[str], symlinks: set[str] | None = None) -> Table:
        symlinks = symlinks or set()
        table = Table(show_header=True, header_style="bold", expand=True)
        table.add_column("Kind", width=10)
        table.add_column("Path", overflow="fold")
        for path in paths:
            kind = classify_path(path, symlinks)
            style = PATH_KIND_STYLE[kind]
            table.add_row(f"[{style}]{kind.value}[/{style}]", path)
        return table

    def render_sync_result(self, result: SyncResult) -> None:
        summary = Table.grid(padding=(0, 2))
        summary.add_column(style="bold")
        summary.add_column()
        summary.add_row("Generated", str(len(result.generated)))
        summary.add_row("Synced files", str(len(result.synced_files)))
        summary.add_row("Symlinks", str(len(result.symlinks)))
        summary.add_row("MCP files", str(len(result.mcp_files)))
        summary.add_row("Hook files", str(len(result.hook_files)))
        summary.add_row("Pruned", str(len(result.removed)))
        summary.add_row(".gitignore", "updated" if result.gitignore_updated else "unchanged")
        self.console.print(_panel("sync", summary, "green"))

        if result.generated:
            table = self._paths_table(result.generated, set(result.symlinks))
            self.console.print(_panel("generated", table, "cyan"))
        if result.removed:
            self.console.print(_panel("pruned", _bullets(result.removed), "magenta"))

    def render_paths(self, paths: list[str]) -> None:
        if not paths:
            self.console.print(_panel("paths", "No generated paths.", "dim"))
            return
        self.console.print(_panel("paths", self._paths_table(paths), "blue"))

    def render_clean(self, removed: list[str]) -> None:
        self.console.print(
            _panel("clean", _bullets(removed) or "Nothing to remove.", "yellow")
        )

    def render_validation(self, missing: list[str]) -> None:
        if not missing:
            self.console.print(_panel("validate", "Configuration is valid.", "green"))
            return
        self.console.print(
            _panel("validate", _bullets(missing, prefix="missing source: "), "red")
        )
