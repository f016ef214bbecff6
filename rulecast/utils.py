import inspect
import json
import posixpath
from pathlib import Path
from typing import Any, Callable


def read_json(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def read_json_safe(path: Path) -> tuple[Any | None, str | None]:
    if not path.exists():
        return None, None
    if path.stat().st_size == 0:
        return None, None
    try:
        return read_json(path), None
    except Exception as exc:
        return None, str(exc)


def write_json(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        json.dump(payload, handle, indent=2, sort_keys=False)
        handle.write("\n")


def write_text(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def normalize_generated_path(path: str) -> str:
    """Collapse a generated path to posix form without a leading "./".

    A trailing "/" (directory marker) is kept.
    """
    text = path.replace("\\", "/")
    is_dir = text.endswith("/")
    normalized = posixpath.normpath(text) if text.strip("/") else text
    if normalized == ".":
        return "./" if is_dir else "."
    if is_dir and not normalized.endswith("/"):
        normalized += "/"
    return normalized


def join_generated(base: str, relative: str) -> str:
    is_dir = relative.endswith("/")
    joined = normalize_generated_path(posixpath.join(base or ".", relative))
    if is_dir and not joined.endswith("/"):
        joined += "/"
    return joined


def is_directory_marker(path: str) -> bool:
    return path.endswith("/")


def strip_directory_marker(path: str) -> str:
    return path[:-1] if path.endswith("/") else path


def dedupe(items: list[str]) -> list[str]:
    seen: set[str] = set()
    result: list[str] = []
    for item in items:
        if item in seen:
            continue
        seen.add(item)
        result.append(item)
    return result


def expand_home(path: str, home: Path) -> str:
    if path == "~":
        return str(home)
    if path.startswith("~/"):
        return str(home / path[2:])
    return path


async def call_maybe_async(func: Callable[..., Any], *args: Any) -> Any:
    result = func(*args)
    if inspect.isawaitable(result):
        result = await result
    return result
