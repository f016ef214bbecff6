import json
from pathlib import Path

import pytest

from rulecast.utils import (
    call_maybe_async,
    dedupe,
    expand_home,
    join_generated,
    normalize_generated_path,
    read_json_safe,
    write_json,
)


# --- read_json_safe ---


def test_read_json_safe_file_missing(tmp_path: Path) -> None:
    assert read_json_safe(tmp_path / "missing.json") == (None, None)


def test_read_json_safe_file_empty(tmp_path: Path) -> None:
    path = tmp_path / "empty.json"
    path.write_text("", encoding="utf-8")
    assert read_json_safe(path) == (None, None)


def test_read_json_safe_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "invalid.json"
    path.write_text("{nope", encoding="utf-8")

    result, error = read_json_safe(path)

    assert result is None
    assert error is not None


def test_write_json_creates_parents_and_trailing_newline(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "out.json"
    write_json(path, {"a": 1})
    text = path.read_text(encoding="utf-8")
    assert text.endswith("}\n")
    assert json.loads(text) == {"a": 1}


# --- generated paths ---


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("./CLAUDE.md", "CLAUDE.md"),
        ("a/./b/../c.md", "a/c.md"),
        (".cursor/rules/", ".cursor/rules/"),
        ("dir\\file.md", "dir/file.md"),
    ],
)
def test_normalize_generated_path(raw: str, expected: str) -> None:
    assert normalize_generated_path(raw) == expected


def test_join_generated_keeps_directory_marker() -> None:
    assert join_generated(".", ".cursor/rules/") == ".cursor/rules/"
    assert join_generated("./app", "CLAUDE.md") == "app/CLAUDE.md"
    assert join_generated("", "AGENTS.md") == "AGENTS.md"


def test_dedupe_keeps_first_occurrence() -> None:
    assert dedupe(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]


def test_expand_home(tmp_path: Path) -> None:
    assert expand_home("~/.cursor/mcp.json", tmp_path) == str(tmp_path / ".cursor/mcp.json")
    assert expand_home("~", tmp_path) == str(tmp_path)
    assert expand_home("relative.json", tmp_path) == "relative.json"


# --- call_maybe_async ---


@pytest.mark.asyncio
async def test_call_maybe_async_handles_both_kinds() -> None:
    async def async_double(value: int) -> int:
        return value * 2

    assert await call_maybe_async(lambda value: value + 1, 1) == 2
    assert await call_maybe_async(async_double, 4) == 8
