"""Syntax checks for fenced code blocks, dispatched on the fence's language."""

from __future__ import annotations

import ast
import json
import tomllib
from collections.abc import Callable
from pathlib import Path

import yaml

from .. import _markdown
from ..skills.frontmatter import body_and_offset
from ._issues import Issue, error, warning

# A checker returns None when the snippet is valid, else (line within snippet, message).
Checker = Callable[[str], tuple[int, str] | None]

_PAIRS = {")": "(", "]": "[", "}": "{"}
_OPENERS = set(_PAIRS.values())
# After these characters a "/" starts a regular expression literal rather than a division.
_REGEX_PRECEDERS = set("(,=:[!&|?{};+-*%~^")


def _check_python(source: str) -> tuple[int, str] | None:
    try:
        ast.parse(source)
    except SyntaxError as e:
        return e.lineno or 1, e.msg
    return None


def _check_json(source: str) -> tuple[int, str] | None:
    try:
        json.loads(source)
    except json.JSONDecodeError as e:
        return e.lineno, e.msg
    return None


def _check_yaml(source: str) -> tuple[int, str] | None:
    try:
        for _ in yaml.safe_load_all(source):
            pass
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        return (mark.line + 1 if mark is not None else 1), getattr(e, "problem", None) or str(e)
    return None


def _check_toml(source: str) -> tuple[int, str] | None:
    try:
        tomllib.loads(source)
    except tomllib.TOMLDecodeError as e:
        return getattr(e, "lineno", None) or 1, str(e)
    return None


def _scan_template(source: str, start: int, line: int) -> tuple[int, int, bool] | None:
    """Scan template literal text from ``start`` up to its closing backtick or the next ``${``.

    Returns (index after the stop point, current line, whether a ``${`` was entered),
    or None when the literal is never closed.
    """
    j = start
    while j < len(source):
        ch = source[j]
        if ch == "\\":
            j += 2
            continue
        if ch == "\n":
            line += 1
        elif ch == "`":
            return j + 1, line, False
        elif ch == "$" and source.startswith("{", j + 1):
            return j + 2, line, True
        j += 1
    return None


def _scan_quoted(source: str, start: int, quote: str) -> int | None:
    """Index after the closing quote of a single-line string, or None."""
    j = start
    while j < len(source):
        ch = source[j]
        if ch == "\\":
            j += 2
            continue
        if ch == "\n":
            return None
        if ch == quote:
            return j + 1
        j += 1
    return None


def _scan_regex(source: str, start: int) -> int | None:
    """Index after the closing slash of a regular expression literal, or None."""
    j = start
    in_class = False
    while j < len(source) and source[j] != "\n":
        ch = source[j]
        if ch == "\\":
            j += 2
            continue
        if ch == "[":
            in_class = True
        elif ch == "]":
            in_class = False
        elif ch == "/" and not in_class:
            return j + 1
        j += 1
    return None


def _check_c_family(source: str) -> tuple[int, str] | None:
    """Check that brackets, strings, comments and template literals are balanced.

    A structural scan only; the grammar itself is not parsed.
    """
    stack: list[tuple[str, int]] = []
    line = 1
    i = 0
    n = len(source)
    last_significant = ""

    while i < n:
        ch = source[i]
        nxt = source[i + 1] if i + 1 < n else ""

        if ch == "\n":
            line += 1
            i += 1
            continue
        if ch.isspace():
            i += 1
            continue

        if ch == "/" and nxt == "/":
            end = source.find("\n", i)
            i = n if end == -1 else end
            continue
        if ch == "/" and nxt == "*":
            end = source.find("*/", i + 2)
            if end == -1:
                return line, "unterminated block comment"
            line += source.count("\n", i, end)
            i = end + 2
            continue
        if ch == "/" and (not last_significant or last_significant in _REGEX_PRECEDERS):
            end = _scan_regex(source, i + 1)
            if end is None:
                return line, "unterminated regular expression literal"
            i = end
            last_significant = "/"
            continue

        if ch in "'\"":
            end = _scan_quoted(source, i + 1, ch)
            if end is None:
                return line, f"unterminated string literal ({ch})"
            i = end
            last_significant = "a"
            continue

        if ch == "`" or (ch == "}" and stack and stack[-1][0] == "${"):
            if ch == "}":
                stack.pop()
            result = _scan_template(source, i + 1, line)
            if result is None:
                return line, "unterminated template literal"
            i, line, entered = result
            if entered:
                stack.append(("${", line))
                last_significant = "{"
            else:
                last_significant = "a"
            continue

        if ch in _OPENERS:
            stack.append((ch, line))
        elif ch in _PAIRS:
            if not stack:
                return line, f"unexpected '{ch}'"
            opener, opened_at = stack.pop()
            if opener == "${":
                return line, f"'{ch}' does not match '${{' opened on line {opened_at}"
            if _PAIRS[ch] != opener:
                return line, f"'{ch}' does not match '{opener}' opened on line {opened_at}"
        if ch in "+-" and last_significant == ch:
            # postfix ++ or --: a "/" after it divides
            last_significant = "a"
        else:
            last_significant = ch
        i += 1

    if stack:
        opener, opened_at = stack[-1]
        return opened_at, f"'{opener}' is never closed"
    return None


# tsx and jsx are not scanned: JSX text may hold unpaired quotes.
CHECKERS: dict[str, Checker] = {
    "python": _check_python,
    "py": _check_python,
    "json": _check_json,
    "yaml": _check_yaml,
    "yml": _check_yaml,
    "toml": _check_toml,
    "typescript": _check_c_family,
    "ts": _check_c_family,
    "javascript": _check_c_family,
    "js": _check_c_family,
}


def check_code_blocks(path: Path, text: str, require_language: bool = True) -> list[Issue]:
    """Check every fenced code block whose language has a syntax checker."""
    body, offset = body_and_offset(text)
    issues = []
    for fence in _markdown.fences(_markdown.parse(body)):
        if not fence.closed:
            # reported by check_markdown
            continue
        language = fence.language
        if not language:
            if require_language:
                issues.append(
                    warning(path, "code-no-language", "fenced code block has no language", line=fence.line + offset)
                )
            continue

        checker = CHECKERS.get(language)
        if checker is None:
            continue
        problem = checker(fence.content)
        if problem is not None:
            snippet_line, message = problem
            issues.append(
                error(
                    path,
                    "code-syntax",
                    f"{language} block: {message}",
                    line=fence.line + offset + snippet_line,
                )
            )
    return issues
