from __future__ import annotations

import logging
from typing import Any

import yaml
from pydantic import ValidationError

from .._errors import FrontmatterError
from .models import SkillMetadata

logger = logging.getLogger(__name__)

OPENING_FENCE = "---"
CLOSING_FENCES = ("---", "...")


def _closing_index(lines: list[str]) -> int | None:
    """Return the index of the closing fence line, or None if there is no block.

    Raises FrontmatterError when a block is opened but never closed.
    """
    if not lines or lines[0].lstrip("\ufeff").rstrip() != OPENING_FENCE:
        return None
    for i, line in enumerate(lines[1:], start=1):
        if line.rstrip() in CLOSING_FENCES:
            return i
    raise FrontmatterError("frontmatter block is not terminated", line=1)


def body_offset(text: str) -> int:
    """Number of lines that precede the Markdown body (0 without frontmatter)."""
    try:
        closing = _closing_index(text.splitlines())
    except FrontmatterError:
        return 0
    return 0 if closing is None else closing + 1


def split_frontmatter(text: str) -> tuple[dict[str, Any] | None, str]:
    """Split a skill file into its frontmatter mapping and Markdown body.

    Returns ``(None, text)`` when the file has no frontmatter block. An empty
    block yields an empty mapping.
    """
    lines = text.splitlines(keepends=True)
    closing = _closing_index([line.rstrip("\r\n") for line in lines])
    if closing is None:
        return None, text

    block = "".join(lines[1:closing])
    body = "".join(lines[closing + 1 :])
    try:
        data = yaml.safe_load(block)
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        line = mark.line + 2 if mark is not None else 1
        raise FrontmatterError(f"frontmatter is not valid YAML: {e}", line=line) from e

    if data is None:
        return {}, body
    if not isinstance(data, dict):
        raise FrontmatterError(f"frontmatter must be a mapping, got {type(data).__name__}", line=2)
    return data, body


def parse_metadata(data: dict[str, Any] | None) -> SkillMetadata:
    """Validate a frontmatter mapping against the recognized keys."""
    if not data:
        return SkillMetadata()
    try:
        return SkillMetadata.model_validate(data)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'frontmatter'}: {err['msg']}" for err in e.errors()
        )
        raise FrontmatterError(f"invalid frontmatter: {problems}", line=2) from e


def read_metadata(text: str) -> tuple[SkillMetadata, str]:
    """Parse and validate frontmatter in one step, returning metadata and body."""
    data, body = split_frontmatter(text)
    return parse_metadata(data), body


def body_and_offset(text: str) -> tuple[str, int]:
    """The Markdown body without frontmatter, and the number of lines removed."""
    offset = body_offset(text)
    return "\n".join(text.splitlines()[offset:]), offset
