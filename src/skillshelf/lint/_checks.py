from __future__ import annotations

import logging
from pathlib import Path
from urllib.parse import unquote, urlsplit

from .. import _markdown
from .._errors import ConfigError, FrontmatterError
from ..skills.discovery import load_skills_config
from ..skills.frontmatter import body_and_offset, parse_metadata, split_frontmatter
from ..skills.models import Skill
from ._issues import Issue, error, warning

logger = logging.getLogger(__name__)


def check_markdown(path: Path, text: str) -> list[Issue]:
    """Structural Markdown checks: closed code fences and a sane heading outline."""
    body, offset = body_and_offset(text)
    tokens = _markdown.parse(body)
    issues = []

    for fence in _markdown.fences(tokens):
        if not fence.closed:
            issues.append(
                error(path, "markdown-unclosed-fence", "fenced code block is never closed", line=fence.line + offset)
            )

    found = _markdown.headings(tokens)
    if not found:
        issues.append(warning(path, "markdown-no-heading", "document has no heading"))
    previous = 0
    for level, text_ in found:
        if previous and level > previous + 1:
            issues.append(
                warning(
                    path,
                    "markdown-heading-level",
                    f"heading '{text_}' jumps from level {previous} to {level}",
                )
            )
        previous = level
    return issues


def check_frontmatter(path: Path, text: str, require: bool = False) -> list[Issue]:
    """Validate the optional frontmatter block against the recognized keys."""
    try:
        data, _ = split_frontmatter(text)
    except FrontmatterError as e:
        return [error(path, "frontmatter-syntax", str(e), line=e.line)]

    if data is None:
        if require:
            return [warning(path, "frontmatter-missing", "skill file has no frontmatter block", line=1)]
        return []

    try:
        metadata = parse_metadata(data)
    except FrontmatterError as e:
        return [error(path, "frontmatter-invalid", str(e), line=e.line)]

    issues = [
        warning(path, "frontmatter-unknown-key", f"unrecognized frontmatter key '{key}'", line=2)
        for key in metadata.unknown_keys
    ]
    version = data.get("version")
    if isinstance(version, (int, float)) and not isinstance(version, bool):
        issues.append(
            warning(
                path,
                "frontmatter-unquoted-version",
                f"version {version!r} is read as a number and may lose digits; "
                "quote it as written, e.g. version: \"1.10\"",
                line=2,
            )
        )
    return issues


class LinkChecker:
    """Resolves relative links and anchors, caching the anchors of each target file."""

    def __init__(self, root: Path):
        self.root = Path(root).resolve()
        self._anchors: dict[Path, set[str]] = {}

    def anchors_for(self, path: Path) -> set[str]:
        path = path.resolve()
        if path not in self._anchors:
            body, _ = body_and_offset(path.read_text(encoding="utf-8"))
            self._anchors[path] = _markdown.heading_anchors(_markdown.parse(body))
        return self._anchors[path]

    def _inside_root(self, target: Path) -> bool:
        return target == self.root or self.root in target.parents

    def check(self, path: Path, text: str) -> list[Issue]:
        path = Path(path).resolve()
        body, offset = body_and_offset(text)
        tokens = _markdown.parse(body)
        own_anchors = _markdown.heading_anchors(tokens)
        self._anchors[path] = own_anchors
        issues = []

        for link in _markdown.links(tokens):
            line = link.line + offset
            parts = urlsplit(link.target)
            if parts.scheme or parts.netloc:
                continue

            fragment = unquote(parts.fragment).lower()
            if not parts.path:
                if fragment and fragment not in own_anchors:
                    issues.append(error(path, "link-anchor", f"no heading for anchor '#{parts.fragment}'", line=line))
                continue

            link_path = unquote(parts.path)
            base = self.root if link_path.startswith("/") else path.parent
            target = (base / link_path.lstrip("/")).resolve()
            if not self._inside_root(target):
                issues.append(
                    error(path, "link-outside-root", f"link '{link.target}' points outside the repository", line=line)
                )
                continue
            if not target.exists():
                kind = "image" if link.is_image else "link"
                issues.append(error(path, "link-broken", f"{kind} target '{link.target}' does not exist", line=line))
                continue

            if fragment and target.is_file() and target.suffix == ".md":
                try:
                    anchors = self.anchors_for(target)
                except (OSError, UnicodeDecodeError) as e:
                    issues.append(error(path, "link-broken", f"cannot read '{link.target}': {e}", line=line))
                    continue
                if fragment not in anchors:
                    issues.append(
                        error(
                            path,
                            "link-anchor",
                            f"'{parts.path}' has no heading for anchor '#{parts.fragment}'",
                            line=line,
                        )
                    )
        return issues


def check_links(path: Path, text: str, root: Path) -> list[Issue]:
    """Check that relative links and images resolve to files in the repository."""
    return LinkChecker(root).check(path, text)


def check_config(config_file: Path, root: Path, skills: list[Skill] | None = None) -> list[Issue]:
    """Cross-check skills-config.json against the files in the repository."""
    config_file = Path(config_file)
    root = Path(root).resolve()
    try:
        config = load_skills_config(config_file)
    except ConfigError as e:
        return [error(config_file, "config-invalid", str(e))]

    by_path = {s.path.resolve(): s for s in skills or []}
    listed: set[Path] = set()
    seen_names: set[str] = set()
    issues = []

    for entry in config.skills:
        if entry.name in seen_names:
            issues.append(error(config_file, "config-duplicate-name", f"skill name '{entry.name}' is listed twice"))
        seen_names.add(entry.name)

        if urlsplit(entry.path).scheme:
            continue
        target = (root / entry.path).resolve()
        listed.add(target)
        if not target.is_file():
            issues.append(error(config_file, "config-path-missing", f"'{entry.path}' does not exist"))
            continue

        skill = by_path.get(target)
        if skill is not None and entry.name not in (skill.skill_id, skill.name):
            issues.append(
                warning(
                    config_file,
                    "config-name-mismatch",
                    f"entry '{entry.name}' does not match skill id '{skill.skill_id}' of '{entry.path}'",
                )
            )

    for skill_path, skill in by_path.items():
        if skill_path not in listed:
            issues.append(warning(config_file, "config-unlisted-skill", f"skill '{skill.skill_id}' is not listed"))
    return issues
