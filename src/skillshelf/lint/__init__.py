from __future__ import annotations

import logging
from pathlib import Path

from ..skills.discovery import discover_skills, is_skill_file
from ._checks import LinkChecker, check_config, check_frontmatter, check_links, check_markdown
from ._code_blocks import CHECKERS, check_code_blocks
from ._issues import Issue, LintReport, Severity, error

logger = logging.getLogger(__name__)


def lint_file(
    path: Path,
    root: Path,
    link_checker: LinkChecker | None = None,
    require_frontmatter: bool = False,
) -> list[Issue]:
    """Run every per-file check on a single Markdown file."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        return [error(path, "file-unreadable", f"cannot read file: {e}")]

    link_checker = link_checker or LinkChecker(root)
    issues = []
    issues.extend(check_frontmatter(path, text, require=require_frontmatter))
    issues.extend(check_markdown(path, text))
    issues.extend(link_checker.check(path, text))
    issues.extend(check_code_blocks(path, text))
    return issues


def _duplicate_ids(skills) -> list[Issue]:
    issues = []
    seen: dict[str, Path] = {}
    for skill in skills:
        if skill.skill_id in seen:
            issues.append(
                error(
                    skill.path,
                    "skill-duplicate-id",
                    f"skill id '{skill.skill_id}' is also used by {seen[skill.skill_id].name}",
                )
            )
        else:
            seen[skill.skill_id] = skill.path
    return issues


def lint_repository(
    root: Path,
    skills_dir: Path | None = None,
    config_file: Path | None = None,
    require_frontmatter: bool = False,
) -> LintReport:
    """Lint the README files at the root, every Markdown file in the skills
    directory, and skills-config.json when it exists.
    """
    root = Path(root).resolve()
    skills_dir = Path(skills_dir) if skills_dir else root / "skills"
    config_file = Path(config_file) if config_file else root / "skills-config.json"

    files = sorted(p for p in root.glob("README*.md") if p.is_file())
    if skills_dir.is_dir():
        files.extend(sorted(p for p in skills_dir.glob("*.md") if p.is_file()))
    else:
        logger.warning(f"Skills directory not found: {skills_dir}")

    report = LintReport()
    link_checker = LinkChecker(root)
    for path in files:
        logger.debug(f"Linting {path}")
        report.files_checked.append(path)
        report.issues.extend(
            lint_file(
                path,
                root,
                link_checker=link_checker,
                require_frontmatter=require_frontmatter and is_skill_file(path),
            )
        )

    skills = discover_skills(skills_dir)
    report.issues.extend(_duplicate_ids(skills))

    if config_file.is_file():
        report.files_checked.append(config_file)
        report.issues.extend(check_config(config_file, root, skills))
    else:
        logger.info(f"No skills config at {config_file}, skipping")

    logger.info(
        f"Checked {len(report.files_checked)} files: {len(report.errors)} errors, {len(report.warnings)} warnings"
    )
    return report


__all__ = [
    "CHECKERS",
    "Issue",
    "LinkChecker",
    "LintReport",
    "Severity",
    "check_code_blocks",
    "check_config",
    "check_frontmatter",
    "check_links",
    "check_markdown",
    "lint_file",
    "lint_repository",
]
