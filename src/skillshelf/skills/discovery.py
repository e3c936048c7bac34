from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from .. import _markdown
from .._errors import ConfigError, FrontmatterError, SkillLoadError
from .frontmatter import read_metadata
from .models import Skill, SkillsConfig

logger = logging.getLogger(__name__)

SKILL_SUFFIX = ".md"


def is_skill_file(path: Path) -> bool:
    """README files describe the collection and are not skills themselves."""
    return path.is_file() and path.suffix == SKILL_SUFFIX and not path.name.upper().startswith("README")


def parse_skill(skill_file: Path) -> Skill:
    """Build a Skill from a Markdown file.

    Raises:
        FrontmatterError: If the frontmatter block is malformed.
    """
    text = skill_file.read_text(encoding="utf-8")
    metadata, body = read_metadata(text)
    name = skill_file.stem
    tokens = _markdown.parse(body)
    return Skill(
        name=name,
        path=skill_file,
        title=metadata.title or _markdown.first_heading(tokens) or name,
        description=metadata.description or _markdown.first_paragraph(tokens),
        metadata=metadata,
    )


def discover_skills(skills_directory: Path) -> list[Skill]:
    """Discover available skills and return their metadata."""
    skills_directory = Path(skills_directory)
    if not skills_directory.exists():
        logger.warning(f"Skills directory not found: {skills_directory}")
        return []

    skills = []
    for skill_file in sorted(skills_directory.iterdir()):
        if not is_skill_file(skill_file):
            continue

        try:
            skills.append(parse_skill(skill_file))
        except (FrontmatterError, OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to parse skill {skill_file.name}: {e}")

    logger.debug(f"Discovered {len(skills)} skills in {skills_directory}")
    return skills


def find_skill(skills_directory: Path, skill_name: str) -> Path:
    """Resolve a skill name (file stem, with or without .md) to its file."""
    skills_directory = Path(skills_directory)
    stem = skill_name[: -len(SKILL_SUFFIX)] if skill_name.endswith(SKILL_SUFFIX) else skill_name
    if "/" in stem or "\\" in stem or stem in ("", ".", ".."):
        raise FileNotFoundError(f"Skill '{skill_name}' not found in {skills_directory}")

    skill_file = skills_directory / f"{stem}{SKILL_SUFFIX}"
    if not is_skill_file(skill_file):
        raise FileNotFoundError(f"Skill '{skill_name}' not found in {skills_directory}")
    return skill_file


def load_skill_content(skills_directory: Path, skill_name: str) -> str:
    """Load and return the full content of a skill file."""
    skill_file = find_skill(skills_directory, skill_name)
    try:
        return skill_file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Failed to load skill {skill_name}: {e}")
        raise SkillLoadError(f"Error loading skill '{skill_name}': {e}") from e


def load_skills_config(config_file: Path) -> SkillsConfig:
    """Read and validate skills-config.json."""
    config_file = Path(config_file)
    try:
        with open(config_file, encoding="utf-8") as f:
            raw = json.load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"Config file not found: {config_file}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"{config_file} is not valid JSON: {e}") from e

    try:
        return SkillsConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(f"{config_file} failed validation: {e}") from e
