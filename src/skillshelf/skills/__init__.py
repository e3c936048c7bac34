from .discovery import discover_skills, find_skill, load_skill_content, load_skills_config, parse_skill
from .fetcher import FetchedSkill, SkillFetcher, to_raw_url
from .frontmatter import parse_metadata, read_metadata, split_frontmatter
from .models import RECOGNIZED_KEYS, Skill, SkillEntry, SkillMetadata, SkillsConfig
from .prompts import build_index, generate_skills_xml

__all__ = [
    "discover_skills",
    "find_skill",
    "load_skill_content",
    "load_skills_config",
    "parse_skill",
    "FetchedSkill",
    "SkillFetcher",
    "to_raw_url",
    "split_frontmatter",
    "parse_metadata",
    "read_metadata",
    "RECOGNIZED_KEYS",
    "Skill",
    "SkillEntry",
    "SkillMetadata",
    "SkillsConfig",
    "build_index",
    "generate_skills_xml",
]
