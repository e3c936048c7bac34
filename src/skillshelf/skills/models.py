from __future__ import annotations

import datetime
from pathlib import Path

from pydantic import AnyUrl, BaseModel, ConfigDict, Field, field_validator, model_validator

RECOGNIZED_KEYS = frozenset(
    {"id", "title", "description", "tags", "version", "location", "author", "created", "updated"}
)


class SkillMetadata(BaseModel):
    """Metadata from the optional YAML frontmatter block of a skill file.

    Every key is optional. Keys outside the recognized set are kept in
    ``model_extra`` so the linter can report them.
    """

    model_config = ConfigDict(extra="allow")

    id: str | None = None
    """Stable identifier used by registries to index the skill."""

    title: str | None = None
    description: str | None = None
    tags: list[str] = Field(default_factory=list)

    version: str | None = None
    """Free-form version string.

    Numeric YAML values are coerced to text, and YAML has already dropped trailing
    zeros by then (`version: 1.10` reads as "1.1"). The linter warns about them.
    """

    location: AnyUrl | None = None
    """Canonical URL a registry fetches the file from."""

    author: str | None = None
    created: datetime.date | None = None
    updated: datetime.date | None = None

    @field_validator("version", mode="before")
    @classmethod
    def _version_to_str(cls, value):
        # YAML reads `version: 1.0` as a float
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def _tags_to_list(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return value

    @field_validator("tags")
    @classmethod
    def _normalize_tags(cls, value: list[str]) -> list[str]:
        seen = []
        for tag in value:
            tag = tag.strip().lower()
            if not tag:
                raise ValueError("tags must not be empty strings")
            if tag in seen:
                raise ValueError(f"duplicate tag '{tag}'")
            seen.append(tag)
        return seen

    @model_validator(mode="after")
    def _check_dates(self) -> SkillMetadata:
        if self.created and self.updated and self.created > self.updated:
            raise ValueError(f"created ({self.created}) is later than updated ({self.updated})")
        return self

    @property
    def unknown_keys(self) -> list[str]:
        return sorted((self.model_extra or {}).keys())


class Skill(BaseModel):
    """A skill file found in the skills directory."""

    name: str
    """The file stem, used as the skill's lookup name."""

    path: Path
    title: str
    description: str = ""
    metadata: SkillMetadata = Field(default_factory=SkillMetadata)

    @property
    def skill_id(self) -> str:
        return self.metadata.id or self.name


class SkillEntry(BaseModel):
    """One entry in skills-config.json."""

    path: str
    name: str
    description: str = ""
    tags: list[str] = Field(default_factory=list)
    auth: bool = False


class SkillsConfig(BaseModel):
    """The registry configuration file, skills-config.json."""

    version: str
    skills: list[SkillEntry] = Field(default_factory=list)

    @field_validator("version", mode="before")
    @classmethod
    def _version_to_str(cls, value):
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value
