class SkillshelfError(Exception):
    """Base class for errors raised by skillshelf."""


class FrontmatterError(SkillshelfError, ValueError):
    """The YAML frontmatter block of a skill file is malformed."""

    def __init__(self, message: str, line: int | None = None):
        super().__init__(message)
        self.line = line


class ConfigError(SkillshelfError):
    """skills-config.json could not be read or failed validation."""


class SkillLoadError(SkillshelfError, OSError):
    """A skill file exists but could not be read."""
