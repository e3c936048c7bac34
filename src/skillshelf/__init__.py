from ._config import ShelfConfig, get_fetch_timeout
from ._errors import ConfigError, FrontmatterError, SkillLoadError, SkillshelfError
from ._logging import configure_logging

__all__ = [
    "ShelfConfig",
    "get_fetch_timeout",
    "ConfigError",
    "FrontmatterError",
    "SkillLoadError",
    "SkillshelfError",
    "configure_logging",
]
