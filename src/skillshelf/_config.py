"""Configuration read from the environment."""

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

ROOT_ENV_VAR = "SKILLSHELF_ROOT"
SKILLS_FOLDER_ENV_VAR = "SKILLSHELF_SKILLS_FOLDER"
CONFIG_ENV_VAR = "SKILLSHELF_CONFIG"
FETCH_TIMEOUT_ENV_VAR = "SKILLSHELF_FETCH_TIMEOUT"

DEFAULT_SKILLS_FOLDER = "skills"
DEFAULT_CONFIG_FILE = "skills-config.json"
DEFAULT_FETCH_TIMEOUT = 10.0


def get_fetch_timeout() -> float:
    """Get the HTTP timeout used when fetching skills by URL.

    Environment variable:
        SKILLSHELF_FETCH_TIMEOUT: Timeout in seconds. Default: 10.

    Returns:
        The timeout in seconds. Invalid or non-positive values fall back to
        the default with a warning.
    """
    timeout_str = os.getenv(FETCH_TIMEOUT_ENV_VAR)
    if timeout_str is None:
        return DEFAULT_FETCH_TIMEOUT

    try:
        timeout = float(timeout_str)
    except ValueError:
        logger.warning(
            f"Invalid {FETCH_TIMEOUT_ENV_VAR} value: {timeout_str}, using default {DEFAULT_FETCH_TIMEOUT}"
        )
        return DEFAULT_FETCH_TIMEOUT

    if timeout <= 0:
        logger.warning(
            f"Invalid {FETCH_TIMEOUT_ENV_VAR} value: {timeout_str} "
            f"(must be positive), using default {DEFAULT_FETCH_TIMEOUT}"
        )
        return DEFAULT_FETCH_TIMEOUT
    return timeout


class ShelfConfig:
    _root: Path
    _skills_dir: Path
    _config_file: Path

    def __init__(self, root: str | Path = None, skills_dir: str | Path = None, config_file: str | Path = None):
        env_root = os.getenv(ROOT_ENV_VAR)
        self._root = Path(root or env_root or ".").resolve()

        env_skills = os.getenv(SKILLS_FOLDER_ENV_VAR)
        self._skills_dir = self._resolve(skills_dir or env_skills or DEFAULT_SKILLS_FOLDER)

        env_config = os.getenv(CONFIG_ENV_VAR)
        self._config_file = self._resolve(config_file or env_config or DEFAULT_CONFIG_FILE)

    def _resolve(self, value: str | Path) -> Path:
        path = Path(value)
        if not path.is_absolute():
            path = self._root / path
        return path

    @property
    def root(self) -> Path:
        return self._root

    @property
    def skills_dir(self) -> Path:
        return self._skills_dir

    @property
    def config_file(self) -> Path:
        return self._config_file

    @property
    def fetch_timeout(self) -> float:
        return get_fetch_timeout()
