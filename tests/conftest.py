import json
import textwrap
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]


def write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(content).lstrip("\n"), encoding="utf-8")
    return path


@pytest.fixture
def repo_root() -> Path:
    """The repository this test suite ships with."""
    return REPO_ROOT


@pytest.fixture
def skill_repo(tmp_path: Path) -> Path:
    """
    Creates a small, clean skills repository:

    README.md, README.ko.md, skills-config.json and two skill files,
    one with frontmatter and one without.
    """
    write(
        tmp_path / "README.md",
        """
        # Example Skills

        [Korean](README.ko.md) | [Deploying](skills/deploying.md#rollback)
        """,
    )
    write(
        tmp_path / "README.ko.md",
        """
        # 예시 스킬

        [English](README.md)
        """,
    )
    write(
        tmp_path / "skills" / "deploying.md",
        """
        ---
        id: deploying
        title: Deploying Services
        description: How to ship a release.
        tags: [deploy, Release]
        version: "2.1"
        created: 2025-01-01
        updated: 2025-02-01
        ---

        # Deploying

        Ship small releases often.

        ## Rollback

        ```python
        def rollback(release):
            return release.previous
        ```
        """,
    )
    write(
        tmp_path / "skills" / "logging.md",
        """
        # Logging Guide

        Log at the boundaries of the system.

        See [deploying](deploying.md).
        """,
    )
    (tmp_path / "skills-config.json").write_text(
        json.dumps(
            {
                "version": "1.0",
                "skills": [
                    {"path": "skills/deploying.md", "name": "deploying", "tags": ["deploy"]},
                    {"path": "skills/logging.md", "name": "logging", "auth": True},
                ],
            }
        ),
        encoding="utf-8",
    )
    return tmp_path
