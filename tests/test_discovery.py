import json
from pathlib import Path

import pytest
from conftest import write

from skillshelf import ConfigError
from skillshelf.skills import discover_skills, find_skill, load_skill_content, load_skills_config


def test_discover_skills(skill_repo: Path):
    skills = discover_skills(skill_repo / "skills")
    assert [s.name for s in skills] == ["deploying", "logging"]

    deploying, logging_skill = skills
    assert deploying.skill_id == "deploying"
    assert deploying.title == "Deploying Services"
    assert deploying.description == "How to ship a release."
    assert deploying.metadata.tags == ["deploy", "release"]
    assert deploying.metadata.version == "2.1"

    # no frontmatter: title from the first heading, description from the first paragraph
    assert logging_skill.skill_id == "logging"
    assert logging_skill.title == "Logging Guide"
    assert logging_skill.description == "Log at the boundaries of the system."


def test_discover_skills_ignores_readme_and_other_files(skill_repo: Path):
    write(skill_repo / "skills" / "README.md", "# About these skills\n")
    write(skill_repo / "skills" / "notes.txt", "not a skill\n")
    (skill_repo / "skills" / "nested").mkdir()
    write(skill_repo / "skills" / "nested" / "deep.md", "# Deep\n")

    assert [s.name for s in discover_skills(skill_repo / "skills")] == ["deploying", "logging"]


def test_discover_skills_title_falls_back_to_name(tmp_path: Path):
    write(tmp_path / "plain.md", "Just text.\n")
    (skill,) = discover_skills(tmp_path)
    assert skill.title == "plain"
    assert skill.description == "Just text."


def test_discover_skills_setext_title_and_formatted_description(tmp_path: Path):
    write(tmp_path / "commits.md", "Title\n=====\n\n**Note:** keep commits small.\n")
    (skill,) = discover_skills(tmp_path)
    assert skill.title == "Title"
    assert skill.description == "Note: keep commits small."


def test_discover_skills_description_skips_lists_quotes_and_code(tmp_path: Path):
    write(
        tmp_path / "review.md",
        """
        ```text
        # not the title
        ```

        > A quoted aside.

        - a list item

        # Review

        Read the diff *before* the
        description, then `run` the tests.
        """,
    )
    (skill,) = discover_skills(tmp_path)
    assert skill.title == "Review"
    assert skill.description == "Read the diff before the description, then run the tests."


def test_discover_skills_skips_broken_frontmatter(skill_repo: Path, caplog):
    write(skill_repo / "skills" / "broken.md", "---\ntags: [a\n---\n# Broken\n")
    skills = discover_skills(skill_repo / "skills")
    assert "broken" not in [s.name for s in skills]
    assert "Failed to parse skill broken.md" in caplog.text


def test_discover_skills_missing_directory(tmp_path: Path, caplog):
    assert discover_skills(tmp_path / "nope") == []
    assert "Skills directory not found" in caplog.text


def test_load_skill_content(skill_repo: Path):
    content = load_skill_content(skill_repo / "skills", "deploying")
    assert content.startswith("---\nid: deploying")
    assert "## Rollback" in content
    assert load_skill_content(skill_repo / "skills", "deploying.md") == content


@pytest.mark.parametrize("name", ["missing", "../README", "", "README"])
def test_load_skill_content_unknown(skill_repo: Path, name: str):
    with pytest.raises(FileNotFoundError):
        load_skill_content(skill_repo / "skills", name)


def test_find_skill(skill_repo: Path):
    assert find_skill(skill_repo / "skills", "logging") == skill_repo / "skills" / "logging.md"


def test_load_skills_config(skill_repo: Path):
    config = load_skills_config(skill_repo / "skills-config.json")
    assert config.version == "1.0"
    assert [e.name for e in config.skills] == ["deploying", "logging"]
    assert config.skills[0].auth is False
    assert config.skills[1].auth is True
    assert config.skills[1].tags == []


def test_load_skills_config_numeric_version(tmp_path: Path):
    path = tmp_path / "skills-config.json"
    path.write_text(json.dumps({"version": 2, "skills": []}))
    assert load_skills_config(path).version == "2"


def test_load_skills_config_missing(tmp_path: Path):
    with pytest.raises(ConfigError, match="not found"):
        load_skills_config(tmp_path / "skills-config.json")


def test_load_skills_config_invalid_json(tmp_path: Path):
    path = tmp_path / "skills-config.json"
    path.write_text("{not json")
    with pytest.raises(ConfigError, match="not valid JSON"):
        load_skills_config(path)


def test_load_skills_config_missing_fields(tmp_path: Path):
    path = tmp_path / "skills-config.json"
    path.write_text(json.dumps({"version": "1", "skills": [{"name": "x"}]}))
    with pytest.raises(ConfigError, match="failed validation"):
        load_skills_config(path)
