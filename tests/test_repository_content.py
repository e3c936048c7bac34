"""The skill files shipped in this repository must pass their own checks."""

from pathlib import Path

from skillshelf.lint import lint_repository
from skillshelf.skills import discover_skills, load_skills_config


def test_repository_lints_clean(repo_root: Path):
    report = lint_repository(repo_root)
    assert [issue.format(repo_root) for issue in report.errors] == []


def test_repository_skills(repo_root: Path):
    skills = discover_skills(repo_root / "skills")
    assert [s.skill_id for s in skills] == ["code-review-checklist", "git-workflow", "typescript-conventions"]
    for skill in skills:
        assert skill.metadata.title
        assert skill.metadata.description
        assert skill.metadata.tags


def test_repository_config_lists_every_skill(repo_root: Path):
    config = load_skills_config(repo_root / "skills-config.json")
    listed = {entry.name for entry in config.skills}
    assert listed == {s.skill_id for s in discover_skills(repo_root / "skills")}
