from xml.sax.saxutils import escape

from .models import Skill


def generate_skills_xml(skills: list[Skill]) -> str:
    """Formats a list of skills into an XML block for tool descriptions."""
    if not skills:
        return "<available_skills>\n<!-- No skills found -->\n</available_skills>"

    skills_entries = []
    for skill in skills:
        skill_xml = (
            f"<skill>\n<name>{escape(skill.skill_id)}</name>\n"
            f"<title>{escape(skill.title)}</title>\n"
            f"<description>{escape(skill.description)}</description>\n</skill>"
        )
        skills_entries.append(skill_xml)

    return "<available_skills>\n" + "\n".join(skills_entries) + "\n</available_skills>"


def build_index(skills: list[Skill], root=None) -> list[dict]:
    """Build a JSON-serialisable index of skills keyed by their frontmatter metadata.

    Paths are made relative to ``root`` when given, so the index can be
    published alongside the repository.
    """
    index = []
    for skill in skills:
        path = skill.path
        if root is not None:
            try:
                path = path.resolve().relative_to(root.resolve())
            except ValueError:
                # outside root, keep the absolute path
                path = skill.path
        meta = skill.metadata
        index.append(
            {
                "id": skill.skill_id,
                "name": skill.name,
                "path": path.as_posix(),
                "title": skill.title,
                "description": skill.description,
                "tags": list(meta.tags),
                "version": meta.version,
                "location": str(meta.location) if meta.location else None,
                "author": meta.author,
                "updated": meta.updated.isoformat() if meta.updated else None,
            }
        )
    return index
