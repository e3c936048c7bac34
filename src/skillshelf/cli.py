import asyncio
import json
import logging
from enum import Enum
from pathlib import Path
from typing import Annotated, Optional

import httpx
import typer

from . import ShelfConfig, SkillshelfError, configure_logging
from .lint import lint_repository
from .skills import SkillFetcher, build_index, discover_skills, generate_skills_xml, load_skill_content

logger = logging.getLogger(__name__)

app = typer.Typer(help="Discover, lint and index Markdown skill files.")


class OutputFormat(str, Enum):
    text = "text"
    json = "json"


def _fail(message: str) -> None:
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(code=1)


@app.callback()
def main(
    ctx: typer.Context,
    root: Annotated[
        Optional[Path], typer.Option("--root", help="Repository root (default: $SKILLSHELF_ROOT or cwd)")
    ] = None,
    skills_dir: Annotated[
        Optional[Path], typer.Option("--skills-dir", help="Skills directory, relative to the root")
    ] = None,
    config_file: Annotated[
        Optional[Path], typer.Option("--config", help="skills-config.json path, relative to the root")
    ] = None,
    log_level: Annotated[Optional[str], typer.Option("--log-level", help="Overrides $LOG_LEVEL")] = None,
):
    configure_logging(log_level)
    ctx.obj = ShelfConfig(root=root, skills_dir=skills_dir, config_file=config_file)


@app.command("list")
def list_skills(ctx: typer.Context):
    """List the skills found in the skills directory."""
    cfg: ShelfConfig = ctx.obj
    skills = discover_skills(cfg.skills_dir)
    if not skills:
        typer.echo(f"No skills found in {cfg.skills_dir}")
        return
    for skill in skills:
        tags = f" [{', '.join(skill.metadata.tags)}]" if skill.metadata.tags else ""
        typer.echo(f"{skill.skill_id}\t{skill.title}{tags}")


@app.command()
def show(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Skill name (file stem)")],
):
    """Print the full content of a skill file."""
    cfg: ShelfConfig = ctx.obj
    try:
        content = load_skill_content(cfg.skills_dir, name)
    except (FileNotFoundError, SkillshelfError) as e:
        _fail(str(e))
    typer.echo(content, nl=False)


@app.command()
def lint(
    ctx: typer.Context,
    strict: Annotated[bool, typer.Option("--strict", help="Fail on warnings too")] = False,
    require_frontmatter: Annotated[
        bool, typer.Option("--require-frontmatter", help="Warn about skill files without frontmatter")
    ] = False,
    output: Annotated[OutputFormat, typer.Option("--format", help="Report format")] = OutputFormat.text,
):
    """Check Markdown structure, frontmatter, links and code samples."""
    cfg: ShelfConfig = ctx.obj
    report = lint_repository(
        cfg.root,
        skills_dir=cfg.skills_dir,
        config_file=cfg.config_file,
        require_frontmatter=require_frontmatter,
    )

    if output is OutputFormat.json:
        typer.echo(report.model_dump_json(indent=2))
    else:
        for issue in report.sorted_issues():
            typer.echo(issue.format(cfg.root))
        typer.echo(
            f"{len(report.files_checked)} files checked, "
            f"{len(report.errors)} errors, {len(report.warnings)} warnings"
        )

    if not report.passed(strict=strict):
        raise typer.Exit(code=1)


@app.command()
def index(
    ctx: typer.Context,
    xml: Annotated[bool, typer.Option("--xml", help="Emit an <available_skills> block instead of JSON")] = False,
    output: Annotated[Optional[Path], typer.Option("--output", "-o", help="Write to a file")] = None,
):
    """Build an index of the skills from their frontmatter metadata."""
    cfg: ShelfConfig = ctx.obj
    skills = discover_skills(cfg.skills_dir)
    if xml:
        rendered = generate_skills_xml(skills)
    else:
        rendered = json.dumps({"skills": build_index(skills, root=cfg.root)}, indent=2, ensure_ascii=False)

    if output:
        output.write_text(rendered + "\n", encoding="utf-8")
        logger.info(f"Wrote index of {len(skills)} skills to {output}")
    else:
        typer.echo(rendered)


async def _fetch_all(urls: list[str], destination: Path, timeout: float) -> list[Path]:
    async with httpx.AsyncClient(timeout=timeout) as client:
        fetcher = SkillFetcher(client)
        return [await fetcher.fetch_to_dir(url, destination) for url in urls]


@app.command()
def fetch(
    ctx: typer.Context,
    urls: Annotated[list[str], typer.Argument(help="Skill file URLs")],
    dest: Annotated[Optional[Path], typer.Option("--dest", help="Destination directory (default: skills dir)")] = None,
):
    """Download skill files by URL and validate their frontmatter."""
    cfg: ShelfConfig = ctx.obj
    destination = dest or cfg.skills_dir
    try:
        written = asyncio.run(_fetch_all(urls, destination, cfg.fetch_timeout))
    except (httpx.HTTPError, httpx.InvalidURL, SkillshelfError, OSError, ValueError) as e:
        _fail(str(e))
    for path in written:
        typer.echo(str(path))


def run_cli():
    app()


if __name__ == "__main__":
    run_cli()
