from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

import httpx

from .._errors import FrontmatterError
from .frontmatter import read_metadata
from .models import SkillMetadata

logger = logging.getLogger(__name__)

GITHUB_HOST = "github.com"
RAW_GITHUB_HOST = "raw.githubusercontent.com"


def to_raw_url(url: str) -> str:
    """
    Rewrite a GitHub page URL into the URL of the raw file.

    Rules:
    - https://github.com/<owner>/<repo>/blob/<ref>/<path> becomes
      https://raw.githubusercontent.com/<owner>/<repo>/<ref>/<path>.
    - Query strings and fragments on GitHub page URLs are dropped.
    - Every other URL, including ones that already point at the raw host, is returned unchanged.
    """
    parsed = httpx.URL(url)
    if parsed.host != GITHUB_HOST:
        return url

    parts = [p for p in parsed.path.split("/") if p]
    # owner, repo, "blob", ref, path...
    if len(parts) < 5 or parts[2] != "blob":
        return url

    owner, repo, _, *rest = parts
    return f"https://{RAW_GITHUB_HOST}/" + "/".join([owner, repo, *rest])


def file_name_from_url(url: str) -> str:
    name = PurePosixPath(httpx.URL(url).path).name
    if not name:
        raise ValueError(f"URL has no file name: {url}")
    return name


@dataclass
class FetchedSkill:
    """A skill file downloaded from a remote location."""

    url: str
    content: str
    metadata: SkillMetadata

    @property
    def file_name(self) -> str:
        return file_name_from_url(self.url)


class SkillFetcher:
    """
    Downloads skill files by URL, the way a remote registry consumes them.
    """

    def __init__(self, client: httpx.AsyncClient):
        """Initialize the fetcher.

        Args:
            client: HTTP client used for all requests
        """
        self.client = client

    async def fetch(self, url: str) -> FetchedSkill:
        """Fetch a skill file and parse its frontmatter.

        Args:
            url: Location of the file; GitHub page URLs are rewritten to raw URLs

        Returns:
            The downloaded content with its validated metadata

        Raises:
            httpx.InvalidURL: If the URL cannot be parsed
            httpx.HTTPStatusError: If the server answers with an error status
            FrontmatterError: If the file's frontmatter is malformed
        """
        raw_url = to_raw_url(url)
        logger.info(f"Fetching skill from {raw_url}")
        response = await self.client.get(raw_url, follow_redirects=True)
        response.raise_for_status()

        content = response.text
        try:
            metadata, _ = read_metadata(content)
        except FrontmatterError as e:
            raise FrontmatterError(f"{raw_url}: {e}", line=e.line) from e
        return FetchedSkill(url=raw_url, content=content, metadata=metadata)

    async def fetch_to_dir(self, url: str, destination: Path) -> Path:
        """Fetch a skill file and write it into destination under its URL's file name."""
        fetched = await self.fetch(url)
        destination = Path(destination)
        destination.mkdir(parents=True, exist_ok=True)
        target = destination / fetched.file_name
        target.write_text(fetched.content, encoding="utf-8")
        logger.info(f"Wrote {target}")
        return target
