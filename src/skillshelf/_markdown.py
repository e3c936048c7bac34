"""Token-level helpers over the shared markdown-it parser."""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass

from markdown_it import MarkdownIt
from markdown_it.token import Token

# Single shared parser instance; GitHub renders pipe tables, so enable them.
_md = MarkdownIt("commonmark", {"html": True}).enable("table")

_SLUG_STRIP_RE = re.compile(r"[^\w\- ]", re.UNICODE)


@dataclass
class Fence:
    info: str
    content: str
    line: int
    """1-based line of the opening fence within the parsed text."""

    closed: bool

    @property
    def language(self) -> str:
        return self.info.split()[0].lower() if self.info.strip() else ""


@dataclass
class Link:
    target: str
    line: int
    is_image: bool = False


def parse(text: str) -> list[Token]:
    return _md.parse(text)


def _inline_text(token: Token) -> str:
    return "".join(child.content for child in token.children or [] if child.type in ("text", "code_inline"))


def plain_text(token: Token) -> str:
    """Text of an inline token with markup dropped and line breaks folded to spaces."""
    parts = []
    for child in token.children or []:
        if child.type in ("text", "code_inline"):
            parts.append(child.content)
        elif child.type in ("softbreak", "hardbreak"):
            parts.append(" ")
    return " ".join("".join(parts).split())


def slugify(heading: str) -> str:
    """GitHub-style anchor for a heading."""
    return _SLUG_STRIP_RE.sub("", heading.strip().lower()).replace(" ", "-")


def headings(tokens: list[Token]) -> list[tuple[int, str]]:
    """(level, text) for every heading, in document order."""
    found = []
    for i, token in enumerate(tokens):
        if token.type == "heading_open":
            found.append((int(token.tag[1:]), _inline_text(tokens[i + 1])))
    return found


def heading_anchors(tokens: list[Token]) -> set[str]:
    """Anchors as GitHub generates them, with -1, -2... suffixes for repeats."""
    anchors: set[str] = set()
    counts: dict[str, int] = {}
    for _, text in headings(tokens):
        slug = slugify(text)
        if slug in counts:
            counts[slug] += 1
            anchors.add(f"{slug}-{counts[slug]}")
        else:
            counts[slug] = 0
            anchors.add(slug)
    return anchors


def fences(tokens: list[Token]) -> Iterator[Fence]:
    for token in tokens:
        if token.type != "fence" or token.map is None:
            continue
        start, end = token.map
        content_lines = token.content.count("\n") + (1 if token.content and not token.content.endswith("\n") else 0)
        # a closed fence spans its opening line, its content and the closing line
        closed = end - start == content_lines + 2
        yield Fence(info=token.info, content=token.content, line=start + 1, closed=closed)


def links(tokens: list[Token]) -> Iterator[Link]:
    for token in tokens:
        if token.type != "inline" or not token.children:
            continue
        line = token.map[0] + 1 if token.map else 1
        for child in token.children:
            if child.type == "link_open":
                href = child.attrGet("href")
                if href:
                    yield Link(target=str(href), line=line)
            elif child.type == "image":
                src = child.attrGet("src")
                if src:
                    yield Link(target=str(src), line=line, is_image=True)


def first_heading(tokens: list[Token], level: int = 1) -> str | None:
    """Text of the first ATX or setext heading of the given level."""
    for i, token in enumerate(tokens):
        if token.type == "heading_open" and token.tag == f"h{level}":
            return plain_text(tokens[i + 1])
    return None


def first_paragraph(tokens: list[Token]) -> str:
    """Text of the first top-level paragraph; lists, quotes and tables are skipped."""
    for i, token in enumerate(tokens):
        if token.type == "paragraph_open" and token.level == 0:
            return plain_text(tokens[i + 1])
    return ""
