from __future__ import annotations

import re

from bs4 import BeautifulSoup

from knowledge_base.utils.url_utils import get_path

SNIPPET_LENGTH = 200
SNIPPET_LEAD = 80
ELLIPSIS = "..."

_TAG_RE = re.compile(r"<[^>]+>")
_CLOSED_TITLE_RE = re.compile(r"<title[^>]*>[^<]*</title>", re.IGNORECASE)
_MARKDOWN_H1_RE = re.compile(r"^#[ \t]+(.+)", re.MULTILINE)


def extract_title(html: str) -> str | None:
    # a bare "<title>" in prose is not a title element
    if not _CLOSED_TITLE_RE.search(html):
        return None
    try:
        soup = BeautifulSoup(html, "lxml")
        if soup.title and soup.title.string:
            return soup.title.string.strip() or None
    except Exception:
        pass
    return None


def extract_markdown_heading(content: str) -> str | None:
    match = _MARKDOWN_H1_RE.search(content)
    if match:
        return match.group(1).strip() or None
    return None


def extract_heading(content: str) -> str | None:
    """<title> text, else the first level-1 Markdown heading."""
    return extract_title(content) or extract_markdown_heading(content)


def extract_text(content: str) -> str:
    """
    Plain text with markup removed and whitespace collapsed to single spaces.
    Works for HTML and Markdown alike; never raises.
    """
    if not content:
        return ""
    try:
        text = BeautifulSoup(content, "lxml").get_text(separator=" ")
    except Exception:
        text = _TAG_RE.sub(" ", content)
    return " ".join(text.split())


def get_title(content: str, url: str) -> str:
    return extract_heading(content) or get_path(url)


def get_snippet(content: str, query: str) -> str:
    """Window of text around the first occurrence of the query's first term."""
    text = extract_text(content)
    terms = query.lower().split()
    idx = text.lower().find(terms[0]) if terms else -1

    if idx == -1:
        return text[:SNIPPET_LENGTH] + ELLIPSIS

    start = max(0, idx - SNIPPET_LEAD)
    prefix = ELLIPSIS if start > 0 else ""
    return prefix + text[start : start + SNIPPET_LENGTH] + ELLIPSIS
