"""Lexical search over an explicit page snapshot.

Relevance is the share of distinct query terms that occur anywhere in the
lower-cased page content. How often a term occurs does not matter.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence

from loguru import logger

from knowledge_base.monitoring.metrics import SEARCHES
from knowledge_base.page import StoredPage

MAX_RESULTS = 50


@dataclass
class SearchResult(StoredPage):
    relevance: float = 0.0

    @classmethod
    def from_page(cls, page: StoredPage, relevance: float) -> "SearchResult":
        return cls(
            url=page.url,
            domain=page.domain,
            content=page.content,
            status=page.status,
            content_size=page.content_size,
            timestamp=page.timestamp,
            relevance=relevance,
        )


def normalize_query(query: str) -> List[str]:
    """Distinct lower-cased terms in order of first appearance."""
    return list(dict.fromkeys((query or "").lower().split()))


def score_page(content: str, terms: Sequence[str]) -> float:
    if not terms:
        return 0.0
    text = (content or "").lower()
    matched = sum(1 for term in terms if term in text)
    return matched / len(terms)


def search_pages(
    query: str,
    corpus: Iterable[StoredPage],
) -> List[SearchResult]:
    terms = normalize_query(query)
    if not terms:
        return []

    SEARCHES.inc()
    results = []
    for page in corpus:
        relevance = score_page(page.content, terms)
        if relevance > 0:
            results.append(SearchResult.from_page(page, relevance))

    # list.sort is stable, so equal scores keep corpus order
    results.sort(key=lambda r: r.relevance, reverse=True)
    logger.debug(f"Search {terms} matched {len(results)} pages")
    return results[:MAX_RESULTS]
