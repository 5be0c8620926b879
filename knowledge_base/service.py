from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from loguru import logger

from knowledge_base.exceptions import StorageUnavailable
from knowledge_base.export.exporter import ExportFormat, export_pages
from knowledge_base.index.domain_index import DomainIndex, summarize
from knowledge_base.page import DomainInfo, StoredPage, build_page, now_ms
from knowledge_base.search.engine import SearchResult, normalize_query, search_pages
from knowledge_base.storage.page_store import PageStore
from knowledge_base.utils.config_loader import Config, load_config
from knowledge_base.utils.logger import setup_logger
from knowledge_base.utils.url_utils import page_filename_prefix

CrawlRecord = Tuple[str, str, Optional[int], Optional[str]]
PathLike = Union[str, Path]


class KnowledgeBase:
    """Front door used by the presentation layer.

    The store is the only stateful collaborator; search and export always
    receive an explicit page snapshot. Storage outages degrade to empty
    results instead of propagating.
    """

    def __init__(self, store: PageStore, export_dir: PathLike = "exports") -> None:
        self.store = store
        self.index = DomainIndex(store)
        self.export_dir = Path(export_dir)
        self._last_timestamp = 0

    @classmethod
    def from_config(cls, config: Config) -> "KnowledgeBase":
        return cls(PageStore(config.database_url), export_dir=config.export_dir)

    async def open(self) -> None:
        await self.store.connect()

    async def close(self) -> None:
        await self.store.close()

    async def __aenter__(self) -> "KnowledgeBase":
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # --------------------------
    #  Ingestion
    # --------------------------
    def _next_timestamp(self) -> int:
        self._last_timestamp = max(now_ms(), self._last_timestamp)
        return self._last_timestamp

    async def save_crawl_result(
        self,
        url: str,
        content: str,
        status: Optional[int] = None,
        domain: Optional[str] = None,
    ) -> Optional[StoredPage]:
        page = build_page(url, content, status, domain, timestamp=self._next_timestamp())
        if not page.domain:
            logger.warning(f"Skipping crawl result without a domain: {url!r}")
            return None
        try:
            await self.store.upsert_page(page)
        except StorageUnavailable as e:
            logger.warning(f"Could not save {url}: {e}")
            return None
        return page

    async def save_crawl_results(self, records: Iterable[CrawlRecord]) -> int:
        saved = 0
        for url, content, status, domain in records:
            if await self.save_crawl_result(url, content, status, domain) is not None:
                saved += 1
        return saved

    # --------------------------
    #  Browsing
    # --------------------------
    async def list_domains(self) -> List[DomainInfo]:
        try:
            return await self.index.get_saved_domains()
        except StorageUnavailable as e:
            logger.warning(f"Domain listing unavailable: {e}")
            return []

    @staticmethod
    def totals(domains: Sequence[DomainInfo]) -> Tuple[int, int]:
        return summarize(list(domains))

    async def get_pages(self, domain: str) -> List[StoredPage]:
        try:
            return await self.store.get_pages_by_domain(domain)
        except StorageUnavailable as e:
            logger.warning(f"Pages for {domain} unavailable: {e}")
            return []

    async def load_corpus(self, domains: Optional[Sequence[str]] = None) -> List[StoredPage]:
        if domains is None:
            domains = [d.domain for d in await self.list_domains()]
        corpus: List[StoredPage] = []
        for domain in domains:
            corpus.extend(await self.get_pages(domain))
        return corpus

    async def search(self, query: str) -> List[SearchResult]:
        if not normalize_query(query):
            return []
        corpus = await self.load_corpus()
        return search_pages(query, corpus)

    # --------------------------
    #  Clearing
    # --------------------------
    async def clear_domain(self, domain: str) -> bool:
        try:
            await self.store.clear_domain(domain)
        except StorageUnavailable as e:
            logger.warning(f"Could not clear {domain}: {e}")
            return False
        return True

    async def clear_all(self) -> bool:
        try:
            await self.store.clear_all()
        except StorageUnavailable as e:
            logger.warning(f"Could not clear knowledge base: {e}")
            return False
        return True

    # --------------------------
    #  Export
    # --------------------------
    def _output_dir(self, output_dir: Optional[PathLike]) -> Path:
        return Path(output_dir) if output_dir is not None else self.export_dir

    async def export_all(self, fmt: Union[ExportFormat, str], output_dir: Optional[PathLike] = None) -> Path:
        pages = await self.load_corpus()
        return export_pages(pages, fmt, "knowledge-base", self._output_dir(output_dir))

    async def export_domain(
        self, domain: str, fmt: Union[ExportFormat, str], output_dir: Optional[PathLike] = None
    ) -> Path:
        pages = await self.get_pages(domain)
        return export_pages(pages, fmt, domain, self._output_dir(output_dir))

    def export_results(
        self,
        results: Sequence[StoredPage],
        fmt: Union[ExportFormat, str],
        output_dir: Optional[PathLike] = None,
    ) -> Path:
        return export_pages(results, fmt, "search-results", self._output_dir(output_dir))

    def export_page(
        self, page: StoredPage, fmt: Union[ExportFormat, str], output_dir: Optional[PathLike] = None
    ) -> Path:
        return export_pages([page], fmt, page_filename_prefix(page.url), self._output_dir(output_dir))


async def open_knowledge_base(config: Optional[Config] = None) -> KnowledgeBase:
    """Load configuration, install logging and connect a KnowledgeBase."""
    config = config or load_config()
    setup_logger(config.log_level, config.log_path)
    kb = KnowledgeBase.from_config(config)
    await kb.open()
    return kb
