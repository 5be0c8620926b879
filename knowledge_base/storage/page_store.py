from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, List

from loguru import logger
from tortoise.exceptions import ConfigurationError, DBConnectionError, OperationalError
from tortoise.transactions import in_transaction

from knowledge_base.exceptions import StorageUnavailable
from knowledge_base.index.domain_index import refresh_domain_aggregate
from knowledge_base.monitoring.metrics import PAGES_UPSERTED, STORAGE_UNAVAILABLE
from knowledge_base.page import StoredPage
from knowledge_base.storage.db_init import close_storage, init_storage
from knowledge_base.storage.models.domain_model import DomainRecord
from knowledge_base.storage.models.page_model import PageRecord


def record_to_page(record: PageRecord) -> StoredPage:
    return StoredPage(
        url=record.url,
        domain=record.domain,
        content=record.content,
        status=record.status,
        content_size=record.content_size,
        timestamp=record.timestamp,
    )


class PageStore:
    """Crawled pages keyed by ``(domain, url)`` plus their per-domain aggregates.

    Every mutation rewrites the owning domain's aggregate row inside the same
    transaction as the page write.
    """

    def __init__(self, database_url: str) -> None:
        self.database_url = database_url
        self.connected = False

    # -------------------------------------------------------
    # Connection
    # -------------------------------------------------------

    async def connect(self) -> None:
        if self.connected:
            return
        try:
            await init_storage(self.database_url)
            self.connected = True
            logger.info(f"Knowledge base storage ready: {self.database_url}")
        except Exception:
            logger.exception("Failed to initialize knowledge base storage")
            self.connected = False

    async def close(self) -> None:
        if self.connected:
            await close_storage()
            self.connected = False

    @asynccontextmanager
    async def available(self, operation: str) -> AsyncIterator[None]:
        """Map an offline store or a substrate failure to StorageUnavailable."""
        if not self.connected:
            STORAGE_UNAVAILABLE.labels(operation=operation).inc()
            raise StorageUnavailable(f"{operation}: storage is not connected")
        try:
            yield
        except (ConfigurationError, DBConnectionError, OperationalError) as exc:
            STORAGE_UNAVAILABLE.labels(operation=operation).inc()
            raise StorageUnavailable(f"{operation}: {exc}") from exc

    # -------------------------------------------------------
    # Page operations
    # -------------------------------------------------------

    async def upsert_page(self, page: StoredPage) -> None:
        async with self.available("upsert_page"):
            async with in_transaction() as conn:
                record = await PageRecord.get_or_none(
                    domain=page.domain, url=page.url, using_db=conn
                )
                if record is None:
                    await PageRecord.create(
                        using_db=conn,
                        url=page.url,
                        domain=page.domain,
                        content=page.content,
                        status=page.status,
                        content_size=page.content_size,
                        timestamp=page.timestamp,
                    )
                else:
                    record.content = page.content
                    record.status = page.status
                    record.content_size = page.content_size
                    record.timestamp = page.timestamp
                    await record.save(using_db=conn)

                await refresh_domain_aggregate(page.domain, conn)

        PAGES_UPSERTED.inc()
        logger.debug(f"Stored page {page.url} ({page.content_size} bytes)")

    async def get_pages_by_domain(self, domain: str) -> List[StoredPage]:
        async with self.available("get_pages_by_domain"):
            records = await PageRecord.filter(domain=domain).order_by("id")
        return [record_to_page(r) for r in records]

    async def clear_domain(self, domain: str) -> None:
        async with self.available("clear_domain"):
            async with in_transaction() as conn:
                deleted = await PageRecord.filter(domain=domain).using_db(conn).delete()
                await DomainRecord.filter(domain=domain).using_db(conn).delete()
        logger.debug(f"Cleared domain {domain} ({deleted} pages)")

    async def clear_all(self) -> None:
        async with self.available("clear_all"):
            async with in_transaction() as conn:
                await PageRecord.all().using_db(conn).delete()
                await DomainRecord.all().using_db(conn).delete()
        logger.debug("Cleared every page and domain")
