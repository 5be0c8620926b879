from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

from loguru import logger
from tortoise.transactions import in_transaction

from knowledge_base.page import DomainInfo
from knowledge_base.storage.models.domain_model import DomainRecord
from knowledge_base.storage.models.page_model import PageRecord

if TYPE_CHECKING:
    from knowledge_base.storage.page_store import PageStore


async def refresh_domain_aggregate(domain: str, conn) -> Optional[DomainInfo]:
    """Recompute one domain's aggregate row from its pages.

    Must run on the caller's transaction connection. The row is removed
    when the domain has no pages left.
    """
    sizes = await PageRecord.filter(domain=domain).using_db(conn).values_list(
        "content_size", flat=True
    )
    if not sizes:
        await DomainRecord.filter(domain=domain).using_db(conn).delete()
        return None

    info = DomainInfo(domain=domain, page_count=len(sizes), total_size=sum(sizes))
    record = await DomainRecord.get_or_none(domain=domain, using_db=conn)
    if record is None:
        await DomainRecord.create(
            using_db=conn,
            domain=domain,
            page_count=info.page_count,
            total_size=info.total_size,
        )
    else:
        record.page_count = info.page_count
        record.total_size = info.total_size
        await record.save(using_db=conn)
    return info


class DomainIndex:
    """Per-domain page counts and sizes, read without scanning page contents."""

    def __init__(self, store: "PageStore") -> None:
        self.store = store

    async def get_saved_domains(self) -> List[DomainInfo]:
        async with self.store.available("get_saved_domains"):
            records = await DomainRecord.filter(page_count__gt=0).order_by("domain")
        return [
            DomainInfo(domain=r.domain, page_count=r.page_count, total_size=r.total_size)
            for r in records
        ]

    async def rebuild(self) -> List[DomainInfo]:
        """Recompute every aggregate from the page table and drop orphans."""
        async with self.store.available("rebuild_domain_index"):
            async with in_transaction() as conn:
                domains = await PageRecord.all().using_db(conn).distinct().values_list(
                    "domain", flat=True
                )
                domains = sorted(set(domains))
                if domains:
                    await DomainRecord.exclude(domain__in=domains).using_db(conn).delete()
                else:
                    await DomainRecord.all().using_db(conn).delete()
                for domain in domains:
                    await refresh_domain_aggregate(domain, conn)

        logger.info(f"Rebuilt domain index for {len(domains)} domains")
        return await self.get_saved_domains()


def summarize(domains: List[DomainInfo]) -> tuple[int, int]:
    """Total pages and bytes across a domain snapshot."""
    return (
        sum(d.page_count for d in domains),
        sum(d.total_size for d in domains),
    )
