import pytest

from knowledge_base.index.domain_index import DomainIndex, summarize
from knowledge_base.page import DomainInfo
from knowledge_base.storage.models.domain_model import DomainRecord


@pytest.mark.anyio
async def test_saved_domains_for_two_pages(store, page_factory):
    await store.upsert_page(
        page_factory("https://a.com/1", "<title>Cats</title><p>cats are great</p>", content_size=45)
    )
    await store.upsert_page(
        page_factory("https://a.com/2", "<title>Dogs</title><p>dogs rule</p>", content_size=40)
    )

    domains = await DomainIndex(store).get_saved_domains()

    assert domains == [DomainInfo(domain="a.com", page_count=2, total_size=85)]


@pytest.mark.anyio
async def test_saved_domains_sorted_by_name_and_stable(store, page_factory):
    for domain in ["zeta.io", "alpha.org", "mid.net"]:
        await store.upsert_page(page_factory(f"https://{domain}/", "x", domain=domain))
    index = DomainIndex(store)

    first = await index.get_saved_domains()
    second = await index.get_saved_domains()

    assert [d.domain for d in first] == ["alpha.org", "mid.net", "zeta.io"]
    assert first == second


@pytest.mark.anyio
async def test_rebuild_repairs_drifted_and_orphaned_aggregates(store, page_factory):
    await store.upsert_page(page_factory("https://a.com/1", "abc", domain="a.com"))
    await store.upsert_page(page_factory("https://a.com/2", "defg", domain="a.com"))
    await DomainRecord.filter(domain="a.com").update(page_count=9, total_size=1)
    await DomainRecord.create(domain="ghost.com", page_count=3, total_size=300)

    rebuilt = await DomainIndex(store).rebuild()

    assert rebuilt == [DomainInfo(domain="a.com", page_count=2, total_size=7)]


@pytest.mark.anyio
async def test_rebuild_on_empty_store_drops_everything(store):
    await DomainRecord.create(domain="ghost.com", page_count=1, total_size=1)

    assert await DomainIndex(store).rebuild() == []


def test_summarize_totals():
    domains = [
        DomainInfo(domain="a.com", page_count=2, total_size=85),
        DomainInfo(domain="b.com", page_count=3, total_size=15),
    ]

    assert summarize(domains) == (5, 100)
    assert summarize([]) == (0, 0)
