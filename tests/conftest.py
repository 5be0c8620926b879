import sys
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from knowledge_base.page import StoredPage
from knowledge_base.storage.page_store import PageStore


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
def clear_kb_environment(monkeypatch):
    """Keep host KB_* variables from leaking into config tests."""

    for key in [
        "KB_DATABASE_URL",
        "KB_EXPORT_DIR",
        "KB_LOG_LEVEL",
        "KB_LOG_PATH",
        "KB_CONFIG_PATH",
    ]:
        monkeypatch.delenv(key, raising=False)
    yield


@pytest.fixture
async def store(anyio_backend):
    page_store = PageStore("sqlite://:memory:")
    await page_store.connect()
    assert page_store.connected
    yield page_store
    await page_store.close()


def make_page(url, content, domain="a.com", status=200, content_size=None, timestamp=1_700_000_000_000):
    return StoredPage(
        url=url,
        domain=domain,
        content=content,
        status=status,
        content_size=len(content.encode("utf-8")) if content_size is None else content_size,
        timestamp=timestamp,
    )


@pytest.fixture
def page_factory():
    return make_page
