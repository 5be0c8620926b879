from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Optional

from knowledge_base.utils.url_utils import get_domain


@dataclass
class StoredPage:
    url: str
    domain: str
    content: str
    status: Optional[int]
    content_size: int
    timestamp: int  # epoch milliseconds


@dataclass
class DomainInfo:
    domain: str
    page_count: int
    total_size: int


def now_ms() -> int:
    return int(time.time() * 1000)


def build_page(
    url: str,
    content: str,
    status: Optional[int] = None,
    domain: Optional[str] = None,
    timestamp: Optional[int] = None,
) -> StoredPage:
    """Turn one crawl record into a StoredPage ready for the store."""
    content = content or ""
    return StoredPage(
        url=url,
        domain=domain or get_domain(url),
        content=content,
        status=status,
        content_size=len(content.encode("utf-8")),
        timestamp=timestamp if timestamp is not None else now_ms(),
    )
