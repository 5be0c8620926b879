from .page_model import PageRecord
from .domain_model import DomainRecord

__all__ = [
    "PageRecord",
    "DomainRecord",
]
