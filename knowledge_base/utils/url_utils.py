import re
from urllib.parse import urlparse


def get_domain(url: str) -> str:
    """Host part of a URL, lower-cased and without port."""
    try:
        netloc = urlparse(url).netloc.lower()
        netloc = netloc.rsplit("@", 1)[-1]
        return netloc.split(":", 1)[0]
    except ValueError:
        return ""


def get_path(url: str) -> str:
    try:
        return urlparse(url).path or "/"
    except ValueError:
        return "/"


def page_filename_prefix(url: str, max_length: int = 50) -> str:
    """Filesystem-safe prefix for single-page exports."""
    return re.sub(r"[^a-zA-Z0-9]", "_", url)[:max_length]
