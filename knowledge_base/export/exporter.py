from __future__ import annotations

import csv
import html
import io
import json
import os
import tempfile
from datetime import date, datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Optional, Sequence, Union

from loguru import logger

from knowledge_base.exceptions import ExportFailed
from knowledge_base.monitoring.metrics import EXPORTS
from knowledge_base.page import StoredPage
from knowledge_base.parsing.html_extractor import ELLIPSIS, extract_heading, extract_text

DOCUMENT_TEXT_LIMIT = 2000
CSV_HEADER = ["url", "domain", "status", "content_size", "timestamp"]


class ExportFormat(str, Enum):
    JSON = "json"
    CSV = "csv"
    MARKDOWN = "markdown"
    HTML = "html"

    @classmethod
    def _missing_(cls, value):
        aliases = {
            "structured": cls.JSON,
            "tabular": cls.CSV,
            "document": cls.MARKDOWN,
            "md": cls.MARKDOWN,
            "markup": cls.HTML,
        }
        if not isinstance(value, str):
            return None
        value = value.lower()
        for member in cls:
            if member.value == value:
                return member
        return aliases.get(value)

    @property
    def extension(self) -> str:
        return {"json": "json", "csv": "csv", "markdown": "md", "html": "html"}[self.value]


def iso_timestamp(timestamp_ms: int) -> str:
    """Epoch milliseconds as an ISO-8601 UTC instant, e.g. 2024-01-02T03:04:05.678Z."""
    moment = datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def render_json(pages: Sequence[StoredPage]) -> str:
    data = [
        {
            "url": p.url,
            "content": p.content,
            "status": p.status,
            "domain": p.domain,
            "timestamp": p.timestamp,
        }
        for p in pages
    ]
    return json.dumps(data, indent=2, ensure_ascii=False)


def render_csv(pages: Sequence[StoredPage]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for p in pages:
        writer.writerow(
            [
                p.url,
                p.domain,
                "" if p.status is None else p.status,
                p.content_size,
                iso_timestamp(p.timestamp),
            ]
        )
    return buffer.getvalue()


def render_markdown(pages: Sequence[StoredPage]) -> str:
    sections = []
    for p in pages:
        title = extract_heading(p.content) or p.url
        text = extract_text(p.content)
        body = text[:DOCUMENT_TEXT_LIMIT]
        if len(text) > DOCUMENT_TEXT_LIMIT:
            body += ELLIPSIS
        sections.append(f"## {title}\n\n**URL:** {p.url}\n\n{body}\n\n---\n")
    return "\n".join(sections)


def render_html(pages: Sequence[StoredPage], filename_prefix: str) -> str:
    body = "\n\n<hr/>\n\n".join(f"<!-- URL: {p.url} -->\n{p.content}" for p in pages)
    title = html.escape(f"{filename_prefix} Export")
    return (
        '<!DOCTYPE html><html><head><meta charset="utf-8">'
        f"<title>{title}</title></head><body>\n{body}\n</body></html>"
    )


def render(pages: Sequence[StoredPage], fmt: ExportFormat, filename_prefix: str) -> str:
    if fmt is ExportFormat.JSON:
        return render_json(pages)
    if fmt is ExportFormat.CSV:
        return render_csv(pages)
    if fmt is ExportFormat.MARKDOWN:
        return render_markdown(pages)
    return render_html(pages, filename_prefix)


def export_filename(filename_prefix: str, fmt: ExportFormat, today: Optional[date] = None) -> str:
    if today is None:
        today = datetime.now(timezone.utc).date()
    return f"{filename_prefix}-{today.isoformat()}.{fmt.extension}"


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


def _write_atomic(path: Path, payload: str) -> None:
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(payload)
        os.chmod(tmp_name, 0o666 & ~_current_umask())
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


def export_pages(
    pages: Sequence[StoredPage],
    fmt: Union[ExportFormat, str],
    filename_prefix: str,
    output_dir: Union[str, Path] = ".",
    today: Optional[date] = None,
) -> Path:
    """Serialize ``pages`` in ``fmt`` and emit one artifact into ``output_dir``.

    Returns the artifact path. Raises ExportFailed if it cannot be written;
    in that case no file (partial or otherwise) is left at the target path.
    """
    fmt = ExportFormat(fmt)
    payload = render(pages, fmt, filename_prefix)
    target = Path(output_dir) / export_filename(filename_prefix, fmt, today)

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        _write_atomic(target, payload)
    except OSError as exc:
        logger.error(f"Export to {target} failed: {exc}")
        raise ExportFailed(f"could not write {target}: {exc}") from exc

    EXPORTS.labels(format=fmt.value).inc()
    logger.info(f"Exported {len(pages)} pages as {fmt.value} to {target}")
    return target
