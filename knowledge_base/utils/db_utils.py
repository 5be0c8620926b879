"""Helpers for the database URL handed to Tortoise ORM.

The knowledge base normally lives in a local SQLite file, but the URL may
arrive in SQLAlchemy style (``sqlite:///path``), as a bare filesystem path,
or as a PostgreSQL DSN when a shared server is used instead.
"""

from __future__ import annotations


def to_tortoise_url(url: str) -> str:
    """Normalize a database URL into the scheme Tortoise ORM expects.

    ``sqlite:///data/kb.db`` and ``data/kb.db`` both become
    ``sqlite://data/kb.db``; ``:memory:`` becomes ``sqlite://:memory:``.
    PostgreSQL DSNs (with or without a driver suffix) are converted to
    ``asyncpg://``.
    """

    if url == ":memory:":
        return "sqlite://:memory:"
    if url.startswith("sqlite:///"):
        return "sqlite://" + url[len("sqlite:///") :]
    if url.startswith("postgresql+"):
        url = "postgresql://" + url.split("://", 1)[1]
    if url.startswith("postgresql://"):
        return "asyncpg://" + url[len("postgresql://") :]
    if url.startswith("postgres://"):
        return "asyncpg://" + url[len("postgres://") :]
    if "://" not in url:
        return "sqlite://" + url
    return url


def sqlite_file_path(url: str) -> str | None:
    """Return the on-disk file of a ``sqlite://`` URL, or None for memory/other DBs."""

    if not url.startswith("sqlite://"):
        return None
    path = url[len("sqlite://") :]
    if not path or path == ":memory:":
        return None
    return path
