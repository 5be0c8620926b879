class KnowledgeBaseError(Exception):
    """Base class for knowledge base failures."""


class StorageUnavailable(KnowledgeBaseError):
    """The persistence substrate cannot be reached or initialized.

    Never fatal: callers treat the knowledge base as empty and may retry.
    """


class ExportFailed(KnowledgeBaseError):
    """An export artifact could not be emitted. No partial file is left behind."""
