from prometheus_client import Counter

# -------------------------
# Store Metrics
# -------------------------

PAGES_UPSERTED = Counter(
    "kb_pages_upserted_total",
    "Pages inserted or replaced in the knowledge base",
)

STORAGE_UNAVAILABLE = Counter(
    "kb_storage_unavailable_total",
    "Store operations rejected because storage was unavailable",
    ["operation"],
)

# -------------------------
# Search / Export Metrics
# -------------------------

SEARCHES = Counter(
    "kb_searches_total",
    "Search queries evaluated against a corpus",
)

EXPORTS = Counter(
    "kb_exports_total",
    "Export artifacts emitted",
    ["format"],
)
