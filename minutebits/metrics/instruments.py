from shared.metrics import get_counter, get_histogram

SERVICE = "minutebits"

TRACKED_IDS = get_counter(
    "tracked_ids_total", "Identifiers written by track()", SERVICE
)
TRACK_FAILURES_SILENCED = get_counter(
    "track_failures_silenced_total",
    "track() calls dropped because the store was unreachable",
    SERVICE,
)
STORE_COMBINES = get_counter(
    "store_combines_total",
    "BITOP calls issued to the store",
    SERVICE,
    labelnames=("operator",),
)
OPERATIONS_CACHE_LOOKUPS = get_counter(
    "operations_cache_lookups_total",
    "Operations cache lookups",
    SERVICE,
    labelnames=("result",),
)
REQUEST_LATENCY = get_histogram(
    "request_latency_seconds",
    "HTTP request latency",
    SERVICE,
    labelnames=("endpoint",),
)
