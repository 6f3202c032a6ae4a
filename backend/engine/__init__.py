from .composer import SnapshotComposer, bucket_connections, classify_state
from .process_cache import ProcessCache
from .rate_engine import NetworkRateEngine

__all__ = [
    "SnapshotComposer",
    "bucket_connections",
    "classify_state",
    "ProcessCache",
    "NetworkRateEngine",
]
