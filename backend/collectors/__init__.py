from .base import MetricsProvider
from .psutil_provider import PsutilProvider

__all__ = [
    "MetricsProvider",
    "PsutilProvider",
]
