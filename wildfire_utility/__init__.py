"""WildFire API utility: submit files and links, retrieve verdicts."""

from .dispatcher import Dispatcher, check_hash_format, check_link_format
from .normalizer import normalize_response
from .report import ReportAggregator
from .wildfire_client import WildFireClient

__version__ = "1.0.0"

__all__ = [
    "Dispatcher",
    "ReportAggregator",
    "WildFireClient",
    "check_hash_format",
    "check_link_format",
    "normalize_response",
]
