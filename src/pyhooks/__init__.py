"""pyhooks - Framework-agnostic reactive utilities for asyncio."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyhooks")
except PackageNotFoundError:
    __version__ = "0+local"
from pyhooks._scheduling import CancellationToken, Scheduler
from pyhooks._transport import HttpTransport, Transport
from pyhooks.config import HooksConfig
from pyhooks.debounce import Debouncer, DebounceState
from pyhooks.exceptions import (
    HooksConfigError,
    HooksError,
    HttpStatusError,
    PersistenceWriteError,
    SerializationError,
    TransportError,
)
from pyhooks.fetch import RequestCoordinator
from pyhooks.history import HistoryCell, HistoryPair
from pyhooks.interval import IntervalTicker
from pyhooks.models import FetchState, FetchTarget
from pyhooks.storage import (
    ApplyUpdate,
    JsonFileStore,
    KeyValueStore,
    MemoryStore,
    PersistentCell,
    SetValue,
    StorageEntry,
    open_store,
)

__all__ = [
    "__version__",
    "ApplyUpdate",
    "CancellationToken",
    "DebounceState",
    "Debouncer",
    "FetchState",
    "FetchTarget",
    "HistoryCell",
    "HistoryPair",
    "HooksConfig",
    "HooksConfigError",
    "HooksError",
    "HttpStatusError",
    "HttpTransport",
    "IntervalTicker",
    "JsonFileStore",
    "KeyValueStore",
    "MemoryStore",
    "PersistenceWriteError",
    "PersistentCell",
    "RequestCoordinator",
    "Scheduler",
    "SerializationError",
    "SetValue",
    "StorageEntry",
    "Transport",
    "TransportError",
    "open_store",
]
