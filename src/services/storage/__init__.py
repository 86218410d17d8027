"""
Storage Services Package

Provides the abstract store interface, the in-memory reference store,
baseline loading and the gateway the client talks to.
"""

from src.services.storage.interface import (
    ConflictError,
    EmptySeriesError,
    NotFoundError,
    RemoteFailureError,
    SeriesStoreInterface,
    StorageError,
)
from src.services.storage.baseline import (
    DEFAULT_BASELINE,
    default_baseline,
    load_baseline,
    parse_series,
)
from src.services.storage.memory import InMemorySeriesStore
from src.services.storage.gateway import SeriesGatewayInterface, StoreGateway

__all__ = [
    # Interfaces
    "SeriesGatewayInterface",
    "SeriesStoreInterface",
    # Exceptions
    "ConflictError",
    "EmptySeriesError",
    "NotFoundError",
    "RemoteFailureError",
    "StorageError",
    # Baseline
    "DEFAULT_BASELINE",
    "default_baseline",
    "load_baseline",
    "parse_series",
    # Implementations
    "InMemorySeriesStore",
    "StoreGateway",
]
