"""Services package."""

from src.services.storage import (
    ConflictError,
    EmptySeriesError,
    InMemorySeriesStore,
    NotFoundError,
    RemoteFailureError,
    SeriesGatewayInterface,
    SeriesStoreInterface,
    StorageError,
    StoreGateway,
)

__all__ = [
    # Storage services
    "ConflictError",
    "EmptySeriesError",
    "InMemorySeriesStore",
    "NotFoundError",
    "RemoteFailureError",
    "SeriesGatewayInterface",
    "SeriesStoreInterface",
    "StorageError",
    "StoreGateway",
]
