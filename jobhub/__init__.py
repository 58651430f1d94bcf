"""Job aggregation backend: listing store, sync job and JSON API."""

__version__ = "1.0.0"
