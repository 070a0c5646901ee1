"""Key-value datastore query model, in-memory query operators, and locking and retrying datastore wrappers."""

__version__ = "0.1.0"
__all__ = ["filter", "locked", "naive", "order", "query", "retry"]