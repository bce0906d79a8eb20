"""
Single import point for the tea collection store used by routes and scripts.
"""
from core.store import (
    StoreError,
    StoreReadError,
    StoreWriteError,
    create_tea,
    data_file_exists,
    delete_tea,
    get_tea,
    list_teas,
    read_teas,
    record_consumption,
    resolve_data_file,
    update_tea,
    write_teas,
)


def init_store() -> int:
    """Load the collection once at startup; returns the number of teas."""
    return len(read_teas())


__all__ = [
    "StoreError",
    "StoreReadError",
    "StoreWriteError",
    "create_tea",
    "data_file_exists",
    "delete_tea",
    "get_tea",
    "init_store",
    "list_teas",
    "read_teas",
    "record_consumption",
    "resolve_data_file",
    "update_tea",
    "write_teas",
]
