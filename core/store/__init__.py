"""
Tea collection storage helpers, split by responsibility.
"""
from core.store.base import (
    StoreError,
    StoreReadError,
    StoreWriteError,
    data_file_exists,
    read_teas,
    resolve_data_file,
    write_teas,
)
from core.store.schema import (
    CAFFEINE_LEVELS,
    TEA_TYPES,
    CaffeineLevel,
    CreateTea,
    Tea,
    TeaType,
    normalize_tea_type,
    validation_issues,
)
from core.store.tea_store import (
    create_tea,
    delete_tea,
    get_tea,
    list_teas,
    record_consumption,
    update_tea,
)

__all__ = [
    "StoreError",
    "StoreReadError",
    "StoreWriteError",
    "data_file_exists",
    "read_teas",
    "resolve_data_file",
    "write_teas",
    "CAFFEINE_LEVELS",
    "TEA_TYPES",
    "CaffeineLevel",
    "CreateTea",
    "Tea",
    "TeaType",
    "normalize_tea_type",
    "validation_issues",
    "create_tea",
    "delete_tea",
    "get_tea",
    "list_teas",
    "record_consumption",
    "update_tea",
]
