"""
Tea CRUD and consumption tracking over the YAML file.
"""
from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional

from core.store.base import read_teas, store_lock, write_teas
from core.store.schema import CreateTea, Tea

log = logging.getLogger("store")


def _now_ms() -> int:
    return int(time.time() * 1000)


def _new_id(existing: List[Tea]) -> str:
    """Creation time in ms; bumped forward if two teas land in the same ms."""
    taken = {t.id for t in existing}
    candidate = _now_ms()
    while str(candidate) in taken:
        candidate += 1
    return str(candidate)


def list_teas() -> List[Tea]:
    return read_teas()


def get_tea(tea_id: str) -> Optional[Tea]:
    for tea in read_teas():
        if tea.id == tea_id:
            return tea
    return None


def create_tea(data: Dict[str, Any]) -> Tea:
    """
    Validate `data` against the creation schema and append it.
    Raises pydantic.ValidationError for bad input, StoreError for file trouble.
    """
    fields = CreateTea.model_validate(data).to_record()
    with store_lock:
        teas = read_teas()
        tea = Tea.model_validate({**fields, "id": _new_id(teas)})
        teas.append(tea)
        write_teas(teas)
    log.info('Tea created - id: %s, name: "%s"', tea.id, tea.name)
    return tea


def update_tea(tea_id: str, changes: Dict[str, Any]) -> Optional[Tea]:
    """
    Merge `changes` into the stored record and re-validate the result.
    Returns None when the id is unknown. The id itself never changes.
    """
    changes = {k: v for k, v in changes.items() if k != "id"}
    with store_lock:
        teas = read_teas()
        for idx, tea in enumerate(teas):
            if tea.id != tea_id:
                continue
            updated = Tea.model_validate({**tea.to_record(), **changes})
            teas[idx] = updated
            write_teas(teas)
            log.info('Tea updated - id: %s, name: "%s"', tea_id, updated.name)
            return updated
    return None


def delete_tea(tea_id: str) -> bool:
    with store_lock:
        teas = read_teas()
        remaining = [t for t in teas if t.id != tea_id]
        if len(remaining) == len(teas):
            return False
        write_teas(remaining)
    log.info("Tea deleted - id: %s", tea_id)
    return True


def record_consumption(tea_id: str) -> Optional[Tea]:
    """Bump timesConsumed and stamp lastConsumedDate with the current time."""
    with store_lock:
        teas = read_teas()
        for idx, tea in enumerate(teas):
            if tea.id != tea_id:
                continue
            updated = Tea.model_validate(
                {
                    **tea.to_record(),
                    "timesConsumed": (tea.times_consumed or 0) + 1,
                    "lastConsumedDate": _now_ms(),
                }
            )
            teas[idx] = updated
            write_teas(teas)
            log.info("Tea consumed - id: %s (count: %d)", tea_id, updated.times_consumed)
            return updated
    return None


__all__ = [
    "list_teas",
    "get_tea",
    "create_tea",
    "update_tea",
    "delete_tea",
    "record_consumption",
]
