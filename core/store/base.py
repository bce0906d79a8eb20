"""
Low-level YAML file helpers (single flat file, no database).
"""
from __future__ import annotations

import errno
import logging
import os
import tempfile
from pathlib import Path
from threading import RLock
from typing import List

import yaml
from pydantic import ValidationError

from core.store.schema import Tea, validation_issues

log = logging.getLogger("store")

_REPO_ROOT = Path(__file__).resolve().parents[2]

# Serializes read-modify-write cycles across request threads.
store_lock = RLock()


class StoreError(Exception):
    """Base class for tea file failures."""


class StoreReadError(StoreError):
    pass


class StoreWriteError(StoreError):
    pass


def resolve_data_file() -> Path:
    """
    Location of teas.yaml. DATA_FILE_PATH wins; otherwise the repo root.
    Read on every call so tests can point it at a temp file.
    """
    raw = (os.getenv("DATA_FILE_PATH") or "").strip()
    if raw:
        return Path(raw).expanduser()
    return _REPO_ROOT / "teas.yaml"


def data_file_exists() -> bool:
    return resolve_data_file().is_file()


def read_teas() -> List[Tea]:
    """
    Load and validate the whole collection.
    A missing or empty file is an empty collection; anything unparsable raises.
    """
    path = resolve_data_file()
    if not path.exists():
        log.debug("Data file not found at %s, returning empty collection", path)
        return []

    try:
        raw = path.read_text(encoding="utf-8")
        data = yaml.safe_load(raw)
    except (OSError, yaml.YAMLError) as exc:
        log.error("Failed to read teas.yaml - %s", exc)
        raise StoreReadError("Failed to read tea collection from file") from exc

    if data is None:
        return []
    if not isinstance(data, list):
        log.error("Failed to read teas.yaml - expected a list, got %s", type(data).__name__)
        raise StoreReadError("Failed to read tea collection from file")

    teas: List[Tea] = []
    for idx, item in enumerate(data):
        try:
            teas.append(Tea.model_validate(item))
        except ValidationError as exc:
            log.error(
                "Failed to read teas.yaml - validation error in file format (entry %d): %s",
                idx,
                validation_issues(exc),
            )
            raise StoreReadError("Failed to read tea collection from file") from exc
    return teas


def write_teas(teas: List[Tea]) -> None:
    """Atomically replace teas.yaml with the given collection."""
    path = resolve_data_file()
    text = yaml.safe_dump(
        [t.to_record() for t in teas],
        sort_keys=False,
        allow_unicode=True,
    )

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        log.error("Failed to write teas.yaml - Failed to create directory %s: %s", path.parent, exc)
        raise StoreWriteError("Failed to create data directory") from exc

    tmp_name = None
    try:
        with tempfile.NamedTemporaryFile(
            "w", delete=False, dir=path.parent, encoding="utf-8", suffix=".tmp"
        ) as tf:
            tmp_name = tf.name
            tf.write(text)
        os.replace(tmp_name, path)
    except PermissionError as exc:
        _discard(tmp_name)
        log.error("Failed to write teas.yaml - Permission denied: Unable to write to data file")
        raise StoreWriteError("Permission denied: Unable to write to data file") from exc
    except OSError as exc:
        _discard(tmp_name)
        if exc.errno == errno.ENOSPC:
            log.error("Failed to write teas.yaml - Disk full: Unable to save tea data")
            raise StoreWriteError("Disk full: Unable to save tea data") from exc
        log.error("Failed to write teas.yaml - %s", exc)
        raise StoreWriteError("Failed to save tea collection to file") from exc

    log.debug("Successfully saved %d teas to %s", len(teas), path)


def _discard(tmp_name: str | None) -> None:
    if tmp_name and os.path.exists(tmp_name):
        try:
            os.remove(tmp_name)
        except OSError:
            log.warning("Could not remove temp file %s", tmp_name)


__all__ = [
    "StoreError",
    "StoreReadError",
    "StoreWriteError",
    "store_lock",
    "resolve_data_file",
    "data_file_exists",
    "read_teas",
    "write_teas",
]
