import errno

import pytest
import yaml
from pydantic import ValidationError

from core.store import base, tea_store
from core.database import (
    StoreReadError,
    StoreWriteError,
    create_tea,
    data_file_exists,
    delete_tea,
    get_tea,
    init_store,
    list_teas,
    read_teas,
    record_consumption,
    resolve_data_file,
    update_tea,
)


def test_data_file_path_from_env(data_file):
    assert resolve_data_file() == data_file


def test_missing_and_empty_file_are_empty_collections(data_file):
    assert not data_file_exists()
    assert read_teas() == []
    data_file.write_text("", encoding="utf-8")
    assert read_teas() == []
    assert init_store() == 0


@pytest.mark.parametrize(
    "content",
    [
        "name: [unclosed",
        "name: not a list\n",
        "- id: '1'\n  name: Missing everything else\n",
    ],
)
def test_bad_file_raises_read_error(data_file, content):
    data_file.write_text(content, encoding="utf-8")
    with pytest.raises(StoreReadError) as excinfo:
        read_teas()
    assert str(excinfo.value) == "Failed to read tea collection from file"


def test_create_tea_persists_camel_case_yaml(data_file, tea_payload):
    tea = create_tea(tea_payload)
    assert tea.id.isdigit()

    raw = data_file.read_text(encoding="utf-8")
    assert "185℉ / 85℃" in raw
    stored = yaml.safe_load(raw)
    assert list(stored[0])[:4] == ["id", "name", "type", "image"]
    assert stored[0]["steepTimes"] == [20, 25, 30]
    assert stored[0]["timesConsumed"] == 0
    assert get_tea(tea.id).name == "Dragon Well"


def test_create_tea_bumps_colliding_ids(monkeypatch, tea_payload):
    monkeypatch.setattr(tea_store, "_now_ms", lambda: 1700000000000)
    first = create_tea(tea_payload)
    second = create_tea({**tea_payload, "name": "Silver Needle", "type": "White"})
    assert first.id == "1700000000000"
    assert second.id == "1700000000001"
    assert [t.name for t in list_teas()] == ["Dragon Well", "Silver Needle"]


def test_create_tea_rejects_invalid_data(data_file, tea_payload):
    with pytest.raises(ValidationError):
        create_tea({**tea_payload, "type": "Coffee"})
    assert not data_file.exists()


def test_update_tea_merges_and_keeps_id(tea_payload):
    tea = create_tea(tea_payload)
    updated = update_tea(tea.id, {"id": "hijack", "rating": 8, "teaWeight": "6g"})
    assert updated.id == tea.id
    assert updated.rating == 8
    assert updated.tea_weight == "6g"
    assert updated.name == tea.name
    assert get_tea("hijack") is None


def test_update_tea_unknown_and_invalid(tea_payload):
    tea = create_tea(tea_payload)
    assert update_tea("nope", {"rating": 5}) is None
    with pytest.raises(ValidationError):
        update_tea(tea.id, {"steepTimes": "fast"})
    assert get_tea(tea.id).steep_times == [20, 25, 30]


def test_delete_tea(tea_payload):
    tea = create_tea(tea_payload)
    assert delete_tea(tea.id) is True
    assert delete_tea(tea.id) is False
    assert list_teas() == []


def test_record_consumption(monkeypatch, tea_payload):
    tea = create_tea(tea_payload)
    monkeypatch.setattr(tea_store, "_now_ms", lambda: 1710000000000)
    once = record_consumption(tea.id)
    twice = record_consumption(tea.id)
    assert once.times_consumed == 1
    assert twice.times_consumed == 2
    assert twice.last_consumed_date == 1710000000000
    assert record_consumption("missing") is None


def test_write_creates_parent_directory(tmp_path, monkeypatch, tea_payload):
    nested = tmp_path / "nested" / "dir" / "teas.yaml"
    monkeypatch.setenv("DATA_FILE_PATH", str(nested))
    create_tea(tea_payload)
    assert nested.exists()


def test_write_permission_denied(monkeypatch, make_tea):
    def deny(src, dst):
        raise PermissionError("read-only")

    monkeypatch.setattr(base.os, "replace", deny)
    with pytest.raises(StoreWriteError) as excinfo:
        base.write_teas([make_tea()])
    assert str(excinfo.value) == "Permission denied: Unable to write to data file"


def test_write_disk_full(monkeypatch, make_tea):
    def full(src, dst):
        raise OSError(errno.ENOSPC, "No space left on device")

    monkeypatch.setattr(base.os, "replace", full)
    with pytest.raises(StoreWriteError) as excinfo:
        base.write_teas([make_tea()])
    assert str(excinfo.value) == "Disk full: Unable to save tea data"


def test_failed_write_leaves_no_temp_files(monkeypatch, data_file, make_tea):
    def broken(src, dst):
        raise OSError(errno.EIO, "I/O error")

    monkeypatch.setattr(base.os, "replace", broken)
    with pytest.raises(StoreWriteError) as excinfo:
        base.write_teas([make_tea()])
    assert str(excinfo.value) == "Failed to save tea collection to file"
    assert list(data_file.parent.glob("*.tmp")) == []
