import pytest
from pydantic import ValidationError

from core.store.schema import RECORD_KEYS, CreateTea, Tea, normalize_tea_type, validation_issues


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("Green", "Green"),
        ("green", "Green"),
        ("  OOLONG ", "Oolong"),
        ("pu-er", "PuEr"),
        ("Pu-Erh", "PuEr"),
        ("puer", "PuEr"),
        ("Matcha", "Matcha"),  # unknown values pass through for validation to reject
        (None, None),
    ],
)
def test_normalize_tea_type(raw, expected):
    assert normalize_tea_type(raw) == expected


def test_create_tea_fills_defaults(tea_payload):
    minimal = {k: tea_payload[k] for k in ("name", "type", "image", "steepTimes")}
    tea = CreateTea.model_validate(minimal)
    record = tea.to_record()
    assert record["caffeineLevel"] == "Low"
    assert record["caffeine"] == ""
    assert record["timesConsumed"] == 0
    assert record["rating"] is None
    assert record["lastConsumedDate"] is None


def test_create_tea_normalizes_type(tea_payload):
    tea = CreateTea.model_validate({**tea_payload, "type": "pu-er"})
    assert tea.type == "PuEr"


@pytest.mark.parametrize(
    "field,value",
    [
        ("type", "Coffee"),
        ("caffeineLevel", "Extreme"),
        ("rating", 0),
        ("rating", 11),
        ("steepTimes", ["30"]),
        ("timesConsumed", -1),
        ("timesConsumed", 2.5),
        ("timesConsumed", True),
        ("name", None),
    ],
)
def test_create_tea_rejects_bad_fields(tea_payload, field, value):
    with pytest.raises(ValidationError):
        CreateTea.model_validate({**tea_payload, field: value})


def test_times_consumed_accepts_whole_floats(tea_payload):
    tea = CreateTea.model_validate({**tea_payload, "timesConsumed": 3.0})
    assert tea.times_consumed == 3
    assert isinstance(tea.times_consumed, int)


def test_tea_requires_full_record(tea_payload):
    with pytest.raises(ValidationError) as excinfo:
        Tea.model_validate({"name": "Only a name"})
    locs = {tuple(issue["loc"]) for issue in validation_issues(excinfo.value)}
    assert ("id",) in locs
    assert ("steepTimes",) in locs


def test_to_record_uses_file_key_order_and_whole_numbers(make_tea):
    tea = make_tea(steepTimes=[20.0, 25.5], rating=7.0, lastConsumedDate=1700000000000.0)
    record = tea.to_record()
    assert tuple(record) == RECORD_KEYS
    assert record["steepTimes"] == [20, 25.5]
    assert isinstance(record["steepTimes"][0], int)
    assert record["rating"] == 7 and isinstance(record["rating"], int)
    assert isinstance(record["lastConsumedDate"], int)


def test_validation_issues_are_json_friendly(tea_payload):
    with pytest.raises(ValidationError) as excinfo:
        CreateTea.model_validate({**tea_payload, "rating": 42})
    issues = validation_issues(excinfo.value)
    assert issues[0]["loc"] == ["rating"]
    assert set(issues[0]) == {"loc", "msg", "type"}
