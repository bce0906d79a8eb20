from datetime import datetime

import pytest

from core.collection import (
    SORT_OPTIONS,
    caffeine_rank,
    filter_teas,
    format_last_consumed_date,
    sort_teas,
    unique_types,
)


@pytest.fixture
def collection(make_tea):
    return [
        make_tea(id="1000", name="Dragon Well", type="Green", caffeineLevel="Low", steepTimes=[20, 25]),
        make_tea(id="3000", name="Lapsang Souchong", type="Black", caffeineLevel="High", steepTimes=[10, 15, 20, 25]),
        make_tea(id="2000", name="Tie Guan Yin", type="Oolong", caffeineLevel="Medium", steepTimes=[30]),
        make_tea(id="4000", name="Green Snail", type="Green", caffeineLevel="Medium", steepTimes=[15, 20, 30]),
    ]


def names(teas):
    return [t.name for t in teas]


def test_search_matches_name_or_type_case_insensitively(collection):
    assert names(filter_teas(collection, "dragon")) == ["Dragon Well"]
    assert names(filter_teas(collection, "GREEN")) == ["Dragon Well", "Green Snail"]
    assert names(filter_teas(collection, "oolong")) == ["Tie Guan Yin"]
    assert filter_teas(collection, "matcha") == []


def test_type_and_caffeine_filters_combine(collection):
    assert names(filter_teas(collection, tea_type="Green")) == ["Dragon Well", "Green Snail"]
    assert names(filter_teas(collection, caffeine_level="Medium")) == ["Tie Guan Yin", "Green Snail"]
    assert names(filter_teas(collection, tea_type="Green", caffeine_level="Medium")) == ["Green Snail"]
    assert len(filter_teas(collection)) == 4


def test_unique_types(collection):
    assert unique_types(collection) == ["Black", "Green", "Oolong"]


def test_caffeine_rank_orders_levels():
    assert caffeine_rank("Low") < caffeine_rank("Medium") < caffeine_rank("High")


@pytest.mark.parametrize(
    "sort_by,expected",
    [
        ("date", ["Green Snail", "Lapsang Souchong", "Tie Guan Yin", "Dragon Well"]),
        ("name-asc", ["Dragon Well", "Green Snail", "Lapsang Souchong", "Tie Guan Yin"]),
        ("name-desc", ["Tie Guan Yin", "Lapsang Souchong", "Green Snail", "Dragon Well"]),
        ("type", ["Lapsang Souchong", "Dragon Well", "Green Snail", "Tie Guan Yin"]),
        ("caffeine-asc", ["Dragon Well", "Tie Guan Yin", "Green Snail", "Lapsang Souchong"]),
        ("caffeine-desc", ["Lapsang Souchong", "Tie Guan Yin", "Green Snail", "Dragon Well"]),
        ("steeps-asc", ["Tie Guan Yin", "Dragon Well", "Green Snail", "Lapsang Souchong"]),
        ("steeps-desc", ["Lapsang Souchong", "Green Snail", "Dragon Well", "Tie Guan Yin"]),
        ("bogus", ["Green Snail", "Lapsang Souchong", "Tie Guan Yin", "Dragon Well"]),
    ],
)
def test_sort_teas(collection, sort_by, expected):
    assert names(sort_teas(collection, sort_by)) == expected


def test_every_sort_option_is_handled(collection):
    for key in SORT_OPTIONS:
        assert len(sort_teas(collection, key)) == len(collection)


def _ms(dt: datetime) -> float:
    return dt.timestamp() * 1000


@pytest.mark.parametrize(
    "consumed,expected",
    [
        (None, "Never"),
        (datetime(2024, 5, 10, 7, 30), "Today"),
        (datetime(2024, 5, 9, 23, 59), "Yesterday"),
        (datetime(2024, 5, 7, 12, 0), "3 days ago"),
        (datetime(2024, 5, 4, 12, 0), "6 days ago"),
        (datetime(2024, 5, 3, 12, 0), "May 3, 2024"),
        (datetime(2023, 12, 25, 9, 0), "Dec 25, 2023"),
    ],
)
def test_format_last_consumed_date(consumed, expected):
    now = datetime(2024, 5, 10, 18, 0)
    stamp = _ms(consumed) if consumed else None
    assert format_last_consumed_date(stamp, now=now) == expected
