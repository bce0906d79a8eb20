"""
Tea record schemas: the full stored record and the creation subset.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, ValidationError, field_validator

TEA_TYPES = ("Green", "Black", "PuEr", "Yellow", "White", "Oolong")
CAFFEINE_LEVELS = ("Low", "Medium", "High")

# Order of keys in the YAML file and in API responses.
RECORD_KEYS = (
    "id",
    "name",
    "type",
    "image",
    "steepTimes",
    "caffeine",
    "caffeineLevel",
    "website",
    "brewingTemperature",
    "teaWeight",
    "rating",
    "timesConsumed",
    "lastConsumedDate",
)

_TYPE_ALIASES = {
    "green": "Green",
    "black": "Black",
    "puer": "PuEr",
    "pu-er": "PuEr",
    "pu-erh": "PuEr",
    "yellow": "Yellow",
    "white": "White",
    "oolong": "Oolong",
}


class TeaType(str, Enum):
    GREEN = "Green"
    BLACK = "Black"
    PUER = "PuEr"
    YELLOW = "Yellow"
    WHITE = "White"
    OOLONG = "Oolong"


class CaffeineLevel(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


def normalize_tea_type(value: Any) -> Any:
    """
    Map spelling variants ("pu-er", "GREEN ", ...) to the canonical type name.
    Unknown values are returned untouched so validation reports them.
    """
    if not isinstance(value, str):
        return value
    return _TYPE_ALIASES.get(value.strip().lower(), value)


def _whole(v):
    if isinstance(v, float) and v.is_integer():
        return int(v)
    return v


class _TeaFields(BaseModel):
    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    name: str
    type: TeaType
    image: str
    steep_times: List[StrictFloat] = Field(alias="steepTimes")
    rating: Optional[StrictFloat] = Field(default=None, ge=1, le=10)
    times_consumed: int = Field(default=0, ge=0, alias="timesConsumed", strict=True)
    last_consumed_date: Optional[StrictFloat] = Field(default=None, alias="lastConsumedDate")

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, v):
        return normalize_tea_type(v)

    @field_validator("times_consumed", mode="before")
    @classmethod
    def _whole_count(cls, v):
        return _whole(v)

    @field_validator("steep_times", mode="after")
    @classmethod
    def _whole_steeps(cls, v):
        return [_whole(t) for t in v]

    @field_validator("rating", "last_consumed_date", mode="after")
    @classmethod
    def _whole_number(cls, v):
        return _whole(v)

    def to_record(self) -> dict:
        """Dump with the camelCase keys used in the YAML file and JSON API."""
        data = self.model_dump(by_alias=True)
        return {key: data[key] for key in RECORD_KEYS if key in data}


class Tea(_TeaFields):
    id: str
    caffeine: str
    caffeine_level: CaffeineLevel = Field(alias="caffeineLevel")
    website: str
    brewing_temperature: str = Field(alias="brewingTemperature")
    tea_weight: str = Field(alias="teaWeight")


class CreateTea(_TeaFields):
    caffeine: str = ""
    caffeine_level: CaffeineLevel = Field(default=CaffeineLevel.LOW.value, alias="caffeineLevel")
    website: str = ""
    brewing_temperature: str = Field(default="", alias="brewingTemperature")
    tea_weight: str = Field(default="", alias="teaWeight")


def validation_issues(exc: ValidationError) -> list[dict]:
    """Flatten a pydantic error into JSON-friendly issue dicts."""
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]


__all__ = [
    "TEA_TYPES",
    "CAFFEINE_LEVELS",
    "RECORD_KEYS",
    "TeaType",
    "CaffeineLevel",
    "Tea",
    "CreateTea",
    "normalize_tea_type",
    "validation_issues",
]
