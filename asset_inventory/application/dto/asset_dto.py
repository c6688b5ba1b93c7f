"""Asset DTOs.

The wire format is camelCase (``assignedTo``, ``purchaseDate``); both the
camelCase and the snake_case spelling are accepted on input. Unknown fields are
ignored.
"""
import logging
import math
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

WIRE_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    extra="ignore",
    protected_namespaces=(),
)


def parse_asset_value(raw: Any) -> float:
    """Coerce a monetary value given as number or text to a non-negative float"""
    if isinstance(raw, bool):
        raise ValueError("value must be a number")
    if isinstance(raw, (int, float)):
        number = float(raw)
    elif isinstance(raw, str):
        try:
            number = float(raw.strip())
        except ValueError:
            raise ValueError(f"value '{raw}' is not a number") from None
    else:
        raise ValueError("value must be a number")

    if not math.isfinite(number):
        raise ValueError("value must be a finite number")
    if number < 0:
        raise ValueError("value must not be negative")
    return number


def _required_text(value: Optional[str], field_name: str) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if not value:
        raise ValueError(f"{field_name} must not be empty")
    return value


class HistoryEntryDTO(BaseModel):
    """Free-form history annotation attached to an asset"""
    action: str
    date: str = ""
    user: str = ""
    details: Optional[str] = None

    model_config = WIRE_CONFIG


class AssetCreateDTO(BaseModel):
    """DTO for creating an asset (a draft, no id)"""
    name: str
    category: str
    status: str
    purchase_date: date
    value: float = 0.0
    location: Optional[str] = None
    assigned_to: Optional[str] = None
    serial_number: Optional[str] = None
    manufacturer: Optional[str] = None
    model: Optional[str] = None
    description: Optional[str] = None
    warranty_end_date: Optional[date] = None
    history: List[HistoryEntryDTO] = Field(default_factory=list)

    model_config = WIRE_CONFIG

    @field_validator("name", "category", "status")
    @classmethod
    def _not_blank(cls, value: str, info):
        return _required_text(value, info.field_name)

    @field_validator("value", mode="before")
    @classmethod
    def _coerce_value(cls, value):
        return parse_asset_value(value)


class AssetUpdateDTO(BaseModel):
    """DTO for a partial update. Fields left out are not touched.

    A ``value`` that does not parse is dropped from the patch instead of
    failing the request; the remaining fields still apply.
    """
    id: str = Field(min_length=1, validation_alias=AliasChoices("id", "_id"))
    name: Optional[str] = None
    category: Optional[str] = None
    status: Optional[str] = None
    purchase_date: Optional[date] = None
    value: Optional[float] = None
    location: Optional[str] = None
    assigned_to: Optional[str] = None
    serial_number: Optional[str] = None
    manufacturer: Optional[str] = None
    model: Optional[str] = None
    description: Optional[str] = None
    warranty_end_date: Optional[date] = None
    history: Optional[List[HistoryEntryDTO]] = None

    model_config = WIRE_CONFIG

    @model_validator(mode="before")
    @classmethod
    def _drop_invalid_value(cls, data):
        if isinstance(data, dict) and "value" in data:
            try:
                data = {**data, "value": parse_asset_value(data["value"])}
            except ValueError as e:
                logger.warning("Dropping value from patch of asset %s: %s", data.get("id") or data.get("_id"), e)
                data = {k: v for k, v in data.items() if k != "value"}
        return data

    @field_validator("id")
    @classmethod
    def _id_required(cls, value: str):
        if not value.strip():
            raise ValueError("id is required")
        return value

    @field_validator("name", "category", "status")
    @classmethod
    def _not_blank(cls, value: Optional[str], info):
        return _required_text(value, info.field_name)

    def changes(self) -> Dict[str, Any]:
        """Fields explicitly supplied with a value, keyed by entity attribute"""
        supplied = self.model_dump(exclude_unset=True, exclude={"id"})
        return {name: value for name, value in supplied.items() if value is not None}


class AssetResponseDTO(BaseModel):
    """DTO for asset response"""
    id: str
    name: str
    category: str
    status: str
    purchase_date: date
    value: float
    location: str
    assigned_to: str
    serial_number: Optional[str] = None
    manufacturer: Optional[str] = None
    model: Optional[str] = None
    description: Optional[str] = None
    warranty_end_date: Optional[date] = None
    history: List[HistoryEntryDTO] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True, **WIRE_CONFIG)


class AssetUpdateResultDTO(BaseModel):
    """Outcome of PUT /assets. ``asset`` is absent when nothing changed."""
    message: str
    asset: Optional[AssetResponseDTO] = None

    model_config = WIRE_CONFIG


class InventorySummaryDTO(BaseModel):
    """KPI aggregates over a set of assets"""
    total_assets: int
    total_value: float
    assignees: int
    by_status: Dict[str, int]
    by_category: Dict[str, int]

    model_config = WIRE_CONFIG
