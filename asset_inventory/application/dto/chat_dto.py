"""Chat DTOs"""
from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator

from asset_inventory.application.dto.asset_dto import WIRE_CONFIG, parse_asset_value


class ChatAssetDTO(BaseModel):
    """Asset as it appears in a chat snapshot. Lenient: the snapshot is only read."""
    id: Optional[str] = Field(None, validation_alias=AliasChoices("id", "_id"))
    name: str = ""
    category: str = ""
    status: str = ""
    assigned_to: Optional[str] = None
    location: Optional[str] = None
    purchase_date: Optional[str] = None
    value: float = 0.0

    model_config = WIRE_CONFIG

    @field_validator("name", "category", "status", mode="before")
    @classmethod
    def _text_or_blank(cls, value: Any):
        return "" if value is None else str(value)

    @field_validator("id", "purchase_date", mode="before")
    @classmethod
    def _as_text(cls, value: Any):
        return None if value is None else str(value)

    @field_validator("value", mode="before")
    @classmethod
    def _lenient_value(cls, value: Any):
        try:
            return parse_asset_value(value)
        except ValueError:
            return 0.0


class ChatRequestDTO(BaseModel):
    """DTO for a chat question"""
    message: str
    assets: List[ChatAssetDTO]

    @field_validator("message")
    @classmethod
    def _message_required(cls, value: str):
        if not value.strip():
            raise ValueError("Message is required")
        return value.strip()


class ChatResponseDTO(BaseModel):
    """DTO for chat response"""
    response: str
