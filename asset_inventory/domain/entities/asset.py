"""Asset domain entity"""
from dataclasses import dataclass, field, fields
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

DEFAULT_LOCATION = "Not specified"
DEFAULT_ASSIGNEE = "Unassigned"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class AssetDraft:
    """Asset payload that has not been persisted yet (no id)"""
    name: str
    category: str
    status: str
    purchase_date: date
    value: float = 0.0
    location: str = DEFAULT_LOCATION
    assigned_to: str = DEFAULT_ASSIGNEE
    serial_number: Optional[str] = None
    manufacturer: Optional[str] = None
    model: Optional[str] = None
    description: Optional[str] = None
    warranty_end_date: Optional[date] = None
    history: List[Dict[str, Any]] = field(default_factory=list)


@dataclass
class Asset:
    """Asset domain entity"""
    id: str
    name: str
    category: str
    status: str
    purchase_date: date
    value: float = 0.0
    location: str = DEFAULT_LOCATION
    assigned_to: str = DEFAULT_ASSIGNEE
    serial_number: Optional[str] = None
    manufacturer: Optional[str] = None
    model: Optional[str] = None
    description: Optional[str] = None
    warranty_end_date: Optional[date] = None
    history: List[Dict[str, Any]] = field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        if self.created_at is None:
            self.created_at = utcnow()
        if self.updated_at is None:
            self.updated_at = self.created_at

    @classmethod
    def from_draft(cls, asset_id: str, draft: AssetDraft) -> "Asset":
        values = {f.name: getattr(draft, f.name) for f in fields(AssetDraft)}
        values["history"] = list(draft.history)
        return cls(id=asset_id, **values)


# Fields a patch may touch. id and timestamps are owned by the repository.
MUTABLE_FIELDS = frozenset(f.name for f in fields(AssetDraft))
