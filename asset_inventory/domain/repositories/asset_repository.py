"""Asset repository interface"""
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, List, Optional
from asset_inventory.domain.entities.asset import Asset, AssetDraft


class PatchOutcome(str, Enum):
    """Result of applying a patch"""
    UPDATED = "updated"
    NOT_FOUND = "not_found"
    NO_OP = "no_op"


class RemoveOutcome(str, Enum):
    """Result of a delete"""
    DELETED = "deleted"
    NOT_FOUND = "not_found"


class AssetRepository(ABC):
    """Interface for asset repository.

    Ids are opaque strings to every caller. Implementations raise
    ``StorageUnavailable`` or ``StorageWriteError`` instead of driver errors.
    """

    @abstractmethod
    async def list_all(self) -> List[Asset]:
        """Get every stored asset"""
        pass

    @abstractmethod
    async def get(self, asset_id: str) -> Optional[Asset]:
        """Get asset by ID"""
        pass

    @abstractmethod
    async def insert(self, draft: AssetDraft) -> Asset:
        """Assign an id and persist a new asset"""
        pass

    @abstractmethod
    async def patch(self, asset_id: str, changes: Dict[str, Any]) -> PatchOutcome:
        """Apply a partial update"""
        pass

    @abstractmethod
    async def remove(self, asset_id: str) -> RemoveOutcome:
        """Hard delete an asset"""
        pass
