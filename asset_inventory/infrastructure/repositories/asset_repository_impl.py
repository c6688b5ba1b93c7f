"""Asset repository implementation"""
import copy
import uuid
from typing import Any, Dict, List, Optional

from asset_inventory.domain.entities.asset import MUTABLE_FIELDS, Asset, AssetDraft, utcnow
from asset_inventory.domain.repositories.asset_repository import AssetRepository, PatchOutcome, RemoveOutcome


class AssetRepositoryImpl(AssetRepository):
    """Asset repository implementation with in-memory storage"""

    def __init__(self, assets: Optional[List[Asset]] = None):
        self._assets: Dict[str, Asset] = {}
        for asset in assets or []:
            self._assets[asset.id] = asset

    async def list_all(self) -> List[Asset]:
        """Get all assets"""
        return [copy.deepcopy(asset) for asset in self._assets.values()]

    async def get(self, asset_id: str) -> Optional[Asset]:
        """Get asset by ID"""
        asset = self._assets.get(asset_id)
        return copy.deepcopy(asset) if asset else None

    async def insert(self, draft: AssetDraft) -> Asset:
        """Create a new asset"""
        asset = Asset.from_draft(str(uuid.uuid4()), draft)
        self._assets[asset.id] = asset
        return copy.deepcopy(asset)

    async def patch(self, asset_id: str, changes: Dict[str, Any]) -> PatchOutcome:
        """Update asset fields in place"""
        asset = self._assets.get(asset_id)
        if asset is None:
            return PatchOutcome.NOT_FOUND

        changed = {
            name: value
            for name, value in changes.items()
            if name in MUTABLE_FIELDS and getattr(asset, name) != value
        }
        if not changed:
            return PatchOutcome.NO_OP

        for name, value in changed.items():
            setattr(asset, name, copy.deepcopy(value))
        asset.updated_at = utcnow()
        return PatchOutcome.UPDATED

    async def remove(self, asset_id: str) -> RemoveOutcome:
        """Delete asset"""
        if asset_id not in self._assets:
            return RemoveOutcome.NOT_FOUND

        del self._assets[asset_id]
        return RemoveOutcome.DELETED
