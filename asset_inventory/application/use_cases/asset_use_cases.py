"""Asset use cases"""
import asyncio
import logging
from typing import Awaitable, List, Optional, Sequence, TypeVar

from asset_inventory.application.dto.asset_dto import (
    AssetCreateDTO,
    AssetResponseDTO,
    AssetUpdateDTO,
    AssetUpdateResultDTO,
    InventorySummaryDTO,
)
from asset_inventory.application.services.inventory_summary import summarize_assets
from asset_inventory.domain.entities.asset import DEFAULT_ASSIGNEE, DEFAULT_LOCATION, Asset, AssetDraft
from asset_inventory.domain.errors import InvalidArgument, NotFound, StorageUnavailable
from asset_inventory.domain.repositories.asset_repository import AssetRepository, PatchOutcome, RemoveOutcome

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AssetUseCases:
    """Use cases for asset operations.

    This is the trust boundary: category and status are checked against the
    configured vocabularies here, whatever the client did.
    """

    def __init__(
        self,
        asset_repository: AssetRepository,
        categories: Optional[Sequence[str]] = None,
        statuses: Optional[Sequence[str]] = None,
        store_timeout: Optional[float] = None,
        default_location: str = DEFAULT_LOCATION,
        default_assignee: str = DEFAULT_ASSIGNEE,
    ):
        self.asset_repository = asset_repository
        self.categories = list(categories) if categories else None
        self.statuses = list(statuses) if statuses else None
        self.store_timeout = store_timeout
        self.default_location = default_location
        self.default_assignee = default_assignee

    async def _store_call(self, call: Awaitable[T]) -> T:
        """Await a repository call, bounded by the store timeout"""
        if not self.store_timeout:
            return await call
        try:
            return await asyncio.wait_for(call, timeout=self.store_timeout)
        except asyncio.TimeoutError:
            logger.error("Store call timed out after %ss", self.store_timeout)
            raise StorageUnavailable(f"Storage did not respond within {self.store_timeout} seconds") from None

    def _check_vocabulary(self, category: Optional[str], status: Optional[str]) -> None:
        if category is not None and self.categories and category not in self.categories:
            raise InvalidArgument(
                f"Unknown category '{category}'. Allowed: {', '.join(self.categories)}"
            )
        if status is not None and self.statuses and status not in self.statuses:
            raise InvalidArgument(
                f"Unknown status '{status}'. Allowed: {', '.join(self.statuses)}"
            )

    async def list_assets(self) -> List[AssetResponseDTO]:
        """Get all assets"""
        assets = await self._store_call(self.asset_repository.list_all())
        return [self._asset_to_dto(asset) for asset in assets]

    async def get_asset(self, asset_id: str) -> AssetResponseDTO:
        """Get asset by ID"""
        asset = await self._store_call(self.asset_repository.get(asset_id))
        if not asset:
            raise NotFound(f"Asset with ID '{asset_id}' not found")
        return self._asset_to_dto(asset)

    async def create_asset(self, asset_data: AssetCreateDTO) -> AssetResponseDTO:
        """Create a new asset"""
        self._check_vocabulary(asset_data.category, asset_data.status)
        draft = AssetDraft(
            name=asset_data.name,
            category=asset_data.category,
            status=asset_data.status,
            purchase_date=asset_data.purchase_date,
            value=asset_data.value,
            location=(asset_data.location or "").strip() or self.default_location,
            assigned_to=(asset_data.assigned_to or "").strip() or self.default_assignee,
            serial_number=asset_data.serial_number,
            manufacturer=asset_data.manufacturer,
            model=asset_data.model,
            description=asset_data.description,
            warranty_end_date=asset_data.warranty_end_date,
            history=[entry.model_dump() for entry in asset_data.history],
        )

        created = await self._store_call(self.asset_repository.insert(draft))
        logger.info("Created asset %s (%s)", created.id, created.name)
        return self._asset_to_dto(created)

    async def update_asset(self, asset_data: AssetUpdateDTO) -> AssetUpdateResultDTO:
        """Apply a partial update. Raises NotFound for unknown ids."""
        changes = asset_data.changes()
        for name, default in (("location", self.default_location), ("assigned_to", self.default_assignee)):
            if name in changes and not changes[name].strip():
                changes[name] = default
        self._check_vocabulary(changes.get("category"), changes.get("status"))

        outcome = await self._store_call(self.asset_repository.patch(asset_data.id, changes))
        if outcome == PatchOutcome.NOT_FOUND:
            raise NotFound(f"Asset with ID '{asset_data.id}' not found")
        if outcome == PatchOutcome.NO_OP:
            return AssetUpdateResultDTO(message="No changes were applied")

        logger.info("Updated asset %s: %s", asset_data.id, ", ".join(sorted(changes)))
        updated = await self._store_call(self.asset_repository.get(asset_data.id))
        if updated is None:
            # deleted between the patch and the read-back
            raise NotFound(f"Asset with ID '{asset_data.id}' not found")
        return AssetUpdateResultDTO(message="Asset updated successfully", asset=self._asset_to_dto(updated))

    async def delete_asset(self, asset_id: Optional[str]) -> None:
        """Delete asset"""
        if not asset_id or not asset_id.strip():
            raise InvalidArgument("Asset id is required")
        outcome = await self._store_call(self.asset_repository.remove(asset_id))
        if outcome == RemoveOutcome.NOT_FOUND:
            raise NotFound(f"Asset with ID '{asset_id}' not found")
        logger.info("Deleted asset %s", asset_id)

    async def summarize(self) -> InventorySummaryDTO:
        """KPI aggregates over the whole inventory"""
        assets = await self._store_call(self.asset_repository.list_all())
        return summarize_assets(assets)

    def _asset_to_dto(self, asset: Asset) -> AssetResponseDTO:
        """Convert Asset entity to AssetResponseDTO"""
        return AssetResponseDTO.model_validate(asset)
