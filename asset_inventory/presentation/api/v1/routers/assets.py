"""Assets API router"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from asset_inventory.application.dto.asset_dto import (
    AssetCreateDTO,
    AssetResponseDTO,
    AssetUpdateDTO,
    InventorySummaryDTO,
)
from asset_inventory.application.use_cases.asset_use_cases import AssetUseCases
from asset_inventory.presentation.api.v1.dependencies import get_asset_use_cases

router = APIRouter(prefix="/assets", tags=["assets"], redirect_slashes=False)


@router.get("", response_model=List[AssetResponseDTO])
async def list_assets(
    use_cases: AssetUseCases = Depends(get_asset_use_cases),
):
    """Get all assets. An empty inventory is an empty list."""
    return await use_cases.list_assets()


@router.get("/summary", response_model=InventorySummaryDTO)
async def get_inventory_summary(
    use_cases: AssetUseCases = Depends(get_asset_use_cases),
):
    """KPI aggregates: totals, value, assignees, per status and per category"""
    return await use_cases.summarize()


@router.get("/{asset_id}", response_model=AssetResponseDTO)
async def get_asset(
    asset_id: str,
    use_cases: AssetUseCases = Depends(get_asset_use_cases),
):
    """Get a single asset by id"""
    return await use_cases.get_asset(asset_id)


@router.post("", response_model=AssetResponseDTO, status_code=status.HTTP_201_CREATED)
async def create_asset(
    asset_data: AssetCreateDTO,
    use_cases: AssetUseCases = Depends(get_asset_use_cases),
):
    """Create a new asset. The id is assigned by the server."""
    return await use_cases.create_asset(asset_data)


@router.put("")
async def update_asset(
    asset_data: AssetUpdateDTO,
    use_cases: AssetUseCases = Depends(get_asset_use_cases),
):
    """Partially update an asset identified by ``id`` in the body.

    Responds with the stored asset, or with a message only when nothing changed.
    """
    result = await use_cases.update_asset(asset_data)
    body = {"message": result.message}
    if result.asset is not None:
        body["asset"] = result.asset.model_dump(mode="json", by_alias=True)
    return body


@router.delete("")
async def delete_asset(
    id: Optional[str] = Query(None, description="Asset id"),
    use_cases: AssetUseCases = Depends(get_asset_use_cases),
):
    """Delete asset"""
    await use_cases.delete_asset(id)
    return {"message": "Asset deleted successfully", "id": id}
