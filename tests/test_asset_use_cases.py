"""
Tests for AssetUseCases against the in-memory repository.
"""
import asyncio

import pytest

from asset_inventory.application.dto.asset_dto import AssetCreateDTO, AssetUpdateDTO
from asset_inventory.application.use_cases.asset_use_cases import AssetUseCases
from asset_inventory.domain.errors import InvalidArgument, NotFound, StorageUnavailable
from asset_inventory.infrastructure.repositories.asset_repository_impl import AssetRepositoryImpl

pytestmark = pytest.mark.anyio


@pytest.fixture
def use_cases():
    return AssetUseCases(
        AssetRepositoryImpl(),
        categories=["Electronics", "Furniture"],
        statuses=["Active", "Retired"],
        default_location="HQ",
        default_assignee="Pool",
    )


def draft(**overrides):
    data = {"name": "Projector", "category": "Electronics", "status": "Active", "purchaseDate": "2024-01-01"}
    data.update(overrides)
    return AssetCreateDTO.model_validate(data)


async def test_create_applies_configured_defaults(use_cases):
    asset = await use_cases.create_asset(draft(location="  "))
    assert asset.location == "HQ"
    assert asset.assigned_to == "Pool"
    assert asset.value == 0.0


async def test_vocabulary_comes_from_configuration(use_cases):
    with pytest.raises(InvalidArgument):
        await use_cases.create_asset(draft(category="Software"))
    with pytest.raises(InvalidArgument):
        await use_cases.create_asset(draft(status="In Use"))
    assert await use_cases.list_assets() == []


async def test_any_category_when_unconfigured():
    use_cases = AssetUseCases(AssetRepositoryImpl())
    asset = await use_cases.create_asset(draft(category="Anything"))
    assert asset.category == "Anything"


async def test_update_returns_stored_record(use_cases):
    asset = await use_cases.create_asset(draft())
    result = await use_cases.update_asset(AssetUpdateDTO.model_validate({"id": asset.id, "status": "Retired"}))
    assert result.asset.status == "Retired"
    assert result.asset.name == "Projector"


async def test_update_drops_bad_value(use_cases):
    asset = await use_cases.create_asset(draft(value=10))
    patch = AssetUpdateDTO.model_validate({"id": asset.id, "value": "ten", "name": "Beamer"})
    result = await use_cases.update_asset(patch)
    assert result.asset.value == 10.0
    assert result.asset.name == "Beamer"


async def test_update_no_op(use_cases):
    asset = await use_cases.create_asset(draft())
    result = await use_cases.update_asset(AssetUpdateDTO.model_validate({"id": asset.id}))
    assert result.asset is None


async def test_update_unknown(use_cases):
    with pytest.raises(NotFound):
        await use_cases.update_asset(AssetUpdateDTO.model_validate({"id": "missing", "name": "x"}))


async def test_update_blank_location_uses_configured_defaults(use_cases):
    asset = await use_cases.create_asset(draft(location="Lab", assignedTo="Ann"))
    patch = AssetUpdateDTO.model_validate({"id": asset.id, "location": " ", "assignedTo": ""})
    result = await use_cases.update_asset(patch)
    assert result.asset.location == "HQ"
    assert result.asset.assigned_to == "Pool"


async def test_padded_id_does_not_resolve(use_cases):
    asset = await use_cases.create_asset(draft())
    with pytest.raises(NotFound):
        await use_cases.delete_asset(f" {asset.id} ")
    with pytest.raises(NotFound):
        await use_cases.update_asset(AssetUpdateDTO.model_validate({"id": f" {asset.id}", "name": "x"}))
    assert len(await use_cases.list_assets()) == 1


async def test_delete_requires_id(use_cases):
    with pytest.raises(InvalidArgument):
        await use_cases.delete_asset("")
    with pytest.raises(InvalidArgument):
        await use_cases.delete_asset(None)


async def test_delete_unknown(use_cases):
    with pytest.raises(NotFound):
        await use_cases.delete_asset("missing")


async def test_get_asset(use_cases):
    asset = await use_cases.create_asset(draft())
    assert (await use_cases.get_asset(asset.id)).id == asset.id
    with pytest.raises(NotFound):
        await use_cases.get_asset("missing")


async def test_store_timeout():
    class SlowRepository(AssetRepositoryImpl):
        async def list_all(self):
            await asyncio.sleep(1)
            return []

    use_cases = AssetUseCases(SlowRepository(), store_timeout=0.05)
    with pytest.raises(StorageUnavailable):
        await use_cases.list_assets()
